"""Categorises type references and maps scalars to document type names."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from ..models import TypeRef


class TypeKind(str, Enum):
    SCALAR = "scalar"
    COLLECTION = "collection"
    MAP = "map"
    ARRAY = "array"
    ENVELOPE = "envelope"
    STRUCT = "struct"


@dataclass(frozen=True)
class Classification:
    """Result of classifying a type reference."""

    kind: TypeKind
    type_name: str
    example: str

    @property
    def is_structured(self) -> bool:
        return self.kind in (TypeKind.STRUCT, TypeKind.ENVELOPE)

    @property
    def is_sequence(self) -> bool:
        return self.kind in (TypeKind.COLLECTION, TypeKind.ARRAY)


# Java type -> document type name
_SCALAR_TYPES: Dict[str, str] = {
    "int": "Integer",
    "long": "Long",
    "double": "Double",
    "float": "Float",
    "boolean": "Boolean",
    "byte": "Byte",
    "short": "Short",
    "char": "Character",
    "java.lang.Integer": "Integer",
    "java.lang.Long": "Long",
    "java.lang.Double": "Double",
    "java.lang.Float": "Float",
    "java.lang.Boolean": "Boolean",
    "java.lang.Byte": "Byte",
    "java.lang.Short": "Short",
    "java.lang.Character": "Character",
    "java.lang.String": "String",
    "java.lang.CharSequence": "String",
    "java.lang.Number": "Number",
    "java.util.Date": "DateTime",
    "java.sql.Timestamp": "DateTime",
    "java.sql.Date": "Date",
    "java.time.LocalDateTime": "DateTime",
    "java.time.OffsetDateTime": "DateTime",
    "java.time.ZonedDateTime": "DateTime",
    "java.time.Instant": "DateTime",
    "java.time.LocalDate": "Date",
    "java.time.LocalTime": "Time",
    "java.math.BigDecimal": "BigDecimal",
    "java.math.BigInteger": "BigInteger",
}

_EXAMPLES: Dict[str, str] = {
    "Integer": "0",
    "Long": "0",
    "Double": "0.0",
    "Float": "0.0",
    "Number": "0",
    "Boolean": "false",
    "Byte": "0",
    "Short": "0",
    "Character": '""',
    "String": '"String"',
    "DateTime": '"DateTime"',
    "Date": '"Date"',
    "Time": '"Time"',
    "BigDecimal": "0",
    "BigInteger": "0",
    "Object": "{}",
    "List": "[]",
    "Array": "[]",
}

_COLLECTION_TYPES = frozenset(
    {
        "java.lang.Iterable",
        "java.util.Collection",
        "java.util.List",
        "java.util.ArrayList",
        "java.util.LinkedList",
        "java.util.Set",
        "java.util.HashSet",
        "java.util.LinkedHashSet",
        "java.util.SortedSet",
        "java.util.TreeSet",
        "java.util.Queue",
        "java.util.Deque",
        "java.util.ArrayDeque",
    }
)

_MAP_TYPES = frozenset(
    {
        "java.util.Map",
        "java.util.HashMap",
        "java.util.LinkedHashMap",
        "java.util.TreeMap",
        "java.util.SortedMap",
        "java.util.concurrent.ConcurrentHashMap",
        "java.util.concurrent.ConcurrentMap",
        "java.util.Properties",
        "java.lang.Object",
    }
)

# Wrappers whose only interesting content is their first type argument.
_TRANSPARENT_WRAPPERS = frozenset(
    {
        "java.util.Optional",
        "java.util.concurrent.CompletableFuture",
        "java.util.concurrent.Future",
        "java.util.concurrent.Callable",
        "org.springframework.http.ResponseEntity",
        "org.springframework.http.HttpEntity",
        "org.springframework.web.context.request.async.DeferredResult",
        "reactor.core.publisher.Mono",
    }
)

ENVELOPE_MARKERS: Tuple[str, ...] = (
    "Result",
    "Response",
    "Page",
    "PageResult",
    "PageInfo",
    "ApiResult",
    "CommonResult",
    "RestResult",
    "BaseResult",
)


def is_envelope_name(name: str) -> bool:
    """Return True when a class name follows a conventional wrapper naming."""
    simple = name.rsplit(".", 1)[-1]
    return any(marker in simple for marker in ENVELOPE_MARKERS)


def is_transparent_wrapper(ref: TypeRef) -> bool:
    return ref.array_dimensions == 0 and ref.name in _TRANSPARENT_WRAPPERS


def is_collection(ref: TypeRef) -> bool:
    if ref.array_dimensions or ref.is_variable:
        return False
    if ref.name in _COLLECTION_TYPES:
        return True
    # Unresolved names still follow the JDK naming convention, e.g. `List<Foo>`.
    return "." not in ref.name and ref.simple_name.endswith(("List", "Set", "Collection")) and bool(
        ref.arguments
    )


def is_map(ref: TypeRef) -> bool:
    if ref.array_dimensions or ref.is_variable:
        return False
    if ref.name in _MAP_TYPES:
        return True
    return "." not in ref.name and ref.simple_name.endswith("Map") and len(ref.arguments) == 2


def scalar_name(ref: TypeRef) -> Optional[str]:
    if ref.array_dimensions:
        return None
    return _SCALAR_TYPES.get(ref.name)


def example_for(type_name: str) -> str:
    """Return the example literal used for a document type name."""
    return _EXAMPLES.get(type_name, '"%s"' % type_name)


def classify(ref: TypeRef) -> Classification:
    """Categorise ``ref`` and derive its document type name and example literal."""
    if ref.array_dimensions:
        return Classification(TypeKind.ARRAY, "Array", example_for("Array"))
    scalar = scalar_name(ref)
    if scalar is not None:
        return Classification(TypeKind.SCALAR, scalar, example_for(scalar))
    if ref.is_variable or is_map(ref):
        return Classification(TypeKind.MAP, "Object", example_for("Object"))
    if is_collection(ref):
        return Classification(TypeKind.COLLECTION, "List", example_for("List"))
    if is_transparent_wrapper(ref) or is_envelope_name(ref.name):
        return Classification(TypeKind.ENVELOPE, ref.simple_name, example_for("Object"))
    return Classification(TypeKind.STRUCT, ref.simple_name, example_for("Object"))


def element_type(ref: TypeRef) -> Optional[TypeRef]:
    """Return the element type of a collection or array reference."""
    if ref.array_dimensions:
        return ref.component()
    if is_collection(ref) and ref.arguments:
        return ref.arguments[0]
    return None


__all__ = [
    "Classification",
    "ENVELOPE_MARKERS",
    "TypeKind",
    "classify",
    "element_type",
    "example_for",
    "is_collection",
    "is_envelope_name",
    "is_map",
    "is_transparent_wrapper",
]
