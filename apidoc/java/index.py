"""Source-backed type resolution for Java projects."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from ..logging import get_logger
from ..models import (
    PRIMITIVE_TYPES,
    FieldDecl,
    MethodSignature,
    Parameter,
    TypeDescriptor,
    TypeRef,
)
from .parser import CompilationUnit, JavaSourceParser
from .scanner import iter_java_sources

_JAVA_LANG = frozenset(
    {
        "Boolean",
        "Byte",
        "Character",
        "CharSequence",
        "Double",
        "Enum",
        "Float",
        "Integer",
        "Iterable",
        "Long",
        "Number",
        "Object",
        "Short",
        "String",
        "Void",
    }
)

# Well-known library types qualified even when the import is missing or a
# wildcard points outside the indexed sources.
_KNOWN_TYPES: Dict[str, str] = {
    name.rsplit(".", 1)[-1]: name
    for name in (
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
        "java.util.Map",
        "java.util.HashMap",
        "java.util.LinkedHashMap",
        "java.util.TreeMap",
        "java.util.SortedMap",
        "java.util.Properties",
        "java.util.Optional",
        "java.util.Date",
        "java.util.concurrent.CompletableFuture",
        "java.util.concurrent.ConcurrentHashMap",
        "java.util.concurrent.ConcurrentMap",
        "java.time.LocalDateTime",
        "java.time.LocalDate",
        "java.time.LocalTime",
        "java.time.OffsetDateTime",
        "java.time.ZonedDateTime",
        "java.time.Instant",
        "java.math.BigDecimal",
        "java.math.BigInteger",
        "java.sql.Timestamp",
        "org.springframework.http.ResponseEntity",
        "org.springframework.http.HttpEntity",
        "reactor.core.publisher.Mono",
    )
}

Sources = Union[Mapping[str, str], Iterable[str]]


class SourceTypeResolver:
    """Indexes parsed Java sources and serves qualified type descriptors."""

    def __init__(self, units: Iterable[CompilationUnit] = ()) -> None:
        self.logger = get_logger("java.index")
        self._units: List[CompilationUnit] = list(units)
        self._types: Dict[str, TypeDescriptor] = {}
        self._link()

    @classmethod
    def from_directory(
        cls, root: Path, exclude_paths: Iterable[str] = ()
    ) -> "SourceTypeResolver":
        """Parse every Java file below ``root``."""
        parser = JavaSourceParser()
        logger = get_logger("java.index")
        units = []
        for path in iter_java_sources(Path(root), exclude_paths):
            try:
                source = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Skipping unreadable source %s: %s", path, exc)
                continue
            units.append(parser.parse(source, str(path)))
        logger.debug("Indexed %d Java source files under %s", len(units), root)
        return cls(units)

    @classmethod
    def from_sources(cls, sources: Sources) -> "SourceTypeResolver":
        """Parse in-memory sources, given as ``{path: text}`` or bare texts."""
        parser = JavaSourceParser()
        if isinstance(sources, Mapping):
            items: Iterable[Tuple[Optional[str], str]] = sources.items()
        else:
            items = ((None, text) for text in sources)
        return cls(parser.parse(text, path) for path, text in items)

    def resolve(self, qualified_name: str) -> Optional[TypeDescriptor]:
        return self._types.get(qualified_name)

    def find(self, name: str) -> Optional[TypeDescriptor]:
        """Look a type up by qualified name, falling back to its simple name."""
        exact = self._types.get(name)
        if exact is not None:
            return exact
        suffix = "." + name
        for qualified, descriptor in self._types.items():
            if qualified.endswith(suffix) or descriptor.simple_name == name:
                return descriptor
        return None

    def controllers(self) -> List[TypeDescriptor]:
        return [
            descriptor
            for descriptor in self._types.values()
            if any(annotation.simple_name.endswith("Controller") for annotation in descriptor.annotations)
        ]

    def __iter__(self) -> Iterator[TypeDescriptor]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)

    def _link(self) -> None:
        known = {descriptor.qualified_name for unit in self._units for descriptor in unit.types}
        for unit in self._units:
            for descriptor in unit.types:
                linker = _Linker(unit, descriptor.qualified_name, known)
                linked = linker.descriptor(descriptor)
                if linked.qualified_name in self._types:
                    self.logger.debug("Duplicate type %s; keeping the first", linked.qualified_name)
                    continue
                self._types[linked.qualified_name] = linked


class _Linker:
    """Qualifies the names written inside one type declaration."""

    def __init__(self, unit: CompilationUnit, owner: str, known: Iterable[str]) -> None:
        self.unit = unit
        self.owner = owner
        self.known = known if isinstance(known, (set, frozenset)) else set(known)

    def descriptor(self, descriptor: TypeDescriptor) -> TypeDescriptor:
        return replace(
            descriptor,
            fields=tuple(self.field(decl) for decl in descriptor.fields),
            superclass=self.ref(descriptor.superclass) if descriptor.superclass else None,
            methods=tuple(self.method(method) for method in descriptor.methods),
        )

    def field(self, decl: FieldDecl) -> FieldDecl:
        return replace(decl, type=self.ref(decl.type))

    def method(self, method: MethodSignature) -> MethodSignature:
        return replace(
            method,
            parameters=tuple(
                Parameter(name=p.name, type=self.ref(p.type), annotations=p.annotations)
                for p in method.parameters
            ),
            return_type=self.ref(method.return_type) if method.return_type else None,
        )

    def ref(self, ref: TypeRef) -> TypeRef:
        if ref.is_variable or ref.name in PRIMITIVE_TYPES:
            return ref
        return TypeRef(
            name=self.qualify(ref.name),
            arguments=tuple(self.ref(argument) for argument in ref.arguments),
            array_dimensions=ref.array_dimensions,
            is_variable=False,
        )

    def qualify(self, name: str) -> str:
        head, dot, rest = name.partition(".")
        if dot:
            # `Outer.Inner` written relative to an import, or already qualified.
            qualified_head = self._qualify_simple(head)
            if qualified_head != head:
                return f"{qualified_head}.{rest}"
            return name
        return self._qualify_simple(name)

    def _qualify_simple(self, name: str) -> str:
        # Only enclosing types are searched here; packages are not nested scopes.
        scope = self.owner
        while scope and scope != self.unit.package:
            candidate = f"{scope}.{name}"
            if candidate in self.known:
                return candidate
            scope = scope.rpartition(".")[0]

        imported = self.unit.imports.get(name)
        if imported:
            return imported

        if self.unit.package:
            candidate = f"{self.unit.package}.{name}"
            if candidate in self.known:
                return candidate
        elif name in self.known:
            return name

        if name in _JAVA_LANG:
            return f"java.lang.{name}"

        for package in self.unit.wildcard_imports:
            candidate = f"{package}.{name}"
            if candidate in self.known:
                return candidate
            if _KNOWN_TYPES.get(name) == candidate:
                return candidate

        return _KNOWN_TYPES.get(name, name)


__all__ = ["SourceTypeResolver"]
