"""Core data models shared across apidoc components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple

DEPTH_MARKER = "--"

PRIMITIVE_TYPES = frozenset(
    {"int", "long", "double", "float", "boolean", "byte", "short", "char", "void"}
)


@dataclass(frozen=True)
class TypeRef:
    """Reference to a (possibly generic) type as written in a declaration."""

    name: str
    arguments: Tuple["TypeRef", ...] = ()
    array_dimensions: int = 0
    is_variable: bool = False

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    def with_arguments(self, arguments: Tuple["TypeRef", ...]) -> "TypeRef":
        return TypeRef(
            name=self.name,
            arguments=arguments,
            array_dimensions=self.array_dimensions,
            is_variable=self.is_variable,
        )

    def component(self) -> "TypeRef":
        """Return the element type of an array reference."""
        return TypeRef(
            name=self.name,
            arguments=self.arguments,
            array_dimensions=max(self.array_dimensions - 1, 0),
            is_variable=self.is_variable,
        )

    def canonical_text(self) -> str:
        text = self.name
        if self.arguments:
            text += "<" + ", ".join(arg.canonical_text() for arg in self.arguments) + ">"
        return text + "[]" * self.array_dimensions

    def __str__(self) -> str:
        return self.canonical_text()


OBJECT_TYPE = TypeRef("java.lang.Object")


@dataclass(frozen=True)
class Annotation:
    """Metadata marker attached to a declaration, e.g. ``@RequestParam``."""

    name: str
    attributes: Mapping[str, str] = field(default_factory=dict)

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    def has(self, attribute: str) -> bool:
        return attribute in self.attributes

    def raw(self, *attributes: str) -> Optional[str]:
        """Return the raw source text of the first present attribute."""
        for attribute in attributes:
            value = self.attributes.get(attribute)
            if value is not None:
                return value
        return None

    def text(self, *attributes: str) -> Optional[str]:
        """Return the first present attribute as unquoted text."""
        value = self.raw(*attributes)
        if value is None:
            return None
        return unquote(value)

    def flag(self, attribute: str) -> Optional[bool]:
        """Interpret a boolean attribute such as ``required = false``."""
        value = self.raw(attribute)
        if value is None:
            return None
        text = value.strip()
        if text.lower() == "true" or text.endswith(".TRUE"):
            return True
        if text.lower() == "false" or text.endswith(".FALSE"):
            return False
        return None


def unquote(value: str) -> str:
    """Strip braces and quotes from an annotation value, keeping the first element."""
    text = value.strip()
    if text.startswith("{") and text.endswith("}"):
        text = text[1:-1].strip()
        if "," in text:
            text = text.split(",", 1)[0].strip()
    return text.replace('"', "").strip()


def find_annotation(annotations: Tuple[Annotation, ...], *names: str) -> Optional[Annotation]:
    """Return the first annotation whose simple name matches one of ``names``."""
    for name in names:
        for annotation in annotations:
            if annotation.simple_name == name:
                return annotation
    return None


@dataclass(frozen=True)
class FieldDecl:
    """A field declared on a type."""

    name: str
    type: TypeRef
    annotations: Tuple[Annotation, ...] = ()
    modifiers: FrozenSet[str] = frozenset()
    doc: str = ""
    trailing_comment: str = ""

    @property
    def is_static(self) -> bool:
        return "static" in self.modifiers


@dataclass(frozen=True)
class Parameter:
    """A method parameter."""

    name: str
    type: TypeRef
    annotations: Tuple[Annotation, ...] = ()


@dataclass(frozen=True)
class MethodSignature:
    """A declared method with its Javadoc."""

    name: str
    parameters: Tuple[Parameter, ...] = ()
    return_type: Optional[TypeRef] = None
    annotations: Tuple[Annotation, ...] = ()
    doc: str = ""
    param_docs: Mapping[str, str] = field(default_factory=dict)
    line: Optional[int] = None


@dataclass(frozen=True)
class TypeDescriptor:
    """Declared shape of a class, record, enum or interface."""

    qualified_name: str
    fields: Tuple[FieldDecl, ...] = ()
    superclass: Optional[TypeRef] = None
    type_parameters: Tuple[str, ...] = ()
    kind: str = "class"
    annotations: Tuple[Annotation, ...] = ()
    doc: str = ""
    methods: Tuple[MethodSignature, ...] = ()
    source_file: Optional[str] = None

    @property
    def simple_name(self) -> str:
        return self.qualified_name.rsplit(".", 1)[-1]

    def bindings_for(self, ref: TypeRef) -> Dict[str, TypeRef]:
        """Map this type's generic parameters onto the arguments of ``ref``."""
        return dict(zip(self.type_parameters, ref.arguments))


@dataclass(frozen=True)
class Field:
    """One row of an extracted request or response shape."""

    name: str
    type_name: str
    required: bool = False
    description: str = ""
    depth: int = 0
    example: str = ""

    @property
    def prefix(self) -> str:
        return DEPTH_MARKER * self.depth


@dataclass
class FieldNode:
    """A field together with the fields nested beneath it."""

    field: Field
    children: List["FieldNode"] = field(default_factory=list)

    @property
    def is_array(self) -> bool:
        return self.field.type_name in ("List", "Array")


__all__ = [
    "Annotation",
    "DEPTH_MARKER",
    "Field",
    "FieldDecl",
    "FieldNode",
    "MethodSignature",
    "OBJECT_TYPE",
    "PRIMITIVE_TYPES",
    "Parameter",
    "TypeDescriptor",
    "TypeRef",
    "find_annotation",
    "unquote",
]
