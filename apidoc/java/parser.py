"""Tree-sitter powered Java declaration parser."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from ..models import (
    OBJECT_TYPE,
    Annotation,
    FieldDecl,
    MethodSignature,
    Parameter,
    TypeDescriptor,
    TypeRef,
)
from .javadoc import is_javadoc, parse_javadoc

try:  # pragma: no cover - optional dependency
    import tree_sitter_java
    from tree_sitter import Language, Parser

    TREE_SITTER_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    tree_sitter_java = None  # type: ignore[assignment]
    Language = None  # type: ignore[assignment]
    Parser = None  # type: ignore[assignment]
    TREE_SITTER_AVAILABLE = False


_TYPE_DECLARATIONS = {
    "class_declaration": "class",
    "interface_declaration": "interface",
    "enum_declaration": "enum",
    "record_declaration": "record",
    "annotation_type_declaration": "annotation",
}
_COMMENT_TYPES = {"line_comment", "block_comment", "comment"}
_PRIMITIVE_NODES = {"integral_type", "floating_point_type", "boolean_type", "void_type"}
_ANNOTATION_NODES = {"annotation", "marker_annotation"}


@dataclass
class CompilationUnit:
    """Declarations of one Java source file, with type names as written."""

    path: Optional[str] = None
    package: str = ""
    imports: Dict[str, str] = field(default_factory=dict)
    wildcard_imports: List[str] = field(default_factory=list)
    types: List[TypeDescriptor] = field(default_factory=list)


def _text(node) -> str:  # type: ignore[no-untyped-def]
    if node is None:
        return ""
    return node.text.decode("utf-8", errors="ignore")


def _child_of_type(node, *types: str):  # type: ignore[no-untyped-def]
    for child in node.children:
        if child.type in types:
            return child
    return None


class JavaSourceParser:
    """Parses Java sources into type descriptors using tree-sitter."""

    def __init__(self) -> None:
        if not TREE_SITTER_AVAILABLE:
            raise RuntimeError(
                "tree-sitter is required for Java parsing. Install it with "
                "`pip install tree-sitter tree-sitter-java`."
            )
        self._parser = Parser(Language(tree_sitter_java.language()))

    def parse(self, source: str, path: Optional[str] = None) -> CompilationUnit:
        tree = self._parser.parse(source.encode("utf-8"))
        unit = CompilationUnit(path=path)
        for child in tree.root_node.named_children:
            if child.type == "package_declaration":
                name_node = _child_of_type(child, "scoped_identifier", "identifier")
                unit.package = _text(name_node)
            elif child.type == "import_declaration":
                self._add_import(unit, child)
            elif child.type in _TYPE_DECLARATIONS:
                unit.types.extend(self._type_declarations(child, unit.package, frozenset(), path))
        return unit

    @staticmethod
    def _add_import(unit: CompilationUnit, node) -> None:  # type: ignore[no-untyped-def]
        if any(child.type == "static" for child in node.children):
            return
        name = _text(_child_of_type(node, "scoped_identifier", "identifier"))
        if not name:
            return
        if any(child.type == "asterisk" for child in node.children):
            unit.wildcard_imports.append(name)
        else:
            unit.imports[name.rsplit(".", 1)[-1]] = name

    def _type_declarations(
        self, node, prefix: str, outer_scope: FrozenSet[str], path: Optional[str]
    ) -> List[TypeDescriptor]:  # type: ignore[no-untyped-def]
        name = _text(node.child_by_field_name("name"))
        if not name:
            return []
        qualified = f"{prefix}.{name}" if prefix else name
        kind = _TYPE_DECLARATIONS[node.type]
        type_parameters = self._type_parameters(node.child_by_field_name("type_parameters"))
        scope = outer_scope | frozenset(type_parameters)

        superclass = None
        superclass_node = node.child_by_field_name("superclass")
        if superclass_node is not None and superclass_node.named_children:
            superclass = self._type_ref(superclass_node.named_children[-1], scope)

        fields: List[FieldDecl] = []
        methods: List[MethodSignature] = []
        nested: List[TypeDescriptor] = []

        if kind == "record":
            for parameter in self._parameters(node.child_by_field_name("parameters"), scope):
                fields.append(
                    FieldDecl(name=parameter.name, type=parameter.type, annotations=parameter.annotations)
                )

        body = node.child_by_field_name("body")
        for member in self._members(body):
            if member.type == "field_declaration":
                fields.extend(self._fields(member, scope))
            elif member.type == "method_declaration":
                methods.append(self._method(member, scope))
            elif member.type in _TYPE_DECLARATIONS:
                nested.extend(self._type_declarations(member, qualified, scope, path))

        descriptor = TypeDescriptor(
            qualified_name=qualified,
            fields=tuple(fields),
            superclass=superclass,
            type_parameters=type_parameters,
            kind=kind,
            annotations=self._annotations(_child_of_type(node, "modifiers")),
            doc=parse_javadoc(self._javadoc(node)).description,
            methods=tuple(methods),
            source_file=path,
        )
        return [descriptor, *nested]

    @staticmethod
    def _members(body) -> Iterable:  # type: ignore[no-untyped-def]
        if body is None:
            return []
        members = []
        for child in body.named_children:
            if child.type == "enum_body_declarations":
                members.extend(child.named_children)
            else:
                members.append(child)
        return members

    @staticmethod
    def _type_parameters(node) -> Tuple[str, ...]:  # type: ignore[no-untyped-def]
        if node is None:
            return ()
        names = []
        for parameter in node.named_children:
            if parameter.type != "type_parameter":
                continue
            name_node = _child_of_type(parameter, "type_identifier", "identifier")
            if name_node is not None:
                names.append(_text(name_node))
        return tuple(names)

    def _fields(self, node, scope: FrozenSet[str]) -> List[FieldDecl]:  # type: ignore[no-untyped-def]
        modifiers_node = _child_of_type(node, "modifiers")
        annotations = self._annotations(modifiers_node)
        modifiers = self._modifiers(modifiers_node)
        base_type = self._type_ref(node.child_by_field_name("type"), scope)
        doc = parse_javadoc(self._javadoc(node)).summary
        trailing = self._trailing_comment(node)

        fields = []
        for declarator in node.children_by_field_name("declarator"):
            name = _text(declarator.child_by_field_name("name"))
            if not name:
                continue
            field_type = base_type
            dimensions = declarator.child_by_field_name("dimensions")
            if dimensions is not None:
                field_type = TypeRef(
                    base_type.name,
                    base_type.arguments,
                    base_type.array_dimensions + _text(dimensions).count("["),
                    base_type.is_variable,
                )
            fields.append(
                FieldDecl(
                    name=name,
                    type=field_type,
                    annotations=annotations,
                    modifiers=modifiers,
                    doc=doc,
                    trailing_comment=trailing,
                )
            )
        return fields

    def _method(self, node, scope: FrozenSet[str]) -> MethodSignature:  # type: ignore[no-untyped-def]
        scope = scope | frozenset(self._type_parameters(node.child_by_field_name("type_parameters")))
        type_node = node.child_by_field_name("type")
        return_type = None
        if type_node is not None and type_node.type != "void_type":
            return_type = self._type_ref(type_node, scope)
        javadoc = parse_javadoc(self._javadoc(node))
        return MethodSignature(
            name=_text(node.child_by_field_name("name")),
            parameters=tuple(self._parameters(node.child_by_field_name("parameters"), scope)),
            return_type=return_type,
            annotations=self._annotations(_child_of_type(node, "modifiers")),
            doc=javadoc.description,
            param_docs=dict(javadoc.params),
            line=node.start_point[0] + 1,
        )

    def _parameters(self, node, scope: FrozenSet[str]) -> List[Parameter]:  # type: ignore[no-untyped-def]
        if node is None:
            return []
        parameters = []
        for child in node.named_children:
            annotations = self._annotations(_child_of_type(child, "modifiers"))
            if child.type == "formal_parameter":
                param_type = self._type_ref(child.child_by_field_name("type"), scope)
                dimensions = child.child_by_field_name("dimensions")
                if dimensions is not None:
                    param_type = TypeRef(
                        param_type.name,
                        param_type.arguments,
                        param_type.array_dimensions + _text(dimensions).count("["),
                        param_type.is_variable,
                    )
                name = _text(child.child_by_field_name("name"))
            elif child.type == "spread_parameter":
                type_node = next(
                    (c for c in child.named_children if c.type not in {"modifiers", "variable_declarator"}),
                    None,
                )
                element = self._type_ref(type_node, scope)
                param_type = TypeRef(
                    element.name, element.arguments, element.array_dimensions + 1, element.is_variable
                )
                declarator = _child_of_type(child, "variable_declarator")
                name = _text(declarator.child_by_field_name("name")) if declarator is not None else ""
            else:
                continue
            if name:
                parameters.append(Parameter(name=name, type=param_type, annotations=annotations))
        return parameters

    def _type_ref(self, node, scope: FrozenSet[str]) -> TypeRef:  # type: ignore[no-untyped-def]
        if node is None:
            return OBJECT_TYPE
        kind = node.type
        if kind == "array_type":
            element = self._type_ref(node.child_by_field_name("element"), scope)
            dimensions = _text(node.child_by_field_name("dimensions")).count("[")
            return TypeRef(
                element.name, element.arguments, element.array_dimensions + dimensions, element.is_variable
            )
        if kind == "generic_type":
            base = self._type_ref(
                _child_of_type(node, "type_identifier", "scoped_type_identifier"), scope
            )
            arguments_node = _child_of_type(node, "type_arguments")
            arguments: Tuple[TypeRef, ...] = ()
            if arguments_node is not None:
                arguments = tuple(
                    self._type_argument(argument, scope)
                    for argument in arguments_node.named_children
                    if argument.type not in _ANNOTATION_NODES
                )
            return TypeRef(base.name, arguments)
        if kind == "type_identifier":
            name = _text(node)
            return TypeRef(name, is_variable=name in scope)
        if kind == "scoped_type_identifier":
            return TypeRef(re.sub(r"\s+", "", _text(node)))
        if kind in _PRIMITIVE_NODES:
            return TypeRef(_text(node))
        if kind == "annotated_type":
            inner = [child for child in node.named_children if child.type not in _ANNOTATION_NODES]
            return self._type_ref(inner[-1] if inner else None, scope)
        return TypeRef(_text(node))

    def _type_argument(self, node, scope: FrozenSet[str]) -> TypeRef:  # type: ignore[no-untyped-def]
        if node.type != "wildcard":
            return self._type_ref(node, scope)
        bounds = [
            child
            for child in node.named_children
            if child.type not in _ANNOTATION_NODES and child.type != "super"
        ]
        if any(child.type == "super" for child in node.children):
            return OBJECT_TYPE
        return self._type_ref(bounds[-1], scope) if bounds else OBJECT_TYPE

    @staticmethod
    def _modifiers(node) -> FrozenSet[str]:  # type: ignore[no-untyped-def]
        if node is None:
            return frozenset()
        return frozenset(child.type for child in node.children if not child.is_named)

    def _annotations(self, node) -> Tuple[Annotation, ...]:  # type: ignore[no-untyped-def]
        if node is None:
            return ()
        return tuple(
            self._annotation(child) for child in node.named_children if child.type in _ANNOTATION_NODES
        )

    @staticmethod
    def _annotation(node) -> Annotation:  # type: ignore[no-untyped-def]
        attributes: Dict[str, str] = {}
        arguments = node.child_by_field_name("arguments")
        if arguments is not None:
            for child in arguments.named_children:
                if child.type == "element_value_pair":
                    key = _text(child.child_by_field_name("key"))
                    attributes[key] = _text(child.child_by_field_name("value"))
                elif child.type not in _COMMENT_TYPES:
                    attributes["value"] = _text(child)
        return Annotation(name=_text(node.child_by_field_name("name")), attributes=attributes)

    @staticmethod
    def _javadoc(node) -> Optional[str]:  # type: ignore[no-untyped-def]
        previous = node.prev_named_sibling
        if previous is not None and previous.type in _COMMENT_TYPES:
            text = _text(previous)
            if is_javadoc(text):
                return text
        return None

    @staticmethod
    def _trailing_comment(node) -> str:  # type: ignore[no-untyped-def]
        following = node.next_named_sibling
        if following is None or following.type not in _COMMENT_TYPES:
            return ""
        if following.start_point[0] != node.end_point[0]:
            return ""
        text = _text(following)
        if text.startswith("//"):
            return text[2:].strip()
        return ""


__all__ = ["CompilationUnit", "JavaSourceParser", "TREE_SITTER_AVAILABLE"]
