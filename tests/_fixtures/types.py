"""Shorthand constructors for in-memory type descriptors."""

from __future__ import annotations

from typing import Dict, Optional, Sequence

from apidoc.models import (
    Annotation,
    FieldDecl,
    MethodSignature,
    Parameter,
    TypeDescriptor,
    TypeRef,
)


def ref(name: str, *arguments: TypeRef, dims: int = 0) -> TypeRef:
    return TypeRef(name, tuple(arguments), dims)


def var(name: str) -> TypeRef:
    return TypeRef(name, is_variable=True)


def ann(name: str, **attributes: str) -> Annotation:
    return Annotation(name, dict(attributes))


def decl(
    name: str,
    type_ref: TypeRef,
    *annotations: Annotation,
    doc: str = "",
    comment: str = "",
    static: bool = False,
) -> FieldDecl:
    modifiers = frozenset({"private", "static"} if static else {"private"})
    return FieldDecl(
        name=name,
        type=type_ref,
        annotations=tuple(annotations),
        modifiers=modifiers,
        doc=doc,
        trailing_comment=comment,
    )


def param(name: str, type_ref: TypeRef, *annotations: Annotation) -> Parameter:
    return Parameter(name=name, type=type_ref, annotations=tuple(annotations))


def method(
    name: str,
    *parameters: Parameter,
    returns: Optional[TypeRef] = None,
    annotations: Sequence[Annotation] = (),
    doc: str = "",
    param_docs: Optional[Dict[str, str]] = None,
) -> MethodSignature:
    return MethodSignature(
        name=name,
        parameters=tuple(parameters),
        return_type=returns,
        annotations=tuple(annotations),
        doc=doc,
        param_docs=dict(param_docs or {}),
    )


def struct(
    qualified_name: str,
    *fields: FieldDecl,
    superclass: Optional[TypeRef] = None,
    type_parameters: Sequence[str] = (),
    kind: str = "class",
    annotations: Sequence[Annotation] = (),
    methods: Sequence[MethodSignature] = (),
    doc: str = "",
    source_file: Optional[str] = None,
) -> TypeDescriptor:
    return TypeDescriptor(
        qualified_name=qualified_name,
        fields=tuple(fields),
        superclass=superclass,
        type_parameters=tuple(type_parameters),
        kind=kind,
        annotations=tuple(annotations),
        doc=doc,
        methods=tuple(methods),
        source_file=source_file,
    )


STRING = ref("java.lang.String")
LONG = ref("java.lang.Long")
INT = ref("int")
DATE = ref("java.util.Date")


def list_of(element: TypeRef) -> TypeRef:
    return ref("java.util.List", element)


__all__ = [
    "DATE",
    "INT",
    "LONG",
    "STRING",
    "ann",
    "decl",
    "list_of",
    "method",
    "param",
    "ref",
    "struct",
    "var",
]
