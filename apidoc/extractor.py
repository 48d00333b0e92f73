"""Depth-first extraction of request and response fields.

The extractor walks type descriptors supplied by a :class:`TypeResolver` and
emits a flat list of :class:`Field` rows in which nesting is carried by
``Field.depth``. Own fields precede inherited ones, envelope payloads are
inlined at the envelope's level, and every branch carries its own frozen
``visited`` set so reference cycles terminate without hiding siblings.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, List, Mapping, Optional, Sequence

from .exclusion import ALL_FIELDS, ExclusionPolicy
from .logging import get_walk_logger
from .models import (
    Annotation,
    Field,
    FieldDecl,
    MethodSignature,
    Parameter,
    TypeRef,
    find_annotation,
)
from .types.classifier import Classification, TypeKind, classify, element_type, example_for
from .types.resolver import TypeResolver

REQUIRED_MARKERS = ("NotNull", "NotEmpty", "NotBlank")

_DESCRIPTION_MARKERS: Sequence[tuple[str, tuple[str, ...]]] = (
    ("ApiModelProperty", ("value", "notes")),
    ("Schema", ("description", "title")),
    ("ApiParam", ("value",)),
    ("Parameter", ("description",)),
)

_INFRASTRUCTURE_TYPES = frozenset(
    {
        "javax.servlet.http.HttpServletRequest",
        "jakarta.servlet.http.HttpServletRequest",
        "javax.servlet.http.HttpServletResponse",
        "jakarta.servlet.http.HttpServletResponse",
        "javax.servlet.http.HttpSession",
        "jakarta.servlet.http.HttpSession",
        "javax.servlet.ServletRequest",
        "jakarta.servlet.ServletRequest",
        "javax.servlet.ServletResponse",
        "jakarta.servlet.ServletResponse",
        "org.springframework.ui.Model",
        "org.springframework.ui.ModelMap",
        "org.springframework.validation.Errors",
        "java.security.Principal",
    }
)

# Matched when the resolver could not qualify the parameter type.
_INFRASTRUCTURE_SIMPLE_NAMES = frozenset(
    {
        "HttpServletRequest",
        "HttpServletResponse",
        "HttpSession",
        "ServletRequest",
        "ServletResponse",
        "Model",
        "ModelMap",
        "Errors",
        "Principal",
        "WebRequest",
        "NativeWebRequest",
    }
)


def substitute(ref: TypeRef, bindings: Mapping[str, TypeRef]) -> TypeRef:
    """Replace generic type variables in ``ref`` using ``bindings``."""
    if ref.is_variable:
        bound = bindings.get(ref.name)
        if bound is None:
            return ref
        if ref.array_dimensions:
            return TypeRef(
                name=bound.name,
                arguments=bound.arguments,
                array_dimensions=bound.array_dimensions + ref.array_dimensions,
                is_variable=bound.is_variable,
            )
        return bound
    if ref.arguments:
        return ref.with_arguments(tuple(substitute(arg, bindings) for arg in ref.arguments))
    return ref


def is_infrastructure_type(ref: TypeRef) -> bool:
    """Return True for framework-supplied parameters that carry no business data."""
    name = ref.name
    if name in _INFRASTRUCTURE_TYPES:
        return True
    if name.endswith(("BindingResult", "RedirectAttributes")) or "MultipartFile" in name:
        return True
    if name.startswith("org.springframework.web."):
        return True
    return "." not in name and name in _INFRASTRUCTURE_SIMPLE_NAMES


def marker_description(annotations: Sequence[Annotation]) -> str:
    for marker, attributes in _DESCRIPTION_MARKERS:
        annotation = find_annotation(tuple(annotations), marker)
        if annotation is None:
            continue
        text = annotation.text(*attributes)
        if text:
            return text
    return ""


def field_description(decl: FieldDecl) -> str:
    """Marker text, else Javadoc, else the trailing same-line comment."""
    described = marker_description(decl.annotations)
    if described:
        return described
    if decl.doc:
        return decl.doc
    return decl.trailing_comment


def field_name(decl: FieldDecl) -> str:
    """Return the serialized name of ``decl``, honouring alias markers."""
    alias = find_annotation(decl.annotations, "JsonProperty", "SerializedName")
    if alias is not None:
        name = alias.text("value")
        if name:
            return name
    fastjson = find_annotation(decl.annotations, "JSONField")
    if fastjson is not None:
        name = fastjson.text("name")
        if name:
            return name
    return decl.name


def is_field_required(decl: FieldDecl) -> bool:
    return find_annotation(decl.annotations, *REQUIRED_MARKERS) is not None


def binding_required(binding: Annotation) -> bool:
    flag = binding.flag("required")
    if flag is not None:
        return flag
    if binding.simple_name == "RequestParam" and binding.has("defaultValue"):
        return False
    return True


def is_parameter_required(parameter: Parameter) -> bool:
    binding = find_annotation(parameter.annotations, "RequestParam", "RequestBody", "PathVariable")
    if binding is not None:
        return binding_required(binding)
    return find_annotation(parameter.annotations, *REQUIRED_MARKERS) is not None


def parameter_name(parameter: Parameter) -> str:
    binding = find_annotation(parameter.annotations, "RequestParam", "PathVariable")
    if binding is not None:
        name = binding.text("value", "name")
        if name:
            return name
    return parameter.name


class FieldExtractor:
    """Walks declared types into flat, depth-annotated field lists."""

    def __init__(self, resolver: TypeResolver, policy: Optional[ExclusionPolicy] = None) -> None:
        self.resolver = resolver
        self.policy = policy if policy is not None else ExclusionPolicy()
        self.logger = get_walk_logger("extractor")

    def classify(self, ref: TypeRef) -> Classification:
        """Classify `ref`, treating resolvable enums as scalar values."""
        classification = classify(ref)
        if classification.kind is TypeKind.STRUCT:
            descriptor = self.resolver.resolve(ref.name)
            if descriptor is not None and descriptor.kind == "enum":
                name = descriptor.simple_name
                return Classification(TypeKind.SCALAR, name, example_for(name))
        return classification

    def extract(
        self, ref: TypeRef, depth: int = 0, visited: FrozenSet[str] = frozenset()
    ) -> List[Field]:
        """Return the fields of ``ref`` at ``depth``, descendants before ancestors."""
        classification = classify(ref)
        if classification.is_sequence:
            element = element_type(ref)
            if element is None:
                return []
            return self.extract(element, depth, visited)
        if not classification.is_structured:
            return []
        return self._walk(
            ref,
            depth,
            visited,
            frozenset(),
            envelope=classification.kind is TypeKind.ENVELOPE,
        )

    def extract_response_fields(self, return_type: Optional[TypeRef]) -> List[Field]:
        if return_type is None or return_type.name == "void":
            return []
        self.logger.debug("Extracting response fields for %s", return_type)
        return self.extract(return_type)

    def extract_request_fields(self, method: MethodSignature) -> List[Field]:
        self.logger.debug("Extracting request fields for %s", method.name)
        fields: List[Field] = []
        for parameter in method.parameters:
            if is_infrastructure_type(parameter.type):
                continue
            annotations = parameter.annotations
            body = find_annotation(annotations, "RequestBody")
            binding = find_annotation(annotations, "RequestParam", "PathVariable")
            attribute = find_annotation(annotations, "RequestAttribute")
            classification = self.classify(parameter.type)
            description = method.param_docs.get(parameter.name) or marker_description(annotations)

            if classification.is_structured:
                fields.extend(self.extract(parameter.type))
            elif body is not None:
                fields.append(
                    self._parameter_row(
                        parameter.name, classification, is_parameter_required(parameter), description
                    )
                )
                fields.extend(self._children(parameter.type, classification, 1, frozenset()))
            elif binding is not None:
                fields.append(
                    self._parameter_row(
                        parameter_name(parameter),
                        classification,
                        is_parameter_required(parameter),
                        description,
                    )
                )
            elif attribute is None:
                fields.append(self._parameter_row(parameter.name, classification, False, description))
        return fields

    @staticmethod
    def _parameter_row(
        name: str, classification: Classification, required: bool, description: str
    ) -> Field:
        return Field(
            name=name,
            type_name=classification.type_name,
            required=required,
            description=description,
            depth=0,
            example=classification.example,
        )

    def _walk(
        self,
        ref: TypeRef,
        depth: int,
        visited: FrozenSet[str],
        forwarded: FrozenSet[str],
        *,
        envelope: bool,
    ) -> List[Field]:
        descriptor = self.resolver.resolve(ref.name)
        if descriptor is None:
            if envelope and ref.arguments:
                return self.extract(ref.arguments[0], depth, visited)
            self.logger.debug("Type %s could not be resolved; omitting branch", ref, depth=depth)
            return []

        if descriptor.kind == "enum":
            return []

        name = descriptor.qualified_name
        if name in visited:
            self.logger.debug("Cycle through %s; truncating branch", name, depth=depth)
            return []

        if self.policy.excluded_fields_for(name) == ALL_FIELDS:
            self.logger.debug("All fields of %s are excluded", name, depth=depth)
            return []

        visited = visited | {name}
        bindings: Dict[str, TypeRef] = descriptor.bindings_for(ref)

        fields: List[Field] = []
        for decl in descriptor.fields:
            if decl.is_static or self.policy.is_field_excluded(name, decl.name, forwarded):
                continue
            fields.extend(self._field_rows(decl, bindings, depth, visited, envelope=envelope))

        parent = descriptor.superclass
        if parent is not None and parent.name != "java.lang.Object":
            parent = substitute(parent, bindings)
            fields.extend(
                self._walk(
                    parent,
                    depth,
                    visited,
                    self.policy.forward(name, forwarded),
                    envelope=classify(parent).kind is TypeKind.ENVELOPE,
                )
            )
        return fields

    def _field_rows(
        self,
        decl: FieldDecl,
        bindings: Mapping[str, TypeRef],
        depth: int,
        visited: FrozenSet[str],
        *,
        envelope: bool,
    ) -> List[Field]:
        declared = decl.type
        resolved = substitute(declared, bindings)
        classification = self.classify(resolved)

        # An envelope's payload slot is replaced by the payload's own fields.
        if (
            envelope
            and declared.is_variable
            and not declared.array_dimensions
            and classification.is_structured
        ):
            return self.extract(resolved, depth, visited)

        rows = [
            Field(
                name=field_name(decl),
                type_name=classification.type_name,
                required=is_field_required(decl),
                description=field_description(decl),
                depth=depth,
                example=classification.example,
            )
        ]
        rows.extend(self._children(resolved, classification, depth + 1, visited))
        return rows

    def _children(
        self,
        ref: TypeRef,
        classification: Classification,
        depth: int,
        visited: FrozenSet[str],
    ) -> List[Field]:
        if classification.is_structured:
            return self.extract(ref, depth, visited)
        if classification.is_sequence:
            element = element_type(ref)
            if element is not None:
                return self.extract(element, depth, visited)
        return []


__all__ = [
    "FieldExtractor",
    "REQUIRED_MARKERS",
    "binding_required",
    "field_description",
    "field_name",
    "is_infrastructure_type",
    "is_parameter_required",
    "marker_description",
    "parameter_name",
    "substitute",
]
