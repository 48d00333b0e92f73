"""apidoc: request/response document generation for Spring controllers."""

from .exclusion import ExclusionPolicy, ExclusionSpec, parse_exclusion_map
from .extractor import FieldExtractor
from .models import Field, FieldNode, TypeDescriptor, TypeRef
from .render import JsonTemplateRenderer, TableRenderer, generate_json_template, generate_parameter_table
from .types import InMemoryTypeResolver, TypeKind, TypeResolver, classify

__all__ = [
    "ExclusionPolicy",
    "ExclusionSpec",
    "Field",
    "FieldExtractor",
    "FieldNode",
    "InMemoryTypeResolver",
    "JsonTemplateRenderer",
    "TableRenderer",
    "TypeDescriptor",
    "TypeKind",
    "TypeRef",
    "TypeResolver",
    "classify",
    "generate_json_template",
    "generate_parameter_table",
    "parse_exclusion_map",
]

__version__ = "0.1.0"
