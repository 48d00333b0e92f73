"""Type classification and resolution."""

from .classifier import Classification, TypeKind, classify, element_type
from .resolver import InMemoryTypeResolver, TypeResolver

__all__ = [
    "Classification",
    "InMemoryTypeResolver",
    "TypeKind",
    "TypeResolver",
    "classify",
    "element_type",
]
