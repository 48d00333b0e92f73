"""Type resolution contract consumed by the field extractor."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, Optional, Protocol

from ..models import TypeDescriptor


class TypeResolver(Protocol):
    """Maps a qualified type name to its declared shape."""

    def resolve(self, qualified_name: str) -> Optional[TypeDescriptor]:
        ...


class InMemoryTypeResolver:
    """Resolver backed by a registry of descriptors."""

    def __init__(self, descriptors: Iterable[TypeDescriptor] = ()) -> None:
        self._descriptors: Dict[str, TypeDescriptor] = {}
        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: TypeDescriptor) -> None:
        self._descriptors[descriptor.qualified_name] = descriptor

    def resolve(self, qualified_name: str) -> Optional[TypeDescriptor]:
        return self._descriptors.get(qualified_name)

    def __iter__(self) -> Iterator[TypeDescriptor]:
        return iter(self._descriptors.values())

    def __len__(self) -> int:
        return len(self._descriptors)


__all__ = ["InMemoryTypeResolver", "TypeResolver"]
