"""Pipeline orchestration for the generate, endpoints and fields flows."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional

from .config import ApiDocConfig, load_config
from .endpoints import ApiDocument, EndpointAssembler, EndpointDoc, is_controller
from .extractor import FieldExtractor
from .java.index import SourceTypeResolver
from .logging import get_logger
from .models import Field, TypeRef
from .postproc.lint import MarkdownLinter

ResolverFactory = Callable[[Path, ApiDocConfig], SourceTypeResolver]


def _default_resolver(root: Path, config: ApiDocConfig) -> SourceTypeResolver:
    return SourceTypeResolver.from_directory(root, config.sources.exclude_paths)


class Orchestrator:
    """Coordinates source indexing, extraction and document assembly."""

    def __init__(
        self,
        resolver_factory: ResolverFactory | None = None,
        linter: MarkdownLinter | None = None,
    ) -> None:
        self.resolver_factory = resolver_factory or _default_resolver
        self.linter = linter
        self.logger = get_logger("orchestrator")

    def run_generate(
        self,
        path: str,
        controller: str,
        method: Optional[str] = None,
        *,
        config_path: Optional[str] = None,
    ) -> List[ApiDocument]:
        """Render endpoint documents for one controller, or one of its methods."""
        root, config, resolver = self._prepare(path, config_path)
        descriptor = resolver.find(controller)
        if descriptor is None or not is_controller(descriptor):
            raise LookupError(f"Controller not found: {controller}")
        if method is not None and not any(m.name == method for m in descriptor.methods):
            raise LookupError(f"Method {method} not found on {descriptor.qualified_name}")

        assembler = EndpointAssembler(resolver, config, linter=self.linter)
        documents = assembler.documents(descriptor, method)
        self.logger.info(
            "Generated %d endpoint documents for %s", len(documents), descriptor.qualified_name
        )
        return documents

    def run_endpoints(self, path: str, *, config_path: Optional[str] = None) -> List[EndpointDoc]:
        """Describe every mapped method of every controller below ``path``."""
        _, config, resolver = self._prepare(path, config_path)
        assembler = EndpointAssembler(resolver, config, linter=self.linter)
        endpoints: List[EndpointDoc] = []
        for descriptor in sorted(resolver.controllers(), key=lambda d: d.qualified_name):
            endpoints.extend(assembler.endpoints(descriptor))
        return endpoints

    def run_fields(
        self, path: str, type_name: str, *, config_path: Optional[str] = None
    ) -> List[Field]:
        """Extract the document shape of a single type."""
        _, config, resolver = self._prepare(path, config_path)
        descriptor = resolver.find(type_name)
        if descriptor is None:
            raise LookupError(f"Type not found: {type_name}")
        extractor = FieldExtractor(resolver, config.exclusions.policy())
        return extractor.extract(TypeRef(descriptor.qualified_name))

    def _prepare(
        self, path: str, config_path: Optional[str]
    ) -> tuple[Path, ApiDocConfig, SourceTypeResolver]:
        root = Path(path).expanduser().resolve()
        if not root.exists():
            raise FileNotFoundError(f"Source root not found: {path}")
        config = load_config(Path(config_path).expanduser() if config_path else root)
        self.logger.debug("Indexing Java sources under %s", root)
        resolver = self.resolver_factory(root, config)
        self.logger.debug("Indexed %d types", len(resolver))
        return root, config, resolver


__all__ = ["Orchestrator"]
