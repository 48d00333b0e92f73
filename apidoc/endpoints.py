"""Endpoint metadata and Markdown document assembly."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

import yaml
from jinja2 import Environment, FileSystemLoader

from .config import ApiDocConfig, OutputConfig
from .extractor import FieldExtractor
from .java.javadoc import collapse, strip_html
from .logging import get_logger
from .models import Annotation, Field, MethodSignature, TypeDescriptor, find_annotation
from .postproc.lint import MarkdownLinter
from .render.json_template import JsonTemplateRenderer
from .render.table import TableRenderer
from .types.resolver import TypeResolver

_LOGGER = get_logger("endpoints")

DEFAULT_HTTP_METHOD = "GET/POST"
DOCUMENT_SEPARATOR = "\n---\n\n"
MAX_SEARCH_LEVELS = 20

_VERB_MAPPINGS = {
    "GetMapping": "GET",
    "PostMapping": "POST",
    "PutMapping": "PUT",
    "DeleteMapping": "DELETE",
    "PatchMapping": "PATCH",
}
_HTTP_VERBS = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS")

_APPLICATION_FILES = (
    "application.properties",
    "bootstrap.properties",
    "application.yml",
    "application.yaml",
    "bootstrap.yml",
    "bootstrap.yaml",
)
_CONTEXT_PATH_KEY = "server.servlet.context-path"
_APPLICATION_NAME_KEYS = ("spring.application.name", "spring.main.application.name")

_PATH_VARIABLE_PATTERN = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\s*:\s*[^}]+\}")


@dataclass
class EndpointDoc:
    """Everything rendered for one controller method."""

    controller: str
    method: str
    title: str
    controller_name: str
    path: str
    url: str
    http_method: str
    content_type: str
    request_fields: List[Field] = field(default_factory=list)
    response_fields: List[Field] = field(default_factory=list)
    line: Optional[int] = None
    source_file: Optional[str] = None


@dataclass(frozen=True)
class ApiDocument:
    """A rendered endpoint document, named after the endpoint title."""

    name: str
    content: str


def normalize_path(path: str) -> str:
    """Return a canonical representation for endpoint paths."""
    if not path:
        return "/"
    result = path.strip()
    if not result.startswith("/"):
        result = "/" + result
    result = _PATH_VARIABLE_PATTERN.sub(r"{\1}", result)
    result = re.sub(r"/{2,}", "/", result)
    if len(result) > 1 and result.endswith("/"):
        result = result[:-1]
    return result or "/"


def join_paths(prefix: str, route: str) -> str:
    """Combine class-level and method-level paths."""
    prefix_norm = normalize_path(prefix) if prefix else ""
    route_norm = normalize_path(route)
    if not prefix_norm:
        return route_norm
    if route_norm == "/":
        return prefix_norm
    return normalize_path(f"{prefix_norm}{route_norm}")


def mapping_annotation(annotations: Sequence[Annotation]) -> Optional[Annotation]:
    for annotation in annotations:
        if annotation.simple_name.endswith("Mapping"):
            return annotation
    return None


def mapping_path(annotations: Sequence[Annotation]) -> str:
    """Return the first path of the ``*Mapping`` marker, or an empty string."""
    annotation = mapping_annotation(annotations)
    if annotation is None:
        return ""
    return annotation.text("value", "path") or ""


def is_controller(descriptor: TypeDescriptor) -> bool:
    return any(annotation.simple_name.endswith("Controller") for annotation in descriptor.annotations)


def is_endpoint(method: MethodSignature) -> bool:
    return mapping_annotation(method.annotations) is not None


def endpoint_methods(controller: TypeDescriptor) -> List[MethodSignature]:
    return [method for method in controller.methods if is_endpoint(method)]


def parse_request_methods(text: str) -> str:
    """Turn ``{RequestMethod.GET, RequestMethod.POST}`` into ``GET/POST``."""
    verbs: List[str] = []
    for part in text.replace("{", "").replace("}", "").split(","):
        token = re.sub(r"[^A-Za-z]", "", part.strip().rsplit(".", 1)[-1]).upper()
        if token in _HTTP_VERBS and token not in verbs:
            verbs.append(token)
    return "/".join(verbs)


def http_method(method: MethodSignature) -> str:
    for annotation in method.annotations:
        verb = _VERB_MAPPINGS.get(annotation.simple_name)
        if verb is not None:
            return verb
        if annotation.simple_name == "RequestMapping":
            declared = annotation.raw("method")
            if declared:
                resolved = parse_request_methods(declared)
                if resolved:
                    return resolved
            return DEFAULT_HTTP_METHOD
    return DEFAULT_HTTP_METHOD


def content_type(method: MethodSignature) -> str:
    for parameter in method.parameters:
        if find_annotation(parameter.annotations, "RequestBody") is not None:
            return "JSON"
    return "FormData"


def method_title(method: MethodSignature) -> str:
    """First non-empty line of the method's Javadoc, else the method name."""
    for line in method.doc.splitlines():
        if line.strip():
            return line.strip()
    return method.name


def controller_name(descriptor: TypeDescriptor) -> str:
    summary = collapse(strip_html(descriptor.doc))
    if summary:
        return summary
    name = descriptor.simple_name
    if name.endswith("Controller") and name != "Controller":
        return name[: -len("Controller")]
    return name


def _strip_slash(value: str) -> str:
    return value[1:] if value.startswith("/") else value


def _read_properties(path: Path) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8", errors="ignore").splitlines():
        line = raw_line.strip()
        if not line or line.startswith(("#", "!")):
            continue
        match = re.match(r"([^=:\s]+)\s*[=:\s]\s*(.*)$", line)
        if match:
            values.setdefault(match.group(1), match.group(2).strip())
    return values


def _lookup(data: Any, parts: Sequence[str]) -> Any:
    """Find a dotted key in YAML data written nested, flat or mixed."""
    if not isinstance(data, dict):
        return None
    for index in range(len(parts), 0, -1):
        key = ".".join(parts[:index])
        if key not in data:
            continue
        if index == len(parts):
            return data[key]
        found = _lookup(data[key], parts[index:])
        if found is not None:
            return found
    return None


def _read_yaml(path: Path) -> Dict[str, str]:
    values: Dict[str, str] = {}
    try:
        documents = list(yaml.safe_load_all(path.read_text(encoding="utf-8", errors="ignore")))
    except yaml.YAMLError as exc:
        _LOGGER.debug("Ignoring unreadable %s: %s", path, exc)
        return values
    for document in documents:
        for key in (_CONTEXT_PATH_KEY, *_APPLICATION_NAME_KEYS):
            value = _lookup(document, key.split("."))
            if isinstance(value, (str, int, float)) and not isinstance(value, bool):
                values.setdefault(key, str(value).strip())
    return values


def read_application_name(path: Path) -> Optional[str]:
    """Return the context path or application name declared in ``path``."""
    if path.suffix == ".properties":
        values = _read_properties(path)
    else:
        values = _read_yaml(path)
    context_path = _strip_slash(values.get(_CONTEXT_PATH_KEY, ""))
    if context_path:
        return context_path
    for key in _APPLICATION_NAME_KEYS:
        if values.get(key):
            return values[key]
    return None


def _application_name_in(directory: Path) -> Optional[str]:
    for filename in _APPLICATION_FILES:
        candidate = directory / filename
        if candidate.is_file():
            name = read_application_name(candidate)
            if name:
                _LOGGER.debug("Application name %r found in %s", name, candidate)
                return name
    return None


def discover_application_name(start: Path, max_levels: int = MAX_SEARCH_LEVELS) -> Optional[str]:
    """Walk up from ``start`` looking for Spring application settings.

    Each level checks the directory itself, then ``src/main/resources`` and
    its immediate subdirectories.
    """
    current: Optional[Path] = start if start.is_dir() else start.parent
    level = 0
    while current is not None and level < max_levels:
        level += 1
        name = _application_name_in(current)
        if name:
            return name
        resources = current / "src" / "main" / "resources"
        if resources.is_dir():
            name = _application_name_in(resources)
            if name:
                return name
            for child in sorted(resources.iterdir()):
                if child.is_dir():
                    name = _application_name_in(child)
                    if name:
                        return name
        parent = current.parent
        current = parent if parent != current else None
    return None


class EndpointAssembler:
    """Builds endpoint documents for controllers served by a type resolver."""

    def __init__(
        self,
        resolver: TypeResolver,
        config: Optional[ApiDocConfig] = None,
        *,
        templates_dir: Path | None = None,
        linter: MarkdownLinter | None = None,
    ) -> None:
        self.resolver = resolver
        self.config = config
        self.output = config.output if config is not None else OutputConfig()
        policy = config.exclusions.policy() if config is not None else None
        self.extractor = FieldExtractor(resolver, policy)
        self.table = TableRenderer(self.output.required_labels)
        self.json = JsonTemplateRenderer(value_style=self.output.json_values)
        self.linter = linter or MarkdownLinter()
        self.env = self._create_env(templates_dir)
        self._application_names: Dict[str, Optional[str]] = {}

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(Path(__file__).with_name("templates")))
        loader = FileSystemLoader(directories)
        return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)

    def application_name(self, controller: TypeDescriptor) -> Optional[str]:
        if self.config is not None and self.config.application_name:
            return self.config.application_name
        if not controller.source_file:
            return None
        directory = str(Path(controller.source_file).parent)
        if directory not in self._application_names:
            self._application_names[directory] = discover_application_name(Path(directory))
        return self._application_names[directory]

    def describe(self, controller: TypeDescriptor, method: MethodSignature) -> EndpointDoc:
        path = join_paths(mapping_path(controller.annotations), mapping_path(method.annotations))
        app = self.application_name(controller)
        return EndpointDoc(
            controller=controller.qualified_name,
            method=method.name,
            title=method_title(method),
            controller_name=controller_name(controller),
            path=path,
            url=f"/{app}{path}" if app else path,
            http_method=http_method(method),
            content_type=content_type(method),
            request_fields=self.extractor.extract_request_fields(method),
            response_fields=self.extractor.extract_response_fields(method.return_type),
            line=method.line,
            source_file=controller.source_file,
        )

    def endpoints(
        self, controller: TypeDescriptor, method_name: Optional[str] = None
    ) -> List[EndpointDoc]:
        """Describe the controller's mapped methods, optionally just one of them."""
        methods = endpoint_methods(controller)
        if method_name is not None:
            methods = [method for method in methods if method.name == method_name]
        _LOGGER.debug("Describing %d endpoints of %s", len(methods), controller.qualified_name)
        return [self.describe(controller, method) for method in methods]

    def render(self, endpoint: EndpointDoc) -> str:
        template = self.env.get_template("endpoint.md.j2")
        markdown = template.render(
            endpoint=endpoint,
            output=self.output,
            request_table=self.table.render(endpoint.request_fields),
            request_json=self.json.render(endpoint.request_fields),
            response_table=self.table.render(endpoint.response_fields),
            response_json=self.json.render(endpoint.response_fields),
        )
        return self.linter.lint(markdown)

    def documents(
        self, controller: TypeDescriptor, method_name: Optional[str] = None
    ) -> List[ApiDocument]:
        return [
            ApiDocument(name=endpoint.title, content=self.render(endpoint))
            for endpoint in self.endpoints(controller, method_name)
        ]

    def render_controller(self, controller: TypeDescriptor) -> str:
        """Render every endpoint of ``controller`` as one Markdown document."""
        return join_documents(self.documents(controller))


def join_documents(documents: Iterable[ApiDocument]) -> str:
    return "".join(document.content + DOCUMENT_SEPARATOR for document in documents)


__all__ = [
    "ApiDocument",
    "DEFAULT_HTTP_METHOD",
    "DOCUMENT_SEPARATOR",
    "EndpointAssembler",
    "EndpointDoc",
    "content_type",
    "controller_name",
    "discover_application_name",
    "endpoint_methods",
    "http_method",
    "is_controller",
    "is_endpoint",
    "join_documents",
    "join_paths",
    "mapping_path",
    "method_title",
    "normalize_path",
    "parse_request_methods",
    "read_application_name",
]
