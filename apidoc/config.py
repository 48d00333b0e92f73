"""Configuration loading for apidoc (.apidoc.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import yaml

from .exclusion import ExclusionPolicy
from .render.json_template import VALUE_STYLES

CONFIG_FILENAME = ".apidoc.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ExclusionConfig:
    """Classes and fields left out of generated documents."""

    classes: List[str] = field(default_factory=list)
    fields: Union[str, Dict[str, Optional[List[str]]], None] = None

    def policy(self) -> ExclusionPolicy:
        """Return an immutable policy snapshot for one documentation run."""
        return ExclusionPolicy.from_config(self.classes, self.fields)


@dataclass
class OutputConfig:
    """Which endpoint document sections are rendered, and how."""

    show_call_location: bool = True
    show_request_json: bool = True
    show_response_json: bool = True
    json_values: str = "type"
    required_labels: Tuple[str, str] = ("Yes", "No")


@dataclass
class SourceConfig:
    """Java source discovery settings."""

    exclude_paths: List[str] = field(default_factory=list)


@dataclass
class ApiDocConfig:
    """Represents the settings defined in .apidoc.yml."""

    root: Path
    application_name: Optional[str] = None
    exclusions: ExclusionConfig = field(default_factory=ExclusionConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    sources: SourceConfig = field(default_factory=SourceConfig)


def load_config(config_path: Path) -> ApiDocConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ApiDocConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    exclusions = ExclusionConfig()
    exclusion_data = _as_dict(data.get("exclusions"))
    if exclusion_data:
        exclusions.classes = _as_str_list(exclusion_data.get("classes"))
        exclusions.fields = _as_field_map(exclusion_data.get("fields"))

    output = OutputConfig()
    output_data = _as_dict(data.get("output"))
    if output_data:
        output.show_call_location = _as_bool(output_data.get("show_call_location"), True)
        output.show_request_json = _as_bool(output_data.get("show_request_json"), True)
        output.show_response_json = _as_bool(output_data.get("show_response_json"), True)
        json_values = _as_str(output_data.get("json_values"))
        if json_values is not None:
            if json_values not in VALUE_STYLES:
                raise ConfigError(
                    f"output.json_values must be one of {', '.join(VALUE_STYLES)}, got {json_values!r}"
                )
            output.json_values = json_values
        labels = _as_str_list(output_data.get("required_labels"))
        if labels:
            if len(labels) != 2:
                raise ConfigError("output.required_labels must list exactly two labels")
            output.required_labels = (labels[0], labels[1])

    sources = SourceConfig()
    source_data = _as_dict(data.get("sources"))
    if source_data:
        sources.exclude_paths = _as_str_list(source_data.get("exclude_paths"))

    return ApiDocConfig(
        root=root,
        application_name=_as_str(data.get("application_name")),
        exclusions=exclusions,
        output=output,
        sources=sources,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.suffix not in {".yml", ".yaml"}:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_field_map(value: Any) -> Union[str, Dict[str, Optional[List[str]]], None]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        result: Dict[str, Optional[List[str]]] = {}
        for key, fields in value.items():
            if fields is None or fields == "*":
                result[str(key)] = None
            elif isinstance(fields, str):
                result[str(key)] = [part.strip() for part in fields.split(",") if part.strip()]
            else:
                result[str(key)] = _as_str_list(fields)
        return result
    raise ConfigError("exclusions.fields must be a string or a mapping")


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return default


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "ApiDocConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "ExclusionConfig",
    "OutputConfig",
    "SourceConfig",
    "load_config",
]
