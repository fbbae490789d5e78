"""Configuration loading for schemaids (.schemaids.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .naming import nested_type_names
from .options import OpenApiOptions
from .transformer import custom_schema_ids

CONFIG_FILENAME = ".schemaids.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class DocumentConfig:
    """Metadata for the generated OpenAPI document."""

    name: str = "v1"
    title: str = "API"
    version: str = "1.0.0"


@dataclass
class SchemaIdConfig:
    """How schema ids are rewritten."""

    enabled: bool = True
    include_value_types: bool = False
    separator: str = "."
    include_module: bool = True
    emit_extension: bool = True


@dataclass
class SchemaIdsConfig:
    """Represents the settings defined in .schemaids.yml."""

    document: DocumentConfig = field(default_factory=DocumentConfig)
    schema_ids: SchemaIdConfig = field(default_factory=SchemaIdConfig)


def load_config(config_path: Path) -> SchemaIdsConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    if not config_file.exists():
        return SchemaIdsConfig()

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    document = DocumentConfig()
    document_data = _as_dict(data.get("document"))
    if document_data:
        document.name = _as_str(document_data.get("name")) or document.name
        document.title = _as_str(document_data.get("title")) or document.title
        document.version = _as_str(document_data.get("version")) or document.version

    schema_ids = SchemaIdConfig()
    schema_data = _as_dict(data.get("schema_ids"))
    if schema_data:
        schema_ids.enabled = _as_bool(schema_data.get("enabled"), schema_ids.enabled)
        schema_ids.include_value_types = _as_bool(
            schema_data.get("include_value_types"), schema_ids.include_value_types
        )
        separator = schema_data.get("separator")
        if separator is not None:
            if not isinstance(separator, str):
                raise ConfigError("schema_ids.separator must be a string")
            schema_ids.separator = separator
        schema_ids.include_module = _as_bool(
            schema_data.get("include_module"), schema_ids.include_module
        )
        schema_ids.emit_extension = _as_bool(
            schema_data.get("emit_extension"), schema_ids.emit_extension
        )

    return SchemaIdsConfig(document=document, schema_ids=schema_ids)


def build_options(config: SchemaIdsConfig) -> OpenApiOptions:
    """Translate configuration into document options with schema ids registered."""
    options = OpenApiOptions(
        document_name=config.document.name,
        title=config.document.title,
        version=config.document.version,
        emit_schema_id_extension=config.schema_ids.emit_extension,
    )
    if not config.schema_ids.enabled:
        return options
    return custom_schema_ids(
        options,
        nested_type_names(
            config.schema_ids.separator,
            include_module=config.schema_ids.include_module,
        ),
        include_value_types=config.schema_ids.include_value_types,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


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


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DocumentConfig",
    "SchemaIdConfig",
    "SchemaIdsConfig",
    "build_options",
    "load_config",
]
