"""Tests for schemaids.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from schemaids.config import (
    ConfigError,
    DocumentConfig,
    SchemaIdConfig,
    SchemaIdsConfig,
    build_options,
    load_config,
)
from schemaids.models import SchemaFragment
from schemaids.options import OpenApiOptions


class _Descriptor:
    def __init__(self, name: str) -> None:
        self.name = name

    def is_value_like(self) -> bool:
        return False

    def is_builtin_text(self) -> bool:
        return False

    def canonical_long_form_name(self) -> str:
        return self.name


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, SchemaIdsConfig)
    assert config.document == DocumentConfig()
    assert config.schema_ids == SchemaIdConfig()


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".schemaids.yml"
    config_file.write_text(
        """
document:
  name: "v2"
  title: "Inventory API"
  version: "2.1.0"
schema_ids:
  include_value_types: true
  separator: "_"
  include_module: false
  emit_extension: "no"
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.document.name == "v2"
    assert config.document.title == "Inventory API"
    assert config.document.version == "2.1.0"
    assert config.schema_ids.include_value_types is True
    assert config.schema_ids.separator == "_"
    assert config.schema_ids.include_module is False
    assert config.schema_ids.emit_extension is False
    assert config.schema_ids.enabled is True


def test_load_config_accepts_directory(tmp_path: Path) -> None:
    (tmp_path / ".schemaids.yml").write_text("document:\n  title: From Dir\n", encoding="utf-8")

    assert load_config(tmp_path).document.title == "From Dir"


def test_load_config_empty_file_uses_defaults(tmp_path: Path) -> None:
    config_file = tmp_path / ".schemaids.yml"
    config_file.write_text("\n", encoding="utf-8")

    assert load_config(config_file).schema_ids == SchemaIdConfig()


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    config_file = tmp_path / ".schemaids.yml"
    config_file.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(config_file)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    config_file = tmp_path / ".schemaids.yml"
    config_file.write_text("document: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(config_file)


def test_load_config_rejects_non_string_separator(tmp_path: Path) -> None:
    config_file = tmp_path / ".schemaids.yml"
    config_file.write_text("schema_ids:\n  separator: [1, 2]\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(config_file)


def test_build_options_registers_schema_id_transformer() -> None:
    config = SchemaIdsConfig(
        document=DocumentConfig(name="v3", title="Shop", version="3.0.0"),
        schema_ids=SchemaIdConfig(separator="::", include_module=False),
    )

    options = build_options(config)

    assert isinstance(options, OpenApiOptions)
    assert (options.document_name, options.title, options.version) == ("v3", "Shop", "3.0.0")
    assert len(options.schema_transformers) == 1

    fragment = SchemaFragment(schema_id="Thing", title="Thing")
    options.schema_transformers[0](fragment, _Descriptor("pkg.mod.Outer+Thing"), None)
    assert fragment.schema_id == "Outer::Thing"
    assert fragment.title == "Outer::Thing"


def test_build_options_without_schema_ids() -> None:
    config = SchemaIdsConfig(schema_ids=SchemaIdConfig(enabled=False))

    assert build_options(config).schema_transformers == []
