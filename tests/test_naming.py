"""Tests for the bundled name mappings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from schemaids.naming import full_type_name, nested_type_names


@dataclass
class _Named:
    name: Optional[str]

    def is_value_like(self) -> bool:
        return False

    def is_builtin_text(self) -> bool:
        return False

    def canonical_long_form_name(self) -> Optional[str]:
        return self.name


def test_nested_type_names_replaces_marker() -> None:
    mapping = nested_type_names()
    assert mapping(_Named("app.models.Outer+Inner")) == "app.models.Outer.Inner"


def test_nested_type_names_custom_separator() -> None:
    mapping = nested_type_names("_")
    assert mapping(_Named("app.Outer+Middle+Inner")) == "app.Outer_Middle_Inner"


def test_nested_type_names_without_module() -> None:
    mapping = nested_type_names(include_module=False)
    assert mapping(_Named("app.models.Outer+Inner")) == "Outer.Inner"
    assert mapping(_Named("app.models.Page[app.models.Item]")) == "Page[app.models.Item]"


def test_nested_type_names_passes_through_missing_names() -> None:
    assert nested_type_names()(_Named(None)) is None


def test_full_type_name_is_unchanged() -> None:
    assert full_type_name(_Named("app.Outer+Inner")) == "app.Outer+Inner"
