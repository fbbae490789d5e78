"""Ready-made name mappings for the schema id transformer."""

from __future__ import annotations

from typing import Optional

from .models import NESTED_TYPE_MARKER, NameMapping, TypeDescriptor


def full_type_name(descriptor: TypeDescriptor) -> Optional[str]:
    """Return the canonical long-form name unchanged."""
    return descriptor.canonical_long_form_name()


def nested_type_names(separator: str = ".", *, include_module: bool = True) -> NameMapping:
    """Return a mapping that spells nested types as ``Outer<separator>Inner``.

    With ``include_module=False`` the module prefix is dropped, so
    ``pkg.mod.Outer+Inner`` becomes ``Outer.Inner`` instead of
    ``pkg.mod.Outer.Inner``.
    """

    def _map(descriptor: TypeDescriptor) -> Optional[str]:
        name = descriptor.canonical_long_form_name()
        if name is None:
            return None
        if not include_module:
            name = _strip_module(name)
        return name.replace(NESTED_TYPE_MARKER, separator)

    return _map


def _strip_module(name: str) -> str:
    head, bracket, params = name.partition("[")
    _, _, local = head.rpartition(".")
    return local + bracket + params


__all__ = ["full_type_name", "nested_type_names"]
