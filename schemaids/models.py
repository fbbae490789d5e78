"""Core data models shared across schemaids components."""

from __future__ import annotations

import datetime
import decimal
import enum
import threading
import types
import uuid
from dataclasses import dataclass, field
from typing import Annotated, Any, Callable, Dict, Optional, Protocol, Union, get_args, get_origin

NESTED_TYPE_MARKER = "+"

_VALUE_LIKE_TYPES = (
    bool,
    int,
    float,
    complex,
    bytes,
    decimal.Decimal,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    uuid.UUID,
    enum.Enum,
    type(None),
)


class TypeDescriptor(Protocol):
    """Read-only view over a program type used for schema naming decisions."""

    def is_value_like(self) -> bool:
        """Return True for scalar, value-like types (numbers, enums, dates, ...)."""

    def is_builtin_text(self) -> bool:
        """Return True for the built-in text type."""

    def canonical_long_form_name(self) -> Optional[str]:
        """Return the module-qualified name, or None when the type is unnameable."""


@dataclass
class SchemaFragment:
    """One generated schema node with the two slots viewers read names from."""

    schema_id: Optional[str]
    title: Optional[str]
    schema: Dict[str, Any] = field(default_factory=dict)
    path: str = ""


NameMapping = Callable[[TypeDescriptor], Optional[str]]
SchemaTransformer = Callable[[SchemaFragment, TypeDescriptor, Optional[threading.Event]], None]


class PythonTypeDescriptor:
    """Adapts a Python annotation to the TypeDescriptor queries."""

    def __init__(self, annotation: Any) -> None:
        self.annotation = annotation
        self._target = unwrap_optional(annotation)

    def is_value_like(self) -> bool:
        target = self._target
        return isinstance(target, type) and issubclass(target, _VALUE_LIKE_TYPES)

    def is_builtin_text(self) -> bool:
        return self._target is str

    def canonical_long_form_name(self) -> Optional[str]:
        target = self._target
        if not isinstance(target, type):
            return None
        qualname = getattr(target, "__qualname__", None)
        module = getattr(target, "__module__", None)
        if not qualname or "<locals>" in qualname:
            return None
        # Parametrised names such as ``Page[pkg.Item]`` keep their brackets verbatim.
        head, bracket, params = qualname.partition("[")
        nested = head.replace(".", NESTED_TYPE_MARKER) + bracket + params
        return f"{module}.{nested}" if module else nested

    def __repr__(self) -> str:
        return f"PythonTypeDescriptor({self.annotation!r})"


def unwrap_optional(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is Annotated:
        return unwrap_optional(get_args(annotation)[0])
    if origin is Union or origin is types.UnionType:
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(members) == 1:
            return members[0]
    return annotation


__all__ = [
    "NESTED_TYPE_MARKER",
    "NameMapping",
    "PythonTypeDescriptor",
    "SchemaFragment",
    "SchemaTransformer",
    "TypeDescriptor",
    "unwrap_optional",
]
