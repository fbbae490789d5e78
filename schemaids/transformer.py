"""Schema transformer replacing generated schema ids with caller-supplied names."""

from __future__ import annotations

import threading
from typing import Optional

from .models import NameMapping, SchemaFragment, SchemaTransformer, TypeDescriptor
from .options import OpenApiOptions


def schema_id_transformer(
    type_schema_transformer: NameMapping,
    include_value_types: bool = False,
) -> SchemaTransformer:
    """Return a per-fragment callback that renames identified schemas.

    Value-like and text types are left alone unless ``include_value_types`` is
    set. Only fragments that already carry a schema id are renamed; the new
    name is written to both the schema id and the title so every viewer shows
    the same model name. A ``None`` name clears both slots.
    """

    def _transform(
        fragment: SchemaFragment,
        descriptor: TypeDescriptor,
        cancel: Optional[threading.Event] = None,
    ) -> None:
        if cancel is not None and cancel.is_set():
            return

        if not include_value_types and (
            descriptor.is_value_like() or descriptor.is_builtin_text()
        ):
            return

        # An unset id means the fragment is inline or has been handled already.
        if fragment.schema_id is None:
            return

        name = type_schema_transformer(descriptor)

        # x-schema-id feeds model listings; title feeds inline/endpoint views.
        fragment.schema_id = name
        fragment.title = name

    return _transform


def custom_schema_ids(
    options: OpenApiOptions,
    type_schema_transformer: NameMapping,
    include_value_types: bool = False,
) -> OpenApiOptions:
    """Register a schema id transformer on ``options`` and return it for chaining."""
    return options.add_schema_transformer(
        schema_id_transformer(type_schema_transformer, include_value_types)
    )


__all__ = ["custom_schema_ids", "schema_id_transformer"]
