"""Document generation options shared by the pipeline and its extensions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .models import SchemaTransformer


@dataclass
class OpenApiOptions:
    """Settings for one generated OpenAPI document."""

    document_name: str = "v1"
    title: str = "API"
    version: str = "1.0.0"
    openapi_version: str = "3.1.0"
    emit_schema_id_extension: bool = True
    schema_transformers: List[SchemaTransformer] = field(default_factory=list)

    def add_schema_transformer(self, transformer: SchemaTransformer) -> "OpenApiOptions":
        """Register a callback invoked for every schema fragment, in registration order."""
        self.schema_transformers.append(transformer)
        return self


__all__ = ["OpenApiOptions"]
