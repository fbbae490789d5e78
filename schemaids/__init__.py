"""Display-friendly schema ids for generated OpenAPI documents."""

from .models import NESTED_TYPE_MARKER, PythonTypeDescriptor, SchemaFragment, TypeDescriptor
from .naming import full_type_name, nested_type_names
from .options import OpenApiOptions
from .pipeline import (
    DocumentBuildCancelled,
    DocumentBuildError,
    DocumentBuilder,
    SchemaIdConflictError,
    install_openapi,
)
from .transformer import custom_schema_ids, schema_id_transformer

__all__ = [
    "NESTED_TYPE_MARKER",
    "DocumentBuildCancelled",
    "DocumentBuildError",
    "DocumentBuilder",
    "OpenApiOptions",
    "PythonTypeDescriptor",
    "SchemaFragment",
    "SchemaIdConflictError",
    "TypeDescriptor",
    "custom_schema_ids",
    "full_type_name",
    "install_openapi",
    "nested_type_names",
    "schema_id_transformer",
]
