"""OpenAPI document generation for FastAPI apps with pluggable schema transformers."""

from __future__ import annotations

import dataclasses
import enum
import inspect
import threading
from dataclasses import dataclass, field
from typing import (
    Any,
    Dict,
    List,
    Optional,
    Tuple,
    get_args,
    get_origin,
    get_type_hints,
)

from fastapi import BackgroundTasks, FastAPI, Request, Response, WebSocket
from fastapi.params import Depends
from fastapi.routing import APIRoute
from pydantic import BaseModel, TypeAdapter
from pydantic.fields import FieldInfo
from pydantic.json_schema import GenerateJsonSchema
from typing_extensions import is_typeddict

from .logging import get_logger
from .models import PythonTypeDescriptor, SchemaFragment, unwrap_optional
from .options import OpenApiOptions

REF_PREFIX = "#/components/schemas/"
REF_TEMPLATE = REF_PREFIX + "{model}"
SCHEMA_ID_EXTENSION = "x-schema-id"

_FRAMEWORK_TYPES = (Request, Response, WebSocket, BackgroundTasks)
_MODE_SUFFIXES = ("-Input", "-Output")


class DocumentBuildError(RuntimeError):
    """Raised when an OpenAPI document cannot be produced."""


class SchemaIdConflictError(DocumentBuildError):
    """Raised when two component schemas end up with the same schema id."""


class DocumentBuildCancelled(DocumentBuildError):
    """Raised when a build is cancelled between schema fragments."""


@dataclass
class _Parameter:
    name: str
    location: str
    required: bool
    annotation: Any
    key: int = -1


@dataclass
class _ResponseSpec:
    status: str
    description: str
    annotation: Any
    key: int = -1


@dataclass
class _Operation:
    route: APIRoute
    parameters: List[_Parameter] = field(default_factory=list)
    body: Any = None
    body_key: int = -1
    responses: List[_ResponseSpec] = field(default_factory=list)


class _SchemaRequests:
    """Accumulates annotations to feed a single pydantic definitions pass."""

    def __init__(self) -> None:
        self.inputs: List[Tuple[int, str, Any]] = []

    def add(self, annotation: Any, mode: str) -> int:
        key = len(self.inputs)
        self.inputs.append((key, mode, TypeAdapter(annotation).core_schema))
        return key


class DocumentBuilder:
    """Builds an OpenAPI document from a FastAPI app's routes.

    Component names come from pydantic's default JSON schema naming. Every
    component and inline property/parameter schema is handed to the
    transformers registered on ``options`` before the document is assembled.
    """

    def __init__(self, app: FastAPI, options: OpenApiOptions) -> None:
        self.app = app
        self.options = options
        self.logger = get_logger("pipeline")

    def build(self, cancel: Optional[threading.Event] = None) -> Dict[str, Any]:
        """Generate the document, running schema transformers over each fragment."""
        operations = [
            self._describe_operation(route)
            for route in self.app.routes
            if isinstance(route, APIRoute) and route.include_in_schema
        ]
        self.logger.debug("Collected %d operations", len(operations))

        requests = _SchemaRequests()
        types_by_key: Dict[int, Tuple[Any, str]] = {}
        for operation in operations:
            for parameter in operation.parameters:
                parameter.key = requests.add(parameter.annotation, "validation")
            if operation.body is not None:
                operation.body_key = requests.add(operation.body, "validation")
                for nested in _collect_types(operation.body):
                    types_by_key[requests.add(nested, "validation")] = (nested, "validation")
            for response in operation.responses:
                if response.annotation is None:
                    continue
                response.key = requests.add(response.annotation, "serialization")
                for nested in _collect_types(response.annotation):
                    types_by_key[requests.add(nested, "serialization")] = (nested, "serialization")

        generator = GenerateJsonSchema(ref_template=REF_TEMPLATE)
        json_schemas, definitions = generator.generate_definitions(requests.inputs)
        schemas_by_key = {key: json_schemas[(key, mode)] for key, mode, _ in requests.inputs}

        component_types: Dict[str, Tuple[Any, str]] = {}
        for key, source in types_by_key.items():
            ref = schemas_by_key[key].get("$ref")
            if isinstance(ref, str) and ref.startswith(REF_PREFIX):
                component_types[ref[len(REF_PREFIX):]] = source

        definitions = {str(name): schema for name, schema in definitions.items()}
        fragments, component_fragments = self._component_fragments(definitions, component_types)
        paths = self._build_paths(operations, schemas_by_key, fragments)

        self._run_transformers(fragments, cancel)

        for fragment, _ in fragments:
            if fragment.title is None:
                fragment.schema.pop("title", None)
            else:
                fragment.schema["title"] = fragment.title

        schemas, renamed = self._rekey_components(definitions, component_fragments)

        document: Dict[str, Any] = {
            "openapi": self.options.openapi_version,
            "info": {"title": self.options.title, "version": self.options.version},
            "paths": paths,
        }
        if schemas:
            document["components"] = {"schemas": schemas}
        _rewrite_refs(document, renamed)

        self.logger.info(
            "Built OpenAPI document '%s' with %d schemas",
            self.options.document_name,
            len(schemas),
        )
        return document

    def _describe_operation(self, route: APIRoute) -> _Operation:
        operation = _Operation(route=route)
        try:
            hints = get_type_hints(route.endpoint, include_extras=True)
        except NameError as exc:
            raise DocumentBuildError(
                f"Cannot resolve annotations of endpoint '{route.name}': {exc}"
            ) from exc
        path_names = set(route.param_convertors)
        for name, param in inspect.signature(route.endpoint).parameters.items():
            annotation = hints.get(name, Any)
            if isinstance(param.default, Depends) or _is_framework_type(annotation):
                continue
            if name not in path_names and _is_body_type(annotation):
                operation.body = annotation
                continue
            operation.parameters.append(
                _Parameter(
                    name=name,
                    location="path" if name in path_names else "query",
                    required=name in path_names or _is_required(param.default),
                    annotation=annotation,
                )
            )

        status = str(route.status_code or 200)
        operation.responses.append(
            _ResponseSpec(
                status=status,
                description=route.response_description,
                annotation=route.response_model,
            )
        )
        for code, spec in route.responses.items():
            operation.responses.append(
                _ResponseSpec(
                    status=str(code),
                    description=str(spec.get("description", "Additional Response")),
                    annotation=spec.get("model"),
                )
            )
        return operation

    def _component_fragments(
        self,
        definitions: Dict[str, Dict[str, Any]],
        component_types: Dict[str, Tuple[Any, str]],
    ) -> Tuple[List[Tuple[SchemaFragment, PythonTypeDescriptor]], Dict[str, SchemaFragment]]:
        fragments: List[Tuple[SchemaFragment, PythonTypeDescriptor]] = []
        by_name: Dict[str, SchemaFragment] = {}
        for name, schema in definitions.items():
            source = component_types.get(name)
            if source is None:
                self.logger.warning("No source type found for schema '%s'; skipping", name)
                continue
            annotation, mode = source
            component = SchemaFragment(
                schema_id=name,
                title=schema.get("title"),
                schema=schema,
                path=f"{REF_PREFIX}{name}",
            )
            by_name[name] = component
            fragments.append((component, PythonTypeDescriptor(annotation)))
            properties = schema.get("properties") or {}
            for key, field_annotation in _field_annotations(annotation, mode).items():
                prop = properties.get(key)
                if not isinstance(prop, dict) or "$ref" in prop:
                    continue
                fragments.append(
                    (
                        SchemaFragment(
                            schema_id=None,
                            title=prop.get("title"),
                            schema=prop,
                            path=f"{REF_PREFIX}{name}/properties/{key}",
                        ),
                        PythonTypeDescriptor(field_annotation),
                    )
                )
        return fragments, by_name

    def _build_paths(
        self,
        operations: List[_Operation],
        schemas_by_key: Dict[int, Dict[str, Any]],
        fragments: List[Tuple[SchemaFragment, PythonTypeDescriptor]],
    ) -> Dict[str, Any]:
        paths: Dict[str, Any] = {}
        for operation in operations:
            route = operation.route
            for method in sorted(route.methods or ()):
                method = method.lower()
                entry: Dict[str, Any] = {"operationId": route.operation_id or route.name}
                if route.summary:
                    entry["summary"] = route.summary
                if route.tags:
                    entry["tags"] = [str(tag) for tag in route.tags]

                parameters = []
                for parameter in operation.parameters:
                    schema = dict(schemas_by_key[parameter.key])
                    parameters.append(
                        {
                            "name": parameter.name,
                            "in": parameter.location,
                            "required": parameter.required,
                            "schema": schema,
                        }
                    )
                    if "$ref" not in schema:
                        fragments.append(
                            (
                                SchemaFragment(
                                    schema_id=None,
                                    title=schema.get("title"),
                                    schema=schema,
                                    path=f"{route.path_format}/{method}/parameters/{parameter.name}",
                                ),
                                PythonTypeDescriptor(parameter.annotation),
                            )
                        )
                if parameters:
                    entry["parameters"] = parameters

                if operation.body is not None:
                    entry["requestBody"] = {
                        "required": True,
                        "content": {
                            "application/json": {"schema": dict(schemas_by_key[operation.body_key])}
                        },
                    }

                responses: Dict[str, Any] = {}
                for response in operation.responses:
                    body: Dict[str, Any] = {"description": response.description}
                    if response.key >= 0:
                        body["content"] = {
                            "application/json": {"schema": dict(schemas_by_key[response.key])}
                        }
                    responses[response.status] = body
                entry["responses"] = responses

                paths.setdefault(route.path_format, {})[method] = entry
        return paths

    def _run_transformers(
        self,
        fragments: List[Tuple[SchemaFragment, PythonTypeDescriptor]],
        cancel: Optional[threading.Event],
    ) -> None:
        transformers = self.options.schema_transformers
        if not transformers:
            return
        for fragment, descriptor in fragments:
            if cancel is not None and cancel.is_set():
                raise DocumentBuildCancelled(
                    f"Build of document '{self.options.document_name}' was cancelled"
                )
            for transformer in transformers:
                try:
                    transformer(fragment, descriptor, cancel)
                except Exception as exc:
                    self.logger.error("Schema transformer failed for %s: %s", fragment.path, exc)
                    raise DocumentBuildError(
                        f"Schema transformer failed for {fragment.path}: {exc}"
                    ) from exc
        self.logger.debug(
            "Applied %d transformer(s) to %d schema fragment(s)",
            len(transformers),
            len(fragments),
        )

    def _rekey_components(
        self,
        definitions: Dict[str, Dict[str, Any]],
        component_fragments: Dict[str, SchemaFragment],
    ) -> Tuple[Dict[str, Dict[str, Any]], Dict[str, str]]:
        schemas: Dict[str, Dict[str, Any]] = {}
        renamed: Dict[str, str] = {}
        for name, schema in definitions.items():
            fragment = component_fragments.get(name)
            schema_id = fragment.schema_id if fragment is not None else None
            new_name = schema_id or name
            suffix = _mode_suffix(name)
            if schema_id and suffix and not schema_id.endswith(suffix):
                # Types whose input and output schemas differ keep separate components.
                new_name = schema_id + suffix
            if new_name in schemas:
                raise SchemaIdConflictError(
                    f"Schemas '{renamed.get(new_name, new_name)}' and '{name}' "
                    f"both resolve to schema id '{new_name}'"
                )
            if schema_id and self.options.emit_schema_id_extension:
                schema[SCHEMA_ID_EXTENSION] = schema_id
            if new_name != name:
                self.logger.debug("Renamed schema '%s' to '%s'", name, new_name)
            schemas[new_name] = schema
            renamed[name] = new_name
        return schemas, renamed


def install_openapi(app: FastAPI, options: OpenApiOptions) -> DocumentBuilder:
    """Replace ``app.openapi`` with a cached, transformer-aware document builder."""
    builder = DocumentBuilder(app, options)

    def _openapi() -> Dict[str, Any]:
        if app.openapi_schema is None:
            app.openapi_schema = builder.build()
        return app.openapi_schema

    app.openapi = _openapi  # type: ignore[method-assign]
    return builder


def _collect_types(annotation: Any, found: Optional[Dict[Any, None]] = None) -> List[Any]:
    """Return the models, dataclasses, typed dicts, named tuples and enums reachable from ``annotation``."""
    if found is None:
        found = {}
    if get_origin(annotation) is not None:
        for arg in get_args(annotation):
            _collect_types(arg, found)
        return list(found)
    if not isinstance(annotation, type) or annotation in found:
        return list(found)
    if issubclass(annotation, enum.Enum):
        found[annotation] = None
    elif _has_fields(annotation):
        found[annotation] = None
        for nested in _field_annotations(annotation).values():
            _collect_types(nested, found)
    return list(found)


def _has_fields(annotation: type) -> bool:
    return (
        issubclass(annotation, BaseModel)
        or dataclasses.is_dataclass(annotation)
        or is_typeddict(annotation)
        or _is_namedtuple(annotation)
    )


def _is_namedtuple(annotation: type) -> bool:
    return issubclass(annotation, tuple) and hasattr(annotation, "_fields")


def _field_annotations(annotation: Any, mode: str = "validation") -> Dict[str, Any]:
    """Map property names as they appear in the schema for ``mode`` to field annotations."""
    if not isinstance(annotation, type):
        return {}
    if issubclass(annotation, BaseModel):
        return {
            _property_name(name, info, mode): info.annotation
            for name, info in annotation.model_fields.items()
        }
    if dataclasses.is_dataclass(annotation):
        hints = get_type_hints(annotation, include_extras=True)
        return {item.name: hints.get(item.name, Any) for item in dataclasses.fields(annotation)}
    if is_typeddict(annotation) or _is_namedtuple(annotation):
        return dict(get_type_hints(annotation, include_extras=True))
    return {}


def _property_name(name: str, info: FieldInfo, mode: str) -> str:
    if mode == "serialization":
        return info.serialization_alias or info.alias or name
    if isinstance(info.validation_alias, str):
        return info.validation_alias
    return info.alias or name


def _is_body_type(annotation: Any) -> bool:
    target = unwrap_optional(annotation)
    return isinstance(target, type) and (
        issubclass(target, BaseModel) or dataclasses.is_dataclass(target)
    )


def _is_framework_type(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, _FRAMEWORK_TYPES)


def _is_required(default: Any) -> bool:
    if default is inspect.Parameter.empty:
        return True
    if isinstance(default, FieldInfo):
        return default.is_required()
    return False


def _mode_suffix(name: str) -> str:
    for suffix in _MODE_SUFFIXES:
        if name.endswith(suffix):
            return suffix
    return ""


def _rewrite_refs(node: Any, renamed: Dict[str, str]) -> None:
    if isinstance(node, dict):
        for key, value in node.items():
            if key == "$ref" and isinstance(value, str) and value.startswith(REF_PREFIX):
                target = value[len(REF_PREFIX):]
                if target in renamed:
                    node[key] = REF_PREFIX + renamed[target]
            else:
                _rewrite_refs(value, renamed)
    elif isinstance(node, list):
        for item in node:
            _rewrite_refs(item, renamed)


__all__ = [
    "DocumentBuildCancelled",
    "DocumentBuildError",
    "DocumentBuilder",
    "REF_PREFIX",
    "SCHEMA_ID_EXTENSION",
    "SchemaIdConflictError",
    "install_openapi",
]
