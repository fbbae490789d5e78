"""Demonstration API whose nested models share the short name ``Response``."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

from .module_a import ModuleA
from .module_b import Availability, ModuleB
from .module_c import ModuleC

_NOT_FOUND: Dict[int | str, Dict[str, Any]] = {404: {"model": int, "description": "Not Found"}}


def register_routes(app: FastAPI) -> FastAPI:
    """Map the sample operations onto ``app``."""
    app.get(
        "/api1",
        name="GetSomethingFromModuleA",
        operation_id="GetSomethingFromModuleA",
        responses=_NOT_FOUND,
    )(ModuleA.execute)
    app.get(
        "/api2",
        name="GetSomethingFromModuleB",
        operation_id="GetSomethingFromModuleB",
        responses=_NOT_FOUND,
    )(ModuleB.execute)
    app.post(
        "/api3",
        name="AddSomethingToModuleC",
        operation_id="AddSomethingToModuleC",
        responses=_NOT_FOUND,
    )(ModuleC.execute)
    return app


def create_demo_api() -> FastAPI:
    """Return a FastAPI app with the sample operations and built-in docs disabled."""
    app = FastAPI(openapi_url=None, docs_url=None, redoc_url=None)
    return register_routes(app)


__all__ = ["Availability", "ModuleA", "ModuleB", "ModuleC", "create_demo_api", "register_routes"]
