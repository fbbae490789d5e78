"""FastAPI application serving transformed OpenAPI documents and viewers."""

from __future__ import annotations

from typing import Any, Dict, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.openapi.docs import get_redoc_html, get_swagger_ui_html
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel

from ..demo import create_demo_api
from ..logging import get_logger
from ..naming import nested_type_names
from ..options import OpenApiOptions
from ..pipeline import DocumentBuildError, install_openapi
from ..transformer import custom_schema_ids


class HealthResponse(BaseModel):
    status: str


def default_options() -> OpenApiOptions:
    """Options used when none are supplied: nested types spelled ``Outer.Inner``."""
    return custom_schema_ids(
        OpenApiOptions(title="Schema Ids Demo", version="1.0.0"),
        nested_type_names("."),
    )


def create_app(
    api: Optional[FastAPI] = None,
    options: Optional[OpenApiOptions] = None,
) -> FastAPI:
    """Attach document, Swagger UI and ReDoc endpoints to ``api``.

    The demo API is used when ``api`` is omitted.
    """
    app = api if api is not None else create_demo_api()
    options = options if options is not None else default_options()
    install_openapi(app, options)
    logger = get_logger("service")

    document_url = f"/openapi/{options.document_name}.json"

    @app.get("/health", response_model=HealthResponse, include_in_schema=False)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/openapi/{document_name}.json", include_in_schema=False)
    async def openapi_document(document_name: str) -> JSONResponse:
        if document_name != options.document_name:
            raise HTTPException(status_code=404, detail=f"Unknown document '{document_name}'")
        return JSONResponse(app.openapi())

    @app.get("/swagger", include_in_schema=False)
    async def swagger_ui() -> HTMLResponse:
        return get_swagger_ui_html(openapi_url=document_url, title=f"{options.title} - Swagger UI")

    @app.get("/redoc", include_in_schema=False)
    async def redoc() -> HTMLResponse:
        return get_redoc_html(openapi_url=document_url, title=f"{options.title} - ReDoc")

    @app.exception_handler(DocumentBuildError)
    async def document_error_handler(_: Any, exc: DocumentBuildError) -> JSONResponse:
        logger.error("OpenAPI document generation failed: %s", exc)
        content: Dict[str, Any] = {"detail": str(exc)}
        return JSONResponse(status_code=500, content=content)

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000, options: Optional[OpenApiOptions] = None
) -> None:
    app = create_app(options=options)
    uvicorn.run(app, host=host, port=port)
