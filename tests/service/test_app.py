"""Tests for the FastAPI service mode."""

from __future__ import annotations

from typing import Any, Dict, Optional

import pytest
from fastapi.testclient import TestClient

from schemaids.models import TypeDescriptor
from schemaids.options import OpenApiOptions
from schemaids.service import app as service_app
from schemaids.service import create_app, run_service
from schemaids.transformer import custom_schema_ids


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_openapi_document_endpoint(client: TestClient) -> None:
    response = client.get("/openapi/v1.json")
    assert response.status_code == 200
    document = response.json()
    assert document["info"]["title"] == "Schema Ids Demo"
    schemas = document["components"]["schemas"]
    assert "schemaids.demo.module_b.ModuleB.Response" in schemas
    assert set(document["paths"]) == {"/api1", "/api2", "/api3"}


def test_unknown_document_returns_404(client: TestClient) -> None:
    response = client.get("/openapi/v2.json")
    assert response.status_code == 404


def test_viewer_pages_reference_document(client: TestClient) -> None:
    swagger = client.get("/swagger")
    redoc = client.get("/redoc")

    assert swagger.status_code == 200
    assert "/openapi/v1.json" in swagger.text
    assert redoc.status_code == 200
    assert "/openapi/v1.json" in redoc.text


def test_demo_operation_still_serves_data(client: TestClient) -> None:
    response = client.get("/api1", params={"id": 7})
    assert response.status_code == 200
    assert response.json()["description"] == "Thing from Module A"


def test_document_failures_map_to_500() -> None:
    def _broken(descriptor: TypeDescriptor) -> Optional[str]:
        raise RuntimeError("bad mapping")

    app = create_app(options=custom_schema_ids(OpenApiOptions(document_name="v1"), _broken))
    response = TestClient(app).get("/openapi/v1.json")

    assert response.status_code == 500
    assert "bad mapping" in response.json()["detail"]


def test_run_service_hands_app_to_uvicorn(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: Dict[str, Any] = {}

    def _fake_run(app: Any, host: str, port: int) -> None:
        calls.update(app=app, host=host, port=port)

    monkeypatch.setattr(service_app.uvicorn, "run", _fake_run)

    run_service("0.0.0.0", 9001)

    assert calls["host"] == "0.0.0.0"
    assert calls["port"] == 9001
    response = TestClient(calls["app"]).get("/health")
    assert response.status_code == 200
