"""HTTP service exposing generated documents with Swagger UI and ReDoc."""

from .app import create_app, default_options, run_service

__all__ = ["create_app", "default_options", "run_service"]
