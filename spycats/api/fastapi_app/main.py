"""Entry point for FastAPI application.

This module exposes the FastAPI ``app`` instance so tests and
runners can import it using ``from spycats.api.fastapi_app.main import app``
(e.g. ``uvicorn spycats.api.fastapi_app.main:app``).
"""

from .app import app

__all__ = ["app"]
