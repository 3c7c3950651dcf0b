"""TubeFeed package entry point.

Re-exports the FastAPI application so ``uvicorn tubefeed:app`` serves the
main and short-form feed endpoints.
"""

from __future__ import annotations

from app.main import app, create_app

__all__ = ["app", "create_app"]
