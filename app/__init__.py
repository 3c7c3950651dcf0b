"""TubeFeed application package: feed ranking engine and its HTTP API."""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = ["app", "create_app", "FeedEngine"]

_LAZY_ATTRIBUTES = {
    "app": "app.main",
    "create_app": "app.main",
    "FeedEngine": "app.services.feed_engine",
}


def __getattr__(name: str) -> Any:
    module_name = _LAZY_ATTRIBUTES.get(name)
    if module_name is None:
        raise AttributeError(f"module 'app' has no attribute {name}")
    return getattr(import_module(module_name), name)
