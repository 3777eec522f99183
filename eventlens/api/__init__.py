"""REST API layer for EventLens.

Exposes:
    create_app -- FastAPI application factory.
    build_app  -- Alias for create_app (used by eventlens.app bootstrap).
"""

from eventlens.api.app import create_app

build_app = create_app

__all__ = ["build_app", "create_app"]
