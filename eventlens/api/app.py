"""FastAPI application factory for EventLens.

Usage::

    from eventlens.api.app import create_app

    app = create_app(
        orchestrator=orchestrator,
        registry=instruments.registry,
    )

The factory is designed for use by both the production bootstrap
(``eventlens.app``) and unit tests.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import CollectorRegistry

from eventlens.api.routes import router
from eventlens.api.schemas import ErrorResponse

_log = structlog.get_logger(component="api.app")


def create_app(
    orchestrator: Any,
    registry: CollectorRegistry | None = None,
) -> FastAPI:
    """Create and configure the EventLens FastAPI application.

    Args:
        orchestrator: IngestionOrchestrator handling ``POST /event``.
        registry:     Prometheus registry exposed on ``GET /metrics``.

    Returns:
        Configured FastAPI application, ready to be served by uvicorn.
    """
    from eventlens import __version__

    app = FastAPI(
        title="EventLens",
        summary="Lifecycle event ingestion and metric derivation",
        version=__version__,
        docs_url="/docs",
        redoc_url=None,
    )

    # Dependencies live on app.state; handlers read them from the request.
    app.state.orchestrator = orchestrator
    app.state.registry = registry if registry is not None else CollectorRegistry()

    app.include_router(router)

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Catch-all for unhandled exceptions -- never expose stack traces."""
        _log.error(
            "unhandled_exception",
            path=str(request.url.path),
            method=request.method,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="INTERNAL_ERROR",
                detail="Internal server error",
            ).model_dump(),
        )

    return app
