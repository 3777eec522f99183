"""Route handlers for the EventLens REST API."""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from eventlens.api.schemas import ErrorResponse, StatusResponse
from eventlens.pipeline.orchestrator import IngestionError, IngestionOrchestrator

router = APIRouter()


@router.post("/event", response_model=StatusResponse)
async def ingest_event(request: Request) -> JSONResponse:
    """Ingest one lifecycle event.

    The raw body is handed to the orchestrator so that decoding failures are
    classified by the pipeline itself rather than by request validation.
    """
    orchestrator: IngestionOrchestrator = request.app.state.orchestrator
    payload = await request.body()
    try:
        await orchestrator.ingest(payload)
    except IngestionError as exc:
        if exc.status_code == 400:
            body = ErrorResponse(error="INVALID_REQUEST_BODY", detail="Invalid request body")
        else:
            body = ErrorResponse(error="INTERNAL_ERROR", detail="Internal server error")
        return JSONResponse(status_code=exc.status_code, content=body.model_dump())

    return JSONResponse(
        status_code=200,
        content=StatusResponse(status="success", message="Event processed successfully").model_dump(),
    )


@router.get("/health", response_model=StatusResponse)
async def health() -> StatusResponse:
    return StatusResponse(status="healthy", message="Service is running")


@router.get("/metrics", include_in_schema=False)
async def metrics(request: Request) -> Response:
    """Prometheus exposition of the live-aggregation instruments."""
    registry = request.app.state.registry
    return Response(content=generate_latest(registry), media_type=CONTENT_TYPE_LATEST)
