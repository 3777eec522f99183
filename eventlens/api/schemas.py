"""Pydantic response envelopes for the REST API."""

from __future__ import annotations

from pydantic import BaseModel


class StatusResponse(BaseModel):
    """Body of 200 responses from ``/event`` and ``/health``."""

    status: str
    message: str


class ErrorResponse(BaseModel):
    """Error envelope: a stable machine code plus a caller-safe detail."""

    error: str
    detail: str
