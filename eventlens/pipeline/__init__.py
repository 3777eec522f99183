"""Ingestion pipeline -- per-request orchestration and failure policy."""

from eventlens.pipeline.orchestrator import (
    TRACKING_POLICY,
    IngestionError,
    IngestionOrchestrator,
    IngestOutcome,
    IngestState,
    TrackingStep,
)

__all__ = [
    "TRACKING_POLICY",
    "IngestOutcome",
    "IngestState",
    "IngestionError",
    "IngestionOrchestrator",
    "TrackingStep",
]
