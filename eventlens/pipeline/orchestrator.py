"""Ingestion orchestrator: sequences derivation and writes for one event.

State machine::

    RECEIVED -> EVENT_VALIDATED -> METRICS_TRACKED -> EVENT_PERSISTED -> ACKNOWLEDGED
        \\              \\                  \\
         +--------------+------------------+------> FAILED

Failure handling for the derivation steps is driven by ``TRACKING_POLICY``
rather than by ad hoc try/continue blocks: a step marked fatal aborts the
request, every other step is logged and skipped.  Writes that already
succeeded are never rolled back.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum

import structlog

from eventlens.engine.tracker import MetricTracker
from eventlens.models.events import Event, MalformedInput, decode_event
from eventlens.models.metrics import MetricName, MetricRecord
from eventlens.storage.writer import StoragePersistError, StorageWriter

_log = structlog.get_logger(component="pipeline.orchestrator")


class IngestState(StrEnum):
    """Per-request lifecycle states."""

    RECEIVED = "received"
    EVENT_VALIDATED = "event_validated"
    METRICS_TRACKED = "metrics_tracked"
    EVENT_PERSISTED = "event_persisted"
    ACKNOWLEDGED = "acknowledged"
    FAILED = "failed"


@dataclass(frozen=True)
class TrackingStep:
    """One row of the derivation failure policy."""

    metric: MetricName
    fatal: bool


# Execution order is the tuple order.
TRACKING_POLICY: tuple[TrackingStep, ...] = (
    TrackingStep(MetricName.EVENT_FREQUENCY, fatal=True),
    TrackingStep(MetricName.EVENT_DURATION, fatal=False),
    TrackingStep(MetricName.EVENT_STATUS_DISTRIBUTION, fatal=False),
    TrackingStep(MetricName.ERROR_RATE, fatal=False),
)


class IngestionError(Exception):
    """A fatal per-request failure.

    ``failed_at`` is the last state reached before the failure; ``cause`` is
    the underlying exception, kept for operator logs and never exposed to
    the HTTP caller.
    """

    def __init__(self, failed_at: IngestState, cause: Exception, status_code: int) -> None:
        super().__init__(f"Ingestion failed after '{failed_at}': {cause}")
        self.failed_at = failed_at
        self.cause = cause
        self.status_code = status_code
        self.state = IngestState.FAILED


@dataclass
class IngestOutcome:
    """Result of a successful ingestion call."""

    state: IngestState
    event: Event
    metrics_written: list[MetricName]
    metrics_failed: list[MetricName]


class IngestionOrchestrator:
    """Runs decode -> four derivations -> raw-event write for each request.

    Args:
        tracker: MetricTracker producing and writing metric records.
        writer:  StorageWriter used for the raw-event write.
        policy:  Derivation order and fatality, ``TRACKING_POLICY`` by default.
    """

    def __init__(
        self,
        tracker: MetricTracker,
        writer: StorageWriter,
        policy: tuple[TrackingStep, ...] = TRACKING_POLICY,
    ) -> None:
        self._writer = writer
        self._policy = policy
        self._operations: dict[MetricName, Callable[[Event], Awaitable[MetricRecord | None]]] = {
            MetricName.EVENT_FREQUENCY: tracker.track_frequency,
            MetricName.EVENT_DURATION: tracker.track_duration,
            MetricName.EVENT_STATUS_DISTRIBUTION: tracker.track_status,
            MetricName.ERROR_RATE: tracker.track_error_rate,
        }

    async def ingest(self, payload: bytes | str) -> IngestOutcome:
        """Process one inbound payload end to end.

        Raises:
            IngestionError: status 400 when the payload is malformed, 500 when
                a fatal derivation step or the raw-event write fails.
        """
        try:
            event = decode_event(payload)
        except MalformedInput as exc:
            _log.info("event_rejected", reason=exc.detail)
            raise IngestionError(IngestState.RECEIVED, exc, status_code=400) from exc

        structlog.contextvars.bind_contextvars(correlation_id=event.correlation_id)
        try:
            return await self._process(event)
        finally:
            structlog.contextvars.unbind_contextvars("correlation_id")

    async def _process(self, event: Event) -> IngestOutcome:
        written: list[MetricName] = []
        failed: list[MetricName] = []

        for step in self._policy:
            operation = self._operations[step.metric]
            try:
                record = await operation(event)
            except Exception as exc:  # noqa: BLE001
                if step.fatal:
                    _log.error("metric_tracking_failed", metric=str(step.metric), fatal=True, error=str(exc))
                    raise IngestionError(IngestState.EVENT_VALIDATED, exc, status_code=500) from exc
                _log.warning("metric_tracking_failed", metric=str(step.metric), fatal=False, error=str(exc))
                failed.append(step.metric)
                continue
            if record is not None:
                written.append(step.metric)

        try:
            await self._writer.write_event(event)
        except StoragePersistError as exc:
            _log.error(
                "event_persist_failed",
                event_name=event.metadata.name,
                status_code=exc.status_code,
                error=str(exc),
            )
            raise IngestionError(IngestState.METRICS_TRACKED, exc, status_code=500) from exc

        _log.info(
            "event_processed",
            event_name=event.metadata.name,
            action=event.action,
            metrics_written=[str(m) for m in written],
            metrics_failed=[str(m) for m in failed],
        )
        return IngestOutcome(
            state=IngestState.ACKNOWLEDGED,
            event=event,
            metrics_written=written,
            metrics_failed=failed,
        )
