"""Metric derivation engine.

Each ``track_*`` operation derives exactly one MetricRecord from an Event
and writes it through the StorageWriter; derivation and write form a
single operation.  Apart from the wall-clock read, the owned occurrence
counters and the Prometheus instruments, the operations are pure.

| Operation          | Trigger          | Instrument side effect                       |
|--------------------|------------------|----------------------------------------------|
| track_frequency    | every event      | event_frequency{event_type=action}           |
| track_duration     | every event      | event_duration histogram                     |
| track_status       | every event      | event_status_distribution{status=type, ...}  |
| track_error_rate   | type == Warning  | error_rate{reason, involved_object_kind}     |
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

import structlog

from eventlens.engine.counters import OccurrenceCounters
from eventlens.models.events import Event, TimeParseError, parse_event_time
from eventlens.models.metrics import MetricName, MetricRecord
from eventlens.observability.metrics import EventInstruments
from eventlens.storage.writer import StorageWriter

_log = structlog.get_logger(component="engine.tracker")


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class MetricTracker:
    """Derives and persists the four metric kinds.

    Args:
        writer:      StorageWriter used for every metric record.
        instruments: Live-aggregation instruments.
        counters:    Owned occurrence counters; a fresh pair by default.
        clock:       Returns the current UTC time.  Injected by tests.
    """

    def __init__(
        self,
        writer: StorageWriter,
        instruments: EventInstruments,
        counters: OccurrenceCounters | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._writer = writer
        self._instruments = instruments
        self.counters = counters or OccurrenceCounters()
        self._clock = clock

    def _base_fields(self, event: Event, now: datetime) -> dict[str, object]:
        return {
            "timestamp": now.isoformat(),
            "event_name": event.metadata.name,
            "event_type": event.action,
            "object_kind": event.involved_object.kind,
            "labels": event.metadata.labels,
        }

    def _elapsed(self, start: datetime, now: datetime) -> float:
        return (now - start).total_seconds()

    async def track_frequency(self, event: Event) -> MetricRecord:
        """Count the event and record the elapsed time since its event-time.

        An unparsable event-time is tolerated: elapsed time is then measured
        from now.  Write failures propagate as StorageWriteError.
        """
        self._instruments.event_frequency.labels(event_type=event.action).inc()
        count = self.counters.events.increment()

        now = self._clock()
        try:
            event_time = parse_event_time(event.event_time)
        except TimeParseError as exc:
            _log.warning("event_time_unparsable", event_name=event.metadata.name, error=str(exc))
            event_time = now

        record = MetricRecord(
            **self._base_fields(event, now),
            metric_name=MetricName.EVENT_FREQUENCY,
            event_count=count,
            duration=self._elapsed(event_time, now),
            is_warning=False,
            type=event.type,
            event=event,
        )
        await self._writer.write_metric(record)
        _log.info("tracked_event_frequency", event_name=event.metadata.name, action=event.action, event_count=count)
        return record

    async def track_duration(self, event: Event) -> MetricRecord:
        """Record the elapsed time since the event-time.

        Raises:
            TimeParseError: if the event-time is not ISO-8601.
            StorageWriteError: if the write is rejected.
        """
        event_time = parse_event_time(event.event_time)
        now = self._clock()
        # Event-times ahead of the clock count as zero elapsed.
        duration = max(self._elapsed(event_time, now), 0.0)
        self._instruments.event_duration.observe(duration)

        record = MetricRecord(
            **self._base_fields(event, now),
            metric_name=MetricName.EVENT_DURATION,
            duration=duration,
        )
        await self._writer.write_metric(record)
        _log.info("tracked_event_duration", event_name=event.metadata.name, action=event.action, duration=duration)
        return record

    async def track_status(self, event: Event) -> MetricRecord:
        """Record the event's current status.

        The instrument label named ``status`` carries the event *type*
        (Normal/Warning), not the current status; dashboards rely on it.
        """
        self._instruments.event_status_distribution.labels(
            status=event.type,
            event_type=event.action,
        ).inc()

        now = self._clock()
        record = MetricRecord(
            **self._base_fields(event, now),
            metric_name=MetricName.EVENT_STATUS_DISTRIBUTION,
            status=event.current_status,
            type=event.type,
        )
        await self._writer.write_metric(record)
        _log.info(
            "tracked_event_status",
            event_name=event.metadata.name,
            status=event.current_status,
            action=event.action,
        )
        return record

    async def track_error_rate(self, event: Event) -> MetricRecord | None:
        """Record a warning occurrence.  No-op (returns None) for non-Warning events.

        ``error_rate`` is always 1: every warning is stored as a single
        occurrence and aggregation is left to the query side.
        """
        if not event.is_warning:
            return None

        reason = event.metadata.reason or ""
        self._instruments.error_rate.labels(
            reason=reason,
            involved_object_kind=event.involved_object.kind,
        ).inc()
        self.counters.warnings.increment()

        now = self._clock()
        fields = self._base_fields(event, now)
        fields["event_type"] = event.type
        record = MetricRecord(
            **fields,
            metric_name=MetricName.ERROR_RATE,
            error_rate=1,
            is_warning=True,
        )
        await self._writer.write_metric(record)
        _log.info(
            "tracked_warning_event",
            event_name=event.metadata.name,
            reason=reason,
            object_kind=event.involved_object.kind,
        )
        return record
