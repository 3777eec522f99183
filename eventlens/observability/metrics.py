"""Prometheus instruments fed inline by the metric derivation engine.

The four instruments are created once at startup on a dedicated
CollectorRegistry so tests (and multiple app instances) never collide on
the process-wide default registry.

Instruments:
    event_frequency            -- Counter, labels: event_type
    event_duration             -- Histogram (seconds)
    event_status_distribution  -- Counter, labels: status, event_type
    error_rate                 -- Counter, labels: reason, involved_object_kind
"""

from __future__ import annotations

from dataclasses import dataclass

from prometheus_client import CollectorRegistry, Counter, Histogram

_DURATION_BUCKETS = (0.1, 0.5, 1.0, 5.0, 15.0, 60.0, 300.0, 900.0, 3600.0, 21600.0, 86400.0)


class InstrumentSetupError(Exception):
    """Raised when an instrument cannot be created.  Fatal at startup."""

    def __init__(self, instrument: str, cause: Exception) -> None:
        super().__init__(f"Failed to create instrument '{instrument}': {cause}")
        self.instrument = instrument
        self.cause = cause


@dataclass(frozen=True)
class EventInstruments:
    """Handles to the four live-aggregation instruments."""

    registry: CollectorRegistry
    event_frequency: Counter
    event_duration: Histogram
    event_status_distribution: Counter
    error_rate: Counter


def build_instruments(registry: CollectorRegistry | None = None) -> EventInstruments:
    """Create the four instruments on *registry* (a fresh one by default).

    Raises:
        InstrumentSetupError: if an instrument cannot be registered, e.g.
            because the name is already taken on the registry.
    """
    registry = registry if registry is not None else CollectorRegistry()

    name = "event_frequency"
    try:
        event_frequency = Counter(
            name,
            "Number of times an event has occurred",
            ["event_type"],
            registry=registry,
        )
        name = "event_duration"
        event_duration = Histogram(
            name,
            "Duration of event series in seconds",
            unit="seconds",
            buckets=_DURATION_BUCKETS,
            registry=registry,
        )
        name = "event_status_distribution"
        event_status_distribution = Counter(
            name,
            "Distribution of event statuses",
            ["status", "event_type"],
            registry=registry,
        )
        name = "error_rate"
        error_rate = Counter(
            name,
            "Rate of warning events",
            ["reason", "involved_object_kind"],
            registry=registry,
        )
    except ValueError as exc:
        raise InstrumentSetupError(name, exc) from exc

    return EventInstruments(
        registry=registry,
        event_frequency=event_frequency,
        event_duration=event_duration,
        event_status_distribution=event_status_distribution,
        error_rate=error_rate,
    )
