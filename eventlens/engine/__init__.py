"""Metric derivation engine -- tracker operations and owned counters."""

from eventlens.engine.counters import OccurrenceCounter, OccurrenceCounters
from eventlens.engine.tracker import MetricTracker

__all__ = [
    "MetricTracker",
    "OccurrenceCounter",
    "OccurrenceCounters",
]
