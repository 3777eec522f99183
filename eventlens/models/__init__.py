"""Core data structures for EventLens."""

from eventlens.models.config import EventLensConfig
from eventlens.models.events import (
    Event,
    EventMetadata,
    InvolvedObject,
    MalformedInput,
    TimeParseError,
    decode_event,
    parse_event_time,
)
from eventlens.models.metrics import MetricName, MetricRecord

__all__ = [
    "Event",
    "EventLensConfig",
    "EventMetadata",
    "InvolvedObject",
    "MalformedInput",
    "MetricName",
    "MetricRecord",
    "TimeParseError",
    "decode_event",
    "parse_event_time",
]
