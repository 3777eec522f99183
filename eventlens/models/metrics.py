"""Derived metric record data structures."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from eventlens.models.events import Event


class MetricName(StrEnum):
    """The four metric kinds derived from every event."""

    EVENT_FREQUENCY = "event_frequency"
    EVENT_DURATION = "event_duration"
    EVENT_STATUS_DISTRIBUTION = "event_status_distribution"
    ERROR_RATE = "error_rate"


class MetricRecord(BaseModel):
    """One derived observation, written once to the metrics index.

    Each metric kind populates its own subset of the optional fields;
    anything left as None is omitted from the stored document.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: str = Field(alias="@timestamp")  # ISO-8601 UTC, time of derivation
    metric_name: MetricName
    event_name: str
    event_type: str
    object_kind: str
    duration: float | None = None
    status: str | None = None
    labels: dict[str, str] | None = None
    error_rate: int | None = None
    is_warning: bool = False
    type: str | None = None
    event_count: int | None = None
    event: Event | None = None

    def to_document(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
