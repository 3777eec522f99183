"""Inbound lifecycle event model, decoding and event-time handling."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class MalformedInput(Exception):
    """Raised when an inbound payload cannot be decoded into an Event."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Malformed event payload: {detail}")
        self.detail = detail


class TimeParseError(ValueError):
    """Raised when an event-time value is not a valid ISO-8601 timestamp."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Invalid ISO-8601 timestamp: {value!r}")
        self.value = value


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class EventMetadata(_Frozen):
    """Identity and descriptive metadata of an event."""

    name: str = ""
    labels: dict[str, str] | None = None
    deletion_timestamp: str | None = Field(default=None, alias="deletionTimestamp")
    reason: str | None = None
    message: str | None = None

    @field_validator("labels")
    @classmethod
    def _empty_labels_are_unset(cls, value: dict[str, str] | None) -> dict[str, str] | None:
        return value or None


class InvolvedObject(_Frozen):
    """The resource the event is about."""

    kind: str = ""
    name: str = ""
    uuid: str | None = None


class Event(_Frozen):
    """One lifecycle notification.

    Produced by ``decode_event``, consumed once per ingestion call.
    Immutable: the event-time default fill happens inside the decoder,
    before any derivation reads the event.
    """

    api_version: str | None = Field(default=None, alias="apiVersion")
    kind: str | None = None
    metadata: EventMetadata = Field(default_factory=EventMetadata)
    involved_object: InvolvedObject = Field(default_factory=InvolvedObject, alias="involvedObject")
    action: str = ""
    event_time: str = Field(default="", alias="eventTime")
    count: int | None = None
    type: str = ""
    current_status: str = Field(default="", alias="currentStatus")
    correlation_id: str = Field(default="", alias="correlationId")
    user_id: str | None = Field(default=None, alias="userId")
    org_id: str | None = Field(default=None, alias="orgUuId")

    @property
    def is_warning(self) -> bool:
        return self.type == "Warning"

    def to_document(self) -> dict[str, object]:
        """Serialise to the canonical JSON document; unset optionals are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def now_iso() -> str:
    """Current UTC wall-clock time as an ISO-8601 string (microsecond precision)."""
    return datetime.now(tz=UTC).isoformat()


def parse_event_time(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC.

    Raises:
        TimeParseError: if *value* is empty or not ISO-8601.
    """
    if not value:
        raise TimeParseError(value)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise TimeParseError(value) from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def decode_event(payload: bytes | str) -> Event:
    """Decode a JSON payload into an Event and default-fill its event-time.

    Raises:
        MalformedInput: if the payload is not a JSON object matching the
            Event shape. JSON values are never coerced:
            a string or boolean where a number is expected is rejected.
    """
    try:
        event = Event.model_validate_json(payload, strict=True)
    except ValidationError as exc:
        errors = exc.errors()
        first = errors[0].get("msg", "invalid payload") if errors else "invalid payload"
        raise MalformedInput(str(first)) from exc

    if not event.event_time:
        event = event.model_copy(update={"event_time": now_iso()})
    return event
