"""Tests for MetricRecord serialisation."""

from __future__ import annotations

from eventlens.models.metrics import MetricName, MetricRecord
from tests.conftest import make_event


class TestMetricRecordDocument:
    def test_timestamp_uses_at_prefix(self) -> None:
        record = MetricRecord(
            timestamp="2024-01-15T10:30:00+00:00",
            metric_name=MetricName.EVENT_DURATION,
            event_name="pod-1",
            event_type="Deleted",
            object_kind="Pod",
            duration=1.5,
        )
        doc = record.to_document()
        assert doc["@timestamp"] == "2024-01-15T10:30:00+00:00"
        assert "timestamp" not in doc
        assert doc["metric_name"] == "event_duration"

    def test_unset_optionals_are_omitted(self) -> None:
        record = MetricRecord(
            timestamp="2024-01-15T10:30:00+00:00",
            metric_name=MetricName.EVENT_STATUS_DISTRIBUTION,
            event_name="pod-1",
            event_type="Deleted",
            object_kind="Pod",
            status="Terminated",
            type="Normal",
        )
        doc = record.to_document()
        assert doc["is_warning"] is False
        for omitted in ("duration", "labels", "error_rate", "event_count", "event"):
            assert omitted not in doc

    def test_embedded_event_uses_wire_names(self) -> None:
        event = make_event(name="pod-1", action="Added")
        record = MetricRecord(
            timestamp="2024-01-15T10:30:00+00:00",
            metric_name=MetricName.EVENT_FREQUENCY,
            event_name="pod-1",
            event_type="Added",
            object_kind="Pod",
            event_count=1,
            event=event,
        )
        embedded = record.to_document()["event"]
        assert embedded["metadata"]["name"] == "pod-1"
        assert embedded["involvedObject"]["kind"] == "Pod"
        assert embedded["eventTime"] == event.event_time
