"""Shared fixtures for EventLens tests.

Provides an in-memory document store plus pre-wired writer, instruments,
tracker and orchestrator so tests can exercise the full ingestion pipeline
without a running OpenSearch cluster.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
import pytest

from eventlens.engine.counters import OccurrenceCounters
from eventlens.engine.tracker import MetricTracker
from eventlens.models.events import Event, decode_event
from eventlens.observability.metrics import EventInstruments, build_instruments
from eventlens.pipeline.orchestrator import IngestionOrchestrator
from eventlens.storage.client import StoreResponse
from eventlens.storage.writer import StorageWriter

# ---------------------------------------------------------------------------
# In-memory document store
# ---------------------------------------------------------------------------


class FakeDocumentStore:
    """DocumentStore double that keeps every accepted document in memory.

    Failures are configured per index (``reject_index``) or per metric kind
    (``reject_metrics``); ``raise_on_index`` simulates a transport error.
    """

    def __init__(self) -> None:
        self.documents: list[tuple[str, dict[str, Any]]] = []
        self.mappings: dict[str, dict[str, Any]] = {}
        self.existing_indices: set[str] = set()
        self.reject_index: dict[str, StoreResponse] = {}
        self.reject_metrics: set[str] = set()
        self.raise_on_index: set[str] = set()
        self.fail_ensure: bool = False
        self.index_calls = 0

    async def ensure_index(self, name: str, mapping: dict[str, Any]) -> StoreResponse:
        if self.fail_ensure:
            return StoreResponse(status_code=503, body='{"error":"cluster unavailable"}')
        if name not in self.existing_indices:
            self.mappings[name] = mapping
            self.existing_indices.add(name)
        return StoreResponse(status_code=200, body='{"acknowledged":true}')

    async def index_document(self, index: str, document: dict[str, Any]) -> StoreResponse:
        self.index_calls += 1
        if index in self.raise_on_index:
            raise httpx.ConnectError("connection refused")
        if index in self.reject_index:
            return self.reject_index[index]
        if document.get("metric_name") in self.reject_metrics:
            return StoreResponse(status_code=429, body='{"error":"es_rejected_execution_exception"}')
        self.documents.append((index, json.loads(json.dumps(document))))
        return StoreResponse(status_code=201, body='{"result":"created"}')

    def docs(self, index: str) -> list[dict[str, Any]]:
        return [doc for idx, doc in self.documents if idx == index]

    def metrics(self, metric_name: str | None = None) -> list[dict[str, Any]]:
        return [doc for doc in self.docs("metrics") if metric_name is None or doc["metric_name"] == metric_name]


# ---------------------------------------------------------------------------
# Event factory helpers
# ---------------------------------------------------------------------------


def make_event_payload(
    name: str = "pod-1",
    action: str = "Deleted",
    event_type: str = "Normal",
    current_status: str = "Terminated",
    reason: str = "Killing",
    kind: str = "Pod",
    event_time: str | None = None,
    labels: dict[str, str] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Build an inbound event payload (camelCase keys) with sensible defaults."""
    if event_time is None:
        event_time = (datetime.now(UTC) - timedelta(seconds=30)).isoformat()
    payload: dict[str, Any] = {
        "apiVersion": "v1",
        "kind": "Event",
        "metadata": {
            "name": name,
            "labels": labels if labels is not None else {"app": "web"},
            "reason": reason,
            "message": f"{action} {kind}/{name}",
        },
        "involvedObject": {"kind": kind, "name": name, "uuid": "5f1c2a9e-0d0b-4c4e-9f61-1f2f0c3b7a10"},
        "action": action,
        "eventTime": event_time,
        "count": 1,
        "type": event_type,
        "currentStatus": current_status,
        "correlationId": "corr-123",
    }
    payload.update(extra)
    return payload


def make_event(**kwargs: Any) -> Event:
    """Decode a payload built by ``make_event_payload``."""
    return decode_event(json.dumps(make_event_payload(**kwargs)))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def store() -> FakeDocumentStore:
    return FakeDocumentStore()


@pytest.fixture
def writer(store: FakeDocumentStore) -> StorageWriter:
    return StorageWriter(store, events_index="events", metrics_index="metrics")


@pytest.fixture
def instruments() -> EventInstruments:
    return build_instruments()


@pytest.fixture
def counters() -> OccurrenceCounters:
    return OccurrenceCounters()


@pytest.fixture
def tracker(writer: StorageWriter, instruments: EventInstruments, counters: OccurrenceCounters) -> MetricTracker:
    return MetricTracker(writer=writer, instruments=instruments, counters=counters)


@pytest.fixture
def orchestrator(tracker: MetricTracker, writer: StorageWriter) -> IngestionOrchestrator:
    return IngestionOrchestrator(tracker=tracker, writer=writer)
