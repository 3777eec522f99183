"""Storage Writer: persists raw events and metric records.

Every write is an independent new-document creation with a single attempt.
There is no upsert path and no content-derived document id, so ingesting
the same logical event twice leaves two documents behind.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from eventlens.models.events import Event
from eventlens.models.metrics import MetricRecord
from eventlens.storage.client import DocumentStore
from eventlens.storage.mappings import EVENTS_MAPPING, METRICS_MAPPING

_log = structlog.get_logger(component="storage.writer")

_MAX_BODY_IN_ERROR = 500


class StorageWriteError(Exception):
    """The store rejected a write, or could not be reached.

    ``status_code`` is None when the request never produced a response.
    """

    def __init__(self, index: str, status_code: int | None, body: str) -> None:
        status = status_code if status_code is not None else "n/a"
        super().__init__(f"Error indexing document in '{index}': Status: {status}, Response: {body[:_MAX_BODY_IN_ERROR]}")
        self.index = index
        self.status_code = status_code
        self.body = body


class StoragePersistError(StorageWriteError):
    """Raised when the raw-event write fails.  Fatal to the request."""


class StorageWriter:
    """Serialises records and submits them to their index.

    Args:
        store:         DocumentStore implementation (OpenSearchClient in production).
        events_index:  Index receiving raw events.
        metrics_index: Index receiving all four metric kinds.
    """

    def __init__(self, store: DocumentStore, events_index: str = "events", metrics_index: str = "metrics") -> None:
        self._store = store
        self.events_index = events_index
        self.metrics_index = metrics_index

    async def bootstrap(self) -> bool:
        """Ensure both indices exist with their mappings.

        Failures are logged and never raised: the indices may already exist
        with a compatible mapping.  Returns True when both calls succeeded.
        """
        ok = True
        for index, mapping in ((self.events_index, EVENTS_MAPPING), (self.metrics_index, METRICS_MAPPING)):
            try:
                response = await self._store.ensure_index(index, mapping)
            except httpx.HTTPError as exc:
                _log.warning("index_mapping_create_failed", index=index, error=str(exc))
                ok = False
                continue
            if not response.ok:
                _log.warning(
                    "index_mapping_create_failed",
                    index=index,
                    status_code=response.status_code,
                    body=response.body[:_MAX_BODY_IN_ERROR],
                )
                ok = False
            else:
                _log.info("index_ready", index=index)
        return ok

    async def write_metric(self, record: MetricRecord) -> None:
        """Write *record* to the metrics index.

        Raises:
            StorageWriteError: on rejection or transport failure.
        """
        await self._write(self.metrics_index, record.to_document(), StorageWriteError)

    async def write_event(self, event: Event) -> None:
        """Write the raw *event* to the events index.

        Raises:
            StoragePersistError: on rejection or transport failure.
        """
        await self._write(self.events_index, event.to_document(), StoragePersistError)

    async def _write(
        self,
        index: str,
        document: dict[str, Any],
        error_cls: type[StorageWriteError],
    ) -> None:
        try:
            response = await self._store.index_document(index, document)
        except httpx.HTTPError as exc:
            raise error_cls(index, None, str(exc)) from exc
        if not response.ok:
            raise error_cls(index, response.status_code, response.body)
