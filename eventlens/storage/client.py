"""OpenSearch document store client over the REST API.

Only two operations are needed by EventLens:

* ``ensure_index``   -- create an index with a mapping, tolerating
                        "already exists" as success.
* ``index_document`` -- create one new document (``POST /{index}/_doc``).

Both issue exactly one HTTP request; there is no retry or backoff.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

import httpx
import structlog

from eventlens.models.config import StoreConfig

_log = structlog.get_logger(component="storage.client")


@dataclass(frozen=True)
class StoreResponse:
    """Outcome of a single store request."""

    status_code: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class DocumentStore(Protocol):
    """Contract the Storage Writer depends on."""

    async def ensure_index(self, name: str, mapping: dict[str, Any]) -> StoreResponse: ...

    async def index_document(self, index: str, document: dict[str, Any]) -> StoreResponse: ...


class OpenSearchClient:
    """Long-lived, process-wide OpenSearch REST client.

    Args:
        config:    Store URL, credentials, TLS and timeout settings.
        transport: Optional httpx transport (used by tests).
    """

    def __init__(self, config: StoreConfig, transport: httpx.AsyncBaseTransport | None = None) -> None:
        auth = httpx.BasicAuth(config.username, config.password) if config.username else None
        self._client = httpx.AsyncClient(
            base_url=config.url,
            auth=auth,
            verify=config.verify_tls,
            timeout=config.timeout_seconds,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def ensure_index(self, name: str, mapping: dict[str, Any]) -> StoreResponse:
        """Create *name* with *mapping*.

        A 400 response means the index already exists and is reported as
        success.  Transport errors propagate as ``httpx.HTTPError``.
        """
        response = await self._client.put(f"/{name}", json={"mappings": mapping})
        if response.status_code == 400:
            _log.debug("index_already_exists", index=name)
            return StoreResponse(status_code=200, body=response.text)
        return StoreResponse(status_code=response.status_code, body=response.text)

    async def index_document(self, index: str, document: dict[str, Any]) -> StoreResponse:
        """Create one new document in *index*.  Transport errors propagate."""
        response = await self._client.post(f"/{index}/_doc", json=document)
        return StoreResponse(status_code=response.status_code, body=response.text)

    async def stop(self) -> None:
        await self._client.aclose()
