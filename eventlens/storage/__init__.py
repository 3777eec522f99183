"""Storage layer for EventLens.

Submodules:
    client   -- OpenSearch REST client (httpx) and the DocumentStore protocol.
    mappings -- Index mappings for the events and metrics indices.
    writer   -- StorageWriter: event and metric writes with typed failures.
"""

from eventlens.storage.client import DocumentStore, OpenSearchClient, StoreResponse
from eventlens.storage.writer import StoragePersistError, StorageWriteError, StorageWriter

__all__ = [
    "DocumentStore",
    "OpenSearchClient",
    "StoragePersistError",
    "StorageWriteError",
    "StorageWriter",
    "StoreResponse",
]
