"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class StoreConfig:
    """OpenSearch document store configuration."""

    url: str = "https://localhost:9200"
    username: str = "admin"
    password: str = ""
    verify_tls: bool = False
    timeout_seconds: float = 10.0
    events_index: str = "events"
    metrics_index: str = "metrics"


@dataclass
class APIConfig:
    """REST API configuration."""

    host: str = "0.0.0.0"
    port: int = 8080


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"
    format: str = "json"


@dataclass
class EventLensConfig:
    """Top-level EventLens configuration."""

    store: StoreConfig = field(default_factory=StoreConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log: LogConfig = field(default_factory=LogConfig)
