"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from eventlens.models.config import APIConfig, EventLensConfig, LogConfig, StoreConfig


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"EVENTLENS_{key}", default)


def _env_bool(key: str, default: bool = False) -> bool:
    val = _env(key, str(default).lower())
    return val.lower() in ("true", "1", "yes")


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    val = int(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _env_float(key: str, default: float, min_val: float | None = None, max_val: float | None = None) -> float:
    val = float(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _validate_url(value: str) -> str:
    if not value.startswith(("http://", "https://")):
        raise ValueError(f"Invalid store URL: {value}. Must start with http:// or https://")
    return value.rstrip("/")


def _validate_index_name(value: str) -> str:
    if not value or value != value.lower() or value.startswith(("_", "-", "+")):
        raise ValueError(f"Invalid index name: {value!r}")
    return value


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def _validate_log_format(value: str) -> str:
    valid = {"json", "console"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log format: {value}. Must be one of {valid}")
    return value.lower()


def load_config() -> EventLensConfig:
    """Load configuration from EVENTLENS_* environment variables."""
    return EventLensConfig(
        store=StoreConfig(
            url=_validate_url(_env("STORE_URL", "https://localhost:9200")),
            username=_env("STORE_USERNAME", "admin"),
            password=_env("STORE_PASSWORD", ""),
            verify_tls=_env_bool("STORE_VERIFY_TLS", False),
            timeout_seconds=_env_float("STORE_TIMEOUT", 10.0, min_val=1.0, max_val=120.0),
            events_index=_validate_index_name(_env("STORE_EVENTS_INDEX", "events")),
            metrics_index=_validate_index_name(_env("STORE_METRICS_INDEX", "metrics")),
        ),
        api=APIConfig(
            host=_env("API_HOST", "0.0.0.0"),
            port=_env_int("API_PORT", 8080, min_val=1024, max_val=65535),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
            format=_validate_log_format(_env("LOG_FORMAT", "json")),
        ),
    )
