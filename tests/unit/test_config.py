"""Tests for environment-driven configuration loading."""

from __future__ import annotations

import pytest

from eventlens.config import load_config


class TestLoadConfig:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for key in (
            "STORE_URL",
            "STORE_USERNAME",
            "STORE_PASSWORD",
            "STORE_VERIFY_TLS",
            "STORE_TIMEOUT",
            "STORE_EVENTS_INDEX",
            "STORE_METRICS_INDEX",
            "API_HOST",
            "API_PORT",
            "LOG_LEVEL",
            "LOG_FORMAT",
        ):
            monkeypatch.delenv(f"EVENTLENS_{key}", raising=False)

        config = load_config()
        assert config.store.url == "https://localhost:9200"
        assert config.store.username == "admin"
        assert config.store.verify_tls is False
        assert config.store.timeout_seconds == 10.0
        assert config.store.events_index == "events"
        assert config.store.metrics_index == "metrics"
        assert config.api.port == 8080
        assert config.log.level == "info"
        assert config.log.format == "json"

    def test_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EVENTLENS_STORE_URL", "http://opensearch:9200/")
        monkeypatch.setenv("EVENTLENS_STORE_VERIFY_TLS", "yes")
        monkeypatch.setenv("EVENTLENS_STORE_TIMEOUT", "2.5")
        monkeypatch.setenv("EVENTLENS_STORE_METRICS_INDEX", "metrics2")
        monkeypatch.setenv("EVENTLENS_API_PORT", "9090")
        monkeypatch.setenv("EVENTLENS_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("EVENTLENS_LOG_FORMAT", "console")

        config = load_config()
        assert config.store.url == "http://opensearch:9200"
        assert config.store.verify_tls is True
        assert config.store.timeout_seconds == 2.5
        assert config.store.metrics_index == "metrics2"
        assert config.api.port == 9090
        assert config.log.level == "debug"
        assert config.log.format == "console"

    def test_out_of_range_values_are_clamped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EVENTLENS_API_PORT", "80")
        monkeypatch.setenv("EVENTLENS_STORE_TIMEOUT", "600")
        config = load_config()
        assert config.api.port == 1024
        assert config.store.timeout_seconds == 120.0

    @pytest.mark.parametrize(
        ("key", "value"),
        [
            ("STORE_URL", "opensearch:9200"),
            ("STORE_EVENTS_INDEX", "Events"),
            ("STORE_METRICS_INDEX", "_metrics"),
            ("LOG_LEVEL", "verbose"),
            ("LOG_FORMAT", "xml"),
            ("API_PORT", "eighty"),
        ],
    )
    def test_invalid_values_raise(self, monkeypatch: pytest.MonkeyPatch, key: str, value: str) -> None:
        monkeypatch.setenv(f"EVENTLENS_{key}", value)
        with pytest.raises(ValueError):
            load_config()
