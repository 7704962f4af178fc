"""Tests for configuration loading."""

import pytest

from progress_service.config import ConfigError, Settings, parse_stages
from progress_service.models import Stage


class TestParseStages:
    """Tests for parse_stages()."""

    def test_parse_default_format(self):
        """Test parsing ordered name:ms pairs."""
        stages = parse_stages("validate-input:1000,process-data:2000,store-results:1500")
        assert stages == (
            Stage("validate-input", 1000),
            Stage("process-data", 2000),
            Stage("store-results", 1500),
        )

    def test_parse_ignores_whitespace_and_empty_items(self):
        """Test tolerant separators."""
        assert parse_stages(" a:1 , ,b:2,") == (Stage("a", 1), Stage("b", 2))

    @pytest.mark.parametrize("value", ["a", "a:x", ":10", "a:-5", "", " , "])
    def test_parse_invalid(self, value):
        """Test malformed definitions raise ConfigError."""
        with pytest.raises(ConfigError):
            parse_stages(value)


class TestSettings:
    """Tests for Settings.from_env()."""

    def test_defaults(self, monkeypatch):
        """Test defaults when nothing is set."""
        for name in (
            "API_HOST",
            "API_PORT",
            "SERVICE_NAME",
            "TRACING_ENABLED",
            "OTEL_EXPORTER_OTLP_ENDPOINT",
            "PIPELINE_STAGES",
            "SUBSCRIBER_QUEUE_SIZE",
            "CORS_ORIGINS",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = Settings.from_env()
        assert settings.api_port == 3004
        assert settings.api_url == "http://localhost:3004"
        assert settings.service_name == "progress-service"
        assert settings.tracing_enabled is True
        assert settings.otlp_endpoint == "http://localhost:4317"
        assert [s.name for s in settings.stages] == [
            "validate-input",
            "process-data",
            "store-results",
        ]
        assert settings.cors_origins == ("*",)

    def test_overrides(self, monkeypatch):
        """Test values read from environment."""
        monkeypatch.setenv("API_PORT", "8080")
        monkeypatch.setenv("TRACING_ENABLED", "false")
        monkeypatch.setenv("PIPELINE_STAGES", "only:5")
        monkeypatch.setenv("SUBSCRIBER_QUEUE_SIZE", "7")
        monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")

        settings = Settings.from_env()
        assert settings.api_port == 8080
        assert settings.tracing_enabled is False
        assert settings.stages == (Stage("only", 5),)
        assert settings.subscriber_queue_size == 7
        assert settings.cors_origins == ("http://a.test", "http://b.test")

    @pytest.mark.parametrize(
        "name,value",
        [("API_PORT", "abc"), ("API_PORT", "0"), ("SUBSCRIBER_QUEUE_SIZE", "0")],
    )
    def test_invalid_integers(self, monkeypatch, name, value):
        """Test malformed integers raise ConfigError."""
        monkeypatch.setenv(name, value)
        with pytest.raises(ConfigError):
            Settings.from_env()
