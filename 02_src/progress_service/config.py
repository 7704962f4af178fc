"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from .models import Stage

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

DEFAULT_STAGES = "validate-input:1000,process-data:2000,store-results:1500"
DEFAULT_OTLP_ENDPOINT = "http://localhost:4317"

LOGS_DIR.mkdir(parents=True, exist_ok=True)


class ConfigError(ValueError):
    """Raised when an environment value cannot be parsed."""


def parse_stages(value: str) -> tuple[Stage, ...]:
    """Parse ``name:ms,name:ms`` into an ordered tuple of stages."""
    stages = []
    for item in value.split(","):
        item = item.strip()
        if not item:
            continue
        name, sep, duration = item.partition(":")
        if not sep or not name.strip():
            raise ConfigError(f"Invalid stage definition: {item!r}")
        try:
            stages.append(Stage(name=name.strip(), simulated_duration_ms=int(duration)))
        except ValueError as e:
            raise ConfigError(f"Invalid stage definition: {item!r} ({e})") from e

    if not stages:
        raise ConfigError("PIPELINE_STAGES must define at least one stage")
    return tuple(stages)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _parse_int(name: str, value: str, minimum: int) -> int:
    try:
        parsed = int(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from e
    if parsed < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {parsed}")
    return parsed


@dataclass(frozen=True)
class Settings:
    """Deployment configuration read from the environment."""

    api_host: str = "localhost"
    api_port: int = 3004
    service_name: str = "progress-service"
    tracing_enabled: bool = True
    otlp_endpoint: str = DEFAULT_OTLP_ENDPOINT
    stages: tuple[Stage, ...] = field(default_factory=lambda: parse_stages(DEFAULT_STAGES))
    subscriber_queue_size: int = 100
    cors_origins: tuple[str, ...] = ("*",)

    @property
    def api_url(self) -> str:
        return f"http://{self.api_host}:{self.api_port}"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            api_host=os.getenv("API_HOST", "localhost"),
            api_port=_parse_int("API_PORT", os.getenv("API_PORT", "3004"), 1),
            service_name=os.getenv("SERVICE_NAME", "progress-service"),
            tracing_enabled=_parse_bool(os.getenv("TRACING_ENABLED", "true")),
            otlp_endpoint=os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", DEFAULT_OTLP_ENDPOINT),
            stages=parse_stages(os.getenv("PIPELINE_STAGES", DEFAULT_STAGES)),
            subscriber_queue_size=_parse_int(
                "SUBSCRIBER_QUEUE_SIZE", os.getenv("SUBSCRIBER_QUEUE_SIZE", "100"), 1
            ),
            cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
        )
