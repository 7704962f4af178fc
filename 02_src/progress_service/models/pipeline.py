"""Pipeline-related data models."""

from dataclasses import dataclass, field
from typing import Any

from opentelemetry.trace import Span


@dataclass(frozen=True)
class Stage:
    """One ordered unit of simulated work."""

    name: str
    simulated_duration_ms: int = 0

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Stage name must not be empty")
        if self.simulated_duration_ms < 0:
            raise ValueError(
                f"simulated_duration_ms must be >= 0, got {self.simulated_duration_ms}"
            )


@dataclass
class PipelineRun:
    """State of a single in-flight run; discarded once the root span ends."""

    run_id: str
    root_span: Span
    stages: tuple[Stage, ...]
    input_payload: dict = field(default_factory=dict)


@dataclass(frozen=True)
class RunOutcome:
    """Result handed back to the caller of PipelineRunner.run()."""

    run_id: str
    succeeded: bool
    processed_data: Any = None
    error: str | None = None
