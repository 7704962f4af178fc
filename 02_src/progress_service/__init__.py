"""Progress service core."""

from .app import Application, IApplication
from .broadcast import (
    Broadcaster,
    IBroadcaster,
    Subscriber,
    SubscriberClosedError,
    SubscriberRegistry,
)
from .config import ConfigError, Settings
from .models import (
    BroadcastMessage,
    MessageType,
    PipelineRun,
    RunOutcome,
    Stage,
    StageStatus,
)
from .pipeline import IPipelineRunner, PipelineRunner
from .tracing import SpanTracer, TraceScope, TracingHandle, init_tracing

__all__ = [
    # Application
    "Application",
    "IApplication",
    # Configuration
    "Settings",
    "ConfigError",
    # Models
    "BroadcastMessage",
    "MessageType",
    "StageStatus",
    "Stage",
    "PipelineRun",
    "RunOutcome",
    # Components
    "Subscriber",
    "SubscriberClosedError",
    "SubscriberRegistry",
    "IBroadcaster",
    "Broadcaster",
    "IPipelineRunner",
    "PipelineRunner",
    "SpanTracer",
    "TraceScope",
    "TracingHandle",
    "init_tracing",
]
