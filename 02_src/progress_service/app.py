"""Application bootstrap and lifecycle management."""

from typing import Protocol

from .broadcast import Broadcaster, IBroadcaster, SubscriberRegistry
from .config import Settings
from .logging_config import get_logger
from .pipeline import IPipelineRunner, PipelineRunner, StageWork, simulate_work
from .tracing import SpanTracer, TracingHandle, init_tracing

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        settings: Settings | None = None,
        tracing: TracingHandle | None = None,
        work: StageWork = simulate_work,
    ):
        self._settings = settings or Settings.from_env()
        self._work = work

        # Components (will be initialized in start())
        self._tracing: TracingHandle | None = tracing
        self._registry: SubscriberRegistry | None = None
        self._broadcaster: IBroadcaster | None = None
        self._runner: IPipelineRunner | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Tracing (failures degrade to a no-op tracer)
        if self._tracing is None:
            self._tracing = init_tracing(
                service_name=self._settings.service_name,
                endpoint=self._settings.otlp_endpoint,
                enabled=self._settings.tracing_enabled,
            )

        # 2. Registry (no dependencies)
        self._registry = SubscriberRegistry()

        # 3. Broadcaster (depends on Registry + Tracing)
        self._broadcaster = Broadcaster(self._registry, self._tracing.tracer)

        # 4. PipelineRunner (depends on Broadcaster + Tracing)
        self._runner = PipelineRunner(
            broadcaster=self._broadcaster,
            tracer=self._tracing.tracer,
            stages=self._settings.stages,
            work=self._work,
        )
        logger.info(
            "Pipeline configured with stages: %s",
            ", ".join(stage.name for stage in self._settings.stages),
        )

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._registry is not None:
            self._registry.close_all()
            logger.info("Subscribers closed")
        if self._tracing:
            self._tracing.shutdown()
            logger.info("Tracing shut down")

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def tracer(self) -> SpanTracer:
        """Get span tracer instance."""
        if not self._tracing:
            raise RuntimeError("Application not started")
        return self._tracing.tracer

    @property
    def tracing_enabled(self) -> bool:
        return bool(self._tracing and self._tracing.enabled)

    @property
    def registry(self) -> SubscriberRegistry:
        """Get subscriber registry instance."""
        if self._registry is None:
            raise RuntimeError("Application not started")
        return self._registry

    @property
    def broadcaster(self) -> IBroadcaster:
        """Get broadcaster instance."""
        if not self._broadcaster:
            raise RuntimeError("Application not started")
        return self._broadcaster

    @property
    def runner(self) -> IPipelineRunner:
        """Get pipeline runner instance."""
        if not self._runner:
            raise RuntimeError("Application not started")
        return self._runner
