"""OpenTelemetry provider and exporter setup."""

from dataclasses import dataclass

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter

from ..logging_config import get_logger
from .scope import SpanTracer

logger = get_logger(__name__)

TRACER_NAME = "progress-service-tracer"


@dataclass
class TracingHandle:
    """Tracer plus the provider that owns its exporter pipeline."""

    tracer: SpanTracer
    provider: TracerProvider | None = None

    @property
    def enabled(self) -> bool:
        return self.provider is not None

    def shutdown(self) -> None:
        """Flush pending spans and stop the exporter."""
        if self.provider is not None:
            self.provider.shutdown()
            self.provider = None


def _disabled() -> TracingHandle:
    return TracingHandle(tracer=SpanTracer(trace.NoOpTracer()))


def init_tracing(
    service_name: str,
    endpoint: str,
    enabled: bool = True,
    exporter: SpanExporter | None = None,
) -> TracingHandle:
    """
    Create a tracer exporting to an OTLP collector.

    Initialization failures are logged and never raised: the service keeps
    serving with a no-op tracer.

    Args:
        service_name: Value of the ``service.name`` resource attribute.
        endpoint: OTLP gRPC collector endpoint.
        enabled: When False, returns a no-op tracer without touching the exporter.
        exporter: Exporter to use instead of OTLP (tests, alternate backends).
    """
    if not enabled:
        logger.info("Tracing disabled by configuration")
        return _disabled()

    try:
        if exporter is None:
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (
                OTLPSpanExporter,
            )

            exporter = OTLPSpanExporter(endpoint=endpoint)

        provider = TracerProvider(resource=Resource.create({SERVICE_NAME: service_name}))
        provider.add_span_processor(BatchSpanProcessor(exporter))
        tracer = provider.get_tracer(TRACER_NAME)
    except Exception:
        logger.exception("Failed to initialize tracing, continuing without it")
        return _disabled()

    logger.info(
        "OpenTelemetry tracing initialized for %s",
        service_name,
        extra={"context": {"endpoint": endpoint}},
    )
    return TracingHandle(tracer=SpanTracer(tracer), provider=provider)
