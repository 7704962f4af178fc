"""Pytest configuration and fixtures."""

import asyncio
import json
import sys
from pathlib import Path

import pytest
import pytest_asyncio
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from progress_service.models import Stage  # noqa: E402


async def no_delay(stage, payload):
    """Stage work that only yields to the event loop."""
    await asyncio.sleep(0)


def read_messages(subscriber) -> list[dict]:
    """Drain frames queued on a subscriber and decode their JSON bodies."""
    messages = []
    while not subscriber._queue.empty():
        frame = subscriber._queue.get_nowait()
        if frame is None:
            break
        assert frame.startswith("data: ")
        assert frame.endswith("\n\n")
        messages.append(json.loads(frame[len("data: "):-2]))
    return messages


@pytest.fixture
def span_exporter():
    """In-memory exporter capturing finished spans."""
    return InMemorySpanExporter()


@pytest.fixture
def tracer_provider(span_exporter):
    """Tracer provider exporting synchronously to the in-memory exporter."""
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    return provider


@pytest.fixture
def span_tracer(tracer_provider):
    """SpanTracer backed by the test provider."""
    from progress_service.tracing import SpanTracer

    return SpanTracer(tracer_provider.get_tracer("test"))


@pytest.fixture
def registry():
    """Create empty SubscriberRegistry."""
    from progress_service.broadcast import SubscriberRegistry

    return SubscriberRegistry()


@pytest.fixture
def broadcaster(registry, span_tracer):
    """Create Broadcaster over the test registry."""
    from progress_service.broadcast import Broadcaster

    return Broadcaster(registry, span_tracer)


@pytest.fixture
def stages():
    """Default stage names with zero simulated delay."""
    return (
        Stage("validate-input", 0),
        Stage("process-data", 0),
        Stage("store-results", 0),
    )


@pytest.fixture
def runner(broadcaster, span_tracer, stages):
    """Create PipelineRunner with zero-delay work."""
    from progress_service.pipeline import PipelineRunner

    return PipelineRunner(
        broadcaster=broadcaster,
        tracer=span_tracer,
        stages=stages,
        work=no_delay,
    )


@pytest.fixture
def settings(stages):
    """Settings that never reach a real collector."""
    from progress_service.config import Settings

    return Settings(tracing_enabled=False, stages=stages)


@pytest_asyncio.fixture
async def application(settings, span_tracer, tracer_provider):
    """Started Application wired to the in-memory tracer."""
    from progress_service.app import Application
    from progress_service.tracing import TracingHandle

    app = Application(
        settings=settings,
        tracing=TracingHandle(tracer=span_tracer, provider=tracer_provider),
        work=no_delay,
    )
    await app.start()
    yield app
    await app.stop()
