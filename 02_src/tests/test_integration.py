"""Integration tests for the progress service end-to-end flow."""

import asyncio

import httpx
import pytest

from progress_service.api import create_fastapi_app
from progress_service.api.routes.stream import sse_frames
from progress_service.app import Application
from progress_service.broadcast import Subscriber
from progress_service.config import Settings
from progress_service.models import Stage
from progress_service.tracing import TracingHandle
from sim import Sim

from conftest import read_messages


@pytest.fixture
async def app(span_tracer, tracer_provider):
    """Application with short real stage delays."""
    settings = Settings(
        tracing_enabled=False,
        stages=(Stage("validate-input", 10), Stage("process-data", 20), Stage("store-results", 15)),
    )
    app = Application(
        settings=settings,
        tracing=TracingHandle(tracer=span_tracer, provider=tracer_provider),
    )
    await app.start()
    yield app
    await app.stop()


@pytest.mark.asyncio
async def test_sim_runs_stream_to_subscriber(app: Application, span_exporter):
    """Test SIM -> HTTP API -> pipeline -> SSE subscriber."""
    subscriber = Subscriber()
    app.registry.add(subscriber)

    sim = Sim(
        api_url="http://test",
        runs=3,
        posts=[1, 2, 3],
        transport=httpx.ASGITransport(app=create_fastapi_app(app)),
    )
    await sim.start()
    await sim.wait()
    await sim.stop()

    assert sim.results == [200, 200, 200]

    messages = read_messages(subscriber)
    run_ids = {m["runId"] for m in messages}
    assert len(run_ids) == 3
    for run_id in run_ids:
        own = [m for m in messages if m["runId"] == run_id]
        assert [m.get("step") or m.get("type") for m in own] == [
            "validate-input",
            "validate-input",
            "process-data",
            "process-data",
            "store-results",
            "store-results",
            "done",
        ]

    roots = [
        s for s in span_exporter.get_finished_spans()
        if s.name == "process-data" and s.parent is None
    ]
    assert len(roots) == 3


@pytest.mark.asyncio
async def test_stream_relays_run(app: Application):
    """Test a connected stream receives the frames of a run."""
    subscriber = Subscriber()
    frames = sse_frames(app, subscriber)
    received = []

    async def consume():
        async for frame in frames:
            received.append(frame)

    consumer = asyncio.create_task(consume())
    await asyncio.sleep(0)

    outcome = await app.runner.run({"posts": ["x"]})
    await asyncio.sleep(0)
    subscriber.close()
    await consumer

    assert outcome.succeeded
    assert len(received) == 7
    assert all(f.startswith("data: ") and f.endswith("\n\n") for f in received)
    assert '"type": "done"' in received[-1]
    assert len(app.registry) == 0
