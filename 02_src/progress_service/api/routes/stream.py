"""Event stream API routes."""

from collections.abc import AsyncIterator

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from ...app import Application
from ...broadcast import Subscriber
from ...logging_config import get_logger

logger = get_logger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


async def sse_frames(app: Application, subscriber: Subscriber) -> AsyncIterator[str]:
    """Register ``subscriber`` and relay its frames until the client goes away.

    The ``sse-connection`` span lives exactly as long as the stream.
    """
    tracer = app.tracer
    span = tracer.start_span("sse-connection")
    app.registry.add(subscriber)
    tracer.add_event(span, "Client connected to SSE")
    logger.info("Client connected to stream (%s connected)", len(app.registry))

    try:
        async for frame in subscriber.frames():
            yield frame
    finally:
        app.registry.remove(subscriber)
        subscriber.close()
        tracer.add_event(span, "Client disconnected from SSE")
        tracer.end(span)
        logger.info("Client disconnected from stream (%s connected)", len(app.registry))


def create_stream_router(app: Application) -> APIRouter:
    """Create stream router."""
    router = APIRouter(tags=["stream"])

    @router.get("/stream")
    async def stream() -> StreamingResponse:
        """Open a long-lived Server-Sent Events connection."""
        subscriber = Subscriber(max_queue=app.settings.subscriber_queue_size)
        return StreamingResponse(
            sse_frames(app, subscriber),
            media_type="text/event-stream",
            headers=SSE_HEADERS,
        )

    return router
