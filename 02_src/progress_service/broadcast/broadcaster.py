"""Broadcaster implementation for fanning messages out to subscribers."""

import json
from typing import Protocol

from ..logging_config import get_logger
from ..models import BroadcastMessage
from ..tracing import SpanTracer, TraceScope
from .registry import SubscriberRegistry

logger = get_logger(__name__)


def format_sse(data: BroadcastMessage | dict) -> str:
    """Frame a message as a single Server-Sent Events ``data:`` record."""
    if isinstance(data, BroadcastMessage):
        body = data.to_json()
    else:
        body = json.dumps(data)
    return f"data: {body}\n\n"


class IBroadcaster(Protocol):
    """Fire-and-forget fan-out of messages to every subscriber."""

    async def broadcast(
        self, message: BroadcastMessage, scope: TraceScope | None = None
    ) -> int:
        """Deliver message to current subscribers. Returns delivered count."""
        ...


class Broadcaster:
    """Serializes messages and writes them to a registry snapshot."""

    def __init__(self, registry: SubscriberRegistry, tracer: SpanTracer):
        self._registry = registry
        self._tracer = tracer

    async def broadcast(
        self, message: BroadcastMessage, scope: TraceScope | None = None
    ) -> int:
        """Deliver message to current subscribers. Returns delivered count."""
        frame = format_sse(message)
        delivered = 0

        with self._tracer.span("sse-broadcast", scope) as broadcast_scope:
            for subscriber in self._registry.snapshot():
                try:
                    subscriber.write(frame)
                    delivered += 1
                except Exception as e:
                    # Broken sinks are closed and dropped now so their stream
                    # ends; the disconnect handler's later remove() is a no-op.
                    logger.warning(
                        "Dropping subscriber after failed write: %r",
                        e,
                        extra={"context": {"run_id": broadcast_scope.run_id}},
                    )
                    subscriber.close()
                    self._registry.remove(subscriber)

            self._tracer.add_event(
                broadcast_scope.span,
                "SSE message sent",
                {
                    "step": message.step or "none",
                    "status": message.status.value if message.status else "none",
                    "subscribers": delivered,
                },
            )

        return delivered
