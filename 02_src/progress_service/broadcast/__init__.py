"""Broadcast module."""

from .broadcaster import Broadcaster, IBroadcaster, format_sse
from .registry import Subscriber, SubscriberClosedError, SubscriberRegistry

__all__ = [
    "Broadcaster",
    "IBroadcaster",
    "format_sse",
    "Subscriber",
    "SubscriberClosedError",
    "SubscriberRegistry",
]
