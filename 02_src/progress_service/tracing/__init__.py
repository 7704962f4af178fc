"""Tracing module."""

from .scope import SpanTracer, TraceScope, extract_parent
from .provider import TRACER_NAME, TracingHandle, init_tracing

__all__ = [
    "SpanTracer",
    "TraceScope",
    "extract_parent",
    "TRACER_NAME",
    "TracingHandle",
    "init_tracing",
]
