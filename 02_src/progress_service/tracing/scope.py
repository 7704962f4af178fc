"""Explicit span correlation.

Every call that may open a child span receives the active ``TraceScope`` as a
parameter. The ambient OpenTelemetry context is never read or written, so runs
interleaved on one event loop cannot adopt each other's spans as parents.
"""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.trace import Span, Status, StatusCode, Tracer
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

_propagator = TraceContextTextMapPropagator()


@dataclass(frozen=True)
class TraceScope:
    """The span currently active for one logical call."""

    span: Span | None = None
    run_id: str | None = None

    def child(self, span: Span) -> "TraceScope":
        """Scope for work nested under ``span``, same run."""
        return TraceScope(span=span, run_id=self.run_id)

    def with_run(self, run_id: str) -> "TraceScope":
        return TraceScope(span=self.span, run_id=run_id)

    @property
    def context(self) -> Context:
        """A fresh OTel context holding only this scope's span."""
        if self.span is None:
            return Context()
        return trace.set_span_in_context(self.span, Context())

    @property
    def trace_id(self) -> str | None:
        if self.span is None:
            return None
        span_context = self.span.get_span_context()
        if not span_context.is_valid:
            return None
        return trace.format_trace_id(span_context.trace_id)


def extract_parent(headers: Mapping[str, str]) -> TraceScope:
    """Build a scope from W3C ``traceparent``/``tracestate`` headers.

    Returns an empty scope when the headers carry no valid trace context.
    """
    context = _propagator.extract(carrier=dict(headers), context=Context())
    span = trace.get_current_span(context)
    if not span.get_span_context().is_valid:
        return TraceScope()
    return TraceScope(span=span)


class SpanTracer:
    """Starts and annotates spans with explicitly supplied parents."""

    def __init__(self, tracer: Tracer):
        self._tracer = tracer

    def start_span(
        self,
        name: str,
        parent: TraceScope | None = None,
        attributes: Mapping[str, Any] | None = None,
    ) -> Span:
        """Start a span whose parent is ``parent.span`` (a new trace if None)."""
        context = parent.context if parent is not None else Context()
        return self._tracer.start_span(name, context=context, attributes=attributes)

    def add_event(
        self, span: Span, name: str, attributes: Mapping[str, Any] | None = None
    ) -> None:
        span.add_event(name, attributes=dict(attributes or {}))

    def set_status(self, span: Span, ok: bool, description: str | None = None) -> None:
        if ok:
            span.set_status(Status(StatusCode.OK))
        else:
            span.set_status(Status(StatusCode.ERROR, description))

    def record_exception(self, span: Span, exc: BaseException) -> None:
        span.record_exception(exc)

    def end(self, span: Span) -> None:
        span.end()

    @contextmanager
    def span(
        self,
        name: str,
        parent: TraceScope | None = None,
        attributes: Mapping[str, Any] | None = None,
    ) -> Iterator[TraceScope]:
        """Open a child span for the duration of the block.

        Yields the child scope. Exceptions mark the span as failed and are
        re-raised; the span is ended exactly once either way.
        """
        span = self.start_span(name, parent, attributes)
        scope = (parent or TraceScope()).child(span)
        try:
            yield scope
        except Exception as e:
            self.record_exception(span, e)
            self.set_status(span, ok=False, description=str(e))
            raise
        finally:
            self.end(span)
