"""PipelineRunner implementation."""

import asyncio
import json
import uuid
from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol

from ..broadcast import IBroadcaster
from ..logging_config import get_logger
from ..models import (
    BroadcastMessage,
    MessageType,
    PipelineRun,
    RunOutcome,
    Stage,
    StageStatus,
)
from ..tracing import SpanTracer, TraceScope

logger = get_logger(__name__)

ROOT_SPAN_NAME = "process-data"

StageWork = Callable[[Stage, dict], Awaitable[None]]


async def simulate_work(stage: Stage, payload: dict) -> None:
    """Default stage work: a non-blocking delay."""
    await asyncio.sleep(stage.simulated_duration_ms / 1000)


class IPipelineRunner(Protocol):
    """Executing the ordered stage pipeline for one request."""

    @property
    def stages(self) -> tuple[Stage, ...]:
        ...

    async def run(self, payload: dict, parent: TraceScope | None = None) -> RunOutcome:
        """Run every stage in order. Never raises for stage failures."""
        ...


class PipelineRunner:
    """Runs stages sequentially, tracing and broadcasting each transition."""

    def __init__(
        self,
        broadcaster: IBroadcaster,
        tracer: SpanTracer,
        stages: Sequence[Stage],
        work: StageWork = simulate_work,
    ):
        self._broadcaster = broadcaster
        self._tracer = tracer
        self._stages = tuple(stages)
        self._work = work

    @property
    def stages(self) -> tuple[Stage, ...]:
        return self._stages

    async def run(self, payload: dict, parent: TraceScope | None = None) -> RunOutcome:
        """
        Execute the pipeline for one request.

        Args:
            payload: Parsed request body; ``posts`` is echoed as processed data.
            parent: Upstream scope (e.g. from a ``traceparent`` header).

        Returns:
            RunOutcome. Stage failures are reported through the outcome, a
            root span error status and an error broadcast, not raised.
        """
        run_id = uuid.uuid4().hex
        root_span = self._tracer.start_span(
            ROOT_SPAN_NAME, parent, attributes={"run.id": run_id}
        )
        run = PipelineRun(
            run_id=run_id,
            root_span=root_span,
            stages=self._stages,
            input_payload=payload,
        )
        scope = (parent or TraceScope()).child(root_span).with_run(run_id)
        log_context = {"run_id": run_id, "trace_id": scope.trace_id}

        try:
            logger.info("Processing run started", extra={"context": log_context})

            for stage in run.stages:
                await self._run_stage(stage, run, scope)

            processed_data = run.input_payload.get("posts")
            self._tracer.add_event(
                root_span,
                "Processing completed",
                {"processedData": json.dumps(processed_data), "status": "success"},
            )
            self._tracer.set_status(root_span, ok=True)
            await self._broadcaster.broadcast(
                BroadcastMessage.terminal(
                    MessageType.DONE, message="Processing complete", run_id=run_id
                ),
                scope,
            )
            logger.info("Processing run completed", extra={"context": log_context})
            return RunOutcome(run_id=run_id, succeeded=True, processed_data=processed_data)

        except Exception as e:
            self._tracer.record_exception(root_span, e)
            self._tracer.set_status(root_span, ok=False, description="Processing failed")
            logger.exception("Processing run failed", extra={"context": log_context})
            await self._broadcaster.broadcast(
                BroadcastMessage.terminal(
                    MessageType.ERROR, message="Processing failed", run_id=run_id
                ),
                scope,
            )
            return RunOutcome(run_id=run_id, succeeded=False, error=str(e))

        finally:
            self._tracer.end(root_span)

    async def _run_stage(self, stage: Stage, run: PipelineRun, scope: TraceScope) -> None:
        # scope is the run's root; it is captured here and reused after the await
        with self._tracer.span(stage.name, scope) as stage_scope:
            self._tracer.add_event(stage_scope.span, f"{stage.name} started")
            await self._broadcaster.broadcast(
                BroadcastMessage.stage(stage.name, StageStatus.STARTED, run.run_id),
                stage_scope,
            )

            await self._work(stage, run.input_payload)

            self._tracer.add_event(stage_scope.span, f"{stage.name} completed")
            await self._broadcaster.broadcast(
                BroadcastMessage.stage(stage.name, StageStatus.COMPLETED, run.run_id),
                stage_scope,
            )
