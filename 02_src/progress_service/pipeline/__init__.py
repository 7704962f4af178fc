"""Pipeline module."""

from .runner import IPipelineRunner, PipelineRunner, StageWork, simulate_work

__all__ = ["IPipelineRunner", "PipelineRunner", "StageWork", "simulate_work"]
