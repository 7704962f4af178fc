"""Core data models for the progress service."""

from .broadcast import BroadcastMessage, MessageType, StageStatus
from .pipeline import PipelineRun, RunOutcome, Stage

__all__ = [
    # Broadcast
    "BroadcastMessage",
    "MessageType",
    "StageStatus",
    # Pipeline
    "Stage",
    "PipelineRun",
    "RunOutcome",
]
