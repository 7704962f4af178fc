"""Broadcast message models."""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any


class MessageType(str, Enum):
    """Terminal message types."""

    DONE = "done"
    ERROR = "error"


class StageStatus(str, Enum):
    """Stage progress markers."""

    STARTED = "started"
    COMPLETED = "completed"


@dataclass(frozen=True)
class BroadcastMessage:
    """A single notification fanned out to stream subscribers.

    Either a terminal message (``type`` set) or a stage message
    (``step`` and ``status`` set), never both.
    """

    type: MessageType | None = None
    step: str | None = None
    status: StageStatus | None = None
    message: str | None = None
    payload: Any = None
    run_id: str | None = None  # run correlation id

    def __post_init__(self) -> None:
        is_terminal = self.type is not None
        is_stage = self.step is not None or self.status is not None
        if is_terminal == is_stage:
            raise ValueError("BroadcastMessage must be either terminal or stage")
        if is_stage and (self.step is None or self.status is None):
            raise ValueError("Stage messages require both step and status")

    @classmethod
    def stage(
        cls, step: str, status: StageStatus, run_id: str | None = None
    ) -> "BroadcastMessage":
        return cls(step=step, status=StageStatus(status), run_id=run_id)

    @classmethod
    def terminal(
        cls,
        type: MessageType,
        message: str | None = None,
        payload: Any = None,
        run_id: str | None = None,
    ) -> "BroadcastMessage":
        return cls(
            type=MessageType(type), message=message, payload=payload, run_id=run_id
        )

    def to_dict(self) -> dict:
        """Wire representation; absent fields are omitted."""
        data: dict[str, Any] = {}
        if self.type is not None:
            data["type"] = self.type.value
        if self.step is not None:
            data["step"] = self.step
        if self.status is not None:
            data["status"] = self.status.value
        if self.message is not None:
            data["message"] = self.message
        if self.payload is not None:
            data["payload"] = self.payload
        if self.run_id is not None:
            data["runId"] = self.run_id
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict())
