"""Observability API routes."""

from pydantic import BaseModel
from fastapi import APIRouter

from ...app import Application


class StageResponse(BaseModel):
    """Response model for a configured stage."""

    name: str
    simulatedDurationMs: int


class StatusResponse(BaseModel):
    """Response model for service status."""

    status: str
    subscribers: int
    tracing: str
    stages: list[StageResponse]


def create_observability_router(app: Application) -> APIRouter:
    """Create observability router."""
    router = APIRouter(prefix="/api", tags=["observability"])

    @router.get("/status", response_model=StatusResponse)
    async def get_status() -> dict:
        """Report connected subscribers, tracing state and pipeline stages."""
        return {
            "status": "ok",
            "subscribers": len(app.registry),
            "tracing": "enabled" if app.tracing_enabled else "disabled",
            "stages": [
                {"name": s.name, "simulatedDurationMs": s.simulated_duration_ms}
                for s in app.runner.stages
            ],
        }

    return router
