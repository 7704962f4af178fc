"""Processing API routes."""

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from ...app import Application
from ...logging_config import get_logger
from ...tracing import extract_parent

logger = get_logger(__name__)


class ProcessResponse(BaseModel):
    """Response model for a successful pipeline run."""

    message: str
    processedData: Any = None


async def read_payload(request: Request) -> dict:
    """Parse the request body, treating anything but a JSON object as empty."""
    try:
        payload = await request.json()
    except ValueError:
        logger.warning("Request body is not valid JSON, processing empty payload")
        return {}

    if not isinstance(payload, dict):
        logger.warning(
            "Request body is a JSON %s, not an object; processing empty payload",
            type(payload).__name__,
        )
        return {}
    return payload


def create_processing_router(app: Application) -> APIRouter:
    """Create processing router."""
    router = APIRouter(tags=["processing"])

    @router.post(
        "/process",
        response_model=ProcessResponse,
        responses={500: {"description": "Processing failed"}},
    )
    async def process(request: Request):
        """Run the stage pipeline and echo the submitted posts."""
        payload = await read_payload(request)
        logger.info("Processing request received")

        outcome = await app.runner.run(payload, parent=extract_parent(request.headers))

        if not outcome.succeeded:
            return PlainTextResponse("Internal Server Error", status_code=500)

        return ProcessResponse(
            message="Data processed successfully",
            processedData=outcome.processed_data,
        )

    return router
