"""SIM implementation - concurrent process calls against a running service."""

import asyncio
from typing import Protocol

import httpx

from progress_service.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_POSTS = [
    {"id": 1, "title": "First post"},
    {"id": 2, "title": "Second post"},
    {"id": 3, "title": "Third post"},
]


class ISim(Protocol):
    """Generate load: several overlapping pipeline runs."""

    async def start(self) -> None:
        """Start scenario."""
        ...

    async def stop(self) -> None:
        """Stop scenario."""
        ...


class Sim:
    """Fires concurrent POST /process calls so their progress interleaves."""

    def __init__(
        self,
        api_url: str = "http://localhost:3004",
        runs: int = 3,
        posts: list | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_url = api_url
        self._runs = runs
        self._posts = posts if posts is not None else DEFAULT_POSTS
        self._transport = transport
        self._running = False
        self._task: asyncio.Task | None = None
        self._client: httpx.AsyncClient | None = None
        self.results: list[int] = []

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start scenario in the background."""
        if self._running:
            return

        self._running = True
        self.results = []
        await self._close_client()
        self._client = httpx.AsyncClient(transport=self._transport)

        self._task = asyncio.create_task(self._run_scenario())

    async def stop(self) -> None:
        """Stop scenario."""
        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        await self._close_client()

    async def wait(self) -> None:
        """Wait for the current scenario to finish."""
        if self._task:
            await asyncio.shield(self._task)

    async def _run_scenario(self) -> None:
        """Launch all runs at once and wait for them."""
        logger.info("SIM: starting %s concurrent runs", self._runs)
        try:
            await asyncio.gather(
                *[self._send_process(i) for i in range(self._runs)]
            )
        except Exception as e:
            logger.error("SIM scenario error: %s", e)
        finally:
            await self._close_client()
            self._running = False
            logger.info("SIM: scenario finished with statuses %s", self.results)

    async def _close_client(self) -> None:
        client, self._client = self._client, None
        if client:
            await client.aclose()

    async def _send_process(self, index: int) -> None:
        """Send one process request via HTTP API."""
        if not self._client:
            return

        try:
            response = await self._client.post(
                f"{self._api_url}/process",
                json={"posts": self._posts, "sim_run": index},
                timeout=30.0,
            )
            self.results.append(response.status_code)

            if response.status_code == 200:
                data = response.json()
                logger.info("SIM: run %s -> %s", index, data.get("message", "N/A"))
            else:
                logger.error(
                    "SIM: run %s failed with status %s",
                    index,
                    response.status_code,
                )

        except httpx.HTTPError as e:
            logger.error("SIM: run %s request failed: %s", index, e)
