from __future__ import annotations
import asyncio
from typing import Optional

from dotswarm.lifecycle.shutdown_protocol import IShutdownHandler
from dotswarm.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


class APIServerShutdownHandler(IShutdownHandler):
    """
    Shutdown handler for the API server (FastAPI + Uvicorn).

    Cancels the task running uvicorn's serve(); uvicorn closes its sockets on
    cancellation.

    Priority: 90 (after rendering stops, before remaining tasks)
    """

    def __init__(self, api_task: Optional[asyncio.Task]):
        self.api_task = api_task

    @property
    def shutdown_priority(self) -> int:
        return 90

    async def shutdown(self) -> None:
        if self.api_task is None or self.api_task.done():
            log.debug("API server not running")
            return

        log.info("Stopping API server...")
        self.api_task.cancel()
        try:
            await self.api_task
        except asyncio.CancelledError:
            log.debug("API server task cancelled")
