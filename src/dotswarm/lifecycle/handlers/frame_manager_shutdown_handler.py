"""
FrameManager shutdown handler.
"""

from __future__ import annotations

from dotswarm.engine.frame_manager import FrameManager
from dotswarm.lifecycle.shutdown_protocol import IShutdownHandler
from dotswarm.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SHUTDOWN)


class FrameManagerShutdownHandler(IShutdownHandler):
    """
    Stops the render loop first so no tick runs against half-torn-down
    collaborators.
    """

    def __init__(self, frame_manager: FrameManager):
        self.frame_manager = frame_manager

    @property
    def shutdown_priority(self) -> int:
        return 120

    async def shutdown(self) -> None:
        log.info("Shutting down FrameManager...")
        await self.frame_manager.shutdown()
        log.debug("FrameManager shutdown complete", **self.frame_manager.get_metrics())
