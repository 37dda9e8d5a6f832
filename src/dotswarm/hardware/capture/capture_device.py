"""
Capture device protocol

A capture device delivers frame-ready events carrying a flat RGBA buffer
(width * height * 4 bytes, row-major) at its configured resolution.
"""

from typing import Protocol


class CaptureDevice(Protocol):
    """
    Anything that can stream downsampled frames into the engine.

    Example:
        class Webcam:
            def configure(self, width: int, height: int) -> None: ...
            async def run(self) -> None: ...   # publishes CaptureCompletedEvent
    """

    def configure(self, width: int, height: int) -> None:
        """Switch capture resolution; frames at the old size stop immediately."""
        ...

    async def run(self) -> None:
        """Capture until cancelled, publishing CaptureCompletedEvent per frame."""
        ...
