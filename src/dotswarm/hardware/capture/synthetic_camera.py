"""
SyntheticCamera - seeded stand-in for a webcam

Renders a few soft colored blobs drifting over a dark backdrop at the
requested grid resolution. Deterministic for a given seed and frame index.
"""

import asyncio
import math
import random
from dataclasses import dataclass
from typing import List, Optional

from dotswarm.models.events import CaptureCompletedEvent
from dotswarm.services.event_bus import EventBus
from dotswarm.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CAPTURE)


@dataclass
class _Blob:
    color: tuple
    radius: float
    phase_x: float
    phase_y: float
    speed: float


class SyntheticCamera:
    """
    Capture device producing moving color blobs

    Usage:
        camera = SyntheticCamera(event_bus, fps=15, seed=3)
        camera.configure(60, 45)
        await camera.run()  # until cancelled
    """

    BACKDROP = (12, 12, 24)

    def __init__(self, event_bus: Optional[EventBus] = None, fps: int = 15,
                 seed: Optional[int] = None, blob_count: int = 4):
        self.event_bus = event_bus
        self.fps = max(1, fps)
        self.width = 0
        self.height = 0
        self.frame_index = 0

        rng = random.Random(seed)
        self._blobs: List[_Blob] = [
            _Blob(
                color=(rng.randint(60, 255), rng.randint(60, 255), rng.randint(60, 255)),
                radius=rng.uniform(0.15, 0.35),
                phase_x=rng.uniform(0, math.tau),
                phase_y=rng.uniform(0, math.tau),
                speed=rng.uniform(0.02, 0.06),
            )
            for _ in range(blob_count)
        ]

    def configure(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        log.info("Capture configured", width=width, height=height)

    def render_frame(self, frame_index: Optional[int] = None) -> List[int]:
        """Flat RGBA buffer for the given (or current) frame index"""
        t = self.frame_index if frame_index is None else frame_index
        w, h = self.width, self.height
        buffer = [0] * (w * h * 4)

        centers = [
            (0.5 + 0.4 * math.sin(b.phase_x + t * b.speed),
             0.5 + 0.4 * math.cos(b.phase_y + t * b.speed * 1.3))
            for b in self._blobs
        ]

        for y in range(h):
            v = (y + 0.5) / h
            for x in range(w):
                u = (x + 0.5) / w
                r, g, b = self.BACKDROP
                for blob, (cx, cy) in zip(self._blobs, centers):
                    d = math.hypot(u - cx, v - cy)
                    weight = max(0.0, 1.0 - d / blob.radius)
                    if weight > 0:
                        r += blob.color[0] * weight
                        g += blob.color[1] * weight
                        b += blob.color[2] * weight
                i = (y * w + x) * 4
                buffer[i] = min(255, int(r))
                buffer[i + 1] = min(255, int(g))
                buffer[i + 2] = min(255, int(b))
                buffer[i + 3] = 255
        return buffer

    def capture(self) -> CaptureCompletedEvent:
        """Produce the next frame as an event"""
        event = CaptureCompletedEvent(self.render_frame(), self.width, self.height)
        self.frame_index += 1
        return event

    async def run(self) -> None:
        if self.event_bus is None:
            raise RuntimeError("SyntheticCamera.run() requires an event bus")

        delay = 1.0 / self.fps
        log.info(f"Synthetic capture started @ {self.fps} FPS")
        try:
            while True:
                if self.width > 0 and self.height > 0:
                    await self.event_bus.publish(self.capture())
                await asyncio.sleep(delay)
        except asyncio.CancelledError:
            log.debug("Synthetic capture cancelled")
            raise
