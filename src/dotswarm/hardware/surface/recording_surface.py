"""
RecordingSurface - in-memory surface that keeps the draw calls

Used by tests and headless runs.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass
class RecordedDot:
    x: float
    y: float
    diameter: float
    color: Tuple[int, int, int]


@dataclass
class RecordedFrame:
    width: float
    height: float
    background: Optional[Tuple[int, int]] = None
    dots: List[RecordedDot] = field(default_factory=list)


class RecordingSurface:
    """
    Stores the most recent completed frame and a bounded history

    Example:
        surface = RecordingSurface()
        frame_manager.add_surface(surface)
        ...
        surface.last_frame.dots[0].color
    """

    def __init__(self, history_limit: int = 10):
        self.history_limit = history_limit
        self.frames: List[RecordedFrame] = []
        self._current: Optional[RecordedFrame] = None
        self._color: Tuple[int, int, int] = (255, 255, 255)

    def begin_frame(self, width: float, height: float) -> None:
        self._current = RecordedFrame(width, height)

    def background(self, gray: int, alpha: int) -> None:
        self._require_frame().background = (gray, alpha)

    def fill_color(self, r: int, g: int, b: int) -> None:
        self._color = (r, g, b)

    def draw_circle(self, cx: float, cy: float, diameter: float) -> None:
        self._require_frame().dots.append(RecordedDot(cx, cy, diameter, self._color))

    def end_frame(self) -> None:
        self.frames.append(self._require_frame())
        if len(self.frames) > self.history_limit:
            self.frames.pop(0)
        self._current = None

    @property
    def last_frame(self) -> Optional[RecordedFrame]:
        return self.frames[-1] if self.frames else None

    def _require_frame(self) -> RecordedFrame:
        if self._current is None:
            raise RuntimeError("draw call outside begin_frame()/end_frame()")
        return self._current
