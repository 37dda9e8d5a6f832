"""
Rendering surface protocol

The minimal 2D drawing vocabulary FrameManager replays a RenderFrame with.
"""

from typing import Protocol


class RenderingSurface(Protocol):
    def begin_frame(self, width: float, height: float) -> None: ...

    def background(self, gray: int, alpha: int) -> None:
        """Wash the whole canvas with gray at the given alpha (0-255)"""
        ...

    def fill_color(self, r: int, g: int, b: int) -> None: ...

    def draw_circle(self, cx: float, cy: float, diameter: float) -> None: ...

    def end_frame(self) -> None: ...
