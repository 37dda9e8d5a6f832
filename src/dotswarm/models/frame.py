"""
Render frame models - draw instructions produced by one engine tick

The engine never talks to a surface directly. Each tick it returns a
RenderFrame; FrameManager replays it onto every registered surface as
background / fill_color / draw_circle calls.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class BackgroundFill:
    """Translucent background wash (gray level + alpha, 0-255)"""
    gray: int = 0
    alpha: int = 255


@dataclass(frozen=True)
class DotDraw:
    """One filled circle on the canvas"""
    x: float
    y: float
    diameter: float
    color: Tuple[int, int, int]


@dataclass
class RenderFrame:
    """
    Complete draw list for one tick

    Attributes:
        timestamp: Clock time (ms) the frame was produced at
        canvas_size: (width, height) of the target canvas
        background: Background wash applied before the dots (None = keep canvas)
        dots: Dots in draw order (underlay first, then moving dots)
    """

    timestamp: float
    canvas_size: Tuple[float, float]
    background: Optional[BackgroundFill] = None
    dots: List[DotDraw] = field(default_factory=list)

    @property
    def is_blank(self) -> bool:
        return not self.dots
