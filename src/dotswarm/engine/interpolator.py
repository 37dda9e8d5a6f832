"""
Interpolator - current eased position and color of a dot at a given time
"""

from dataclasses import dataclass
from typing import Callable

from dotswarm.models.transition import TransitionPixel, ease_in_out_cubic
from dotswarm.utils.colors import lerp, lerp_rgb


@dataclass(frozen=True)
class DotState:
    """Evaluated dot: grid position (fractional), color channels, raw progress"""
    x: float
    y: float
    r: float
    g: float
    b: float
    progress: float

    @property
    def done(self) -> bool:
        return self.progress >= 1.0

    @property
    def rgb(self):
        return (self.r, self.g, self.b)


class Interpolator:
    """
    Evaluates TransitionPixels against time elapsed since transition start

    Example:
        interp = Interpolator()
        state = interp.evaluate(pixel, elapsed=4000)
        state.x, state.y, state.rgb
    """

    def __init__(self, ease: Callable[[float], float] = ease_in_out_cubic):
        self.ease = ease

    @staticmethod
    def progress(pixel: TransitionPixel, elapsed: float) -> float:
        """Linear progress clamped to [0, 1]"""
        if pixel.pixel_duration <= 0:
            return 1.0
        pixel_elapsed = elapsed - pixel.start_delay
        return max(0.0, min(1.0, pixel_elapsed / pixel.pixel_duration))

    def evaluate(self, pixel: TransitionPixel, elapsed: float) -> DotState:
        progress = self.progress(pixel, elapsed)
        eased = self.ease(progress)
        c = pixel.correspondence
        r, g, b = lerp_rgb(c.source_color, c.target_color, eased)

        return DotState(
            x=lerp(c.source_x, c.target_x, eased),
            y=lerp(c.source_y, c.target_y, eased),
            r=r, g=g, b=b,
            progress=progress,
        )
