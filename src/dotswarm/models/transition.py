"""
Transition Models

Per-cell animation records for one snapshot-to-snapshot transition,
the global timing constants they are scheduled against, and the easing
curves used to reparameterize linear progress.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List

from dotswarm.utils.colors import RGB


@dataclass(frozen=True)
class PixelCorrespondence:
    """
    Target grid cell plus the source cell it animates from

    Several targets may share the same source (not a bijection).
    """

    source_x: int
    source_y: int
    source_color: RGB
    target_x: int
    target_y: int
    target_color: RGB

    @property
    def is_identity(self) -> bool:
        return self.source_x == self.target_x and self.source_y == self.target_y


@dataclass
class TransitionPixel:
    """
    One cell's full animation record: correspondence + timing

    Attributes:
        correspondence: Where/what the dot starts from and ends at
        start_delay: Offset (ms) from transition start before the dot moves
        pixel_duration: Time (ms) the dot takes to reach its target
    """

    correspondence: PixelCorrespondence
    start_delay: float = 0.0
    pixel_duration: float = 0.0

    @property
    def end_time(self) -> float:
        return self.start_delay + self.pixel_duration


@dataclass
class TransitionSet:
    """
    All TransitionPixels of one transition, one per target grid cell

    Created atomically when a transition begins and discarded atomically
    when it completes or a resolution change interrupts it.
    """

    width: int
    height: int
    pixels: List[TransitionPixel] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.pixels

    def __len__(self) -> int:
        return len(self.pixels)

    def __iter__(self) -> Iterator[TransitionPixel]:
        return iter(self.pixels)

    def max_end_time(self) -> float:
        """Latest start_delay + pixel_duration in the set (0 when empty)"""
        return max((p.end_time for p in self.pixels), default=0.0)

    def identity_count(self) -> int:
        return sum(1 for p in self.pixels if p.correspondence.is_identity)


class TransitionTiming:
    """
    Global timing constants for scheduling one transition (all in ms)

    Attributes:
        total_duration: Nominal transition length (the capture interval)
        duration_jitter: Upper bound of each pixel's random start delay
        min_pixel_duration: Shortest time any pixel may take to move
        safe_end_margin: Every pixel finishes at least this long before total_duration
        fallback_window: Window substituted when the usable end-time range is <= 0

    Examples:
        # Defaults used by the app (8 second interval)
        timing = TransitionTiming(total_duration=8000, duration_jitter=500,
                                  min_pixel_duration=7000, safe_end_margin=500)

        # Lockstep: every pixel starts at 0
        lockstep = TransitionTiming(total_duration=1000, duration_jitter=0,
                                    min_pixel_duration=500, safe_end_margin=100)
    """

    FALLBACK_WINDOW_MS = 1000.0

    def __init__(
        self,
        total_duration: float = 8000.0,
        duration_jitter: float = 500.0,
        min_pixel_duration: float = 7000.0,
        safe_end_margin: float = 500.0,
        fallback_window: float = FALLBACK_WINDOW_MS
    ):
        if total_duration <= 0:
            raise ValueError(f"total_duration must be > 0 (got {total_duration})")
        if min_pixel_duration <= 0:
            raise ValueError(f"min_pixel_duration must be > 0 (got {min_pixel_duration})")
        if duration_jitter < 0 or safe_end_margin < 0:
            raise ValueError("duration_jitter and safe_end_margin must be >= 0")
        if fallback_window <= 0:
            raise ValueError(f"fallback_window must be > 0 (got {fallback_window})")

        self.total_duration = float(total_duration)
        self.duration_jitter = float(duration_jitter)
        self.min_pixel_duration = float(min_pixel_duration)
        self.safe_end_margin = float(safe_end_margin)
        self.fallback_window = float(fallback_window)

    @property
    def max_end_time(self) -> float:
        return self.total_duration - self.safe_end_margin

    def __repr__(self):
        return (
            f"TransitionTiming(total={self.total_duration:.0f}ms, jitter={self.duration_jitter:.0f}ms, "
            f"min_pixel={self.min_pixel_duration:.0f}ms, margin={self.safe_end_margin:.0f}ms)"
        )


# === Easing Functions ===

def ease_linear(t: float) -> float:
    """
    Linear easing (constant speed)

    Args:
        t: Progress (0.0 = start, 1.0 = end)

    Returns:
        Blend factor (0.0 to 1.0)
    """
    return t


def ease_in_out_quad(t: float) -> float:
    """Quadratic ease-in-out (slow start → fast middle → slow end)"""
    return 2 * t * t if t < 0.5 else 1 - (-2 * t + 2) ** 2 / 2


def ease_in_out_cubic(t: float) -> float:
    """Cubic ease-in-out (very smooth acceleration/deceleration)"""
    return 4 * t ** 3 if t < 0.5 else 1 - (-2 * t + 2) ** 3 / 2


EASING_FUNCTIONS: Dict[str, Callable[[float], float]] = {
    "linear": ease_linear,
    "in_out_quad": ease_in_out_quad,
    "in_out_cubic": ease_in_out_cubic,
}


def get_easing(name: str) -> Callable[[float], float]:
    """Look up an easing function by config name"""
    try:
        return EASING_FUNCTIONS[name]
    except KeyError:
        raise ValueError(f"Unknown easing '{name}'. Available: {sorted(EASING_FUNCTIONS)}")
