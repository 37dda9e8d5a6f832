"""
Color utilities

Pure functions for RGB distance and linear blending used by the matcher
and the interpolator.
"""

from typing import Tuple

RGB = Tuple[int, int, int]


def color_distance(rgb1: RGB, rgb2: RGB) -> float:
    """
    Calculate Euclidean distance between two RGB colors

    Args:
        rgb1, rgb2: RGB tuples (0-255 each)

    Returns:
        Distance (0.0 - ~441.67 for max distance)

    Example:
        dist = color_distance((255, 0, 0), (255, 128, 0))
        # 128.0
    """
    r1, g1, b1 = rgb1
    r2, g2, b2 = rgb2
    return ((r1 - r2) ** 2 + (g1 - g2) ** 2 + (b1 - b2) ** 2) ** 0.5


def lerp(start: float, stop: float, amount: float) -> float:
    """Linear interpolation: amount 0.0 -> start, 1.0 -> stop"""
    return start + (stop - start) * amount


def lerp_rgb(start: RGB, stop: RGB, amount: float) -> Tuple[float, float, float]:
    """
    Blend two colors channel by channel

    Channels are returned as floats; callers round when they need bytes.
    """
    return (
        lerp(start[0], stop[0], amount),
        lerp(start[1], stop[1], amount),
        lerp(start[2], stop[2], amount),
    )


def clamp_channel(value: float) -> int:
    """Round and clamp a channel value to 0-255"""
    return max(0, min(255, int(round(value))))
