"""
Utility functions for dotswarm
"""

from .colors import color_distance, lerp, lerp_rgb, clamp_channel
from .clock import MonotonicClock, ManualClock

__all__ = [
    'color_distance',
    'lerp',
    'lerp_rgb',
    'clamp_channel',
    'MonotonicClock',
    'ManualClock',
]
