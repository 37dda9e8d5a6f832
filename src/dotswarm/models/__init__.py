"""
Models package - Data models for the dotswarm transition engine
"""

from .enums import EngineState, EventSource, KeyboardSource, LogLevel, LogCategory
from .snapshot import Snapshot
from .transition import (
    PixelCorrespondence,
    TransitionPixel,
    TransitionSet,
    TransitionTiming,
    ease_in_out_cubic,
)
from .geometry import GridResolution, CanvasGeometry
from .frame import BackgroundFill, DotDraw, RenderFrame

__all__ = [
    'EngineState',
    'EventSource',
    'KeyboardSource',
    'LogLevel',
    'LogCategory',
    'Snapshot',
    'PixelCorrespondence',
    'TransitionPixel',
    'TransitionSet',
    'TransitionTiming',
    'ease_in_out_cubic',
    'GridResolution',
    'CanvasGeometry',
    'BackgroundFill',
    'DotDraw',
    'RenderFrame',
]
