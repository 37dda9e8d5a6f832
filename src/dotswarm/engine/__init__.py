"""
Engine package - correspondence matching, scheduling, interpolation and the
tick-driven transition state machine
"""

from .correspondence import CorrespondenceMatcher
from .scheduler import TransitionScheduler
from .interpolator import Interpolator, DotState
from .transition_engine import TransitionEngine
from .frame_manager import FrameManager

__all__ = [
    'CorrespondenceMatcher',
    'TransitionScheduler',
    'Interpolator',
    'DotState',
    'TransitionEngine',
    'FrameManager',
]
