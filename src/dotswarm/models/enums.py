"""
Enums for the dotswarm transition engine
"""

from enum import Enum, auto


class EngineState(Enum):
    """
    Transition engine states (derived from engine fields, never stored)

    IDLE: No snapshot yet, waiting for the first capture
    AWAITING_SECOND_FRAME: Bootstrap only - first snapshot held, second pending
    TRANSITIONING: A TransitionSet is animating
    SETTLED: Between transitions, waiting for the next capture interval
    """
    IDLE = auto()
    AWAITING_SECOND_FRAME = auto()
    TRANSITIONING = auto()
    SETTLED = auto()


class EventSource(Enum):
    """Event source identifiers for application events"""
    CAPTURE = auto()      # Capture device (camera)
    KEYBOARD = auto()     # Keyboard adapters
    API = auto()          # HTTP API requests
    ENGINE = auto()       # TransitionEngine notifications
    WINDOW = auto()       # Canvas / window resize


class KeyboardSource(Enum):
    STDIN = auto()
    DUMMY = auto()


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()         # Configuration loading, validation
    CAPTURE = auto()        # Capture device, incoming frames
    MATCHER = auto()        # Nearest-color correspondence
    SCHEDULER = auto()      # Per-pixel timing
    TRANSITION = auto()     # Engine state changes
    RENDER_ENGINE = auto()  # FrameManager render loop
    EVENT = auto()          # Event bus events and handling
    INPUT = auto()          # Keyboard input

    API = auto()

    SYSTEM = auto()         # Startup, shutdown, errors
    SHUTDOWN = auto()
    GENERAL = auto()        # Default general category
