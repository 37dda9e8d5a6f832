"""
Event system for dotswarm

Inputs (capture frames, key presses, resize and resolution requests) are
published as events and routed into the engine, which applies them at the
next tick boundary. The engine reports transition start/completion back
the same way.
"""

from dataclasses import dataclass
import time
from enum import Enum, auto
from typing import Any, Dict, Generic, List, Optional, Sequence, TypeVar

from dotswarm.models.enums import EventSource, KeyboardSource


class EventType(Enum):
    """Event types in the system"""
    # Inputs
    CAPTURE_COMPLETED = auto()
    KEYBOARD_KEYPRESS = auto()
    RESOLUTION_CHANGE = auto()
    CANVAS_RESIZE = auto()

    # Engine notifications
    TRANSITION_STARTED = auto()
    TRANSITION_COMPLETED = auto()


TSource = TypeVar("TSource", bound=Enum)


@dataclass
class Event(Generic[TSource]):
    """
    Base event class

    All events carry:
    - type: EventType (what kind of event)
    - source: Enum (where it came from)
    - data: dict (event-specific payload)
    - timestamp: float (when it happened, wall clock seconds)
    """
    type: EventType
    source: Optional[TSource]
    data: Dict[str, Any]
    timestamp: float


@dataclass
class CaptureCompletedEvent(Event[EventSource]):
    """Frame-ready event from the capture device (flat RGBA buffer)"""

    def __init__(self, buffer: Sequence[int], width: int, height: int):
        super().__init__(
            type=EventType.CAPTURE_COMPLETED,
            source=EventSource.CAPTURE,
            data={"buffer": buffer, "width": width, "height": height},
            timestamp=time.time()
        )

    @property
    def buffer(self) -> Sequence[int]:
        return self.data["buffer"]

    @property
    def width(self) -> int:
        return self.data["width"]

    @property
    def height(self) -> int:
        return self.data["height"]


@dataclass
class KeyboardKeyPressEvent(Event[KeyboardSource]):
    """Key press from a keyboard adapter"""

    def __init__(self, key: str, modifiers: Optional[List[str]] = None,
                 source: KeyboardSource = KeyboardSource.STDIN):
        """
        Args:
            key: Key name ("5", "A", "ENTER", "UP")
            modifiers: Modifier names ("CTRL", "SHIFT")
            source: Which adapter produced the key
        """
        super().__init__(
            type=EventType.KEYBOARD_KEYPRESS,
            source=source,
            data={"key": key, "modifiers": modifiers or []},
            timestamp=time.time()
        )

    @property
    def key(self) -> str:
        return self.data["key"]

    @property
    def modifiers(self) -> List[str]:
        return self.data["modifiers"]


@dataclass
class ResolutionChangeEvent(Event[EventSource]):
    """Authoritative reset to a new grid resolution"""

    def __init__(self, width: int, height: int, source: EventSource = EventSource.KEYBOARD):
        super().__init__(
            type=EventType.RESOLUTION_CHANGE,
            source=source,
            data={"width": width, "height": height},
            timestamp=time.time()
        )

    @property
    def width(self) -> int:
        return self.data["width"]

    @property
    def height(self) -> int:
        return self.data["height"]


@dataclass
class CanvasResizeEvent(Event[EventSource]):
    """New canvas dimensions (pixels)"""

    def __init__(self, width: float, height: float, source: EventSource = EventSource.WINDOW):
        super().__init__(
            type=EventType.CANVAS_RESIZE,
            source=source,
            data={"width": width, "height": height},
            timestamp=time.time()
        )

    @property
    def width(self) -> float:
        return self.data["width"]

    @property
    def height(self) -> float:
        return self.data["height"]


@dataclass
class TransitionStartedEvent(Event[EventSource]):
    def __init__(self, pixel_count: int, identity_count: int, started_at: float):
        super().__init__(
            type=EventType.TRANSITION_STARTED,
            source=EventSource.ENGINE,
            data={
                "pixel_count": pixel_count,
                "identity_count": identity_count,
                "started_at": started_at,
            },
            timestamp=time.time()
        )


@dataclass
class TransitionCompletedEvent(Event[EventSource]):
    def __init__(self, pixel_count: int, completed_at: float, elapsed_ms: float):
        super().__init__(
            type=EventType.TRANSITION_COMPLETED,
            source=EventSource.ENGINE,
            data={
                "pixel_count": pixel_count,
                "completed_at": completed_at,
                "elapsed_ms": elapsed_ms,
            },
            timestamp=time.time()
        )
