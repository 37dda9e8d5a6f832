"""
Middleware for EventBus

Middleware = pipeline functions that process events before handlers.
Can modify events, block events, or log/validate events.
"""

from typing import Optional

from dotswarm.models.events import Event, EventType
from dotswarm.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)


def _source_str(event: Event) -> str:
    return event.source.name if event.source is not None else "-"


def log_middleware(event: Event) -> Event:
    """
    Log all events for debugging

    Capture frames are logged by size only; their buffers are large.

    Usage:
        event_bus.add_middleware(log_middleware)
    """
    if event.type == EventType.CAPTURE_COMPLETED:
        log.debug(f"Event: {event.type.name} from {_source_str(event)} | {event.data['width']}x{event.data['height']}")
        return event

    log.info(f"Event: {event.type.name} from {_source_str(event)} | {event.data}")
    return event


def drop_empty_captures(event: Event) -> Optional[Event]:
    """Block capture events without any pixels (camera not configured yet)"""
    if event.type == EventType.CAPTURE_COMPLETED and not event.data.get("buffer"):
        log.debug("Blocked empty capture frame")
        return None
    return event
