from typing import Optional

from dotswarm.engine.transition_engine import TransitionEngine
from dotswarm.models.events import Event, EventType
from dotswarm.services.event_bus import EventBus
from dotswarm.services.resolution_service import ResolutionService
from dotswarm.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TRANSITION)


class TransitionController:
    """
    Routes bus events into the TransitionEngine

    - CAPTURE_COMPLETED / RESOLUTION_CHANGE / CANVAS_RESIZE -> engine.deliver()
      (applied at the next tick boundary)
    - KEYBOARD_KEYPRESS -> ResolutionService (digits become RESOLUTION_CHANGE)
    - TRANSITION_STARTED / TRANSITION_COMPLETED -> counters for status
    """

    def __init__(self, engine: TransitionEngine, event_bus: EventBus, resolution_service: ResolutionService):
        self.engine = engine
        self.event_bus = event_bus
        self.resolution_service = resolution_service
        self.transitions_started = 0
        self.last_transition_ms: Optional[float] = None

        event_bus.subscribe(EventType.CAPTURE_COMPLETED, self._forward, priority=10)
        event_bus.subscribe(EventType.RESOLUTION_CHANGE, self._forward, priority=10)
        event_bus.subscribe(EventType.CANVAS_RESIZE, self._forward, priority=10)
        event_bus.subscribe(EventType.KEYBOARD_KEYPRESS, self._on_key)
        event_bus.subscribe(EventType.TRANSITION_STARTED, self._on_transition_started)
        event_bus.subscribe(EventType.TRANSITION_COMPLETED, self._on_transition_completed)

        log.info("TransitionController initialized")

    def _forward(self, event: Event) -> None:
        self.engine.deliver(event)

    async def _on_key(self, event: Event) -> None:
        await self.resolution_service.handle_key(event)

    def _on_transition_started(self, event: Event) -> None:
        self.transitions_started += 1

    def _on_transition_completed(self, event: Event) -> None:
        self.last_transition_ms = event.data["elapsed_ms"]
