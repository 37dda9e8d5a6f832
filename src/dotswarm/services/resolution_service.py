"""
Resolution Service - maps user input to grid resolutions

Digit keys 1-9 select a "dot fidelity" N; the grid becomes
(4 * min_dots * N) x (0.75 * width). Every accepted request is published as
a ResolutionChangeEvent, which resets the engine.
"""

from typing import Optional

from dotswarm.models.enums import EventSource
from dotswarm.models.events import KeyboardKeyPressEvent, ResolutionChangeEvent
from dotswarm.models.geometry import GridResolution
from dotswarm.services.event_bus import EventBus
from dotswarm.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.INPUT)

MIN_DOT_FIDELITY = 1
MAX_DOT_FIDELITY = 9


class ResolutionService:
    """
    Key/API -> GridResolution mapping and change publication

    Example:
        service = ResolutionService(event_bus, min_dots=3, initial=GridResolution(60, 45))
        await service.request(2)            # publishes 24x18
        service.resolution_for_key("5")     # GridResolution(60, 45)
    """

    def __init__(self, event_bus: EventBus, min_dots: int = 3, initial: Optional[GridResolution] = None):
        if min_dots < 1:
            raise ValueError(f"min_dots must be >= 1 (got {min_dots})")
        self.event_bus = event_bus
        self.min_dots = min_dots
        self.current = initial
        self.changes = 0

    def resolution_for(self, dot_fidelity: int) -> GridResolution:
        """
        Raises:
            ValueError: dot_fidelity outside 1-9
        """
        if not MIN_DOT_FIDELITY <= dot_fidelity <= MAX_DOT_FIDELITY:
            raise ValueError(
                f"dot_fidelity must be {MIN_DOT_FIDELITY}-{MAX_DOT_FIDELITY} (got {dot_fidelity})"
            )
        return GridResolution.from_dot_fidelity(dot_fidelity, self.min_dots)

    def resolution_for_key(self, key: str) -> Optional[GridResolution]:
        """Grid for a digit key "1"-"9"; None for any other key"""
        if len(key) != 1 or key not in "123456789":
            return None
        return self.resolution_for(int(key))

    async def request(self, dot_fidelity: int, source: EventSource = EventSource.API) -> GridResolution:
        """
        Publish a resolution change for dot_fidelity

        A request for the current resolution is still published: it restarts
        the capture bootstrap, matching what a key press does.
        """
        grid = self.resolution_for(dot_fidelity)
        await self._publish(grid, source)
        return grid

    async def handle_key(self, event: KeyboardKeyPressEvent) -> Optional[GridResolution]:
        """Keyboard handler: digits change resolution, other keys are ignored"""
        if event.modifiers:
            return None
        grid = self.resolution_for_key(event.key)
        if grid is None:
            log.debug("Ignoring key", key=event.key)
            return None
        await self._publish(grid, EventSource.KEYBOARD)
        return grid

    async def _publish(self, grid: GridResolution, source: EventSource) -> None:
        previous = self.current
        self.current = grid
        self.changes += 1
        log.info(
            "Resolution change requested",
            grid=str(grid),
            previous=str(previous) if previous else None,
            source=source.name
        )
        await self.event_bus.publish(ResolutionChangeEvent(grid.width, grid.height, source=source))
