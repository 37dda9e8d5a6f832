import asyncio
from typing import Iterable, Optional

from dotswarm.models.enums import KeyboardSource
from dotswarm.models.events import KeyboardKeyPressEvent
from dotswarm.services.event_bus import EventBus
from dotswarm.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.INPUT)


class DummyKeyboardAdapter:
    """
    Keyboard stand-in for non-interactive runs (no TTY, tests)

    Optionally replays a scripted key sequence, then idles until cancelled.

    Example:
        adapter = DummyKeyboardAdapter(bus, script=["3", "5"], interval=2.0)
    """

    def __init__(self, event_bus: EventBus, script: Optional[Iterable[str]] = None, interval: float = 1.0):
        self.event_bus = event_bus
        self.script = list(script or [])
        self.interval = interval

    async def run(self) -> None:
        log.info("Keyboard input disabled (no TTY)", scripted_keys=len(self.script))
        for key in self.script:
            await asyncio.sleep(self.interval)
            await self.event_bus.publish(KeyboardKeyPressEvent(key, source=KeyboardSource.DUMMY))

        await asyncio.Event().wait()
