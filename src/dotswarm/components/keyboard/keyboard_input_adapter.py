"""
Keyboard Input Adapter - backend selection for keyboard input

- StdinKeyboardAdapter: interactive terminal
- DummyKeyboardAdapter: stdin is not a TTY (piped, service, CI)

Publishes KeyboardKeyPressEvent to EventBus; digit keys drive resolution
changes through TransitionController.
"""

import asyncio
import sys

from dotswarm.services.event_bus import EventBus
from dotswarm.utils.logger import get_logger, LogCategory
from .dummy_keyboard_adapter import DummyKeyboardAdapter
from .stdin_keyboard_adapter import StdinKeyboardAdapter

log = get_logger().for_category(LogCategory.INPUT)


class KeyboardInputAdapter:
    """
    Unified keyboard input adapter with automatic backend selection

    Usage:
        adapter = KeyboardInputAdapter(event_bus)
        await adapter.run()  # Blocks until cancelled
    """

    def __init__(self, event_bus: EventBus, stdin=None):
        self.event_bus = event_bus
        self.stdin = stdin or sys.stdin
        self.backend = self._select_backend()

    def _select_backend(self):
        isatty = getattr(self.stdin, "isatty", None)
        if isatty is not None and isatty():
            return StdinKeyboardAdapter(self.event_bus)
        return DummyKeyboardAdapter(self.event_bus)

    async def run(self) -> None:
        """Run the selected backend, restarting it after unexpected errors"""
        log.info(f"Keyboard backend: {type(self.backend).__name__}")
        while True:
            try:
                await self.backend.run()
                return
            except asyncio.CancelledError:
                raise
            except Exception as e:
                log.warn(f"Keyboard adapter error: {e}, retrying...")
                await asyncio.sleep(0.1)
