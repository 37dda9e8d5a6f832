import asyncio
import sys
import termios
import tty
from typing import List, Optional, Tuple

from dotswarm.models.enums import KeyboardSource
from dotswarm.models.events import KeyboardKeyPressEvent
from dotswarm.services.event_bus import EventBus
from dotswarm.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.INPUT)

SHIFT_MAP = {
    '!': '1', '@': '2', '#': '3', '$': '4', '%': '5',
    '^': '6', '&': '7', '*': '8', '(': '9', ')': '0',
    '_': '-', '+': '=', '{': '[', '}': ']', '|': '\\',
    ':': ';', '"': "'", '<': ',', '>': '.', '?': '/'
}

ARROW_KEYS = {'A': 'UP', 'B': 'DOWN', 'C': 'RIGHT', 'D': 'LEFT'}


def decode_char(char: str) -> Optional[Tuple[str, List[str]]]:
    """
    Translate one cbreak-mode character into (key, modifiers)

    Returns None for characters that are not keys on their own (ESC starts a
    sequence and is handled by the reader).

    Example:
        decode_char('5')     # ('5', [])
        decode_char('\\x03')  # ('C', ['CTRL'])
        decode_char('%')     # ('5', ['SHIFT'])
    """
    if not char or char == '\x1b':
        return None
    if char in ('\n', '\r'):
        return 'ENTER', []
    if char == '\t':
        return 'TAB', []
    # 0x01-0x1a = Ctrl+A to Ctrl+Z
    if '\x01' <= char <= '\x1a':
        return chr(ord(char) + 96).upper(), ['CTRL']
    if char == '\x7f':
        return 'BACKSPACE', []
    if char == ' ':
        return 'SPACE', []
    if char.isprintable():
        if char.isupper():
            return char, ['SHIFT']
        if char in SHIFT_MAP:
            return SHIFT_MAP[char].upper(), ['SHIFT']
        return char.upper(), []
    return None


class StdinKeyboardAdapter:
    """
    Terminal stdin keyboard input (SSH/local terminal)

    Features:
    - Async-native (blocking read runs in executor)
    - Escape sequence handling (arrow keys)
    - Ctrl+Key detection via control codes

    Publishes KeyboardKeyPressEvent to EventBus on key press.

    Note: Terminal is put in cbreak mode. Settings are restored on exit.
    A read blocked in the executor only returns after the next key, so
    shutdown may need one extra key press.
    """

    def __init__(self, event_bus: EventBus):
        self.event_bus = event_bus
        self._old_settings = None

    async def run(self) -> None:
        log.info("Using STDIN keyboard input")

        loop = asyncio.get_running_loop()

        self._old_settings = termios.tcgetattr(sys.stdin)
        tty.setcbreak(sys.stdin.fileno())

        try:
            while True:
                char = await loop.run_in_executor(None, sys.stdin.read, 1)
                if not char:
                    continue

                if char == '\x1b':
                    await self._handle_escape_sequence(loop)
                    continue

                decoded = decode_char(char)
                if decoded:
                    await self._publish_key(*decoded)

        except asyncio.CancelledError:
            log.info("STDIN keyboard input cancelled")
            raise
        finally:
            if self._old_settings:
                termios.tcsetattr(sys.stdin, termios.TCSADRAIN, self._old_settings)
                log.debug("Terminal settings restored")

    async def _handle_escape_sequence(self, loop) -> None:
        """
        Arrow keys send ESC [ {A|B|C|D}; a lone ESC times out after 50ms
        """
        try:
            next_char = await asyncio.wait_for(
                loop.run_in_executor(None, sys.stdin.read, 1),
                timeout=0.05
            )

            if next_char == '[':
                direction = await asyncio.wait_for(
                    loop.run_in_executor(None, sys.stdin.read, 1),
                    timeout=0.05
                )
                key = ARROW_KEYS.get(direction)
                if key:
                    await self._publish_key(key)
                else:
                    log.debug(f"Unknown CSI sequence: ESC[{direction}")
            else:
                await self._publish_key('ESCAPE')

        except asyncio.TimeoutError:
            await self._publish_key('ESCAPE')

    async def _publish_key(self, key: str, modifiers: Optional[List[str]] = None) -> None:
        log.debug("Keyboard key pressed", key=key, modifiers=modifiers if modifiers else None)
        await self.event_bus.publish(
            KeyboardKeyPressEvent(key, modifiers, source=KeyboardSource.STDIN)
        )
