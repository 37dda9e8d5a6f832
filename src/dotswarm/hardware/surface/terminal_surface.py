"""
TerminalSurface - ANSI truecolor preview

Maps the canvas onto a character grid where one dot lights one cell. Cell
colors persist between frames so the translucent background wash fades
settled dots like a real canvas.
"""

import sys
from typing import List, Optional, TextIO, Tuple

from dotswarm.utils.colors import clamp_channel

RGB = Tuple[int, int, int]

CURSOR_HOME = "\033[H"
CLEAR_SCREEN = "\033[2J"
RESET = "\033[0m"


class TerminalSurface:
    """
    Renders dots as colored blocks

    Args:
        columns: Character columns used for the canvas width
        stream: Output stream (default sys.stdout)
        char_aspect: Character height / width, used to derive row count
    """

    def __init__(self, columns: int = 80, stream: Optional[TextIO] = None, char_aspect: float = 2.0):
        if columns < 1:
            raise ValueError(f"columns must be >= 1 (got {columns})")
        self.columns = columns
        self.char_aspect = char_aspect
        self.stream = stream
        self.rows = 0
        self._cells: List[List[RGB]] = []
        self._color: RGB = (255, 255, 255)
        self._width = 1.0
        self._height = 1.0
        self._cleared = False

    def begin_frame(self, width: float, height: float) -> None:
        rows = max(1, round(self.columns * height / width / self.char_aspect))
        if rows != self.rows:
            self.rows = rows
            self._cells = [[(0, 0, 0)] * self.columns for _ in range(rows)]
        self._width = width
        self._height = height

    def background(self, gray: int, alpha: int) -> None:
        a = alpha / 255
        for row in self._cells:
            for i, (r, g, b) in enumerate(row):
                row[i] = (
                    clamp_channel(r + (gray - r) * a),
                    clamp_channel(g + (gray - g) * a),
                    clamp_channel(b + (gray - b) * a),
                )

    def fill_color(self, r: int, g: int, b: int) -> None:
        self._color = (r, g, b)

    def draw_circle(self, cx: float, cy: float, diameter: float) -> None:
        col = int(cx / self._width * self.columns)
        row = int(cy / self._height * self.rows)
        if 0 <= col < self.columns and 0 <= row < self.rows:
            self._cells[row][col] = self._color

    def cell(self, col: int, row: int) -> RGB:
        return self._cells[row][col]

    def end_frame(self) -> None:
        out = self.stream or sys.stdout
        parts = []
        if not self._cleared:
            parts.append(CLEAR_SCREEN)
            self._cleared = True
        parts.append(CURSOR_HOME)
        for row in self._cells:
            parts.append("".join(f"\033[48;2;{r};{g};{b}m " for r, g, b in row))
            parts.append(RESET + "\n")
        out.write("".join(parts))
        out.flush()
