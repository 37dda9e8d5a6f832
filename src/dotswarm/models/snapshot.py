"""
Snapshot - one immutable captured grid of RGB colors

Built from the capture device's flat RGBA buffer (row-major, 8-bit channels).
Alpha is dropped on construction; the grid never changes afterwards.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

from dotswarm.utils.colors import RGB


@dataclass(frozen=True)
class Snapshot:
    """
    width x height grid of RGB triples, row-major.

    Attributes:
        width: Grid columns
        height: Grid rows
        pixels: Tuple of (r, g, b), length width * height
        captured_at: Clock time (ms) of capture

    Example:
        snap = Snapshot.from_rgba(buffer, 60, 45, captured_at=clock.now())
        r, g, b = snap.color_at(10, 4)
    """

    width: int
    height: int
    pixels: Tuple[RGB, ...]
    captured_at: float = 0.0

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Invalid snapshot size {self.width}x{self.height}")
        if len(self.pixels) != self.width * self.height:
            raise ValueError(
                f"Snapshot expects {self.width * self.height} pixels, got {len(self.pixels)}"
            )

    # === CONSTRUCTORS ===

    @classmethod
    def from_rgba(
        cls,
        buffer: Sequence[int],
        width: int,
        height: int,
        captured_at: float = 0.0
    ) -> 'Snapshot':
        """
        Build from a flat RGBA buffer of length width * height * 4

        Raises:
            ValueError: buffer length does not match the grid, or a channel is outside 0-255
        """
        expected = width * height * 4
        if len(buffer) != expected:
            raise ValueError(f"RGBA buffer length {len(buffer)} != {expected} for {width}x{height}")
        _check_channels(buffer)

        pixels = tuple(
            (int(buffer[i]), int(buffer[i + 1]), int(buffer[i + 2]))
            for i in range(0, expected, 4)
        )
        return cls(width=width, height=height, pixels=pixels, captured_at=captured_at)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[RGB]], captured_at: float = 0.0) -> 'Snapshot':
        """Build from a list of rows of RGB tuples (handy in tests)"""
        height = len(rows)
        width = len(rows[0]) if height else 0
        if any(len(row) != width for row in rows):
            raise ValueError("All rows must have the same length")
        pixels = tuple(tuple(int(c) for c in rgb) for row in rows for rgb in row)
        _check_channels([c for rgb in pixels for c in rgb])
        return cls(width=width, height=height, pixels=pixels, captured_at=captured_at)

    # === ACCESS ===

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        return self.cell_count == 0

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def color_at(self, x: int, y: int) -> RGB:
        return self.pixels[y * self.width + x]

    def position_of(self, index: int) -> Tuple[int, int]:
        """Row-major index -> (x, y)"""
        return index % self.width, index // self.width

    def cells(self) -> Iterator[Tuple[int, int, RGB]]:
        """Iterate (x, y, rgb) in row-major order"""
        for index, rgb in enumerate(self.pixels):
            x, y = self.position_of(index)
            yield x, y, rgb

    def __repr__(self) -> str:
        return f"Snapshot({self.width}x{self.height}, captured_at={self.captured_at:.0f}ms)"


def _check_channels(values: Sequence[int]) -> None:
    for index, value in enumerate(values):
        if not 0 <= value <= 255:
            raise ValueError(f"Channel value {value} at index {index} is outside 0-255")
