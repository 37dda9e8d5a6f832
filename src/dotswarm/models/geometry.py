"""
Grid resolution and canvas geometry

The grid is the downsampled capture resolution (one dot per cell);
the canvas is the pixel surface the dots are drawn on.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class GridResolution:
    """Downsampled grid size (columns x rows)"""

    width: int
    height: int

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Grid resolution must be positive, got {self.width}x{self.height}")

    @classmethod
    def from_width(cls, width: int) -> 'GridResolution':
        """4:3 grid: height = 0.75 * width"""
        return cls(width=width, height=int(0.75 * width))

    @classmethod
    def from_dot_fidelity(cls, dot_fidelity: int, min_dots: int = 3) -> 'GridResolution':
        """
        Map a discrete input value (keyboard digit) to a grid

        width = 4 * min_dots * dot_fidelity, height = 0.75 * width

        Example:
            GridResolution.from_dot_fidelity(5)  # 60x45
        """
        if dot_fidelity < 1:
            raise ValueError(f"dot_fidelity must be >= 1 (got {dot_fidelity})")
        if min_dots < 1:
            raise ValueError(f"min_dots must be >= 1 (got {min_dots})")
        return cls.from_width(4 * min_dots * dot_fidelity)

    @property
    def cell_count(self) -> int:
        return self.width * self.height

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class CanvasGeometry:
    """
    Per-cell draw geometry for a canvas showing a grid

    Attributes:
        canvas_width, canvas_height: Canvas size in pixels
        grid: Grid resolution drawn onto the canvas
        diameter_adj: Dot diameter as a fraction of the smaller cell side
        mirror: Flip horizontally (selfie view)
    """

    canvas_width: float
    canvas_height: float
    grid: GridResolution
    diameter_adj: float = 0.9
    mirror: bool = True

    @classmethod
    def for_window(
        cls,
        window_width: float,
        grid: GridResolution,
        diameter_adj: float = 0.9,
        mirror: bool = True
    ) -> 'CanvasGeometry':
        """Canvas spans the window width and keeps the grid's aspect ratio"""
        return cls(
            canvas_width=window_width,
            canvas_height=window_width * grid.height / grid.width,
            grid=grid,
            diameter_adj=diameter_adj,
            mirror=mirror,
        )

    def with_canvas(self, canvas_width: float, canvas_height: float) -> 'CanvasGeometry':
        return CanvasGeometry(canvas_width, canvas_height, self.grid, self.diameter_adj, self.mirror)

    @property
    def cell_width(self) -> float:
        return self.canvas_width / self.grid.width

    @property
    def cell_height(self) -> float:
        return self.canvas_height / self.grid.height

    @property
    def diameter(self) -> float:
        return min(self.cell_width, self.cell_height) * self.diameter_adj

    def cell_center(self, grid_x: float, grid_y: float) -> Tuple[float, float]:
        """
        Canvas coordinates of a (possibly fractional) grid position's center
        """
        x = grid_x * self.cell_width + self.cell_width / 2
        y = grid_y * self.cell_height + self.cell_height / 2
        if self.mirror:
            x = self.canvas_width - x
        return x, y
