"""
CorrespondenceMatcher - picks, for every target cell, the previous-snapshot
cell its dot animates from.

Per target cell (x, y) with color C:
1. Same position in prev within tolerance -> identity (common for static scenes)
2. Otherwise exhaustive nearest-color search over prev, first minimum in
   row-major order wins
3. Nothing found -> uniformly random prev cell; prev with zero cells -> the
   target itself (no motion possible)

Cost is O(cells_prev) per unmatched cell, fine for grids tens of cells wide.
"""

import random
from typing import Dict, List, Optional

from dotswarm.models.snapshot import Snapshot
from dotswarm.models.transition import PixelCorrespondence, TransitionPixel, TransitionSet
from dotswarm.utils.colors import RGB, color_distance
from dotswarm.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.MATCHER)

DEFAULT_TOLERANCE = 30.0


class CorrespondenceMatcher:
    """
    Builds an unscheduled TransitionSet from (prev, next)

    Pure apart from the injected random source, which is only consulted in
    the fallback branch.

    Example:
        matcher = CorrespondenceMatcher(tolerance=30, rng=random.Random(7))
        transition_set = matcher.match(prev, next_snapshot)
        assert len(transition_set) == next_snapshot.cell_count
    """

    def __init__(self, tolerance: float = DEFAULT_TOLERANCE, rng: Optional[random.Random] = None):
        self.tolerance = tolerance
        self.rng = rng or random.Random()

    def match(self, prev: Snapshot, next_snapshot: Snapshot) -> TransitionSet:
        """
        One correspondence per cell of next_snapshot (timing fields left at 0)
        """
        pixels: List[TransitionPixel] = []
        searched = 0
        nearest_cache: Dict[RGB, Optional[int]] = {}

        for x, y, color in next_snapshot.cells():
            if prev.contains(x, y):
                same_pos_color = prev.color_at(x, y)
                if color_distance(color, same_pos_color) < self.tolerance:
                    pixels.append(TransitionPixel(PixelCorrespondence(
                        source_x=x, source_y=y, source_color=same_pos_color,
                        target_x=x, target_y=y, target_color=color,
                    )))
                    continue

            searched += 1
            pixels.append(TransitionPixel(self._search(prev, x, y, color, nearest_cache)))

        log.debug(
            "Correspondence built",
            cells=len(pixels),
            identity=len(pixels) - searched,
            searched=searched
        )
        return TransitionSet(width=next_snapshot.width, height=next_snapshot.height, pixels=pixels)

    def _search(
        self, prev: Snapshot, x: int, y: int, color: RGB, nearest_cache: Dict[RGB, Optional[int]]
    ) -> PixelCorrespondence:
        # Same color always resolves to the same nearest cell within one match
        if color not in nearest_cache:
            nearest_cache[color] = self.find_nearest(prev, color)
        best_index = nearest_cache[color]

        if best_index is None:
            if prev.is_empty:
                # No source at all: the dot appears in place
                return PixelCorrespondence(x, y, color, x, y, color)
            best_index = self.rng.randrange(prev.cell_count)
            log.debug("Nearest search exhausted, using random source", index=best_index)

        sx, sy = prev.position_of(best_index)
        return PixelCorrespondence(
            source_x=sx, source_y=sy, source_color=prev.pixels[best_index],
            target_x=x, target_y=y, target_color=color,
        )

    @staticmethod
    def find_nearest(prev: Snapshot, color: RGB) -> Optional[int]:
        """
        Row-major index of the prev cell closest to color (None if prev is empty)

        Strict comparison keeps the first-encountered minimum.
        """
        best_index = None
        best_dist = float("inf")
        for index, candidate in enumerate(prev.pixels):
            dist = color_distance(color, candidate)
            if dist < best_dist:
                best_dist = dist
                best_index = index
        return best_index
