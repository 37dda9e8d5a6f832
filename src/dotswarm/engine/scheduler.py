"""
TransitionScheduler - per-pixel start delay and duration

Gives every pixel a random start within the jitter window and a random end
between (start + min_pixel_duration) and (total_duration - safe_end_margin),
producing a staggered swarm that is finished before the next capture.
"""

import random
from typing import Optional

from dotswarm.models.transition import TransitionSet, TransitionTiming
from dotswarm.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SCHEDULER)


class TransitionScheduler:
    """
    Fills start_delay / pixel_duration of every TransitionPixel in place

    Example:
        scheduler = TransitionScheduler(TransitionTiming(), rng=random.Random(1))
        scheduler.schedule(transition_set)
    """

    def __init__(self, timing: TransitionTiming, rng: Optional[random.Random] = None):
        self.timing = timing
        self.rng = rng or random.Random()

    def schedule(self, transition_set: TransitionSet) -> TransitionSet:
        timing = self.timing
        max_end_time = timing.max_end_time
        fallbacks = 0

        for pixel in transition_set:
            start_delay = self.rng.random() * timing.duration_jitter
            min_end_time = start_delay + timing.min_pixel_duration

            usable_range = max_end_time - min_end_time
            if usable_range <= 0:
                # Large delay squeezed the window shut; keep moving forward anyway
                usable_range = timing.fallback_window
                fallbacks += 1

            end_time = min_end_time + self.rng.random() * usable_range
            pixel.start_delay = start_delay
            pixel.pixel_duration = end_time - start_delay

        if fallbacks:
            log.debug(
                "Scheduling window fallback used",
                pixels=fallbacks,
                window_ms=timing.fallback_window
            )

        log.debug(
            "Transition scheduled",
            pixels=len(transition_set),
            latest_end_ms=f"{transition_set.max_end_time():.0f}"
        )
        return transition_set
