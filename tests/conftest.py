import random
from typing import Sequence

import pytest

from dotswarm.lifecycle.task_registry import TaskRegistry
from dotswarm.models.enums import LogLevel
from dotswarm.models.events import CaptureCompletedEvent
from dotswarm.models.transition import TransitionTiming
from dotswarm.utils.clock import ManualClock
from dotswarm.utils.colors import RGB
from dotswarm.utils.logger import configure_logger


def rgba_buffer(rows: Sequence[Sequence[RGB]]) -> list:
    """Flatten rows of RGB tuples into an RGBA buffer (alpha 255)"""
    buffer = []
    for row in rows:
        for r, g, b in row:
            buffer.extend((r, g, b, 255))
    return buffer


@pytest.fixture(autouse=True)
def quiet_logger():
    configure_logger(LogLevel.WARN, use_colors=False)
    yield
    configure_logger(LogLevel.INFO, use_colors=True)


@pytest.fixture(autouse=True)
def fresh_task_registry():
    TaskRegistry.reset_instance()
    yield
    TaskRegistry.reset_instance()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def lockstep_timing():
    """1 s interval, no jitter: every pixel starts at 0 and ends in [500, 900)"""
    return TransitionTiming(total_duration=1000, duration_jitter=0, min_pixel_duration=500, safe_end_margin=100)


@pytest.fixture
def make_capture():
    """Factory: rows of RGB tuples -> CaptureCompletedEvent"""
    def _make(rows):
        return CaptureCompletedEvent(rgba_buffer(rows), len(rows[0]), len(rows))
    return _make
