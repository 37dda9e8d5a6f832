"""
Unit tests for TransitionEngine state machine

Timing used throughout (lockstep_timing): 1000ms interval, no jitter,
every pixel finishes in [500, 900) ms; initial delay 200ms.
"""

import random
from unittest.mock import MagicMock

import pytest

from dotswarm.engine.transition_engine import TransitionEngine
from dotswarm.models.config import DotSwarmConfig
from dotswarm.models.enums import EngineState
from dotswarm.models.events import (
    CanvasResizeEvent, CaptureCompletedEvent, EventType, KeyboardKeyPressEvent,
    ResolutionChangeEvent,
)
from dotswarm.models.frame import BackgroundFill
from dotswarm.models.geometry import GridResolution
from dotswarm.models.transition import TransitionTiming

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)
WHITE = (255, 255, 255)

FRAME_A = [[RED, GREEN], [BLUE, WHITE]]
FRAME_B = [[WHITE, GREEN], [BLUE, RED]]
FRAME_C = [[GREEN, GREEN], [GREEN, GREEN]]


@pytest.fixture
def engine(lockstep_timing, rng):
    return TransitionEngine(GridResolution(2, 2), lockstep_timing, initial_delay=200, rng=rng)


@pytest.fixture
def transitioning(engine, make_capture):
    """Engine with the bootstrap transition A -> B started at t=250"""
    engine.deliver(make_capture(FRAME_A))
    engine.tick(10)
    engine.deliver(make_capture(FRAME_B))
    engine.tick(250)
    return engine


@pytest.fixture
def settled(transitioning):
    """Bootstrap transition finished at t=1150 with nothing pending"""
    transitioning.tick(1150)
    transitioning.drain_notifications()
    return transitioning


def _colors(dots):
    return [d.color for d in dots]


# ============================================================================
# Bootstrap
# ============================================================================

class TestBootstrap:

    def test_idle_without_capture(self, engine):
        frame = engine.tick(0)

        assert engine.state == EngineState.IDLE
        assert frame.is_blank
        assert frame.background == BackgroundFill(gray=0, alpha=8)
        assert frame.canvas_size == (32.0, 32.0)

    def test_first_capture_becomes_prev(self, engine, make_capture):
        engine.deliver(make_capture(FRAME_A))
        frame = engine.tick(10)

        assert engine.state == EngineState.AWAITING_SECOND_FRAME
        assert engine.prev.pixels == (RED, GREEN, BLUE, WHITE)
        assert engine.time_of_first_frame == 10
        assert frame.is_blank

    def test_second_frame_needs_a_new_capture(self, engine, make_capture):
        engine.deliver(make_capture(FRAME_A))
        engine.tick(10)
        engine.tick(211)
        engine.tick(400)

        assert engine.state == EngineState.AWAITING_SECOND_FRAME
        assert engine.status(400)["capture_pending"] is False

    def test_second_frame_waits_for_initial_delay(self, engine, make_capture):
        engine.deliver(make_capture(FRAME_A))
        engine.tick(10)
        engine.deliver(make_capture(FRAME_B))

        engine.tick(150)
        assert engine.state == EngineState.AWAITING_SECOND_FRAME
        assert engine.status(150)["capture_pending"] is True

        engine.tick(211)
        assert engine.state == EngineState.TRANSITIONING
        assert engine.transition_start_time == 211

    def test_only_newest_capture_is_kept(self, engine, make_capture):
        engine.deliver(make_capture(FRAME_A))
        engine.tick(10)
        engine.deliver(make_capture(FRAME_C))
        engine.deliver(make_capture(FRAME_B))
        engine.tick(250)

        assert engine.next_snapshot.pixels == (WHITE, GREEN, BLUE, RED)


# ============================================================================
# Transitioning
# ============================================================================

class TestTransitioning:

    def test_transition_starts_with_notification(self, transitioning):
        assert transitioning.state == EngineState.TRANSITIONING
        assert transitioning.transition_start_time == 250
        assert len(transitioning.transition_set) == 4

        notifications = transitioning.drain_notifications()
        assert [n.type for n in notifications] == [EventType.TRANSITION_STARTED]
        assert notifications[0].data["pixel_count"] == 4
        assert notifications[0].data["identity_count"] == 2
        assert transitioning.drain_notifications() == []

    def test_frame_draws_underlay_then_moving_dots(self, transitioning):
        frame = transitioning.tick(300)

        assert len(frame.dots) == 8
        assert _colors(frame.dots[:4]) == [RED, GREEN, BLUE, WHITE]

    def test_underlay_can_be_disabled(self, lockstep_timing, rng, make_capture):
        engine = TransitionEngine(GridResolution(2, 2), lockstep_timing, draw_underlay=False, rng=rng)
        engine.deliver(make_capture(FRAME_A))
        engine.tick(10)
        engine.deliver(make_capture(FRAME_B))
        frame = engine.tick(250)

        assert len(frame.dots) == 4

    def test_moving_dots_start_at_source_color(self, transitioning):
        frame = transitioning.tick(250)
        # Corners swapped: each moving dot starts with its source's color
        assert _colors(frame.dots[4:]) == [WHITE, GREEN, BLUE, RED]

    def test_progress_is_reported(self, transitioning):
        assert transitioning.progress(250) == 0.0
        assert 0.0 < transitioning.progress(600) < 1.0
        assert transitioning.status(600)["active_pixels"] == 4

    def test_stays_transitioning_until_every_pixel_done(self, transitioning):
        transitioning.tick(700)
        assert transitioning.state == EngineState.TRANSITIONING


# ============================================================================
# Completion / Settled
# ============================================================================

class TestCompletion:

    def test_completion_promotes_next_to_prev(self, transitioning):
        frame = transitioning.tick(1150)

        assert transitioning.state == EngineState.SETTLED
        assert transitioning.prev.pixels == (WHITE, GREEN, BLUE, RED)
        assert transitioning.transitions_completed == 1
        assert transitioning.bootstrap_complete
        assert transitioning.last_capture_time == 950
        assert _colors(frame.dots[4:]) == [WHITE, GREEN, BLUE, RED]

        types = [n.type for n in transitioning.drain_notifications()]
        assert types == [EventType.TRANSITION_STARTED, EventType.TRANSITION_COMPLETED]

    def test_settled_frame_is_blank(self, settled):
        assert settled.tick(1200).is_blank

    def test_next_capture_waits_for_interval(self, settled, make_capture):
        settled.deliver(make_capture(FRAME_C))

        settled.tick(1900)
        assert settled.state == EngineState.SETTLED
        assert settled.status(1900)["capture_pending"] is True

        settled.tick(1951)
        assert settled.state == EngineState.TRANSITIONING
        assert settled.last_capture_time == 1951
        assert settled.next_snapshot.pixels == (GREEN,) * 4

    def test_overdue_interval_waits_for_capture(self, settled, make_capture):
        settled.tick(3000)
        assert settled.state == EngineState.SETTLED

        settled.deliver(make_capture(FRAME_C))
        settled.tick(3016)
        assert settled.state == EngineState.TRANSITIONING

    def test_pending_capture_starts_next_transition_immediately(self, transitioning, make_capture):
        transitioning.deliver(make_capture(FRAME_C))
        transitioning.tick(1150)

        assert transitioning.state == EngineState.TRANSITIONING
        assert transitioning.transitions_completed == 1
        assert transitioning.prev.pixels == (WHITE, GREEN, BLUE, RED)
        assert transitioning.transition_start_time == 1150


# ============================================================================
# Reset (resolution change)
# ============================================================================

class TestReset:

    def test_reset_mid_transition_returns_to_bootstrap(self, lockstep_timing, rng, make_capture):
        device = MagicMock()
        engine = TransitionEngine(GridResolution(2, 2), lockstep_timing, rng=rng, capture_device=device)
        device.configure.assert_called_once_with(2, 2)

        engine.deliver(make_capture(FRAME_A))
        engine.tick(10)
        engine.deliver(make_capture(FRAME_B))
        engine.tick(250)
        assert engine.state == EngineState.TRANSITIONING

        engine.deliver(make_capture(FRAME_C))
        engine.deliver(ResolutionChangeEvent(4, 3))
        frame = engine.tick(400)

        assert engine.state == EngineState.IDLE
        assert engine.transition_set is None
        assert engine.prev is None and engine.next_snapshot is None
        assert not engine.bootstrap_complete
        assert engine.time_of_first_frame is None
        assert engine.status(400)["capture_pending"] is False
        assert (engine.grid.width, engine.grid.height) == (4, 3)
        assert frame.is_blank
        assert frame.canvas_size == (32.0, 24.0)
        device.configure.assert_called_with(4, 3)

    def test_stale_capture_after_reset_is_dropped(self, engine, make_capture):
        engine.deliver(ResolutionChangeEvent(3, 2))
        engine.tick(0)

        engine.deliver(make_capture(FRAME_A))
        engine.tick(10)
        assert engine.state == EngineState.IDLE

        engine.deliver(make_capture([[RED, GREEN, BLUE], [WHITE, RED, GREEN]]))
        engine.tick(20)
        assert engine.state == EngineState.AWAITING_SECOND_FRAME

    def test_bad_buffer_length_is_dropped(self, engine):
        engine.deliver(CaptureCompletedEvent([0] * 10, 2, 2))
        engine.tick(0)
        assert engine.state == EngineState.IDLE

    def test_out_of_range_channels_are_dropped(self, engine):
        engine.deliver(CaptureCompletedEvent([300, 0, 0, 255] * 4, 2, 2))
        engine.tick(0)
        assert engine.state == EngineState.IDLE
        assert engine.status(0)["capture_pending"] is False

    def test_unrelated_events_are_ignored(self, engine):
        engine.deliver(KeyboardKeyPressEvent("5"))
        engine.tick(0)
        assert engine.state == EngineState.IDLE


# ============================================================================
# Canvas resize
# ============================================================================

class TestResize:

    def test_resize_redraws_prev_once(self, settled):
        settled.deliver(CanvasResizeEvent(64, 64))
        frame = settled.tick(1200)

        assert len(frame.dots) == 4
        assert frame.canvas_size == (64, 64)
        assert frame.dots[0].diameter == pytest.approx(28.8)
        assert _colors(frame.dots) == [WHITE, GREEN, BLUE, RED]
        assert settled.tick(1216).is_blank

    def test_resize_keeps_transition(self, transitioning):
        transitioning.deliver(CanvasResizeEvent(100, 50))
        frame = transitioning.tick(300)

        assert transitioning.state == EngineState.TRANSITIONING
        assert frame.canvas_size == (100, 50)
        assert len(frame.dots) == 8

    @pytest.fixture
    def settled_with_capture(self, settled, make_capture):
        # Capture arrives early; the interval (last capture 950) keeps it pending
        settled.deliver(make_capture(FRAME_C))
        settled.tick(1200)
        assert settled.status(1200)["capture_pending"]
        return settled

    def test_resize_after_interval_and_delay_captures(self, settled_with_capture):
        # 950 + interval 1000 + initial delay 200 = 2150
        settled_with_capture.resize(64, 64, now=2200)

        assert settled_with_capture.state == EngineState.TRANSITIONING
        assert settled_with_capture.next_snapshot.pixels == (GREEN,) * 4
        assert settled_with_capture.last_capture_time == 2200

    def test_resize_before_threshold_stays_settled(self, settled_with_capture):
        settled_with_capture.resize(64, 64, now=2100)

        assert settled_with_capture.state == EngineState.SETTLED
        assert settled_with_capture.last_capture_time == 950
        assert settled_with_capture.status(2100)["capture_pending"]

    def test_resize_event_starts_transition_on_tick(self, settled_with_capture):
        settled_with_capture.deliver(CanvasResizeEvent(64, 64))
        frame = settled_with_capture.tick(2250)

        assert settled_with_capture.state == EngineState.TRANSITIONING
        assert frame.canvas_size == (64, 64)
        assert [n.type for n in settled_with_capture.drain_notifications()] == [
            EventType.TRANSITION_STARTED
        ]

    def test_mirrored_geometry(self, engine):
        # 2 columns on a 32px canvas: column 0 is drawn on the right
        assert engine.geometry.cell_center(0, 0) == (24.0, 8.0)

    @pytest.mark.parametrize("size", [(0, 10), (10, -1)])
    def test_non_positive_size_ignored(self, engine, size):
        engine.deliver(CanvasResizeEvent(*size))
        frame = engine.tick(0)
        assert frame.canvas_size == (32.0, 32.0)


# ============================================================================
# Construction / determinism
# ============================================================================

def test_from_config_uses_configured_values():
    engine = TransitionEngine.from_config(DotSwarmConfig(), rng=random.Random(0))

    assert (engine.grid.width, engine.grid.height) == (60, 45)
    assert engine.capture_interval == 8000
    assert engine.initial_delay == 200
    assert engine.geometry.canvas_width == 960
    assert engine.geometry.canvas_height == 720
    assert engine.matcher.tolerance == 30


def test_same_seed_same_frames(make_capture):
    def run(seed):
        timing = TransitionTiming(total_duration=1000, duration_jitter=300,
                                  min_pixel_duration=400, safe_end_margin=100)
        engine = TransitionEngine(GridResolution(2, 2), timing, rng=random.Random(seed))
        engine.deliver(make_capture(FRAME_A))
        engine.tick(0)
        engine.deliver(make_capture(FRAME_B))
        return [engine.tick(t).dots for t in (250, 400, 600, 800)]

    assert run(42) == run(42)
