"""
Unit tests for FrameManager render loop
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from dotswarm.engine.frame_manager import FrameManager, MAX_FPS, MIN_FPS
from dotswarm.engine.transition_engine import TransitionEngine
from dotswarm.hardware.surface.recording_surface import RecordingSurface
from dotswarm.models.events import EventType
from dotswarm.models.geometry import GridResolution
from dotswarm.services.event_bus import EventBus

FRAME_A = [[(255, 0, 0), (0, 255, 0)], [(0, 0, 255), (255, 255, 255)]]
FRAME_B = [[(255, 255, 255), (0, 255, 0)], [(0, 0, 255), (255, 0, 0)]]


@pytest.fixture
def engine(lockstep_timing, rng):
    return TransitionEngine(GridResolution(2, 2), lockstep_timing, rng=rng)


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def manager(engine, clock, bus, surface):
    fm = FrameManager(engine, clock, fps=60, event_bus=bus)
    fm.add_surface(surface)
    return fm


class TestRenderOnce:

    @pytest.mark.asyncio
    async def test_replays_frame_on_surface(self, manager, engine, clock, surface, make_capture):
        engine.deliver(make_capture(FRAME_A))
        clock.set(10)
        await manager.render_once()

        engine.deliver(make_capture(FRAME_B))
        clock.set(250)
        frame = await manager.render_once()

        recorded = surface.last_frame
        assert recorded.background == (0, 8)
        assert (recorded.width, recorded.height) == frame.canvas_size
        assert len(recorded.dots) == 8
        assert [d.color for d in recorded.dots] == [d.color for d in frame.dots]
        assert manager.last_frame is frame

    @pytest.mark.asyncio
    async def test_publishes_engine_notifications(self, manager, engine, clock, bus, make_capture):
        received = []
        bus.subscribe(EventType.TRANSITION_STARTED, received.append)
        bus.subscribe(EventType.TRANSITION_COMPLETED, received.append)

        engine.deliver(make_capture(FRAME_A))
        clock.set(10)
        await manager.render_once()
        engine.deliver(make_capture(FRAME_B))
        clock.set(250)
        await manager.render_once()
        clock.set(1150)
        await manager.render_once()

        assert [e.type for e in received] == [EventType.TRANSITION_STARTED, EventType.TRANSITION_COMPLETED]
        assert received[1].data["elapsed_ms"] == 900

    @pytest.mark.asyncio
    async def test_metrics_count_blank_frames(self, manager, engine, clock, make_capture):
        await manager.render_once()
        engine.deliver(make_capture(FRAME_A))
        clock.set(10)
        await manager.render_once()
        engine.deliver(make_capture(FRAME_B))
        clock.set(250)
        await manager.render_once()

        metrics = manager.get_metrics()
        assert metrics["frames_rendered"] == 3
        assert metrics["blank_frames"] == 2
        assert metrics["render_errors"] == 0
        assert metrics["surfaces"] == 1

    @pytest.mark.asyncio
    async def test_works_without_event_bus(self, engine, clock):
        fm = FrameManager(engine, clock)
        frame = await fm.render_once()
        assert frame.is_blank


class TestSurfaces:

    def test_duplicate_surface_ignored(self, manager, surface):
        manager.add_surface(surface)
        assert len(manager.surfaces) == 1

    def test_remove_surface(self, manager, surface):
        manager.remove_surface(surface)
        manager.remove_surface(surface)
        assert manager.surfaces == []


class TestControl:

    @pytest.mark.parametrize("requested,expected", [(0, MIN_FPS), (30, 30), (1000, MAX_FPS)])
    def test_fps_clamped(self, engine, clock, requested, expected):
        fm = FrameManager(engine, clock, fps=requested)
        assert fm.fps == expected
        fm.set_fps(requested)
        assert fm.fps == expected

    @pytest.mark.asyncio
    async def test_start_and_stop(self, manager):
        await manager.start()
        assert manager.running
        await asyncio.sleep(0.05)
        await manager.stop()

        assert not manager.running
        assert manager.render_task is None
        assert manager.frames_rendered > 0

    @pytest.mark.asyncio
    async def test_paused_loop_only_renders_steps(self, manager):
        manager.pause()
        await manager.start()
        await asyncio.sleep(0.05)
        assert manager.frames_rendered == 0

        manager.step_frame()
        await asyncio.sleep(0.05)
        assert manager.frames_rendered == 1

        await manager.shutdown()
        assert manager.surfaces == []

    @pytest.mark.asyncio
    async def test_render_errors_do_not_stop_loop(self, clock):
        engine = MagicMock()
        engine.tick.side_effect = RuntimeError("boom")
        fm = FrameManager(engine, clock, fps=240)

        await fm.start()
        await asyncio.sleep(0.05)
        assert fm.running
        await fm.stop()

        assert fm.render_errors > 1
        assert fm.frames_rendered == 0
