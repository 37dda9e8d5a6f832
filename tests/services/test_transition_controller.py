"""
TransitionController tests - bus events reach the engine at the next tick
"""

import pytest

from dotswarm.controllers.transition_controller import TransitionController
from dotswarm.engine.frame_manager import FrameManager
from dotswarm.engine.transition_engine import TransitionEngine
from dotswarm.models.enums import EngineState
from dotswarm.models.events import CanvasResizeEvent, KeyboardKeyPressEvent
from dotswarm.models.geometry import GridResolution
from dotswarm.services.event_bus import EventBus
from dotswarm.services.resolution_service import ResolutionService

FRAME_A = [[(255, 0, 0), (0, 255, 0)], [(0, 0, 255), (255, 255, 255)]]
FRAME_B = [[(255, 255, 255), (0, 255, 0)], [(0, 0, 255), (255, 0, 0)]]


@pytest.fixture
def wiring(lockstep_timing, rng, clock):
    bus = EventBus()
    engine = TransitionEngine(GridResolution(2, 2), lockstep_timing, rng=rng)
    resolution = ResolutionService(bus, min_dots=3)
    controller = TransitionController(engine, bus, resolution)
    manager = FrameManager(engine, clock, event_bus=bus)
    return bus, engine, controller, manager, clock


@pytest.mark.asyncio
async def test_captures_flow_into_engine(wiring, make_capture):
    bus, engine, controller, manager, clock = wiring

    await bus.publish(make_capture(FRAME_A))
    assert engine.state == EngineState.IDLE  # applied at the next tick

    clock.set(10)
    await manager.render_once()
    assert engine.state == EngineState.AWAITING_SECOND_FRAME

    await bus.publish(make_capture(FRAME_B))
    clock.set(250)
    await manager.render_once()
    assert engine.state == EngineState.TRANSITIONING
    assert controller.transitions_started == 1

    clock.set(1150)
    await manager.render_once()
    assert controller.last_transition_ms == 900


@pytest.mark.asyncio
async def test_digit_key_resets_engine(wiring, make_capture):
    bus, engine, controller, manager, clock = wiring
    await bus.publish(make_capture(FRAME_A))
    await manager.render_once()

    await bus.publish(KeyboardKeyPressEvent("1"))
    clock.set(16)
    await manager.render_once()

    assert engine.state == EngineState.IDLE
    assert (engine.grid.width, engine.grid.height) == (12, 9)


@pytest.mark.asyncio
async def test_canvas_resize_forwarded(wiring):
    bus, engine, controller, manager, clock = wiring

    await bus.publish(CanvasResizeEvent(300, 200))
    frame = await manager.render_once()

    assert frame.canvas_size == (300, 200)
