"""
API tests - engine and system endpoints through FastAPI's TestClient
"""

import pytest
from fastapi.testclient import TestClient

from dotswarm.api.dependencies import set_service_container
from dotswarm.api.main import create_app
from dotswarm.controllers.transition_controller import TransitionController
from dotswarm.engine.frame_manager import FrameManager
from dotswarm.engine.transition_engine import TransitionEngine
from dotswarm.managers.config_manager import ConfigManager
from dotswarm.models.enums import EngineState
from dotswarm.models.events import EventType
from dotswarm.models.geometry import GridResolution
from dotswarm.services.event_bus import EventBus
from dotswarm.services.resolution_service import ResolutionService
from dotswarm.services.service_container import ServiceContainer


@pytest.fixture
def services(lockstep_timing, rng, clock):
    bus = EventBus()
    engine = TransitionEngine(GridResolution(2, 2), lockstep_timing, rng=rng)
    resolution = ResolutionService(bus, min_dots=3)
    TransitionController(engine, bus, resolution)
    container = ServiceContainer(
        engine=engine,
        frame_manager=FrameManager(engine, clock, event_bus=bus),
        resolution_service=resolution,
        event_bus=bus,
        config_manager=ConfigManager(),
        clock=clock,
    )
    set_service_container(container)
    yield container
    set_service_container(None)


@pytest.fixture
def client(services):
    return TestClient(create_app())


# ============================================================================
# Health / root
# ============================================================================

def test_health():
    response = TestClient(create_app()).get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["service"] == "dotswarm-api"


def test_root():
    assert TestClient(create_app()).get("/").json()["health"] == "/api/health"


def test_services_not_ready_returns_503():
    set_service_container(None)
    response = TestClient(create_app()).get("/api/v1/engine/status")
    assert response.status_code == 503


# ============================================================================
# Status
# ============================================================================

def test_status_of_fresh_engine(client):
    body = client.get("/api/v1/engine/status").json()

    assert body["state"] == "IDLE"
    assert (body["grid_width"], body["grid_height"]) == (2, 2)
    assert body["active_pixels"] == 0
    assert body["capture_pending"] is False
    assert body["frames_rendered"] == 0
    assert body["fps_target"] == 60


def test_status_while_transitioning(client, services, make_capture):
    engine = services.engine
    engine.deliver(make_capture([[(255, 0, 0), (0, 255, 0)], [(0, 0, 255), (9, 9, 9)]]))
    engine.tick(10)
    engine.deliver(make_capture([[(9, 9, 9), (0, 255, 0)], [(0, 0, 255), (255, 0, 0)]]))
    engine.tick(250)
    services.clock.set(600)

    body = client.get("/api/v1/engine/status").json()

    assert body["state"] == "TRANSITIONING"
    assert body["active_pixels"] == 4
    assert 0 < body["progress"] < 1


# ============================================================================
# Resolution
# ============================================================================

def test_change_resolution(client, services):
    published = []
    services.event_bus.subscribe(EventType.RESOLUTION_CHANGE, published.append)

    response = client.post("/api/v1/engine/resolution", json={"dot_fidelity": 2})

    assert response.status_code == 200
    assert response.json()["grid_width"] == 24
    assert response.json()["grid_height"] == 18
    assert len(published) == 1

    services.engine.tick(0)
    assert services.engine.state == EngineState.IDLE
    assert services.engine.grid.width == 24


@pytest.mark.parametrize("fidelity", [0, 10])
def test_change_resolution_out_of_range(client, fidelity):
    response = client.post("/api/v1/engine/resolution", json={"dot_fidelity": fidelity})

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "INVALID_RESOLUTION"
    assert error["details"]["valid_range"] == [1, 9]


def test_change_resolution_bad_body(client):
    response = client.post("/api/v1/engine/resolution", json={"dot_fidelity": "lots"})

    assert response.status_code == 422
    body = response.json()
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert body["validation_errors"][0]["field"] == "dot_fidelity"


# ============================================================================
# Canvas
# ============================================================================

def test_resize_canvas(client, services):
    response = client.post("/api/v1/engine/canvas", json={"width": 640, "height": 480})

    assert response.status_code == 200
    frame = services.engine.tick(0)
    assert frame.canvas_size == (640, 480)


@pytest.mark.parametrize("size", [(0, 100), (100, -5), (20000, 100)])
def test_resize_canvas_rejects_bad_sizes(client, size):
    response = client.post("/api/v1/engine/canvas", json={"width": size[0], "height": size[1]})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "INVALID_CANVAS_SIZE"


# ============================================================================
# Frame
# ============================================================================

def test_frame_not_available(client):
    response = client.get("/api/v1/engine/frame")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "FRAME_NOT_AVAILABLE"


@pytest.mark.asyncio
async def test_last_frame(services, make_capture):
    services.engine.deliver(make_capture([[(1, 2, 3), (4, 5, 6)], [(7, 8, 9), (10, 11, 12)]]))
    await services.frame_manager.render_once()
    services.engine.resize(64, 64, 0)
    await services.frame_manager.render_once()

    body = TestClient(create_app()).get("/api/v1/engine/frame").json()

    assert body["canvas_width"] == 64
    assert body["background"] == [0, 8]
    assert body["dot_count"] == 4
    assert body["dots"][0]["color"] == [1, 2, 3]


# ============================================================================
# System
# ============================================================================

def test_system_tasks_empty(client):
    body = client.get("/api/v1/system/tasks").json()
    assert body["count"] == 0
    assert body["tasks"] == []
