"""
Engine Endpoints - HTTP routes for the transition engine

Control requests never touch the engine directly: they are published on the
event bus like keyboard and window input, and the engine applies them at
its next tick.
"""

from fastapi import APIRouter, Depends

from dotswarm.api.dependencies import get_service_container
from dotswarm.api.middleware.error_handler import (
    FrameNotAvailableError, InvalidCanvasSizeError, InvalidResolutionError,
)
from dotswarm.api.schemas.engine import (
    CanvasResizeRequest, CanvasResizeResponse, DotResponse, EngineStatusResponse,
    FrameResponse, ResolutionChangeRequest, ResolutionChangeResponse,
)
from dotswarm.models.enums import EventSource
from dotswarm.models.events import CanvasResizeEvent
from dotswarm.services.resolution_service import MIN_DOT_FIDELITY, MAX_DOT_FIDELITY
from dotswarm.services.service_container import ServiceContainer
from dotswarm.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)

MAX_CANVAS_SIZE = 16384.0

router = APIRouter(prefix="/engine", tags=["Engine"])


@router.get(
    "/status",
    response_model=EngineStatusResponse,
    summary="Engine status",
    description="State machine state, grid, active transition progress and render metrics"
)
async def get_status(services: ServiceContainer = Depends(get_service_container)) -> EngineStatusResponse:
    status = services.engine.status(services.clock.now())
    metrics = services.frame_manager.get_metrics()
    return EngineStatusResponse(
        **status,
        fps_target=metrics["fps_target"],
        fps_actual=metrics["fps_actual"],
        frames_rendered=metrics["frames_rendered"],
    )


@router.post(
    "/resolution",
    response_model=ResolutionChangeResponse,
    summary="Change grid resolution",
    description="Reset the engine to the grid for dot_fidelity (1-9), like pressing that digit key"
)
async def change_resolution(
    request: ResolutionChangeRequest,
    services: ServiceContainer = Depends(get_service_container)
) -> ResolutionChangeResponse:
    try:
        grid = await services.resolution_service.request(request.dot_fidelity, EventSource.API)
    except ValueError as e:
        raise InvalidResolutionError(request.dot_fidelity, str(e), (MIN_DOT_FIDELITY, MAX_DOT_FIDELITY)) from e

    log.info("Resolution changed via API", grid=str(grid))
    return ResolutionChangeResponse(grid_width=grid.width, grid_height=grid.height)


@router.post(
    "/canvas",
    response_model=CanvasResizeResponse,
    summary="Resize canvas",
    description="New canvas size in pixels; dot geometry is recomputed at the next tick"
)
async def resize_canvas(
    request: CanvasResizeRequest,
    services: ServiceContainer = Depends(get_service_container)
) -> CanvasResizeResponse:
    if not (0 < request.width <= MAX_CANVAS_SIZE and 0 < request.height <= MAX_CANVAS_SIZE):
        raise InvalidCanvasSizeError(request.width, request.height, MAX_CANVAS_SIZE)

    await services.event_bus.publish(CanvasResizeEvent(request.width, request.height, source=EventSource.API))
    return CanvasResizeResponse(width=request.width, height=request.height)


@router.get(
    "/frame",
    response_model=FrameResponse,
    summary="Last rendered frame",
    description="Draw list (background wash + dots) of the most recent tick"
)
async def get_frame(services: ServiceContainer = Depends(get_service_container)) -> FrameResponse:
    frame = services.frame_manager.last_frame
    if frame is None:
        raise FrameNotAvailableError()

    width, height = frame.canvas_size
    background = (frame.background.gray, frame.background.alpha) if frame.background else None
    return FrameResponse(
        timestamp=frame.timestamp,
        canvas_width=width,
        canvas_height=height,
        background=background,
        dot_count=len(frame.dots),
        dots=[DotResponse(x=d.x, y=d.y, diameter=d.diameter, color=d.color) for d in frame.dots],
    )
