"""
Engine schemas - Pydantic models for engine status, control requests and frames
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field


class EngineStatusResponse(BaseModel):
    """Current engine state plus render loop metrics"""
    state: str = Field(description="IDLE, AWAITING_SECOND_FRAME, TRANSITIONING or SETTLED")
    grid_width: int
    grid_height: int
    canvas_width: float
    canvas_height: float
    active_pixels: int = Field(description="Pixels in the active transition (0 when none)")
    progress: float = Field(ge=0, le=1, description="Elapsed fraction of the active transition")
    bootstrap_complete: bool
    transitions_completed: int
    capture_pending: bool = Field(description="A capture frame is waiting to be used")
    last_capture_ms: float
    transition_start_ms: float
    fps_target: int
    fps_actual: float
    frames_rendered: int


class ResolutionChangeRequest(BaseModel):
    """Select a grid by dot fidelity (same as pressing a digit key)"""
    dot_fidelity: int = Field(description="1-9; grid width = 4 * min_dots * dot_fidelity")


class ResolutionChangeResponse(BaseModel):
    grid_width: int
    grid_height: int


class CanvasResizeRequest(BaseModel):
    """New canvas size in pixels"""
    width: float
    height: float


class CanvasResizeResponse(BaseModel):
    width: float
    height: float


class DotResponse(BaseModel):
    x: float
    y: float
    diameter: float
    color: Tuple[int, int, int]


class FrameResponse(BaseModel):
    """Draw list of the most recently rendered frame"""
    timestamp: float
    canvas_width: float
    canvas_height: float
    background: Optional[Tuple[int, int]] = Field(None, description="(gray, alpha) wash, if any")
    dot_count: int
    dots: List[DotResponse]
