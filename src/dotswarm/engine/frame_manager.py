"""
FrameManager — asyncio render loop driving the TransitionEngine.

Architecture:
  - Ticks the engine at a target FPS with the injected clock
  - Replays each RenderFrame onto every registered rendering surface
  - Republishes engine notifications (transition started/completed) on the event bus
  - Supports pause/step/FPS control for debugging
  - Keeps performance metrics

A failing tick or surface is logged and the loop keeps running.
"""

from __future__ import annotations
import asyncio
import time
from collections import deque
from typing import Any, Deque, Dict, List, Optional, TYPE_CHECKING

from dotswarm.engine.transition_engine import TransitionEngine
from dotswarm.models.frame import RenderFrame
from dotswarm.utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from dotswarm.hardware.surface.rendering_surface import RenderingSurface
    from dotswarm.services.event_bus import EventBus
    from dotswarm.utils.clock import MonotonicClock

log = get_logger().for_category(LogCategory.RENDER_ENGINE)

MIN_FPS = 1
MAX_FPS = 240


class FrameManager:
    """
    Centralized frame rendering manager.

    Manages:
    - Render loop timing (target FPS)
    - Surface registration
    - Pause/step/FPS control
    - Performance metrics

    Example:
        manager = FrameManager(engine, MonotonicClock(), fps=60, event_bus=bus)
        manager.add_surface(TerminalSurface())
        await manager.start()
    """

    def __init__(
        self,
        engine: TransitionEngine,
        clock: 'MonotonicClock',
        fps: int = 60,
        event_bus: Optional['EventBus'] = None
    ):
        """
        Initialize FrameManager.

        Args:
            engine: Transition engine to tick
            clock: Millisecond clock (MonotonicClock or ManualClock)
            fps: Target render frequency (1-240, default 60)
            event_bus: Where engine notifications are republished (optional)
        """
        self.engine = engine
        self.clock = clock
        self.event_bus = event_bus
        self.fps = max(MIN_FPS, min(fps, MAX_FPS))

        self.surfaces: List['RenderingSurface'] = []

        # Runtime state
        self.running = False
        self.paused = False
        self.step_requested = False
        self.render_task: Optional[asyncio.Task] = None

        # Timing & performance metrics
        self.frame_times: Deque[float] = deque(maxlen=300)  # Last 5 seconds @ 60 FPS
        self.frames_rendered = 0
        self.blank_frames = 0
        self.render_errors = 0
        self.last_frame: Optional[RenderFrame] = None

        log.info("FrameManager initialized", fps=self.fps)

    # === Surface Registration ===

    def add_surface(self, surface: 'RenderingSurface') -> None:
        if surface in self.surfaces:
            log.warn("Surface already registered, skipping")
            return
        self.surfaces.append(surface)
        log.info(f"Added surface: {type(surface).__name__} (total {len(self.surfaces)})")

    def remove_surface(self, surface: 'RenderingSurface') -> None:
        if surface in self.surfaces:
            self.surfaces.remove(surface)
            log.debug(f"Removed surface: {type(surface).__name__}")

    # === Control API ===

    def pause(self) -> None: self.paused = True

    def resume(self) -> None: self.paused = False

    def step_frame(self) -> None: self.step_requested = True

    def set_fps(self, fps: int) -> None:
        """Change FPS at runtime."""
        self.fps = max(MIN_FPS, min(fps, MAX_FPS))
        log.info(f"FrameManager FPS set to {self.fps}")

    # === Lifecycle ===

    async def start(self) -> None:
        """Start the render loop."""
        if self.running:
            log.warn("FrameManager already running")
            return

        self.running = True
        self.render_task = asyncio.create_task(self._render_loop())
        log.info(f"FrameManager render loop started @ {self.fps} FPS")

    async def stop(self) -> None:
        """Stop the render loop."""
        if not self.running:
            return
        self.running = False
        if self.render_task:
            self.render_task.cancel()
            try:
                await self.render_task
            except asyncio.CancelledError:
                pass
            self.render_task = None

        log.info(
            "FrameManager stopped",
            frames_rendered=self.frames_rendered,
            render_errors=self.render_errors,
        )

    async def shutdown(self) -> None:
        await self.stop()
        self.surfaces.clear()

    # === Metrics ===

    def get_actual_fps(self) -> float:
        """Get measured FPS over recent frames."""
        if len(self.frame_times) < 2:
            return 0.0
        duration = self.frame_times[-1] - self.frame_times[0]
        if duration <= 0:
            return 0.0
        return (len(self.frame_times) - 1) / duration

    def get_metrics(self) -> Dict[str, Any]:
        return {
            "fps_target": self.fps,
            "fps_actual": self.get_actual_fps(),
            "frames_rendered": self.frames_rendered,
            "blank_frames": self.blank_frames,
            "render_errors": self.render_errors,
            "surfaces": len(self.surfaces),
            "paused": self.paused,
        }

    # === Core Render Loop ===

    async def render_once(self) -> RenderFrame:
        """
        Tick the engine once, draw the result and publish notifications
        """
        frame = self.engine.tick(self.clock.now())

        for surface in self.surfaces:
            self._render_to(surface, frame)

        self.last_frame = frame
        self.frames_rendered += 1
        if frame.is_blank:
            self.blank_frames += 1
        self.frame_times.append(time.perf_counter())

        notifications = self.engine.drain_notifications()
        if self.event_bus is not None:
            for event in notifications:
                await self.event_bus.publish(event)

        return frame

    async def _render_loop(self) -> None:
        """Main render loop @ target FPS."""
        log.info(f"Render loop @ {self.fps} FPS (delay={1000 / self.fps:.2f}ms)")

        while self.running:
            if self.paused and not self.step_requested:
                await asyncio.sleep(0.01)
                continue

            started = time.perf_counter()
            try:
                await self.render_once()
            except Exception as e:
                self.render_errors += 1
                log.error(f"Render error: {e}", exc_info=True)

            self.step_requested = False

            # Frame rate control (fps may change at runtime)
            spent = time.perf_counter() - started
            await asyncio.sleep(max(0.0, 1.0 / self.fps - spent))

    @staticmethod
    def _render_to(surface: 'RenderingSurface', frame: RenderFrame) -> None:
        width, height = frame.canvas_size
        surface.begin_frame(width, height)
        if frame.background is not None:
            surface.background(frame.background.gray, frame.background.alpha)
        for dot in frame.dots:
            surface.fill_color(*dot.color)
            surface.draw_circle(dot.x, dot.y, dot.diameter)
        surface.end_frame()

    def __repr__(self) -> str:
        return (
            f"FrameManager(fps_target={self.fps}, fps_actual={self.get_actual_fps():.1f}, "
            f"rendered={self.frames_rendered}, surfaces={len(self.surfaces)})"
        )
