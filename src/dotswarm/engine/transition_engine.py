"""
TransitionEngine — owns snapshots, the active TransitionSet and the
animation clock anchor; turns each tick into a RenderFrame.

State machine (derived, see EngineState):

    IDLE ──first frame──▶ AWAITING_SECOND_FRAME ──initial_delay──▶ TRANSITIONING
                                                                      │  ▲
                                                     all pixels done  ▼  │ capture
                                                                    SETTLED

    any state ──resolution change──▶ IDLE (in-flight transition discarded)

Inputs (capture frames, resolution changes, canvas resizes) are queued with
deliver() and applied atomically at the start of the next tick, never in
the middle of rendering one. Only the newest valid capture is kept pending;
taking a snapshot consumes it, and a missing capture just means "retry on a
later tick".
"""

from __future__ import annotations
import random
from collections import deque
from dataclasses import replace
from typing import Any, Callable, Deque, Dict, List, Optional, TYPE_CHECKING

from dotswarm.engine.correspondence import CorrespondenceMatcher
from dotswarm.engine.interpolator import Interpolator
from dotswarm.engine.scheduler import TransitionScheduler
from dotswarm.models.config import DotSwarmConfig
from dotswarm.models.enums import EngineState
from dotswarm.models.events import (
    Event, EventType, CaptureCompletedEvent,
    TransitionStartedEvent, TransitionCompletedEvent,
)
from dotswarm.models.frame import BackgroundFill, DotDraw, RenderFrame
from dotswarm.models.geometry import CanvasGeometry, GridResolution
from dotswarm.models.snapshot import Snapshot
from dotswarm.models.transition import TransitionSet, TransitionTiming, ease_in_out_cubic, get_easing
from dotswarm.utils.colors import clamp_channel
from dotswarm.utils.logger import get_logger, LogCategory

if TYPE_CHECKING:
    from dotswarm.hardware.capture.capture_device import CaptureDevice

log = get_logger().for_category(LogCategory.TRANSITION)


class TransitionEngine:
    """
    Tick-driven transition state machine

    Single-threaded: every mutation happens inside tick() or the methods it
    calls, so no locking is needed.

    Example:
        engine = TransitionEngine(GridResolution(60, 45), TransitionTiming(),
                                  geometry=CanvasGeometry.for_window(960, GridResolution(60, 45)))
        engine.deliver(CaptureCompletedEvent(buffer, 60, 45))
        frame = engine.tick(clock.now())
    """

    def __init__(
        self,
        grid: GridResolution,
        timing: TransitionTiming,
        *,
        geometry: Optional[CanvasGeometry] = None,
        tolerance: float = 30.0,
        initial_delay: float = 200.0,
        capture_interval: Optional[float] = None,
        background: Optional[BackgroundFill] = BackgroundFill(gray=0, alpha=8),
        draw_underlay: bool = True,
        ease: Callable[[float], float] = ease_in_out_cubic,
        rng: Optional[random.Random] = None,
        capture_device: Optional['CaptureDevice'] = None,
    ):
        self.grid = grid
        self.timing = timing
        self.geometry = geometry or CanvasGeometry.for_window(grid.width * 16, grid)
        self.initial_delay = initial_delay
        self.capture_interval = capture_interval if capture_interval is not None else timing.total_duration
        self.background = background
        self.draw_underlay = draw_underlay
        self.capture_device = capture_device

        rng = rng or random.Random()
        self.matcher = CorrespondenceMatcher(tolerance=tolerance, rng=rng)
        self.scheduler = TransitionScheduler(timing, rng=rng)
        self.interpolator = Interpolator(ease)

        # Snapshots
        self.prev: Optional[Snapshot] = None
        self.next_snapshot: Optional[Snapshot] = None
        self._latest_capture: Optional[Snapshot] = None

        # Active transition + clock anchors
        self.transition_set: Optional[TransitionSet] = None
        self.transition_start_time = 0.0
        self.last_capture_time = 0.0
        self.time_of_first_frame: Optional[float] = None
        self.bootstrap_complete = False

        self.transitions_completed = 0
        self._redraw_prev = False
        self._pending: Deque[Event] = deque()
        self._notifications: List[Event] = []

        if self.capture_device is not None:
            self.capture_device.configure(grid.width, grid.height)

        log.info(
            "TransitionEngine initialized",
            grid=str(grid),
            timing=repr(timing),
            tolerance=tolerance
        )

    @classmethod
    def from_config(
        cls,
        config: DotSwarmConfig,
        *,
        rng: Optional[random.Random] = None,
        capture_device: Optional['CaptureDevice'] = None
    ) -> 'TransitionEngine':
        grid = config.grid.resolution
        render = config.render
        return cls(
            grid,
            config.timing.to_transition_timing(),
            geometry=CanvasGeometry.for_window(render.window_width, grid, render.diameter_adj, render.mirror),
            tolerance=config.matching.tolerance,
            initial_delay=config.timing.initial_delay_ms,
            capture_interval=config.timing.capture_interval_ms,
            background=BackgroundFill(gray=render.background_color, alpha=render.background_fader),
            draw_underlay=render.draw_underlay,
            ease=get_easing(render.easing),
            rng=rng,
            capture_device=capture_device,
        )

    # ============================================================
    # Inputs
    # ============================================================

    def deliver(self, event: Event) -> None:
        """Queue an input event; it takes effect at the next tick boundary"""
        self._pending.append(event)

    def drain_notifications(self) -> List[Event]:
        """TransitionStarted / TransitionCompleted events produced since last drain"""
        notifications, self._notifications = self._notifications, []
        return notifications

    def _apply_pending(self, now: float) -> None:
        while self._pending:
            event = self._pending.popleft()
            if event.type == EventType.CAPTURE_COMPLETED:
                self._accept_capture(event, now)
            elif event.type == EventType.RESOLUTION_CHANGE:
                self.reset(GridResolution(event.width, event.height), now)
            elif event.type == EventType.CANVAS_RESIZE:
                self.resize(event.width, event.height, now)
            else:
                log.debug(f"Ignoring event {event.type.name}")

    def _accept_capture(self, event: CaptureCompletedEvent, now: float) -> None:
        if (event.width, event.height) != (self.grid.width, self.grid.height):
            log.debug(
                "Dropping capture for stale resolution",
                frame=f"{event.width}x{event.height}",
                grid=str(self.grid)
            )
            return
        try:
            self._latest_capture = Snapshot.from_rgba(event.buffer, event.width, event.height, captured_at=now)
        except ValueError as ex:
            log.warn("Dropping malformed capture", error=str(ex))

    # ============================================================
    # State
    # ============================================================

    @property
    def state(self) -> EngineState:
        if self.transition_set is not None:
            return EngineState.TRANSITIONING
        if self.prev is None:
            return EngineState.IDLE
        if not self.bootstrap_complete:
            return EngineState.AWAITING_SECOND_FRAME
        return EngineState.SETTLED

    def reset(self, grid: GridResolution, now: float) -> None:
        """
        Authoritative reset to a new grid resolution

        Discards snapshots, the active transition and any pending capture,
        then re-enters the capture bootstrap.
        """
        dropped = len(self.transition_set) if self.transition_set else 0

        self.grid = grid
        self.geometry = CanvasGeometry.for_window(
            self.geometry.canvas_width, grid, self.geometry.diameter_adj, self.geometry.mirror
        )

        self.prev = None
        self.next_snapshot = None
        self._latest_capture = None
        self.transition_set = None
        self.bootstrap_complete = False
        self.time_of_first_frame = None
        self.last_capture_time = now
        self.transition_start_time = 0.0
        self._redraw_prev = False

        if self.capture_device is not None:
            self.capture_device.configure(grid.width, grid.height)

        log.info(
            "Resolution reset",
            grid=str(grid),
            canvas=f"{self.geometry.canvas_width:.0f}x{self.geometry.canvas_height:.0f}",
            dropped_pixels=dropped
        )

    def resize(self, canvas_width: float, canvas_height: float, now: float) -> None:
        """
        New canvas size: recompute dot geometry only

        The grid and any in-flight transition stay valid.
        """
        if canvas_width <= 0 or canvas_height <= 0:
            log.warn("Ignoring non-positive canvas size", width=canvas_width, height=canvas_height)
            return

        self.geometry = self.geometry.with_canvas(canvas_width, canvas_height)
        log.debug("Canvas resized", width=canvas_width, height=canvas_height)

        if self.transition_set is None and self.prev is not None:
            self._redraw_prev = True

        if (self.bootstrap_complete
                and self.transition_set is None
                and now - self.last_capture_time > self.capture_interval + self.initial_delay):
            self._capture_and_prepare(now)

    # ============================================================
    # Tick
    # ============================================================

    def tick(self, now: float) -> RenderFrame:
        """
        Advance the state machine to `now` and return this tick's draw list
        """
        self._apply_pending(now)

        frame = RenderFrame(
            timestamp=now,
            canvas_size=(self.geometry.canvas_width, self.geometry.canvas_height),
            background=self.background,
        )

        if self.prev is None:
            self._capture_first(now)

        if (not self.bootstrap_complete
                and self.prev is not None
                and self.time_of_first_frame is not None
                and self.transition_set is None
                and now - self.time_of_first_frame > self.initial_delay):
            self._capture_and_prepare(now)

        if self.transition_set is None:
            if self.bootstrap_complete and now - self.last_capture_time > self.capture_interval:
                self._capture_and_prepare(now)

        if self.transition_set is None:
            if self._redraw_prev and self.prev is not None:
                self._draw_snapshot(frame, self.prev)
            self._redraw_prev = False
            return frame

        if self.draw_underlay and self.prev is not None:
            self._draw_snapshot(frame, self.prev)

        if self._draw_transition(frame, now - self.transition_start_time):
            self._complete_transition(now)

        return frame

    def _draw_snapshot(self, frame: RenderFrame, snapshot: Snapshot) -> None:
        diameter = self.geometry.diameter
        for x, y, rgb in snapshot.cells():
            cx, cy = self.geometry.cell_center(x, y)
            frame.dots.append(DotDraw(cx, cy, diameter, rgb))

    def _draw_transition(self, frame: RenderFrame, elapsed: float) -> bool:
        """Append every moving dot; True when all pixels reached progress 1"""
        diameter = self.geometry.diameter
        all_done = True

        for pixel in self.transition_set:
            dot = self.interpolator.evaluate(pixel, elapsed)
            if not dot.done:
                all_done = False

            cx, cy = self.geometry.cell_center(dot.x, dot.y)
            frame.dots.append(DotDraw(
                cx, cy, diameter,
                (clamp_channel(dot.r), clamp_channel(dot.g), clamp_channel(dot.b)),
            ))

        return all_done

    # ============================================================
    # Capture + transition construction
    # ============================================================

    def _take_snapshot(self, now: float) -> Optional[Snapshot]:
        """Consume the pending capture; each frame feeds at most one snapshot"""
        capture, self._latest_capture = self._latest_capture, None
        if capture is None:
            return None
        return replace(capture, captured_at=now)

    def _capture_first(self, now: float) -> None:
        snapshot = self._take_snapshot(now)
        if snapshot is None:
            return

        self.prev = snapshot
        self.last_capture_time = now
        self.time_of_first_frame = now
        log.info("First frame captured", grid=str(self.grid), at_ms=f"{now:.0f}")

    def _capture_and_prepare(self, now: float) -> None:
        snapshot = self._take_snapshot(now)
        if snapshot is None:
            log.debug("No capture available yet, retrying next tick")
            return

        self.next_snapshot = snapshot
        self._prepare_transition(now)
        self.last_capture_time = now

    def _prepare_transition(self, now: float) -> None:
        self.transition_set = None
        if self.prev is None or self.next_snapshot is None:
            return

        transition_set = self.matcher.match(self.prev, self.next_snapshot)
        self.scheduler.schedule(transition_set)

        self.transition_set = transition_set
        self.transition_start_time = now

        identity = transition_set.identity_count()
        self._notifications.append(TransitionStartedEvent(len(transition_set), identity, now))
        log.info(
            "Transition started",
            pixels=len(transition_set),
            identity=identity,
            latest_end_ms=f"{transition_set.max_end_time():.0f}"
        )

    def _complete_transition(self, now: float) -> None:
        pixel_count = len(self.transition_set)
        elapsed = now - self.transition_start_time

        self.transition_set = None
        self.prev = self.next_snapshot
        self.transitions_completed += 1
        self._notifications.append(TransitionCompletedEvent(pixel_count, now, elapsed))
        log.info("Transition complete", pixels=pixel_count, elapsed_ms=f"{elapsed:.0f}")

        if not self.bootstrap_complete:
            self.bootstrap_complete = True
            self.last_capture_time = now - self.initial_delay

        self._capture_and_prepare(now)

    # ============================================================
    # Introspection
    # ============================================================

    def progress(self, now: float) -> float:
        """Fraction of the active transition's latest end time elapsed (0 when idle)"""
        if self.transition_set is None:
            return 0.0
        span = self.transition_set.max_end_time()
        if span <= 0:
            return 1.0
        return max(0.0, min(1.0, (now - self.transition_start_time) / span))

    def status(self, now: float) -> Dict[str, Any]:
        return {
            "state": self.state.name,
            "grid_width": self.grid.width,
            "grid_height": self.grid.height,
            "canvas_width": self.geometry.canvas_width,
            "canvas_height": self.geometry.canvas_height,
            "active_pixels": len(self.transition_set) if self.transition_set else 0,
            "progress": self.progress(now),
            "bootstrap_complete": self.bootstrap_complete,
            "transitions_completed": self.transitions_completed,
            "capture_pending": self._latest_capture is not None,
            "last_capture_ms": self.last_capture_time,
            "transition_start_ms": self.transition_start_time,
        }
