"""
main_asyncio.py — Application entry point for dotswarm
------------------------------------------------------

Responsible for:
- loading configuration
- wiring dependencies (engine, capture, render loop, controllers, API)
- starting the async main loop
- graceful shutdown on Ctrl+C, SIGTERM or critical task failure
"""

import sys

# Box-drawing log output needs UTF-8
if hasattr(sys.stdout, 'reconfigure') and sys.stdout.encoding != 'UTF-8':
    sys.stdout.reconfigure(encoding='utf-8')  # type: ignore

import asyncio
import random
from typing import Optional

import uvicorn
from fastapi import FastAPI

from dotswarm.api.dependencies import set_service_container
from dotswarm.api.main import create_app
from dotswarm.components.keyboard import KeyboardInputAdapter
from dotswarm.controllers import TransitionController
from dotswarm.engine import FrameManager, TransitionEngine
from dotswarm.hardware.capture import SyntheticCamera
from dotswarm.hardware.surface import TerminalSurface
from dotswarm.lifecycle import ShutdownCoordinator
from dotswarm.lifecycle.handlers import (
    APIServerShutdownHandler, FrameManagerShutdownHandler, TaskCancellationHandler,
)
from dotswarm.lifecycle.task_registry import create_tracked_task, TaskCategory
from dotswarm.managers import ConfigManager
from dotswarm.services.event_bus import EventBus
from dotswarm.services.middleware import drop_empty_captures, log_middleware
from dotswarm.services.resolution_service import ResolutionService
from dotswarm.services.service_container import ServiceContainer
from dotswarm.utils.clock import MonotonicClock
from dotswarm.utils.logger import get_logger, configure_logger, LogCategory

log = get_logger().for_category(LogCategory.SYSTEM)


# ---------------------------------------------------------------------------
# API SERVER RUNNER
# ---------------------------------------------------------------------------

async def run_api_server(app: FastAPI, host: str = "0.0.0.0", port: int = 8000) -> None:
    """
    Run FastAPI/Uvicorn server in the asyncio event loop.

    Uvicorn's own signal handlers are disabled; the shutdown coordinator owns
    SIGINT/SIGTERM. Runs until cancelled.
    """
    config = uvicorn.Config(
        app=app,
        host=host,
        port=port,
        loop="asyncio",
        log_level="warning",
        access_log=False,
    )

    server = uvicorn.Server(config)
    server.install_signal_handlers = lambda: None  # type: ignore

    try:
        log.info(f"Starting API server on http://{host}:{port}")
        await server.serve()
    except asyncio.CancelledError:
        log.debug("API server cancelled (expected during shutdown)")
        raise


# ---------------------------------------------------------------------------
# Application Entry
# ---------------------------------------------------------------------------

async def main(config_path: Optional[str] = None) -> None:
    """Main async entry point (dependency injection and event loop startup)."""

    # ========================================================================
    # 1. CONFIGURATION + INFRASTRUCTURE
    # ========================================================================

    config_manager = ConfigManager(config_path)
    config = config_manager.load()
    configure_logger(config.logging.level, config.logging.colors)

    log.info("Starting dotswarm...")

    event_bus = EventBus()
    event_bus.add_middleware(drop_empty_captures)
    event_bus.add_middleware(log_middleware)

    clock = MonotonicClock()
    rng = random.Random(config.capture.seed)

    # ========================================================================
    # 2. CAPTURE + ENGINE
    # ========================================================================

    camera = SyntheticCamera(event_bus, fps=config.capture.fps, seed=config.capture.seed)
    engine = TransitionEngine.from_config(config, rng=rng, capture_device=camera)

    resolution_service = ResolutionService(
        event_bus, min_dots=config.grid.min_dots, initial=config.grid.resolution
    )
    TransitionController(engine, event_bus, resolution_service)

    # ========================================================================
    # 3. FRAME MANAGER
    # ========================================================================

    frame_manager = FrameManager(engine, clock, fps=config.render.fps, event_bus=event_bus)
    if config.render.terminal_preview:
        frame_manager.add_surface(TerminalSurface(columns=config.render.terminal_columns))
    await frame_manager.start()

    # ========================================================================
    # 4. SERVICE CONTAINER
    # ========================================================================

    services = ServiceContainer(
        engine=engine,
        frame_manager=frame_manager,
        resolution_service=resolution_service,
        event_bus=event_bus,
        config_manager=config_manager,
        clock=clock,
    )
    set_service_container(services)

    # ========================================================================
    # 5. BACKGROUND TASKS (capture, keyboard, API)
    # ========================================================================

    capture_task = create_tracked_task(
        camera.run(),
        category=TaskCategory.CAPTURE,
        description="SyntheticCamera capture loop"
    )

    keyboard_task = create_tracked_task(
        KeyboardInputAdapter(event_bus).run(),
        category=TaskCategory.INPUT,
        description="KeyboardInputAdapter"
    )

    api_task = None
    if config.api.enabled:
        api_task = create_tracked_task(
            run_api_server(create_app(), config.api.host, config.api.port),
            category=TaskCategory.API,
            description="FastAPI/Uvicorn Server"
        )

    # ========================================================================
    # 6. SHUTDOWN COORDINATOR
    # ========================================================================

    coordinator = ShutdownCoordinator()
    coordinator.register(FrameManagerShutdownHandler(frame_manager))
    coordinator.register(APIServerShutdownHandler(api_task))
    coordinator.register(TaskCancellationHandler([capture_task, keyboard_task]))
    coordinator.setup_signal_handlers(asyncio.get_running_loop())

    log.info("Application initialized. Press 1-9 to change resolution, Ctrl+C to exit.")

    await coordinator.wait_for_shutdown()
    await coordinator.shutdown_all()
    set_service_container(None)
    log.info("dotswarm shut down cleanly.")


def run() -> None:
    """Console script entry: `dotswarm [config.yaml]`"""
    config_path = sys.argv[1] if len(sys.argv) > 1 else None
    try:
        asyncio.run(main(config_path))
    except KeyboardInterrupt:
        log.info("Keyboard interrupt received")


if __name__ == "__main__":
    run()
