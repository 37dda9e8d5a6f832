"""Service Container - Dependency injection container for all core services"""

from dataclasses import dataclass

from dotswarm.engine.frame_manager import FrameManager
from dotswarm.engine.transition_engine import TransitionEngine
from dotswarm.managers.config_manager import ConfigManager
from dotswarm.services.event_bus import EventBus
from dotswarm.services.resolution_service import ResolutionService
from dotswarm.utils.clock import MonotonicClock


@dataclass
class ServiceContainer:
    """
    Centralized dependency injection container for core services and managers.

    Aggregates what controllers and API endpoints need, so neither has to
    reach into the application wiring.

    Usage:
        services = ServiceContainer(
            engine=engine,
            frame_manager=frame_manager,
            resolution_service=resolution_service,
            event_bus=event_bus,
            config_manager=config_manager,
            clock=clock
        )

        @router.get("/engine/status")
        async def status(services: ServiceContainer = Depends(get_service_container)):
            return services.engine.status(services.clock.now())
    """

    engine: TransitionEngine
    frame_manager: FrameManager
    resolution_service: ResolutionService
    event_bus: EventBus
    config_manager: ConfigManager
    clock: MonotonicClock
