from .api_server_shutdown_handler import APIServerShutdownHandler
from .frame_manager_shutdown_handler import FrameManagerShutdownHandler
from .task_cancellation_handler import TaskCancellationHandler

__all__ = [
    "APIServerShutdownHandler",
    "FrameManagerShutdownHandler",
    "TaskCancellationHandler",
]
