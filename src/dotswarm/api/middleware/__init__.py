from .error_handler import (
    register_exception_handlers,
    DomainError,
    InvalidResolutionError,
    InvalidCanvasSizeError,
    FrameNotAvailableError,
)

__all__ = [
    "register_exception_handlers",
    "DomainError",
    "InvalidResolutionError",
    "InvalidCanvasSizeError",
    "FrameNotAvailableError",
]
