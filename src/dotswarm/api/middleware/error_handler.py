"""
Error handling middleware for API

FastAPI calls the matching handler when an exception escapes a route and
returns its JSON response:
- Validation errors (bad request format) -> 422 ValidationErrorResponse
- Domain errors (bad resolution, bad canvas size) -> ErrorResponse with the error's status
- Anything else -> 500 ErrorResponse
"""

import json
import uuid
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from dotswarm.api.schemas.error import ErrorResponse, ErrorDetail, ValidationErrorResponse
from dotswarm.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)


class DomainError(Exception):
    """Base class for domain-specific errors"""
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
        status_code: int = 400
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        super().__init__(message)


class InvalidResolutionError(DomainError):
    """dot_fidelity outside the supported range"""
    def __init__(self, dot_fidelity: int, message: str, valid_range=(1, 9)):
        super().__init__(
            code="INVALID_RESOLUTION",
            message=message,
            details={"dot_fidelity": dot_fidelity, "valid_range": list(valid_range)},
            status_code=422
        )


class InvalidCanvasSizeError(DomainError):
    """Canvas dimensions not positive or too large"""
    def __init__(self, width: float, height: float, max_size: float):
        super().__init__(
            code="INVALID_CANVAS_SIZE",
            message=f"Canvas must be within (0, {max_size:g}] on both axes (got {width:g}x{height:g})",
            details={"width": width, "height": height, "max_size": max_size},
            status_code=422
        )


class FrameNotAvailableError(DomainError):
    """Nothing rendered yet"""
    def __init__(self):
        super().__init__(
            code="FRAME_NOT_AVAILABLE",
            message="No frame has been rendered yet",
            status_code=404
        )


def _json(model) -> dict:
    return json.loads(model.model_dump_json())


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with FastAPI app"""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        request_id = str(uuid.uuid4())
        errors = exc.errors()

        log.warn(f"Validation error: {len(errors)} errors", request_id=request_id, path=request.url.path)

        validation_errors = []
        for error in errors:
            field = ".".join(str(x) for x in error["loc"][1:])  # Skip "body"
            validation_errors.append({
                "field": field,
                "message": error["msg"],
                "type": error["type"]
            })

        response = ValidationErrorResponse(
            error=ErrorDetail(
                code="VALIDATION_ERROR",
                message="Request validation failed",
                details={"error_count": len(errors)},
            ),
            validation_errors=validation_errors,
            request_id=request_id
        )
        return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=_json(response))

    @app.exception_handler(DomainError)
    async def domain_exception_handler(request: Request, exc: DomainError):
        request_id = str(uuid.uuid4())

        log.warn(f"Domain error: {exc.code} - {exc.message}", request_id=request_id)

        response = ErrorResponse(
            error=ErrorDetail(code=exc.code, message=exc.message, details=exc.details),
            request_id=request_id
        )
        return JSONResponse(status_code=exc.status_code, content=_json(response))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        request_id = str(uuid.uuid4())

        log.error(
            f"Unexpected error: {type(exc).__name__}: {exc}",
            request_id=request_id,
            path=request.url.path
        )

        response = ErrorResponse(
            error=ErrorDetail(
                code="INTERNAL_SERVER_ERROR",
                message="An unexpected error occurred. Please try again.",
                details={"request_id": request_id},
            ),
            request_id=request_id
        )
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=_json(response))
