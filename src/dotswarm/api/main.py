"""
FastAPI Application Factory

Assembles routes, CORS and exception handlers. Used by main_asyncio.py and
by the tests (which install their own ServiceContainer).

FastAPI serves OpenAPI docs at /docs and ReDoc at /redoc.
"""

from typing import List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dotswarm import __version__
from dotswarm.api.middleware.error_handler import register_exception_handlers
from dotswarm.api.routes import engine, system
from dotswarm.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.API)


def create_app(
    title: str = "dotswarm",
    description: str = "REST API for the dot-grid transition engine",
    version: str = __version__,
    docs_enabled: bool = True,
    cors_origins: Optional[List[str]] = None
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        title: API title (shown in docs)
        description: API description
        version: API version
        docs_enabled: Enable /docs and /redoc
        cors_origins: CORS allowed origins (default: local dev servers)
    """
    app = FastAPI(
        title=title,
        description=description,
        version=version,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None
    )

    log.info(f"Creating FastAPI app: {title} v{version}")

    if cors_origins is None:
        cors_origins = [
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(engine.router, prefix="/api/v1")
    app.include_router(system.router, prefix="/api/v1")
    log.debug("Routes registered: engine (/api/v1/engine), system (/api/v1/system)")

    @app.get(
        "/api/health",
        tags=["System"],
        summary="Health check",
        description="Check if API is running and responding"
    )
    async def health_check():
        return {
            "status": "healthy",
            "service": "dotswarm-api",
            "version": version
        }

    @app.get("/", include_in_schema=False)
    async def root():
        return JSONResponse(
            {
                "message": "dotswarm API",
                "docs": "/docs",
                "health": "/api/health"
            }
        )

    return app
