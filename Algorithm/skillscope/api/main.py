"""
SkillScope API - Main FastAPI Application.

Serves the arena's skill analytics to the presentation layer:
- Skill radar vectors with per-environment contributions
- Hour-aligned, forward-filled rating history
- Filtered, paginated leaderboard pages
"""

import os
import logging
from datetime import datetime, timezone
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from skillscope import __version__
from skillscope.api.dependencies import cleanup_async, data_source_configured
from skillscope.api.middleware import RequestLoggingMiddleware
from skillscope.api.routes import (
    skills_router,
    history_router,
    leaderboard_router,
)
from skillscope.api.schemas import HealthResponse
from skillscope.config.settings import get_settings
from skillscope.errors import ConfigurationError, DataSourceError
from skillscope.utils.logger_config import setup_logging

logger = logging.getLogger(__name__)


# API version
API_VERSION = __version__


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging()
    logger.info("Starting SkillScope API...")
    if not data_source_configured():
        logger.warning("Data source not configured; data endpoints will return 503")

    yield

    logger.info("Shutting down SkillScope API...")
    await cleanup_async()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title="SkillScope API",
        description="Skill aggregation and rating history for the game arena leaderboard.",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(skills_router)
    app.include_router(history_router)
    app.include_router(leaderboard_router)

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["health"]
    )
    async def health_check():
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            version=API_VERSION,
            data_source_configured=data_source_configured(),
            timestamp=datetime.now(timezone.utc).isoformat()
        )

    @app.exception_handler(DataSourceError)
    async def data_source_exception_handler(request: Request, exc: DataSourceError):
        """Upstream failure: no data, offer a retry."""
        logger.error(f"Data source error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=502,
            content={
                "error": "Data source unavailable",
                "detail": str(exc),
                "code": "DATA_SOURCE_ERROR",
                "retryable": exc.retryable,
            }
        )

    @app.exception_handler(ConfigurationError)
    async def configuration_exception_handler(request: Request, exc: ConfigurationError):
        logger.error(f"Configuration error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=503,
            content={
                "error": "Service not configured",
                "detail": str(exc),
                "code": "CONFIGURATION_ERROR",
                "retryable": False,
            }
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc) if os.getenv("DEBUG") else None,
                "code": "INTERNAL_ERROR",
                "retryable": False,
            }
        )

    return app


# Create the app instance
app = create_app()


# Entry point for running with uvicorn
if __name__ == "__main__":
    import uvicorn

    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))
    reload = os.getenv("DEBUG", "false").lower() == "true"

    uvicorn.run(
        "skillscope.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level="info"
    )
