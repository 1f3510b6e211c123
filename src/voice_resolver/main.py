"""
FastAPI application entry point.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from voice_resolver.config import get_settings
from voice_resolver.shared.database import get_database_manager
from voice_resolver.shared.exceptions import VoiceResolutionError
from voice_resolver.shared.logging import get_logger, setup_logging
from voice_resolver.shared.middleware import CorrelationIdMiddleware
from voice_resolver.voices.router import router as voices_router
from voice_resolver.voices.router import voice_resolution_error_handler

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    setup_logging()
    settings = get_settings()
    db_manager = get_database_manager()

    logger.info("Application starting", extra={"env": settings.app_env})

    if settings.db_ping_on_startup:
        try:
            await db_manager.ping()
        except Exception:
            logger.exception(
                "Failed to ping database",
                extra={"database": settings.database_target},
            )
            await db_manager.close()
            raise
    logger.info("Database connected", extra={"database": settings.database_target})

    yield

    logger.info("Shutting down application")
    await db_manager.close()
    logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Voice Resolver API",
        description="Random active voice and recordings per campaign model",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    app.add_exception_handler(VoiceResolutionError, voice_resolution_error_handler)

    # Last resort: never leak tracebacks to callers
    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error",
            exc_info=exc,
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "internal server error"},
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(voices_router)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    @app.get("/ready")
    async def readiness_check() -> JSONResponse:
        try:
            await get_database_manager().ping()
        except Exception:
            logger.warning("Readiness check failed", exc_info=True)
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "unavailable"},
            )
        return JSONResponse(status_code=status.HTTP_200_OK, content={"status": "ready"})

    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn."""
    settings = get_settings()
    setup_logging()
    logger.info("Server starting", extra={"port": settings.port})
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
        access_log=False,
    )


if __name__ == "__main__":
    run()
