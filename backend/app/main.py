"""
FastAPI Application Entry Point.

This is the main application file for the Fleet Back Office backend.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError

from backend.app.api.v1.router import router as api_v1_router
from backend.app.core.config import Settings, get_settings
from backend.app.core.exceptions import (
    AppException,
    app_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    generic_exception_handler
)
from backend.app.core.observability import ObservabilityMiddleware, configure_logging
from backend.app.core.redis_client import create_redis, ping_redis
from backend.app.db.session import Database


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None, redis=None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Settings to use, defaults to the environment
        database: Pre-built Database (tests pass an in-memory one)
        redis: Pre-built Redis client (tests pass a fake)
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan context manager for application startup/shutdown.

        1. Creates the database engine and tables on startup.
        2. Connects Redis.
        3. Disposes both on shutdown.
        """
        app.state.db = database or Database(settings)
        app.state.redis = redis or create_redis(settings)
        await app.state.db.create_all()
        yield
        await app.state.db.dispose()
        if redis is None:
            await app.state.redis.aclose()

    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version=settings.api_version,
        debug=settings.debug,
        description="Back office for trips, drivers, vehicles and reference data",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(ObservabilityMiddleware)

    # Register global exception handlers
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    @app.get("/health", tags=["Health"])
    async def health_check():
        """
        Health check endpoint.

        Returns:
            dict: Status and application information
        """
        redis_ok = await ping_redis(app.state.redis)
        return {
            "status": "healthy" if redis_ok else "degraded",
            "app_name": settings.app_name,
            "version": settings.api_version,
            "redis": redis_ok,
        }

    @app.get("/", tags=["Root"])
    async def root():
        """
        Root endpoint.

        Returns:
            dict: Welcome message and API documentation links
        """
        return {
            "message": f"Welcome to the {settings.app_name} API",
            "docs": "/docs",
            "health": "/health",
        }

    # Include API v1 router
    app.include_router(api_v1_router, prefix=f"/{settings.api_version}")

    return app


app = create_app()
