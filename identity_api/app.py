"""
FastAPI application factory and configuration.

This module provides the application factory used by ``main`` and the
tests. Security services are attached to ``app.state`` at creation time;
the database engine is created in the lifespan.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from identity_api.config import settings, is_development, is_production
from identity_api.config.settings import get_environment


logger = logging.getLogger(__name__)


def get_app_metadata() -> dict:
    """
    Get application metadata.

    Returns:
        Dictionary with application metadata
    """
    return {
        "title": settings.get("app_name", "identity-api"),
        "description": "Users, roles and permissions with role-based access control",
        "version": settings.get("version", "0.1.0"),
    }


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Configures logging and opens the database engine on startup, and
    disposes of it on shutdown.

    Args:
        app: FastAPI application instance

    Yields:
        None during application runtime
    """
    from identity_api.database.config import close_database, init_database
    from identity_api.utils.logging import configure_structlog

    configure_structlog()
    logger.info(
        "Starting up application",
        extra={"event_type": "application_startup", "environment": get_environment()}
    )

    await init_database()

    try:
        yield
    finally:
        logger.info("Shutting down application", extra={"event_type": "application_shutdown"})
        await close_database()


def create_app(environment: Optional[str] = None) -> FastAPI:
    """
    Application factory function.

    Args:
        environment: Override environment (for testing)

    Returns:
        Configured FastAPI application instance
    """
    # Override environment if specified (useful for testing)
    if environment:
        os.environ["API_ENV"] = environment

    app_config = {
        **get_app_metadata(),
        "lifespan": lifespan,
        "debug": is_development(),
    }

    if is_production():
        app_config.update({
            "docs_url": None,
            "redoc_url": None,
            "openapi_url": None,
        })

    app = FastAPI(**app_config)

    from identity_api.dependencies import build_security_services
    app.state.password_hash_service, app.state.token_service = build_security_services()

    _add_middleware(app)
    _include_routers(app)
    _add_exception_handlers(app)

    return app


def _add_middleware(app: FastAPI) -> None:
    """
    Add custom middleware to the application.

    Args:
        app: FastAPI application instance
    """
    from identity_api.middleware import CorrelationIDMiddleware, RequestLoggingMiddleware

    # Added last so it runs first and the request logger sees the id
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationIDMiddleware)


def _include_routers(app: FastAPI) -> None:
    """
    Include API routers in the application.

    Args:
        app: FastAPI application instance
    """
    from identity_api.routes.api import router as api_router
    from identity_api.routes.health import router as health_router

    # Include health check routes (no prefix)
    app.include_router(health_router)

    # Include main API routes
    app.include_router(api_router)


def _add_exception_handlers(app: FastAPI) -> None:
    """
    Add custom exception handlers to the application.

    Args:
        app: FastAPI application instance
    """
    from identity_api.exceptions import setup_exception_handlers
    setup_exception_handlers(app)


def get_application() -> FastAPI:
    """
    Get the configured FastAPI application instance.

    Returns:
        Configured FastAPI application instance
    """
    return create_app()
