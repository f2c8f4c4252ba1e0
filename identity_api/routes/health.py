"""
Health check routes.

``/health`` reports liveness together with a database round trip.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from identity_api.config import settings
from identity_api.config.settings import get_environment
from identity_api.database.config import get_session_factory

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(
    tags=["health"],
)


async def check_database() -> Dict[str, Any]:
    """
    Run ``SELECT 1`` against the configured database.

    Returns:
        Dictionary with the check status and, on failure, the error
    """
    try:
        async with get_session_factory()() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, RuntimeError) as e:
        logger.error(
            f"Database health check failed: {e}",
            extra={"event_type": "health_check_failed", "dependency": "database"}
        )
        return {"status": "unhealthy", "error": str(e)}
    return {"status": "healthy"}


@router.get(
    "/health",
    summary="Health Check",
    description="Returns 200 when the application and its database respond, 503 otherwise.",
    responses={503: {"description": "Database unavailable"}},
)
async def health_check() -> JSONResponse:
    database = await check_database()
    healthy = database["status"] == "healthy"

    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "version": settings.get("version", "0.1.0"),
            "environment": get_environment(),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "checks": {"database": database},
        },
    )
