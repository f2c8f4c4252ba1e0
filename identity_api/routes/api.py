"""
Main API router.

This module mounts the versioned routers under ``/api``.
"""

from fastapi import APIRouter

from identity_api.config import settings
from identity_api.routes import v1


# Create main API router
router = APIRouter(
    prefix=settings.get("api_prefix", "/api"),
)

# Include API version routers
router.include_router(
    v1.router,
    prefix="/v1",
)


@router.get(
    "",
    summary="API Root",
    description="Basic information about the API and its versions.",
)
async def api_root():
    api_prefix = settings.get("api_prefix", "/api")

    return {
        "message": settings.get("app_name", "identity-api"),
        "version": settings.get("version", "0.1.0"),
        "apiVersions": ["v1"],
        "docsUrl": "/docs",
        "healthUrl": "/health",
        "authentication": {
            "methods": ["JWT"],
            "loginUrl": f"{api_prefix}/v1/auth/login",
        },
    }
