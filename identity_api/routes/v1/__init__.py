"""
API version 1 router.
"""

from fastapi import APIRouter

from . import auth, permissions, roles, users

# Create API v1 router
router = APIRouter()

# Include sub-routers
router.include_router(auth.router)
router.include_router(users.router)
router.include_router(roles.router)
router.include_router(permissions.router)

__all__ = ["router"]
