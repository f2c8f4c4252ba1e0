"""
User management routes for API v1.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from identity_api.auth.rbac import require_permission
from identity_api.dependencies import Container
from identity_api.exceptions import unwrap_or_raise
from identity_api.schemas import (
    CreateUserRequest,
    PaginatedResponse,
    PermissionCheckResponse,
    PermissionResponse,
    UpdateUserRequest,
    UserResponse,
)


# Create router
router = APIRouter(
    prefix="/users",
    tags=["users"],
)


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
    dependencies=[Depends(require_permission("users", "create"))],
)
async def create_user(data: CreateUserRequest, container: Container) -> UserResponse:
    return unwrap_or_raise(await container.create_user.execute(data))


@router.get(
    "",
    response_model=PaginatedResponse[UserResponse],
    summary="List Users",
    description="Get a page of users ordered by creation time.",
    dependencies=[Depends(require_permission("users", "read"))],
)
async def list_users(
    container: Container,
    limit: Optional[int] = Query(None, description="Page size, 1 to 100 (default 20)"),
    offset: Optional[int] = Query(None, description="Number of users to skip (default 0)"),
) -> PaginatedResponse[UserResponse]:
    return unwrap_or_raise(await container.list_users.execute(limit, offset))


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    summary="Get User",
    dependencies=[Depends(require_permission("users", "read"))],
)
async def get_user(user_id: str, container: Container) -> UserResponse:
    return unwrap_or_raise(await container.get_user.execute(user_id))


@router.patch(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update User",
    description="Update only the supplied fields.",
    dependencies=[Depends(require_permission("users", "update"))],
)
async def update_user(user_id: str, data: UpdateUserRequest, container: Container) -> UserResponse:
    return unwrap_or_raise(await container.update_user.execute(user_id, data))


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete User",
    dependencies=[Depends(require_permission("users", "delete"))],
)
async def delete_user(user_id: str, container: Container) -> None:
    unwrap_or_raise(await container.delete_user.execute(user_id))


@router.get(
    "/{user_id}/permissions",
    response_model=List[PermissionResponse],
    summary="User Permissions",
    dependencies=[Depends(require_permission("users", "read"))],
)
async def get_user_permissions(user_id: str, container: Container) -> List[PermissionResponse]:
    return unwrap_or_raise(await container.get_user_permissions.execute(user_id))


@router.get(
    "/{user_id}/permissions/check",
    response_model=PermissionCheckResponse,
    summary="Check User Permission",
    description="Evaluate whether the user may perform `action` on `resource`.",
    dependencies=[Depends(require_permission("users", "read"))],
)
async def check_user_permission(
    user_id: str,
    container: Container,
    resource: str = Query(..., min_length=1),
    action: str = Query(..., min_length=1),
) -> PermissionCheckResponse:
    return unwrap_or_raise(await container.check_permission.execute(user_id, resource, action))
