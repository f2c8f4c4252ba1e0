"""
Permission catalogue routes for API v1.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from identity_api.auth.rbac import require_permission
from identity_api.dependencies import Container
from identity_api.exceptions import unwrap_or_raise
from identity_api.schemas import (
    CreatePermissionRequest,
    PaginatedResponse,
    PermissionResponse,
    UpdatePermissionRequest,
)


# Create router
router = APIRouter(
    prefix="/permissions",
    tags=["permissions"],
)


@router.get(
    "",
    response_model=PaginatedResponse[PermissionResponse],
    summary="List Permissions",
    dependencies=[Depends(require_permission("permissions", "read"))],
)
async def list_permissions(
    container: Container,
    limit: Optional[int] = Query(None, description="Page size, 1 to 100 (default 20)"),
    offset: Optional[int] = Query(None, description="Number of permissions to skip (default 0)"),
) -> PaginatedResponse[PermissionResponse]:
    return unwrap_or_raise(await container.list_permissions.execute(limit, offset))


@router.get(
    "/{permission_id}",
    response_model=PermissionResponse,
    summary="Get Permission",
    dependencies=[Depends(require_permission("permissions", "read"))],
)
async def get_permission(permission_id: str, container: Container) -> PermissionResponse:
    return unwrap_or_raise(await container.get_permission.execute(permission_id))


# Catalogue changes are reserved for holders of the matching grant (or *:*)
@router.post(
    "",
    response_model=PermissionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Permission",
    dependencies=[Depends(require_permission("permissions", "create"))],
)
async def create_permission(data: CreatePermissionRequest, container: Container) -> PermissionResponse:
    return unwrap_or_raise(await container.create_permission.execute(data))


@router.patch(
    "/{permission_id}",
    response_model=PermissionResponse,
    summary="Update Permission",
    description="Only the description of a permission can change.",
    dependencies=[Depends(require_permission("permissions", "update"))],
)
async def update_permission(
    permission_id: str,
    data: UpdatePermissionRequest,
    container: Container,
) -> PermissionResponse:
    return unwrap_or_raise(await container.update_permission.execute(permission_id, data))


@router.delete(
    "/{permission_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Permission",
    dependencies=[Depends(require_permission("permissions", "delete"))],
)
async def delete_permission(permission_id: str, container: Container) -> None:
    unwrap_or_raise(await container.delete_permission.execute(permission_id))
