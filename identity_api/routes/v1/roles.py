"""
Role management routes for API v1.

System roles are read-only; attempts to edit or delete them return 403.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from identity_api.auth.rbac import require_permission
from identity_api.dependencies import Container
from identity_api.exceptions import unwrap_or_raise
from identity_api.schemas import CreateRoleRequest, PaginatedResponse, RoleResponse, UpdateRoleRequest


# Create router
router = APIRouter(
    prefix="/roles",
    tags=["roles"],
)


@router.post(
    "",
    response_model=RoleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Role",
    dependencies=[Depends(require_permission("roles", "create"))],
)
async def create_role(data: CreateRoleRequest, container: Container) -> RoleResponse:
    return unwrap_or_raise(await container.create_role.execute(data))


@router.get(
    "",
    response_model=PaginatedResponse[RoleResponse],
    summary="List Roles",
    dependencies=[Depends(require_permission("roles", "read"))],
)
async def list_roles(
    container: Container,
    limit: Optional[int] = Query(None, description="Page size, 1 to 100 (default 20)"),
    offset: Optional[int] = Query(None, description="Number of roles to skip (default 0)"),
) -> PaginatedResponse[RoleResponse]:
    return unwrap_or_raise(await container.list_roles.execute(limit, offset))


@router.get(
    "/{role_id}",
    response_model=RoleResponse,
    summary="Get Role",
    dependencies=[Depends(require_permission("roles", "read"))],
)
async def get_role(role_id: str, container: Container) -> RoleResponse:
    return unwrap_or_raise(await container.get_role.execute(role_id))


@router.patch(
    "/{role_id}",
    response_model=RoleResponse,
    summary="Update Role",
    description="Rename, redescribe or replace the permission set of a custom role.",
    dependencies=[Depends(require_permission("roles", "update"))],
)
async def update_role(role_id: str, data: UpdateRoleRequest, container: Container) -> RoleResponse:
    return unwrap_or_raise(await container.update_role.execute(role_id, data))


@router.delete(
    "/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Role",
    description="Delete a custom role. Roles still assigned to users cannot be deleted.",
    dependencies=[Depends(require_permission("roles", "delete"))],
)
async def delete_role(role_id: str, container: Container) -> None:
    unwrap_or_raise(await container.delete_role.execute(role_id))
