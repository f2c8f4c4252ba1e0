"""
Permission catalogue use cases.
"""

from typing import Optional

from identity_api.domain.entities import Permission
from identity_api.domain.repositories import PermissionRepository
from identity_api.domain.value_objects import PermissionId
from identity_api.errors import ConflictError, IdentityError, NotFoundError
from identity_api.mappers import PermissionMapper
from identity_api.result import Err, Ok, Result
from identity_api.schemas.base import PaginatedResponse
from identity_api.schemas.permissions import (
    CreatePermissionRequest,
    PermissionResponse,
    UpdatePermissionRequest,
)
from identity_api.services.base import BaseUseCase


async def _load_permission(
    permission_repository: PermissionRepository, raw_id: str
) -> Result[Permission, IdentityError]:
    id_result = PermissionId.from_string(raw_id)
    if id_result.is_err():
        return id_result

    permission_result = await permission_repository.find_by_id(id_result.value)
    if permission_result.is_err():
        return permission_result
    if permission_result.value is None:
        return Err(NotFoundError("Permission", id_result.value.value))
    return Ok(permission_result.value)


class CreatePermissionUseCase(BaseUseCase):
    """Add a ``resource:action`` pair to the catalogue."""

    def __init__(self, permission_repository: PermissionRepository):
        super().__init__()
        self.permission_repository = permission_repository

    async def execute(self, data: CreatePermissionRequest) -> Result[PermissionResponse, IdentityError]:
        """
        Create a permission.

        Returns:
            Ok(PermissionResponse), Err(ValidationError), or Err(ConflictError)
            on field ``code`` when the pair already exists
        """
        permission_result = Permission.create(data.resource, data.action, data.description)
        if permission_result.is_err():
            return permission_result
        permission = permission_result.value

        exists_result = await self.permission_repository.exists_by_code(permission.resource, permission.action)
        if exists_result.is_err():
            return exists_result
        if exists_result.value:
            return Err(ConflictError("Permission", "code", permission.code))

        saved_result = await self.permission_repository.save(permission)
        if saved_result.is_err():
            return saved_result

        self._log_operation("create", "Permission", permission_id=permission.id.value, code=permission.code)
        return Ok(PermissionMapper.to_dto(saved_result.value))


class GetPermissionByIdUseCase(BaseUseCase):
    """Fetch one permission."""

    def __init__(self, permission_repository: PermissionRepository):
        super().__init__()
        self.permission_repository = permission_repository

    async def execute(self, permission_id: str) -> Result[PermissionResponse, IdentityError]:
        permission_result = await _load_permission(self.permission_repository, permission_id)
        if permission_result.is_err():
            return permission_result
        return Ok(PermissionMapper.to_dto(permission_result.value))


class ListPermissionsUseCase(BaseUseCase):
    """Paginated permission listing."""

    def __init__(self, permission_repository: PermissionRepository):
        super().__init__()
        self.permission_repository = permission_repository

    async def execute(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Result[PaginatedResponse[PermissionResponse], IdentityError]:
        return await self._paginate(
            limit,
            offset,
            self.permission_repository.find_all,
            self.permission_repository.count,
            PermissionMapper.to_dto_list,
        )


class UpdatePermissionUseCase(BaseUseCase):
    """Change a permission's description. Resource and action are fixed."""

    def __init__(self, permission_repository: PermissionRepository):
        super().__init__()
        self.permission_repository = permission_repository

    async def execute(
        self, permission_id: str, data: UpdatePermissionRequest
    ) -> Result[PermissionResponse, IdentityError]:
        permission_result = await _load_permission(self.permission_repository, permission_id)
        if permission_result.is_err():
            return permission_result
        permission = permission_result.value

        if data.description is not None:
            changed = permission.update_description(data.description)
            if changed.is_err():
                return changed

        updated_result = await self.permission_repository.update(permission)
        if updated_result.is_err():
            return updated_result

        self._log_operation("update", "Permission", permission_id=permission.id.value)
        return Ok(PermissionMapper.to_dto(updated_result.value))


class DeletePermissionUseCase(BaseUseCase):
    """Remove a permission. Roles referencing it simply stop granting it."""

    def __init__(self, permission_repository: PermissionRepository):
        super().__init__()
        self.permission_repository = permission_repository

    async def execute(self, permission_id: str) -> Result[None, IdentityError]:
        id_result = PermissionId.from_string(permission_id)
        if id_result.is_err():
            return id_result

        deleted_result = await self.permission_repository.delete(id_result.value)
        if deleted_result.is_err():
            return deleted_result
        if not deleted_result.value:
            return Err(NotFoundError("Permission", id_result.value.value))

        self._log_operation("delete", "Permission", permission_id=id_result.value.value)
        return Ok(None)
