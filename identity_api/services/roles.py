"""
Role management use cases.

System roles are seeded and can never be updated or deleted here.
"""

from typing import Optional

from identity_api.domain.entities import Role
from identity_api.domain.entities.role import normalize_role_name
from identity_api.domain.repositories import PermissionRepository, RoleRepository
from identity_api.domain.value_objects import RoleId
from identity_api.errors import ConflictError, ForbiddenError, IdentityError, NotFoundError
from identity_api.mappers import RoleMapper
from identity_api.result import Err, Ok, Result
from identity_api.schemas.base import PaginatedResponse
from identity_api.schemas.roles import CreateRoleRequest, RoleResponse, UpdateRoleRequest
from identity_api.services.base import BaseUseCase, resolve_permission_ids


async def _ensure_name_available(role_repository: RoleRepository, name: str) -> Result[None, IdentityError]:
    normalized = normalize_role_name(name)
    exists_result = await role_repository.exists_by_name(normalized)
    if exists_result.is_err():
        return exists_result
    if exists_result.value:
        return Err(ConflictError("Role", "name", normalized))
    return Ok(None)


async def _load_role(role_repository: RoleRepository, raw_id: str) -> Result[Role, IdentityError]:
    id_result = RoleId.from_string(raw_id)
    if id_result.is_err():
        return id_result

    role_result = await role_repository.find_by_id(id_result.value)
    if role_result.is_err():
        return role_result
    if role_result.value is None:
        return Err(NotFoundError("Role", id_result.value.value))
    return Ok(role_result.value)


class CreateRoleUseCase(BaseUseCase):
    """Create a custom (non-system) role."""

    def __init__(self, role_repository: RoleRepository, permission_repository: PermissionRepository):
        super().__init__()
        self.role_repository = role_repository
        self.permission_repository = permission_repository

    async def execute(self, data: CreateRoleRequest) -> Result[RoleResponse, IdentityError]:
        """
        Create a role.

        Args:
            data: Role name, description and initial permission ids

        Returns:
            Ok(RoleResponse), Err(ConflictError) if the name is taken,
            Err(NotFoundError) listing unknown permission ids, or another Err
        """
        available = await _ensure_name_available(self.role_repository, data.name)
        if available.is_err():
            return available

        permission_ids_result = await resolve_permission_ids(self.permission_repository, data.permission_ids)
        if permission_ids_result.is_err():
            return permission_ids_result

        role_result = Role.create(
            name=data.name,
            description=data.description,
            permission_ids=permission_ids_result.value,
        )
        if role_result.is_err():
            return role_result

        saved_result = await self.role_repository.save(role_result.value)
        if saved_result.is_err():
            return saved_result

        role = saved_result.value
        self._log_operation("create", "Role", role_id=role.id.value, role_name=role.name)
        return Ok(RoleMapper.to_dto(role))


class GetRoleByIdUseCase(BaseUseCase):
    """Fetch one role."""

    def __init__(self, role_repository: RoleRepository):
        super().__init__()
        self.role_repository = role_repository

    async def execute(self, role_id: str) -> Result[RoleResponse, IdentityError]:
        role_result = await _load_role(self.role_repository, role_id)
        if role_result.is_err():
            return role_result
        return Ok(RoleMapper.to_dto(role_result.value))


class ListRolesUseCase(BaseUseCase):
    """Paginated role listing."""

    def __init__(self, role_repository: RoleRepository):
        super().__init__()
        self.role_repository = role_repository

    async def execute(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Result[PaginatedResponse[RoleResponse], IdentityError]:
        return await self._paginate(
            limit,
            offset,
            self.role_repository.find_all,
            self.role_repository.count,
            RoleMapper.to_dto_list,
        )


class UpdateRoleUseCase(BaseUseCase):
    """Partial update of a custom role."""

    def __init__(self, role_repository: RoleRepository, permission_repository: PermissionRepository):
        super().__init__()
        self.role_repository = role_repository
        self.permission_repository = permission_repository

    async def execute(self, role_id: str, data: UpdateRoleRequest) -> Result[RoleResponse, IdentityError]:
        """
        Update name, description and/or the permission set of a role.

        Args:
            role_id: ID of the role to update
            data: Fields to change; ``permission_ids`` replaces the whole set

        Returns:
            Ok(RoleResponse), Err(ForbiddenError) for system roles whatever
            the payload, or the first other Err encountered
        """
        role_result = await _load_role(self.role_repository, role_id)
        if role_result.is_err():
            return role_result
        role = role_result.value

        if role.is_system:
            error = ForbiddenError(
                "update", "Role", "System roles cannot be edited", metadata={"role_id": role.id.value}
            )
            self._log_failure("update", "Role", error)
            return Err(error)

        changed_fields = []

        if data.name is not None and normalize_role_name(data.name) != role.name:
            available = await _ensure_name_available(self.role_repository, data.name)
            if available.is_err():
                return available
            changed = role.change_name(data.name)
            if changed.is_err():
                return changed
            changed_fields.append("name")

        if data.description is not None:
            changed = role.change_description(data.description)
            if changed.is_err():
                return changed
            changed_fields.append("description")

        if data.permission_ids is not None:
            permission_ids_result = await resolve_permission_ids(self.permission_repository, data.permission_ids)
            if permission_ids_result.is_err():
                return permission_ids_result
            changed = role.replace_permissions(permission_ids_result.value)
            if changed.is_err():
                return changed
            changed_fields.append("permission_ids")

        updated_result = await self.role_repository.update(role)
        if updated_result.is_err():
            return updated_result

        self._log_operation("update", "Role", role_id=role.id.value, updated_fields=changed_fields)
        return Ok(RoleMapper.to_dto(updated_result.value))


class DeleteRoleUseCase(BaseUseCase):
    """Delete a custom role."""

    def __init__(self, role_repository: RoleRepository):
        super().__init__()
        self.role_repository = role_repository

    async def execute(self, role_id: str) -> Result[None, IdentityError]:
        """
        Delete a role.

        Returns:
            Ok(None), Err(NotFoundError), or Err(ForbiddenError) for system roles
        """
        role_result = await _load_role(self.role_repository, role_id)
        if role_result.is_err():
            return role_result
        role = role_result.value

        if role.is_system:
            error = ForbiddenError(
                "delete", "Role", "System roles cannot be deleted", metadata={"role_id": role.id.value}
            )
            self._log_failure("delete", "Role", error)
            return Err(error)

        deleted_result = await self.role_repository.delete(role.id)
        if deleted_result.is_err():
            return deleted_result
        if not deleted_result.value:
            return Err(NotFoundError("Role", role.id.value))

        self._log_operation("delete", "Role", role_id=role.id.value, role_name=role.name)
        return Ok(None)
