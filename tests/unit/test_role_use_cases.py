"""
Tests for the role management use cases.
"""

import uuid

import pytest

from identity_api.errors import ConflictError, ForbiddenError, NotFoundError
from identity_api.result import Ok
from identity_api.schemas.roles import CreateRoleRequest, UpdateRoleRequest
from identity_api.services.roles import (
    CreateRoleUseCase,
    DeleteRoleUseCase,
    GetRoleByIdUseCase,
    ListRolesUseCase,
    UpdateRoleUseCase,
)
from tests.factories import PermissionFactory, RoleFactory


class TestCreateRole:
    """Test custom role creation."""

    @pytest.fixture
    def use_case(self, role_repository, permission_repository):
        return CreateRoleUseCase(role_repository, permission_repository)

    @pytest.mark.asyncio
    async def test_create_with_permissions(self, use_case, role_repository, permission_repository):
        permission = PermissionFactory()
        role_repository.exists_by_name.return_value = Ok(False)
        permission_repository.find_by_ids.return_value = Ok([permission])
        role_repository.save.side_effect = lambda role: Ok(role)

        response = (await use_case.execute(CreateRoleRequest(
            name="editor", description="Edits", permission_ids=[permission.id.value]
        ))).unwrap()

        assert response.name == "EDITOR"
        assert response.is_system is False
        assert response.permission_ids == [permission.id.value]
        role_repository.exists_by_name.assert_awaited_once_with("EDITOR")

    @pytest.mark.asyncio
    async def test_name_conflict_is_case_insensitive(self, use_case, role_repository):
        role_repository.exists_by_name.return_value = Ok(True)

        error = (await use_case.execute(CreateRoleRequest(name="Admin", description="Dup"))).unwrap_err()

        assert isinstance(error, ConflictError)
        assert error.value == "ADMIN"

    @pytest.mark.asyncio
    async def test_unknown_permission_ids_are_listed(self, use_case, role_repository, permission_repository):
        known = PermissionFactory()
        unknown = str(uuid.uuid4())
        role_repository.exists_by_name.return_value = Ok(False)
        permission_repository.find_by_ids.return_value = Ok([known])

        error = (await use_case.execute(CreateRoleRequest(
            name="EDITOR", description="Edits", permission_ids=[known.id.value, unknown]
        ))).unwrap_err()

        assert isinstance(error, NotFoundError)
        assert error.missing_ids == [unknown]
        role_repository.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_permission_id(self, use_case, role_repository, permission_repository):
        role_repository.exists_by_name.return_value = Ok(False)

        error = (await use_case.execute(CreateRoleRequest(
            name="EDITOR", description="Edits", permission_ids=["nope"]
        ))).unwrap_err()

        assert error.field == "permissionId"
        permission_repository.find_by_ids.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_duplicate_permission_ids(self, use_case, role_repository, permission_repository):
        permission = PermissionFactory()
        role_repository.exists_by_name.return_value = Ok(False)
        permission_repository.find_by_ids.return_value = Ok([permission])

        error = (await use_case.execute(CreateRoleRequest(
            name="EDITOR", description="Edits", permission_ids=[permission.id.value, permission.id.value]
        ))).unwrap_err()

        assert error.field == "permissionIds"


class TestReadRoles:
    """Test lookups and listing."""

    @pytest.mark.asyncio
    async def test_get_role(self, role_repository):
        role = RoleFactory()
        role_repository.find_by_id.return_value = Ok(role)

        response = (await GetRoleByIdUseCase(role_repository).execute(role.id.value)).unwrap()

        assert response.name == role.name

    @pytest.mark.asyncio
    async def test_get_missing_role(self, role_repository):
        role_repository.find_by_id.return_value = Ok(None)

        error = (await GetRoleByIdUseCase(role_repository).execute(str(uuid.uuid4()))).unwrap_err()

        assert isinstance(error, NotFoundError)

    @pytest.mark.asyncio
    async def test_list_roles(self, role_repository):
        roles = RoleFactory.build_batch(3)
        role_repository.find_all.return_value = Ok(roles)
        role_repository.count.return_value = Ok(3)

        page = (await ListRolesUseCase(role_repository).execute(limit=10)).unwrap()

        assert len(page.data) == 3
        assert page.pagination.has_more is False
        assert page.pagination.total_pages == 1


class TestUpdateRole:
    """Test role updates."""

    @pytest.fixture
    def use_case(self, role_repository, permission_repository):
        return UpdateRoleUseCase(role_repository, permission_repository)

    @pytest.mark.asyncio
    async def test_system_role_is_read_only(self, use_case, role_repository):
        """Even an empty payload is refused for system roles."""
        role = RoleFactory(name="ADMIN", system=True)
        role_repository.find_by_id.return_value = Ok(role)

        error = (await use_case.execute(role.id.value, UpdateRoleRequest())).unwrap_err()

        assert isinstance(error, ForbiddenError)
        role_repository.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_system_role_refused_before_payload_checks(
        self, use_case, role_repository, permission_repository
    ):
        """An invalid name and unknown permission ids still yield ForbiddenError."""
        role = RoleFactory(name="USER", system=True)
        role_repository.find_by_id.return_value = Ok(role)

        error = (await use_case.execute(
            role.id.value,
            UpdateRoleRequest(name="bad name!", description="", permission_ids=[str(uuid.uuid4())]),
        )).unwrap_err()

        assert isinstance(error, ForbiddenError)
        assert error.message == "System roles cannot be edited"
        role_repository.exists_by_name.assert_not_awaited()
        permission_repository.find_by_ids.assert_not_awaited()
        role_repository.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rename(self, use_case, role_repository):
        role = RoleFactory(name="EDITOR")
        role_repository.find_by_id.return_value = Ok(role)
        role_repository.exists_by_name.return_value = Ok(False)
        role_repository.update.side_effect = lambda r: Ok(r)

        response = (await use_case.execute(role.id.value, UpdateRoleRequest(name="reviewer"))).unwrap()

        assert response.name == "REVIEWER"

    @pytest.mark.asyncio
    async def test_same_name_skips_conflict_check(self, use_case, role_repository):
        role = RoleFactory(name="EDITOR")
        role_repository.find_by_id.return_value = Ok(role)
        role_repository.update.side_effect = lambda r: Ok(r)

        assert (await use_case.execute(role.id.value, UpdateRoleRequest(name="editor"))).is_ok()
        role_repository.exists_by_name.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rename_conflict(self, use_case, role_repository):
        role = RoleFactory(name="EDITOR")
        role_repository.find_by_id.return_value = Ok(role)
        role_repository.exists_by_name.return_value = Ok(True)

        error = (await use_case.execute(role.id.value, UpdateRoleRequest(name="USER"))).unwrap_err()

        assert isinstance(error, ConflictError)

    @pytest.mark.asyncio
    async def test_replace_permissions(self, use_case, role_repository, permission_repository):
        role = RoleFactory(permission_ids=[PermissionFactory().id])
        replacement = PermissionFactory()
        role_repository.find_by_id.return_value = Ok(role)
        permission_repository.find_by_ids.return_value = Ok([replacement])
        role_repository.update.side_effect = lambda r: Ok(r)

        response = (await use_case.execute(
            role.id.value, UpdateRoleRequest(permission_ids=[replacement.id.value])
        )).unwrap()

        assert response.permission_ids == [replacement.id.value]

    @pytest.mark.asyncio
    async def test_clear_permissions(self, use_case, role_repository, permission_repository):
        role = RoleFactory(permission_ids=[PermissionFactory().id])
        role_repository.find_by_id.return_value = Ok(role)
        role_repository.update.side_effect = lambda r: Ok(r)

        response = (await use_case.execute(role.id.value, UpdateRoleRequest(permission_ids=[]))).unwrap()

        assert response.permission_ids == []
        permission_repository.find_by_ids.assert_not_awaited()


class TestDeleteRole:
    """Test role deletion."""

    @pytest.mark.asyncio
    async def test_system_role_cannot_be_deleted(self, role_repository):
        role = RoleFactory(system=True)
        role_repository.find_by_id.return_value = Ok(role)

        error = (await DeleteRoleUseCase(role_repository).execute(role.id.value)).unwrap_err()

        assert isinstance(error, ForbiddenError)
        assert error.message == "System roles cannot be deleted"
        role_repository.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_custom_role(self, role_repository):
        role = RoleFactory()
        role_repository.find_by_id.return_value = Ok(role)
        role_repository.delete.return_value = Ok(True)

        assert await DeleteRoleUseCase(role_repository).execute(role.id.value) == Ok(None)
        role_repository.delete.assert_awaited_once_with(role.id)

    @pytest.mark.asyncio
    async def test_delete_missing_role(self, role_repository):
        role_repository.find_by_id.return_value = Ok(None)

        error = (await DeleteRoleUseCase(role_repository).execute(str(uuid.uuid4()))).unwrap_err()

        assert isinstance(error, NotFoundError)
