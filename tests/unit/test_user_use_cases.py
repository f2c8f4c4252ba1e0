"""
Tests for the user management use cases.
"""

import uuid

import pytest

from identity_api.errors import ConflictError, NotFoundError, ValidationError
from identity_api.result import Ok
from identity_api.schemas.users import CreateUserRequest, UpdateUserRequest
from identity_api.services.users import (
    CreateUserUseCase,
    DeleteUserUseCase,
    GetUserByIdUseCase,
    ListUsersUseCase,
    UpdateUserUseCase,
)
from tests.factories import UserFactory


def _create_request(role_id: str, **overrides) -> CreateUserRequest:
    data = {
        "email": "staff@example.com",
        "password": "Str0ng!Pass",
        "first_name": "Staff",
        "last_name": "Member",
        "role_id": role_id,
    }
    data.update(overrides)
    return CreateUserRequest(**data)


class TestCreateUser:
    """Test administrative user creation."""

    @pytest.fixture
    def use_case(self, user_repository, role_repository, password_hash_service):
        return CreateUserUseCase(user_repository, role_repository, password_hash_service)

    @pytest.mark.asyncio
    async def test_create_with_explicit_role(self, use_case, user_repository, role_repository):
        role_id = str(uuid.uuid4())
        user_repository.exists_by_email.return_value = Ok(False)
        role_repository.exists_by_id.return_value = Ok(True)
        user_repository.save.side_effect = lambda user: Ok(user)

        response = (await use_case.execute(_create_request(role_id))).unwrap()

        assert response.role_id == role_id
        assert response.full_name == "Staff Member"

    @pytest.mark.asyncio
    async def test_unknown_role(self, use_case, user_repository, role_repository):
        role_id = str(uuid.uuid4())
        user_repository.exists_by_email.return_value = Ok(False)
        role_repository.exists_by_id.return_value = Ok(False)

        error = (await use_case.execute(_create_request(role_id))).unwrap_err()

        assert isinstance(error, NotFoundError)
        assert error.identifier == role_id
        user_repository.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_role_id(self, use_case, user_repository, role_repository):
        user_repository.exists_by_email.return_value = Ok(False)

        error = (await use_case.execute(_create_request("admin"))).unwrap_err()

        assert error.field == "roleId"
        role_repository.exists_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_duplicate_email(self, use_case, user_repository):
        user_repository.exists_by_email.return_value = Ok(True)

        error = (await use_case.execute(_create_request(str(uuid.uuid4())))).unwrap_err()

        assert isinstance(error, ConflictError)


class TestGetUser:
    """Test single user lookup."""

    @pytest.mark.asyncio
    async def test_found(self, user_repository):
        user = UserFactory()
        user_repository.find_by_id.return_value = Ok(user)

        response = (await GetUserByIdUseCase(user_repository).execute(user.id.value)).unwrap()

        assert response.id == user.id.value
        assert response.email == user.email.value

    @pytest.mark.asyncio
    async def test_valid_but_absent_id(self, user_repository):
        missing_id = str(uuid.uuid4())
        user_repository.find_by_id.return_value = Ok(None)

        error = (await GetUserByIdUseCase(user_repository).execute(missing_id)).unwrap_err()

        assert isinstance(error, NotFoundError)
        assert error.identifier == missing_id

    @pytest.mark.asyncio
    async def test_malformed_id(self, user_repository):
        error = (await GetUserByIdUseCase(user_repository).execute("123")).unwrap_err()

        assert isinstance(error, ValidationError)
        assert error.field == "userId"
        user_repository.find_by_id.assert_not_awaited()


class TestListUsers:
    """Test paginated listing."""

    @pytest.mark.asyncio
    async def test_pagination_metadata(self, user_repository):
        users = [UserFactory()]
        user_repository.find_all.return_value = Ok(users)
        user_repository.count.return_value = Ok(10)

        page = (await ListUsersUseCase(user_repository).execute(limit=1, offset=2)).unwrap()

        assert [u.id for u in page.data] == [users[0].id.value]
        meta = page.pagination
        assert (meta.total, meta.limit, meta.offset) == (10, 1, 2)
        assert meta.has_more is True
        assert meta.current_page == 3
        assert meta.total_pages == 10
        user_repository.find_all.assert_awaited_once_with(1, 2)

    @pytest.mark.asyncio
    async def test_defaults(self, user_repository):
        user_repository.find_all.return_value = Ok([])
        user_repository.count.return_value = Ok(0)

        page = (await ListUsersUseCase(user_repository).execute()).unwrap()

        assert page.pagination.limit == 20
        assert page.pagination.offset == 0
        assert page.pagination.total_pages == 0
        assert page.pagination.has_more is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit, offset, field", [(0, 0, "limit"), (101, 0, "limit"), (10, -1, "offset")])
    async def test_invalid_params_make_no_queries(self, user_repository, limit, offset, field):
        error = (await ListUsersUseCase(user_repository).execute(limit=limit, offset=offset)).unwrap_err()

        assert error.field == field
        user_repository.find_all.assert_not_awaited()
        user_repository.count.assert_not_awaited()


class TestUpdateUser:
    """Test partial updates."""

    @pytest.fixture
    def use_case(self, user_repository, role_repository, password_hash_service):
        return UpdateUserUseCase(user_repository, role_repository, password_hash_service)

    @pytest.mark.asyncio
    async def test_update_names_and_deactivate(self, use_case, user_repository):
        user = UserFactory()
        user_repository.find_by_id.return_value = Ok(user)
        user_repository.update.side_effect = lambda u: Ok(u)

        response = (await use_case.execute(
            user.id.value, UpdateUserRequest(first_name="Grace", is_active=False)
        )).unwrap()

        assert response.first_name == "Grace"
        assert response.is_active is False

    @pytest.mark.asyncio
    async def test_same_email_is_a_noop(self, use_case, user_repository):
        user = UserFactory()
        user_repository.find_by_id.return_value = Ok(user)
        user_repository.update.side_effect = lambda u: Ok(u)

        result = await use_case.execute(user.id.value, UpdateUserRequest(email=user.email.value.upper()))

        assert result.is_ok()
        user_repository.exists_by_email.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_email_taken(self, use_case, user_repository):
        user = UserFactory()
        user_repository.find_by_id.return_value = Ok(user)
        user_repository.exists_by_email.return_value = Ok(True)

        error = (await use_case.execute(user.id.value, UpdateUserRequest(email="taken@example.com"))).unwrap_err()

        assert isinstance(error, ConflictError)
        user_repository.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_password_is_rehashed(self, use_case, user_repository, password_hash_service):
        user = UserFactory()
        user_repository.find_by_id.return_value = Ok(user)
        user_repository.update.side_effect = lambda u: Ok(u)

        (await use_case.execute(user.id.value, UpdateUserRequest(password="N3w!Password"))).unwrap()

        password_hash_service.hash.assert_awaited_once_with("N3w!Password")
        assert user.password.value == "hashed::N3w!Password"

    @pytest.mark.asyncio
    async def test_same_role_fails(self, use_case, user_repository, role_repository):
        user = UserFactory()
        user_repository.find_by_id.return_value = Ok(user)
        role_repository.exists_by_id.return_value = Ok(True)

        error = (await use_case.execute(user.id.value, UpdateUserRequest(role_id=user.role_id.value))).unwrap_err()

        assert error.reason == "New role is the same as current role"

    @pytest.mark.asyncio
    async def test_first_failure_stops_update(self, use_case, user_repository):
        """A bad last name after a good first name persists nothing."""
        user = UserFactory()
        user_repository.find_by_id.return_value = Ok(user)

        error = (await use_case.execute(
            user.id.value, UpdateUserRequest(first_name="Grace", last_name="")
        )).unwrap_err()

        assert error.field == "lastName"
        user_repository.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_user(self, use_case, user_repository):
        user_repository.find_by_id.return_value = Ok(None)

        error = (await use_case.execute(str(uuid.uuid4()), UpdateUserRequest(first_name="X"))).unwrap_err()

        assert isinstance(error, NotFoundError)


class TestDeleteUser:
    """Test deletion."""

    @pytest.mark.asyncio
    async def test_delete(self, user_repository):
        user_repository.delete.return_value = Ok(True)
        user_id = str(uuid.uuid4())

        assert await DeleteUserUseCase(user_repository).execute(user_id) == Ok(None)

    @pytest.mark.asyncio
    async def test_delete_missing(self, user_repository):
        user_repository.delete.return_value = Ok(False)

        error = (await DeleteUserUseCase(user_repository).execute(str(uuid.uuid4()))).unwrap_err()

        assert isinstance(error, NotFoundError)
