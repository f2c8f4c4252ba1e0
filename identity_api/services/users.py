"""
User management use cases.
"""

from typing import Optional

from identity_api.domain.entities import User
from identity_api.domain.repositories import RoleRepository, UserRepository
from identity_api.domain.value_objects import Email, Password, RoleId, UserId
from identity_api.errors import ConflictError, IdentityError, NotFoundError
from identity_api.mappers import UserMapper
from identity_api.result import Err, Ok, Result
from identity_api.schemas.base import PaginatedResponse
from identity_api.schemas.users import CreateUserRequest, UpdateUserRequest, UserResponse
from identity_api.services.base import BaseUseCase
from identity_api.services.ports import PasswordHashService


async def _ensure_email_available(
    user_repository: UserRepository, email: Email
) -> Result[None, IdentityError]:
    exists_result = await user_repository.exists_by_email(email)
    if exists_result.is_err():
        return exists_result
    if exists_result.value:
        return Err(ConflictError("User", "email", email.value, "Email already registered"))
    return Ok(None)


async def _ensure_role_exists(
    role_repository: RoleRepository, role_id: RoleId
) -> Result[None, IdentityError]:
    exists_result = await role_repository.exists_by_id(role_id)
    if exists_result.is_err():
        return exists_result
    if not exists_result.value:
        return Err(NotFoundError("Role", role_id.value))
    return Ok(None)


async def _load_user(user_repository: UserRepository, raw_id: str) -> Result[User, IdentityError]:
    id_result = UserId.from_string(raw_id)
    if id_result.is_err():
        return id_result

    user_result = await user_repository.find_by_id(id_result.value)
    if user_result.is_err():
        return user_result
    if user_result.value is None:
        return Err(NotFoundError("User", id_result.value.value))
    return Ok(user_result.value)


class CreateUserUseCase(BaseUseCase):
    """Administrative user creation with an explicit role."""

    def __init__(
        self,
        user_repository: UserRepository,
        role_repository: RoleRepository,
        password_hash_service: PasswordHashService,
    ):
        super().__init__()
        self.user_repository = user_repository
        self.role_repository = role_repository
        self.password_hash_service = password_hash_service

    async def execute(self, data: CreateUserRequest) -> Result[UserResponse, IdentityError]:
        """
        Create a user.

        Args:
            data: Creation payload, including the role to assign

        Returns:
            Ok(UserResponse) or the first Err encountered
        """
        email_result = Email.create(data.email)
        if email_result.is_err():
            return email_result
        email = email_result.value

        available = await _ensure_email_available(self.user_repository, email)
        if available.is_err():
            return available

        password_result = Password.create(data.password)
        if password_result.is_err():
            return password_result

        role_id_result = RoleId.from_string(data.role_id)
        if role_id_result.is_err():
            return role_id_result
        role_id = role_id_result.value

        role_exists = await _ensure_role_exists(self.role_repository, role_id)
        if role_exists.is_err():
            return role_exists

        hashed = await self.password_hash_service.hash(password_result.value.value)

        user_result = User.create(
            email=email,
            password=Password.from_string(hashed),
            first_name=data.first_name,
            last_name=data.last_name,
            role_id=role_id,
        )
        if user_result.is_err():
            return user_result

        saved_result = await self.user_repository.save(user_result.value)
        if saved_result.is_err():
            return saved_result

        user = saved_result.value
        self._log_operation("create", "User", user_id=user.id.value, role_id=role_id.value)
        return Ok(UserMapper.to_dto(user))


class GetUserByIdUseCase(BaseUseCase):
    """Fetch one user."""

    def __init__(self, user_repository: UserRepository):
        super().__init__()
        self.user_repository = user_repository

    async def execute(self, user_id: str) -> Result[UserResponse, IdentityError]:
        user_result = await _load_user(self.user_repository, user_id)
        if user_result.is_err():
            return user_result
        return Ok(UserMapper.to_dto(user_result.value))


class ListUsersUseCase(BaseUseCase):
    """Paginated user listing."""

    def __init__(self, user_repository: UserRepository):
        super().__init__()
        self.user_repository = user_repository

    async def execute(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Result[PaginatedResponse[UserResponse], IdentityError]:
        return await self._paginate(
            limit,
            offset,
            self.user_repository.find_all,
            self.user_repository.count,
            UserMapper.to_dto_list,
        )


class UpdateUserUseCase(BaseUseCase):
    """
    Partial user update.

    Fields are applied in a fixed order (email, password, first name,
    last name, role, active flag). The first failure stops the update and
    nothing is persisted.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        role_repository: RoleRepository,
        password_hash_service: PasswordHashService,
    ):
        super().__init__()
        self.user_repository = user_repository
        self.role_repository = role_repository
        self.password_hash_service = password_hash_service

    async def execute(self, user_id: str, data: UpdateUserRequest) -> Result[UserResponse, IdentityError]:
        """
        Update the supplied fields of a user.

        Args:
            user_id: ID of the user to update
            data: Fields to change; ``None`` means "leave unchanged"

        Returns:
            Ok(UserResponse) or the first Err encountered
        """
        user_result = await _load_user(self.user_repository, user_id)
        if user_result.is_err():
            return user_result
        user = user_result.value
        changed_fields = []

        if data.email is not None:
            email_result = Email.create(data.email)
            if email_result.is_err():
                return email_result
            email = email_result.value

            if email != user.email:
                available = await _ensure_email_available(self.user_repository, email)
                if available.is_err():
                    return available
                changed = user.change_email(email)
                if changed.is_err():
                    return changed
                changed_fields.append("email")

        if data.password is not None:
            password_result = Password.create(data.password)
            if password_result.is_err():
                return password_result
            hashed = await self.password_hash_service.hash(password_result.value.value)
            changed = user.change_password(Password.from_string(hashed))
            if changed.is_err():
                return changed
            changed_fields.append("password")

        if data.first_name is not None:
            changed = user.change_first_name(data.first_name)
            if changed.is_err():
                return changed
            changed_fields.append("first_name")

        if data.last_name is not None:
            changed = user.change_last_name(data.last_name)
            if changed.is_err():
                return changed
            changed_fields.append("last_name")

        if data.role_id is not None:
            role_id_result = RoleId.from_string(data.role_id)
            if role_id_result.is_err():
                return role_id_result
            role_id = role_id_result.value

            role_exists = await _ensure_role_exists(self.role_repository, role_id)
            if role_exists.is_err():
                return role_exists
            changed = user.change_role(role_id)
            if changed.is_err():
                return changed
            changed_fields.append("role_id")

        if data.is_active is not None and data.is_active != user.is_active:
            changed = user.activate() if data.is_active else user.deactivate()
            if changed.is_err():
                return changed
            changed_fields.append("is_active")

        updated_result = await self.user_repository.update(user)
        if updated_result.is_err():
            return updated_result

        self._log_operation("update", "User", user_id=user.id.value, updated_fields=changed_fields)
        return Ok(UserMapper.to_dto(updated_result.value))


class DeleteUserUseCase(BaseUseCase):
    """Delete a user. The adapter decides between soft and hard delete."""

    def __init__(self, user_repository: UserRepository):
        super().__init__()
        self.user_repository = user_repository

    async def execute(self, user_id: str) -> Result[None, IdentityError]:
        id_result = UserId.from_string(user_id)
        if id_result.is_err():
            return id_result

        deleted_result = await self.user_repository.delete(id_result.value)
        if deleted_result.is_err():
            return deleted_result
        if not deleted_result.value:
            return Err(NotFoundError("User", id_result.value.value))

        self._log_operation("delete", "User", user_id=id_result.value.value)
        return Ok(None)
