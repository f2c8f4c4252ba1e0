"""
Registration and login use cases.
"""

from identity_api.domain.entities import User
from identity_api.domain.repositories import RoleRepository, UserRepository
from identity_api.domain.value_objects import Email, Password
from identity_api.errors import ConflictError, IdentityError, NotFoundError, UnauthorizedError
from identity_api.mappers import UserMapper
from identity_api.result import Err, Ok, Result
from identity_api.schemas.auth import LoginRequest, LoginResponse, RegisterRequest
from identity_api.schemas.users import UserResponse
from identity_api.services.base import BaseUseCase
from identity_api.services.ports import PasswordHashService, TokenService


DEFAULT_ROLE_NAME = "USER"
INVALID_CREDENTIALS = "Invalid credentials"


class RegisterUserUseCase(BaseUseCase):
    """Self-service sign-up. New users always get the default role."""

    def __init__(
        self,
        user_repository: UserRepository,
        role_repository: RoleRepository,
        password_hash_service: PasswordHashService,
        default_role_name: str = DEFAULT_ROLE_NAME,
    ):
        super().__init__()
        self.user_repository = user_repository
        self.role_repository = role_repository
        self.password_hash_service = password_hash_service
        self.default_role_name = default_role_name

    async def execute(self, data: RegisterRequest) -> Result[UserResponse, IdentityError]:
        """
        Register a new user.

        Args:
            data: Registration payload

        Returns:
            Ok(UserResponse), or Err with ValidationError, ConflictError when
            the email is taken, NotFoundError when the default role is not
            seeded, or a repository error
        """
        email_result = Email.create(data.email)
        if email_result.is_err():
            return email_result
        email = email_result.value

        exists_result = await self.user_repository.exists_by_email(email)
        if exists_result.is_err():
            return exists_result
        if exists_result.value:
            return Err(ConflictError("User", "email", email.value, "Email already registered"))

        password_result = Password.create(data.password)
        if password_result.is_err():
            return password_result

        hashed = await self.password_hash_service.hash(password_result.value.value)

        role_result = await self.role_repository.find_by_name(self.default_role_name)
        if role_result.is_err():
            return role_result
        role = role_result.value
        if role is None:
            self.logger.error(
                f"Default role {self.default_role_name} is missing, was the database seeded?",
                extra={"event_type": "default_role_missing", "role_name": self.default_role_name}
            )
            return Err(NotFoundError("Role", self.default_role_name))

        user_result = User.create(
            email=email,
            password=Password.from_string(hashed),
            first_name=data.first_name,
            last_name=data.last_name,
            role_id=role.id,
        )
        if user_result.is_err():
            return user_result

        saved_result = await self.user_repository.save(user_result.value)
        if saved_result.is_err():
            return saved_result

        user = saved_result.value
        self._log_operation("register", "User", user_id=user.id.value, role_id=role.id.value)
        return Ok(UserMapper.to_dto(user))


class LoginUserUseCase(BaseUseCase):
    """
    Verify credentials and issue a bearer token.

    Unknown email, inactive account and wrong password all return the
    same UnauthorizedError so callers cannot enumerate accounts.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        password_hash_service: PasswordHashService,
        token_service: TokenService,
    ):
        super().__init__()
        self.user_repository = user_repository
        self.password_hash_service = password_hash_service
        self.token_service = token_service

    def _reject(self, reason: str, email: Email) -> Err[UnauthorizedError]:
        error = UnauthorizedError(INVALID_CREDENTIALS, metadata={"reason": reason, "email": email.value})
        self._log_failure("login", "User", error)
        return Err(error)

    async def execute(self, data: LoginRequest) -> Result[LoginResponse, IdentityError]:
        """
        Authenticate a user.

        Args:
            data: Login credentials

        Returns:
            Ok(LoginResponse) with the token and public user, Err(ValidationError)
            for a malformed email, or Err(UnauthorizedError("Invalid credentials"))
        """
        email_result = Email.create(data.email)
        if email_result.is_err():
            return email_result
        email = email_result.value

        user_result = await self.user_repository.find_by_email(email)
        if user_result.is_err():
            return user_result
        user = user_result.value

        if user is None:
            return self._reject("user_not_found", email)

        if not user.can_authenticate():
            return self._reject("user_inactive", email)

        password_matches = await self.password_hash_service.compare(data.password, user.password.value)
        if not password_matches:
            return self._reject("invalid_password", email)

        access_token = self.token_service.sign({"userId": user.id.value})

        self._log_operation("login", "User", user_id=user.id.value)
        return Ok(LoginResponse(access_token=access_token, user=UserMapper.to_dto(user)))
