"""
Dependency injection for FastAPI.

``build_container`` is the single place where repositories, domain
services and use cases are wired together for one database session.
Routes receive the container through ``get_container``.
"""

from dataclasses import dataclass
from typing import Annotated, AsyncGenerator, Tuple

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from identity_api.auth.passwords import BcryptPasswordHashService
from identity_api.auth.tokens import JWTTokenService
from identity_api.config.settings import get_jwt_config, settings
from identity_api.database.config import get_session
from identity_api.database.repositories import (
    SQLAlchemyPermissionRepository,
    SQLAlchemyRoleRepository,
    SQLAlchemyUserRepository,
)
from identity_api.domain.repositories import PermissionRepository, RoleRepository, UserRepository
from identity_api.domain.services import AuthorizationService
from identity_api.services import (
    CheckPermissionUseCase,
    CreatePermissionUseCase,
    CreateRoleUseCase,
    CreateUserUseCase,
    DeletePermissionUseCase,
    DeleteRoleUseCase,
    DeleteUserUseCase,
    GetPermissionByIdUseCase,
    GetRoleByIdUseCase,
    GetUserByIdUseCase,
    GetUserPermissionsUseCase,
    ListPermissionsUseCase,
    ListRolesUseCase,
    ListUsersUseCase,
    LoginUserUseCase,
    RegisterUserUseCase,
    UpdatePermissionUseCase,
    UpdateRoleUseCase,
    UpdateUserUseCase,
)
from identity_api.services.ports import PasswordHashService, TokenService


@dataclass
class IdentityContainer:
    """Everything a request needs, bound to one session."""

    user_repository: UserRepository
    role_repository: RoleRepository
    permission_repository: PermissionRepository
    authorization_service: AuthorizationService

    register_user: RegisterUserUseCase
    login_user: LoginUserUseCase

    create_user: CreateUserUseCase
    get_user: GetUserByIdUseCase
    list_users: ListUsersUseCase
    update_user: UpdateUserUseCase
    delete_user: DeleteUserUseCase

    create_role: CreateRoleUseCase
    get_role: GetRoleByIdUseCase
    list_roles: ListRolesUseCase
    update_role: UpdateRoleUseCase
    delete_role: DeleteRoleUseCase

    create_permission: CreatePermissionUseCase
    get_permission: GetPermissionByIdUseCase
    list_permissions: ListPermissionsUseCase
    update_permission: UpdatePermissionUseCase
    delete_permission: DeletePermissionUseCase

    check_permission: CheckPermissionUseCase
    get_user_permissions: GetUserPermissionsUseCase


def build_container(
    session: AsyncSession,
    password_hash_service: PasswordHashService,
    token_service: TokenService,
    default_role_name: str = "USER",
) -> IdentityContainer:
    """
    Wire repositories, the authorization service and every use case.

    Args:
        session: Database session shared by the repositories
        password_hash_service: Password hasher
        token_service: Bearer token signer
        default_role_name: Role given to self-registered users

    Returns:
        Ready-to-use container
    """
    users = SQLAlchemyUserRepository(session)
    roles = SQLAlchemyRoleRepository(session)
    permissions = SQLAlchemyPermissionRepository(session)
    authorization_service = AuthorizationService(users, roles, permissions)

    return IdentityContainer(
        user_repository=users,
        role_repository=roles,
        permission_repository=permissions,
        authorization_service=authorization_service,

        register_user=RegisterUserUseCase(users, roles, password_hash_service, default_role_name),
        login_user=LoginUserUseCase(users, password_hash_service, token_service),

        create_user=CreateUserUseCase(users, roles, password_hash_service),
        get_user=GetUserByIdUseCase(users),
        list_users=ListUsersUseCase(users),
        update_user=UpdateUserUseCase(users, roles, password_hash_service),
        delete_user=DeleteUserUseCase(users),

        create_role=CreateRoleUseCase(roles, permissions),
        get_role=GetRoleByIdUseCase(roles),
        list_roles=ListRolesUseCase(roles),
        update_role=UpdateRoleUseCase(roles, permissions),
        delete_role=DeleteRoleUseCase(roles),

        create_permission=CreatePermissionUseCase(permissions),
        get_permission=GetPermissionByIdUseCase(permissions),
        list_permissions=ListPermissionsUseCase(permissions),
        update_permission=UpdatePermissionUseCase(permissions),
        delete_permission=DeletePermissionUseCase(permissions),

        check_permission=CheckPermissionUseCase(authorization_service),
        get_user_permissions=GetUserPermissionsUseCase(authorization_service),
    )


def build_security_services() -> Tuple[PasswordHashService, TokenService]:
    """
    Create the password hasher and token service from configuration.

    Returns:
        (password_hash_service, token_service)
    """
    password_hash_service = BcryptPasswordHashService(rounds=settings.bcrypt_rounds)
    token_service = JWTTokenService(**get_jwt_config())
    return password_hash_service, token_service


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Get database session dependency.

    The transaction commits when the request succeeds and rolls back when
    the route raises.
    """
    async with get_session() as session:
        yield session


DatabaseSession = Annotated[AsyncSession, Depends(get_db_session)]


def get_password_hash_service(request: Request) -> PasswordHashService:
    return request.app.state.password_hash_service


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


async def get_container(
    session: DatabaseSession,
    password_hash_service: PasswordHashService = Depends(get_password_hash_service),
    token_service: TokenService = Depends(get_token_service),
) -> IdentityContainer:
    """
    Build the request's container.

    Args:
        session: Request-scoped database session
        password_hash_service: Hasher created at startup
        token_service: Token service created at startup

    Returns:
        IdentityContainer bound to ``session``
    """
    return build_container(
        session,
        password_hash_service,
        token_service,
        default_role_name=settings.get("default_role_name", "USER"),
    )


Container = Annotated[IdentityContainer, Depends(get_container)]
