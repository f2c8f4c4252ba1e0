"""
Application use cases.

Each use case exposes ``execute`` and returns a ``Result``.
"""

from .auth import LoginUserUseCase, RegisterUserUseCase
from .authorization import CheckPermissionUseCase, GetUserPermissionsUseCase
from .pagination import PaginationService
from .permissions import (
    CreatePermissionUseCase,
    DeletePermissionUseCase,
    GetPermissionByIdUseCase,
    ListPermissionsUseCase,
    UpdatePermissionUseCase,
)
from .roles import (
    CreateRoleUseCase,
    DeleteRoleUseCase,
    GetRoleByIdUseCase,
    ListRolesUseCase,
    UpdateRoleUseCase,
)
from .users import (
    CreateUserUseCase,
    DeleteUserUseCase,
    GetUserByIdUseCase,
    ListUsersUseCase,
    UpdateUserUseCase,
)

__all__ = [
    "LoginUserUseCase",
    "RegisterUserUseCase",
    "CheckPermissionUseCase",
    "GetUserPermissionsUseCase",
    "PaginationService",
    "CreatePermissionUseCase",
    "DeletePermissionUseCase",
    "GetPermissionByIdUseCase",
    "ListPermissionsUseCase",
    "UpdatePermissionUseCase",
    "CreateRoleUseCase",
    "DeleteRoleUseCase",
    "GetRoleByIdUseCase",
    "ListRolesUseCase",
    "UpdateRoleUseCase",
    "CreateUserUseCase",
    "DeleteUserUseCase",
    "GetUserByIdUseCase",
    "ListUsersUseCase",
    "UpdateUserUseCase",
]
