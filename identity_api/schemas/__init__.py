"""Request and response schemas."""

from .auth import LoginRequest, LoginResponse, RegisterRequest
from .base import ErrorDetail, ErrorResponse, PaginatedResponse, PaginationMeta
from .permissions import (
    CreatePermissionRequest,
    PermissionCheckResponse,
    PermissionResponse,
    UpdatePermissionRequest,
)
from .roles import CreateRoleRequest, RoleResponse, UpdateRoleRequest
from .users import CreateUserRequest, UpdateUserRequest, UserResponse

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "ErrorDetail",
    "ErrorResponse",
    "PaginatedResponse",
    "PaginationMeta",
    "CreatePermissionRequest",
    "PermissionCheckResponse",
    "PermissionResponse",
    "UpdatePermissionRequest",
    "CreateRoleRequest",
    "RoleResponse",
    "UpdateRoleRequest",
    "CreateUserRequest",
    "UpdateUserRequest",
    "UserResponse",
]
