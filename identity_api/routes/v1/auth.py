"""
Authentication routes for API v1.

Registration and login are public. ``/auth/me`` endpoints describe the
caller identified by the bearer token.
"""

from typing import List

from fastapi import APIRouter, status

from identity_api.auth.rbac import CurrentUserId
from identity_api.dependencies import Container
from identity_api.exceptions import unwrap_or_raise
from identity_api.schemas import LoginRequest, LoginResponse, PermissionResponse, RegisterRequest, UserResponse


# Create router
router = APIRouter(
    prefix="/auth",
    tags=["authentication"],
)


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create an account with the default role.",
)
async def register(data: RegisterRequest, container: Container) -> UserResponse:
    return unwrap_or_raise(await container.register_user.execute(data))


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Login",
    description="Exchange email and password for a bearer token.",
    responses={401: {"description": "Invalid credentials"}},
)
async def login(data: LoginRequest, container: Container) -> LoginResponse:
    """
    Authenticate a user.

    Unknown emails, inactive accounts and wrong passwords all produce the
    same 401 response.
    """
    return unwrap_or_raise(await container.login_user.execute(data))


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Current User",
)
async def get_me(user_id: CurrentUserId, container: Container) -> UserResponse:
    return unwrap_or_raise(await container.get_user.execute(user_id))


@router.get(
    "/me/permissions",
    response_model=List[PermissionResponse],
    summary="Current User Permissions",
    description="Effective permissions granted through the caller's role.",
)
async def get_my_permissions(user_id: CurrentUserId, container: Container) -> List[PermissionResponse]:
    return unwrap_or_raise(await container.get_user_permissions.execute(user_id))
