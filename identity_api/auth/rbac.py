"""
Role-Based Access Control guards for FastAPI routes.

Bearer tokens are verified by the configured ``TokenService``; the
resulting user id is then checked against the stored role and its
permissions through the ``AuthorizationService``. Guards are plain
dependencies:

    @router.get("/users", dependencies=[Depends(require_permission("users", "read"))])
"""

import logging
from typing import Annotated, Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from identity_api.dependencies import IdentityContainer, get_container, get_token_service
from identity_api.domain.value_objects import UserId
from identity_api.errors import IdentityError, NotFoundError
from identity_api.exceptions import AuthenticationException, AuthorizationException, unwrap_or_raise
from identity_api.result import Result
from identity_api.services.ports import InvalidTokenError, TokenService

logger = logging.getLogger(__name__)

# Security scheme for JWT authentication
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    token_service: TokenService = Depends(get_token_service),
) -> str:
    """
    Authenticate the request from its bearer token.

    Args:
        request: FastAPI request object
        credentials: HTTP authorization credentials
        token_service: Token verifier

    Returns:
        The authenticated user id

    Raises:
        AuthenticationException: If the token is missing or invalid
    """
    if not credentials:
        raise AuthenticationException("Authentication required")

    try:
        payload = token_service.verify(credentials.credentials)
    except InvalidTokenError as e:
        raise AuthenticationException(str(e), error_code="INVALID_TOKEN")

    user_id_result = UserId.from_string(payload.get("userId"))
    if user_id_result.is_err():
        logger.warning(
            "Token carries no usable user id",
            extra={"event_type": "token_invalid_subject", "path": request.url.path}
        )
        raise AuthenticationException("Invalid token", error_code="INVALID_TOKEN")

    user_id = user_id_result.value.value
    request.state.user_id = user_id
    return user_id


def _authorize(result: Result[bool, IdentityError], user_id: str) -> bool:
    # A token for a deleted user no longer authenticates anyone
    if result.is_err() and isinstance(result.error, NotFoundError):
        if result.error.entity_type == "User":
            raise AuthenticationException("Authentication required")
        return False
    return unwrap_or_raise(result)


def require_permission(resource: str, action: str) -> Callable:
    """
    Create a dependency that requires ``resource:action``.

    Args:
        resource: Required resource
        action: Required action

    Returns:
        Dependency returning the authenticated user id
    """
    async def check_permission(
        request: Request,
        user_id: str = Depends(get_current_user_id),
        container: IdentityContainer = Depends(get_container),
    ) -> str:
        result = await container.authorization_service.user_has_permission(
            UserId(user_id), resource, action
        )
        if not _authorize(result, user_id):
            logger.warning(
                f"Access denied: user {user_id} lacks permission {resource}:{action}",
                extra={
                    "event_type": "access_denied",
                    "user_id": user_id,
                    "required_permission": f"{resource}:{action}",
                    "path": request.url.path,
                    "method": request.method,
                    "correlation_id": getattr(request.state, "correlation_id", None),
                }
            )
            raise AuthorizationException(f"Permission denied: {resource}:{action} required")
        return user_id

    return check_permission


def require_role(role_name: str) -> Callable:
    """
    Create a dependency that requires the user's role to be ``role_name``.

    Args:
        role_name: Required role, compared case-insensitively

    Returns:
        Dependency returning the authenticated user id
    """
    async def check_role(
        request: Request,
        user_id: str = Depends(get_current_user_id),
        container: IdentityContainer = Depends(get_container),
    ) -> str:
        result = await container.authorization_service.user_has_role(UserId(user_id), role_name)
        if not _authorize(result, user_id):
            logger.warning(
                f"Access denied: user {user_id} lacks role {role_name}",
                extra={
                    "event_type": "access_denied",
                    "user_id": user_id,
                    "required_role": role_name,
                    "path": request.url.path,
                    "method": request.method,
                }
            )
            raise AuthorizationException(f"Required role: {role_name.upper()}")
        return user_id

    return check_role


CurrentUserId = Annotated[str, Depends(get_current_user_id)]
