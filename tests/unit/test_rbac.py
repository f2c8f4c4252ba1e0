"""
Tests for the bearer authentication and RBAC guard dependencies.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from identity_api.auth.rbac import get_current_user_id, require_permission, require_role
from identity_api.domain.value_objects import UserId
from identity_api.errors import DatabaseError, NotFoundError
from identity_api.exceptions import AuthenticationException, AuthorizationException, DatabaseException
from identity_api.result import Err, Ok


def _request() -> Mock:
    request = Mock()
    request.state = SimpleNamespace()
    request.url.path = "/api/v1/users"
    request.method = "GET"
    return request


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def _container(**service_results) -> SimpleNamespace:
    authorization_service = AsyncMock()
    for name, result in service_results.items():
        getattr(authorization_service, name).return_value = result
    return SimpleNamespace(authorization_service=authorization_service)


class TestGetCurrentUserId:
    """Test bearer token authentication."""

    @pytest.mark.asyncio
    async def test_valid_token(self, token_service):
        user_id = UserId.create().value
        request = _request()

        result = await get_current_user_id(request, _bearer(token_service.sign({"userId": user_id})), token_service)

        assert result == user_id
        assert request.state.user_id == user_id

    @pytest.mark.asyncio
    async def test_missing_credentials(self, token_service):
        with pytest.raises(AuthenticationException) as exc_info:
            await get_current_user_id(_request(), None, token_service)
        assert exc_info.value.message == "Authentication required"

    @pytest.mark.asyncio
    async def test_invalid_token(self, token_service):
        with pytest.raises(AuthenticationException) as exc_info:
            await get_current_user_id(_request(), _bearer("garbage"), token_service)
        assert exc_info.value.error_code == "INVALID_TOKEN"

    @pytest.mark.asyncio
    async def test_token_with_bad_subject(self, token_service):
        token = token_service.sign({"userId": "not-a-uuid"})
        with pytest.raises(AuthenticationException):
            await get_current_user_id(_request(), _bearer(token), token_service)


class TestRequirePermission:
    """Test the permission guard."""

    @pytest.mark.asyncio
    async def test_allowed(self):
        user_id = UserId.create().value
        container = _container(user_has_permission=Ok(True))
        guard = require_permission("users", "read")

        assert await guard(_request(), user_id, container) == user_id
        container.authorization_service.user_has_permission.assert_awaited_once_with(
            UserId(user_id), "users", "read"
        )

    @pytest.mark.asyncio
    async def test_denied(self):
        guard = require_permission("users", "delete")

        with pytest.raises(AuthorizationException) as exc_info:
            await guard(_request(), UserId.create().value, _container(user_has_permission=Ok(False)))
        assert exc_info.value.message == "Permission denied: users:delete required"

    @pytest.mark.asyncio
    async def test_deleted_user_is_unauthenticated(self):
        guard = require_permission("users", "read")
        container = _container(user_has_permission=Err(NotFoundError("User", "x")))

        with pytest.raises(AuthenticationException):
            await guard(_request(), UserId.create().value, container)

    @pytest.mark.asyncio
    async def test_missing_role_is_forbidden(self):
        guard = require_permission("users", "read")
        container = _container(user_has_permission=Err(NotFoundError("Role", "x")))

        with pytest.raises(AuthorizationException):
            await guard(_request(), UserId.create().value, container)

    @pytest.mark.asyncio
    async def test_storage_failure_is_500(self):
        guard = require_permission("users", "read")
        container = _container(user_has_permission=Err(DatabaseError("Failed to find user")))

        with pytest.raises(DatabaseException):
            await guard(_request(), UserId.create().value, container)


class TestRequireRole:
    """Test the role guard."""

    @pytest.mark.asyncio
    async def test_allowed(self):
        guard = require_role("admin")
        user_id = UserId.create().value

        assert await guard(_request(), user_id, _container(user_has_role=Ok(True))) == user_id

    @pytest.mark.asyncio
    async def test_denied(self):
        guard = require_role("admin")

        with pytest.raises(AuthorizationException) as exc_info:
            await guard(_request(), UserId.create().value, _container(user_has_role=Ok(False)))
        assert exc_info.value.message == "Required role: ADMIN"
