"""
Test utilities and helper functions.

Shared constants plus helpers for driving and asserting on the HTTP API.
"""

from typing import Any, Dict, Optional

from httpx import AsyncClient, Response

# Test database URL - use in-memory SQLite for fast tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_JWT_SECRET = "test-only-secret-key-0123456789abcdef-0123"

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "Admin!Passw0rd"

API_PREFIX = "/api/v1"


class APITestHelper:
    """Helpers for calling the identity API from tests."""

    @staticmethod
    def assert_error_response(
        response: Response,
        expected_status: int,
        expected_error_code: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Assert the standard error envelope.

        Args:
            response: HTTP response
            expected_status: Expected status code
            expected_error_code: Expected ``error_code``, if any

        Returns:
            Parsed error body
        """
        assert response.status_code == expected_status, response.text
        body = response.json()
        assert body["success"] is False
        assert "message" in body
        if expected_error_code:
            assert body["error_code"] == expected_error_code
        return body

    @staticmethod
    def assert_validation_error(response: Response, expected_field: Optional[str] = None) -> None:
        """Assert a 400 whose details name ``expected_field``."""
        body = APITestHelper.assert_error_response(response, 400, "VALIDATION_ERROR")
        if expected_field:
            fields = [detail.get("field") for detail in body.get("details") or []]
            assert expected_field in fields, fields

    @staticmethod
    async def register_user(
        client: AsyncClient,
        email: str,
        password: str = "Str0ng!Pass",
        first_name: str = "Test",
        last_name: str = "User",
    ) -> Dict[str, Any]:
        """Register through the public endpoint and return the created user."""
        response = await client.post(
            f"{API_PREFIX}/auth/register",
            json={"email": email, "password": password, "firstName": first_name, "lastName": last_name},
        )
        assert response.status_code == 201, response.text
        return response.json()

    @staticmethod
    async def role_id_by_name(client: AsyncClient, headers: Dict[str, str], name: str) -> str:
        """Look a role up by name through the listing endpoint."""
        response = await client.get(f"{API_PREFIX}/roles", params={"limit": 100}, headers=headers)
        assert response.status_code == 200, response.text
        for role in response.json()["data"]:
            if role["name"] == name:
                return role["id"]
        raise AssertionError(f"Role {name} not found")

    @staticmethod
    async def permission_id_by_code(client: AsyncClient, headers: Dict[str, str], code: str) -> str:
        """Look a permission up by its ``resource:action`` code."""
        response = await client.get(f"{API_PREFIX}/permissions", params={"limit": 100}, headers=headers)
        assert response.status_code == 200, response.text
        for permission in response.json()["data"]:
            if f"{permission['resource']}:{permission['action']}" == code:
                return permission["id"]
        raise AssertionError(f"Permission {code} not found")
