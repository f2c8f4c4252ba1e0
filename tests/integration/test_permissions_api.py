"""
HTTP tests for the permission catalogue endpoints.
"""

import uuid

import pytest

from identity_api.database.seed import PERMISSION_CATALOGUE
from tests.utils import API_PREFIX, APITestHelper

pytestmark = pytest.mark.integration

PERMISSIONS = f"{API_PREFIX}/permissions"


class TestPermissionCatalogue:
    """Test reading the seeded catalogue."""

    @pytest.mark.asyncio
    async def test_list(self, client, admin_headers):
        response = await client.get(PERMISSIONS, params={"limit": 100}, headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["pagination"]["total"] == len(PERMISSION_CATALOGUE)
        codes = {f"{p['resource']}:{p['action']}" for p in body["data"]}
        assert {"*:*", "users:read", "permissions:read"} <= codes

    @pytest.mark.asyncio
    async def test_get(self, client, admin_headers):
        permission_id = await APITestHelper.permission_id_by_code(client, admin_headers, "roles:read")

        response = await client.get(f"{PERMISSIONS}/{permission_id}", headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert (body["resource"], body["action"]) == ("roles", "read")
        assert body["updatedAt"] == body["createdAt"]

    @pytest.mark.asyncio
    async def test_registered_user_can_read(self, client, login):
        await APITestHelper.register_user(client, "ada@example.com")
        headers = await login("ada@example.com", "Str0ng!Pass")

        assert (await client.get(PERMISSIONS, headers=headers)).status_code == 200


class TestPermissionWrites:
    """Test catalogue changes, reserved for superusers."""

    @pytest.mark.asyncio
    async def test_create_update_delete(self, client, admin_headers):
        created = await client.post(PERMISSIONS, headers=admin_headers, json={
            "resource": "Reports", "action": "export", "description": "Export reports",
        })
        assert created.status_code == 201
        permission = created.json()
        assert permission["resource"] == "reports"

        updated = await client.patch(
            f"{PERMISSIONS}/{permission['id']}", headers=admin_headers, json={"description": "Export any report"}
        )
        assert updated.json()["description"] == "Export any report"

        deleted = await client.delete(f"{PERMISSIONS}/{permission['id']}", headers=admin_headers)
        assert deleted.status_code == 204
        assert (await client.get(f"{PERMISSIONS}/{permission['id']}", headers=admin_headers)).status_code == 404

    @pytest.mark.asyncio
    async def test_duplicate(self, client, admin_headers):
        response = await client.post(PERMISSIONS, headers=admin_headers, json={
            "resource": "users", "action": "read", "description": "Again",
        })

        body = APITestHelper.assert_error_response(response, 409, "CONFLICT")
        assert body["details"][0]["field"] == "code"

    @pytest.mark.asyncio
    async def test_regular_user_cannot_create(self, client, login):
        await APITestHelper.register_user(client, "ada@example.com")
        headers = await login("ada@example.com", "Str0ng!Pass")

        response = await client.post(PERMISSIONS, headers=headers, json={
            "resource": "reports", "action": "export", "description": "Export reports",
        })

        APITestHelper.assert_error_response(response, 403)

    @pytest.mark.asyncio
    async def test_delete_missing(self, client, admin_headers):
        response = await client.delete(f"{PERMISSIONS}/{uuid.uuid4()}", headers=admin_headers)

        APITestHelper.assert_error_response(response, 404)
