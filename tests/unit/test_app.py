"""
Tests for the FastAPI application factory.
"""

from identity_api.app import create_app
from identity_api.auth.passwords import BcryptPasswordHashService
from identity_api.auth.tokens import JWTTokenService


class TestCreateApp:
    """Test application creation and configuration."""

    def test_metadata(self):
        app = create_app()
        assert app.title == "identity-api"
        assert app.version == "0.1.0"

    def test_security_services_on_state(self):
        app = create_app()
        assert isinstance(app.state.password_hash_service, BcryptPasswordHashService)
        assert isinstance(app.state.token_service, JWTTokenService)

    def test_routes_registered(self):
        app = create_app()
        paths = set(app.openapi()["paths"])

        assert {
            "/health",
            "/api",
            "/api/v1/auth/register",
            "/api/v1/auth/login",
            "/api/v1/auth/me",
            "/api/v1/auth/me/permissions",
            "/api/v1/users",
            "/api/v1/users/{user_id}",
            "/api/v1/users/{user_id}/permissions",
            "/api/v1/users/{user_id}/permissions/check",
            "/api/v1/roles",
            "/api/v1/roles/{role_id}",
            "/api/v1/permissions",
            "/api/v1/permissions/{permission_id}",
        } <= paths

    def test_docs_enabled_outside_production(self):
        assert create_app().docs_url == "/docs"

    def test_docs_disabled_in_production(self, monkeypatch):
        monkeypatch.setenv("API_ENV", "production")
        app = create_app()
        assert app.docs_url is None
        assert app.openapi_url is None
