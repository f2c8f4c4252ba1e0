"""
Tests for the bcrypt hasher and the JWT token service.
"""

from datetime import timedelta

import jwt
import pytest

from identity_api.auth.passwords import BcryptPasswordHashService
from identity_api.auth.tokens import JWTTokenService
from identity_api.services.ports import InvalidTokenError


class TestBcryptPasswordHashService:
    """Test password hashing."""

    @pytest.mark.asyncio
    async def test_hash_and_compare(self, bcrypt_service):
        hashed = await bcrypt_service.hash("Str0ng!Pass")

        assert hashed != "Str0ng!Pass"
        assert hashed.startswith("$2b$04$")
        assert await bcrypt_service.compare("Str0ng!Pass", hashed)
        assert not await bcrypt_service.compare("Str0ng!Pasz", hashed)

    @pytest.mark.asyncio
    async def test_hashes_are_salted(self, bcrypt_service):
        assert await bcrypt_service.hash("Str0ng!Pass") != await bcrypt_service.hash("Str0ng!Pass")

    @pytest.mark.asyncio
    async def test_malformed_hash_is_a_mismatch(self, bcrypt_service):
        assert await bcrypt_service.compare("Str0ng!Pass", "not-a-bcrypt-hash") is False

    def test_rounds_are_configurable(self):
        service = BcryptPasswordHashService(rounds=5)
        assert service.pwd_context.hash("x").startswith("$2b$05$")


class TestJWTTokenService:
    """Test token signing and verification."""

    def test_sign_and_verify(self, token_service):
        token = token_service.sign({"userId": "abc"})
        payload = token_service.verify(token)

        assert payload["userId"] == "abc"
        assert payload["exp"] - payload["iat"] == 3600

    def test_expired_token(self):
        service = JWTTokenService(secret_key="s" * 32, expires_in=timedelta(seconds=-10))
        token = service.sign({"userId": "abc"})

        with pytest.raises(InvalidTokenError, match="Token expired"):
            service.verify(token)

    def test_wrong_secret(self, token_service):
        other = JWTTokenService(secret_key="o" * 32)
        with pytest.raises(InvalidTokenError, match="Invalid token"):
            token_service.verify(other.sign({"userId": "abc"}))

    def test_tampered_token(self, token_service):
        header, payload, signature = token_service.sign({"userId": "abc"}).split(".")
        tampered = ".".join([header, payload, signature[::-1]])

        with pytest.raises(InvalidTokenError):
            token_service.verify(tampered)

    def test_missing_exp_claim(self, token_service):
        token = jwt.encode({"userId": "abc"}, token_service.secret_key, algorithm="HS256")
        with pytest.raises(InvalidTokenError):
            token_service.verify(token)

    def test_garbage(self, token_service):
        with pytest.raises(InvalidTokenError):
            token_service.verify("not.a.jwt")
