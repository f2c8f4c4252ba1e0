"""
Pytest configuration and shared fixtures.

Provides repository doubles for use case tests, an in-memory SQLite
database for repository tests and a seeded application with an httpx
client for HTTP tests.
"""

import os

os.environ.setdefault("API_ENV", "test")

from datetime import timedelta
from typing import AsyncGenerator, Awaitable, Callable, Dict
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from identity_api.app import create_app
from identity_api.auth.passwords import BcryptPasswordHashService
from identity_api.auth.tokens import JWTTokenService
from identity_api.database.config import (
    close_database,
    create_engine,
    create_session_factory,
    create_tables,
    get_session,
    init_database,
)
from identity_api.database.seed import seed_database
from identity_api.domain.repositories import PermissionRepository, RoleRepository, UserRepository
from identity_api.services.ports import PasswordHashService
from tests.utils import ADMIN_EMAIL, ADMIN_PASSWORD, API_PREFIX, TEST_DATABASE_URL, TEST_JWT_SECRET


@pytest.fixture
def user_repository() -> AsyncMock:
    """UserRepository double; every method is an AsyncMock."""
    return AsyncMock(spec=UserRepository)


@pytest.fixture
def role_repository() -> AsyncMock:
    return AsyncMock(spec=RoleRepository)


@pytest.fixture
def permission_repository() -> AsyncMock:
    return AsyncMock(spec=PermissionRepository)


@pytest.fixture
def password_hash_service() -> AsyncMock:
    """Hasher double producing predictable hashes."""
    service = AsyncMock(spec=PasswordHashService)
    service.hash.side_effect = lambda plaintext: f"hashed::{plaintext}"
    service.compare.return_value = True
    return service


@pytest.fixture
def token_service() -> JWTTokenService:
    return JWTTokenService(secret_key=TEST_JWT_SECRET, expires_in=timedelta(hours=1))


@pytest.fixture
def bcrypt_service() -> BcryptPasswordHashService:
    """Real bcrypt hasher at the lowest cost factor."""
    return BcryptPasswordHashService(rounds=4)


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    Create a fresh in-memory database for one test.

    Yields:
        Engine with every table created
    """
    engine = create_engine(TEST_DATABASE_URL, echo=False)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """
    Database session for one test.

    Args:
        db_engine: Test database engine fixture

    Yields:
        Database session for the test
    """
    session_factory = create_session_factory(db_engine)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def app() -> AsyncGenerator[FastAPI, None]:
    """
    Application backed by a seeded in-memory database.

    httpx does not run the lifespan, so the database is initialized here.
    """
    await init_database(TEST_DATABASE_URL)
    async with get_session() as session:
        await seed_database(
            session,
            BcryptPasswordHashService(rounds=4),
            admin_email=ADMIN_EMAIL,
            admin_password=ADMIN_PASSWORD,
        )

    application = create_app()
    yield application

    await close_database()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Create asynchronous test client.

    Args:
        app: FastAPI application fixture

    Yields:
        httpx client talking to the app in-process
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture
def login(client: AsyncClient) -> Callable[[str, str], Awaitable[Dict[str, str]]]:
    """Log in through the API and return the Authorization header."""

    async def _login(email: str, password: str) -> Dict[str, str]:
        response = await client.post(f"{API_PREFIX}/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['accessToken']}"}

    return _login


@pytest_asyncio.fixture
async def admin_headers(login) -> Dict[str, str]:
    return await login(ADMIN_EMAIL, ADMIN_PASSWORD)