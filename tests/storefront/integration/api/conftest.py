"""Pytest fixtures for API integration tests.

Each test runs the app against its own SQLite database file and talks
to it through FastAPI's TestClient.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.infrastructure.email import MailingService
from storefront.infrastructure.persistence.sqlalchemy import Base
from storefront.presentation.api.app import SESSIONS_PREFIX, create_app
from storefront.presentation.api.dependencies import (
    get_db_session,
    get_mailing_service,
)
from storefront_config.settings import Settings

TEST_PASSWORD = "Secure@Pass1"


@pytest.fixture
def sessions_url() -> str:
    """Get the sessions prefix for building URLs."""
    return SESSIONS_PREFIX


@pytest.fixture
def api_settings(database_url) -> Settings:
    """Test API settings."""
    return Settings(
        # Required security settings
        jwt_secret_key=SecretStr("test-jwt-secret-for-testing-only"),
        cookie_secret=SecretStr("test-cookie-secret-for-testing-only"),
        database_url=database_url,
        api_cors_origins="http://localhost:3000",
        cookie_secure=False,  # Allow HTTP in tests
        # Minimum bcrypt work factor keeps the tests fast
        password_hash_rounds=4,
        reset_password_url="http://testserver/reset-password",
        smtp_enabled=False,
    )


@pytest.fixture
def mailing_service() -> AsyncMock:
    """Mailer double that records the reset links instead of sending them."""
    return AsyncMock(spec=MailingService)


def _run(coro) -> None:
    """Run ``coro`` in a fresh event loop, apart from TestClient's loop."""
    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(coro)
    finally:
        loop.close()


@pytest.fixture
def test_client(api_settings, async_engine, mailing_service):
    """Create a test client bound to an isolated database."""

    async def _setup():
        async with async_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def _teardown():
        async with async_engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    _run(_setup())

    app = create_app(settings=api_settings)

    test_session_maker = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # Override the database session dependency
    async def override_get_db_session():
        async with test_session_maker() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_mailing_service] = lambda: mailing_service

    yield TestClient(app)

    _run(_teardown())


@pytest.fixture
def user_data() -> dict:
    return {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "age": 36,
        "password": TEST_PASSWORD,
    }


@pytest.fixture
def registered_user(test_client, sessions_url, user_data) -> dict:
    response = test_client.post(f"{sessions_url}/register", json=user_data)
    assert response.status_code == 201, (
        f"Registration failed: {response.status_code} - {response.text}"
    )
    return user_data


@pytest.fixture
def logged_in_user(test_client, sessions_url, registered_user) -> dict:
    """Log the registered user in; the client keeps the session cookie."""
    response = test_client.post(
        f"{sessions_url}/login",
        json={
            "email": registered_user["email"],
            "password": registered_user["password"],
        },
    )
    assert response.status_code == 200, (
        f"Login failed: {response.status_code} - {response.text}"
    )
    return response.json()["payload"]
