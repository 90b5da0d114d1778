"""Shared fixtures for integration tests.

Every test gets its own SQLite database file, so tests never share state
and never touch the configured database.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'storefront-test.db'}"


@pytest.fixture
def async_engine(database_url) -> AsyncEngine:
    """Engine without pooling, connections are opened in the caller's loop."""
    return create_async_engine(database_url, poolclass=NullPool)
