"""Shared test fixtures.

Every test gets a fresh SQLite database file built from the ORM metadata.
Redis is never initialized, so rate limiting passes requests through and
/ready reports redis as unavailable.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

os.environ.setdefault("SKILLPATH_JWT_SECRET_KEY", "test-secret-key-with-at-least-32-bytes")
os.environ.setdefault("SKILLPATH_LOG_FORMAT", "console")

from skillpath.config import get_settings  # noqa: E402
from skillpath.database import close_db, get_engine, get_session, init_db  # noqa: E402
from skillpath.db import Base  # noqa: E402
from skillpath.main import create_app  # noqa: E402

TEST_PASSWORD = "SecureP@ss1"


@pytest_asyncio.fixture
async def database(tmp_path: Path) -> AsyncGenerator[str, None]:
    """Point settings at a throwaway SQLite file and create the schema."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'skillpath_test.db'}"
    os.environ["SKILLPATH_DATABASE_URL"] = url
    get_settings.cache_clear()

    await init_db(url)
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield url

    await close_db()
    get_settings.cache_clear()


@pytest_asyncio.fixture
async def client(database: str) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP test client bound to the app (lifespan not run)."""
    app = create_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db_session(database: str) -> AsyncGenerator[AsyncSession, None]:
    """Direct database session for service calls and assertions.

    SQLite holds a file lock for an open transaction, so tests that mix this
    session with HTTP calls end their transaction (commit or rollback) first.
    """
    gen = get_session()
    session = await anext(gen)
    try:
        yield session
    finally:
        await session.rollback()
        await gen.aclose()


async def _register(client: AsyncClient, email: str, full_name: str = "Test Learner") -> dict:
    response = await client.post("/api/v1/auth/register", json={
        "email": email,
        "password": TEST_PASSWORD,
        "full_name": full_name,
    })
    assert response.status_code == 200, response.text
    return {
        "email": email,
        "password": TEST_PASSWORD,
        "full_name": full_name,
        "access_token": response.json()["access_token"],
    }


@pytest_asyncio.fixture
async def registered_user(client: AsyncClient) -> dict:
    """Register a user via email+password. Returns credentials and token."""
    return await _register(client, "learner@example.com")


@pytest_asyncio.fixture
async def authed_client(client: AsyncClient, registered_user: dict) -> AsyncClient:
    """Client carrying the registered user's bearer token."""
    client.headers["Authorization"] = f"Bearer {registered_user['access_token']}"
    return client


@pytest.fixture
def register_user_via_api():
    """Register additional users from a test body."""
    return _register
