"""
Test fixtures for the Cardfolio API test suite.

  - db_engine / db_session: Fresh in-memory SQLite database for each test
  - client_factory / client: Async HTTP test clients (unauthenticated)
  - authenticated_client: Client for a registered USER ("alice")
  - second_authenticated_client: Client for a second USER ("bob")
  - admin_client: Client for a registered ADMIN

Key design decisions:
  - In-memory SQLite (sqlite+aiosqlite://) with foreign keys enabled, so
    ON DELETE CASCADE behaves the way it does in production.
  - get_db is overridden so application code runs unchanged against the
    test database.
  - Every user gets their own AsyncClient; headers never leak between users.
  - The admin is registered normally and then promoted directly in the DB,
    the way operators provision admins.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cardfolio.database import Base, enable_sqlite_foreign_keys, get_db
from cardfolio.main import app
from cardfolio.models.user import User, UserRole


TEST_DATABASE_URL = "sqlite+aiosqlite://"


async def register_user(client: AsyncClient, username: str, password: str = "SecurePass123!") -> dict:
    """Register through the real endpoint and attach the bearer token to `client`."""
    response = await client.post(
        "/auth/register",
        json={
            "username": username,
            "email": f"{username}@example.com",
            "password": password,
        },
    )
    assert response.status_code == 201, f"Register failed: {response.text}"
    data = response.json()
    client.headers["Authorization"] = f"Bearer {data['token']}"
    return data


@pytest_asyncio.fixture
async def db_engine():
    """Create a fresh async engine with all tables for each test."""
    engine = create_async_engine(TEST_DATABASE_URL)
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Provide an async session bound to the test engine."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client_factory(session_factory):
    """
    Build any number of HTTP clients that share the test database.

    Overrides get_db so every request hits the in-memory test database.
    """

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    clients: list[AsyncClient] = []

    def make_client() -> AsyncClient:
        ac = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        clients.append(ac)
        return ac

    yield make_client

    for ac in clients:
        await ac.aclose()
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(client_factory):
    return client_factory()


@pytest_asyncio.fixture
async def authenticated_client(client_factory):
    ac = client_factory()
    await register_user(ac, "alice")
    return ac


@pytest_asyncio.fixture
async def second_authenticated_client(client_factory):
    """A second USER for cross-user authorization tests."""
    ac = client_factory()
    await register_user(ac, "bob", password="SecurePass456!")
    return ac


@pytest_asyncio.fixture
async def admin_client(client_factory, session_factory):
    """Register a user, then promote them to ADMIN directly in the DB."""
    ac = client_factory()
    data = await register_user(ac, "admin", password="AdminPass123!")

    async with session_factory() as session:
        await session.execute(
            update(User)
            .where(User.username == data["username"])
            .values(role=UserRole.ADMIN)
        )
        await session.commit()

    return ac
