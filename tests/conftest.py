"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from eduquest.auth.service import register_user
from eduquest.db.base import Base
from eduquest.db.models import User
from eduquest.main import create_app
from eduquest.storage import MemStorage, SqlStorage, Storage, get_storage


@pytest_asyncio.fixture(params=["memory", "sql"])
async def storage(request: pytest.FixtureRequest) -> AsyncGenerator[Storage, None]:
    """Every service test runs against both backends.

    The SQL backend uses an in-memory SQLite database with the ORM schema.
    """
    if request.param == "memory":
        yield MemStorage()
        return

    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield SqlStorage(session)

    await engine.dispose()


@pytest.fixture
def make_user(storage: Storage) -> Callable[[str], Awaitable[User]]:
    """Register users with stats, default subjects and starter quests."""

    async def _make(username: str) -> User:
        return await register_user(storage, username, "correct horse battery staple")

    return _make


@pytest_asyncio.fixture
async def user(make_user: Callable[[str], Awaitable[User]]) -> User:
    return await make_user("alice")


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against a fresh app whose storage is a private MemStorage."""
    app = create_app()
    mem = MemStorage()

    async def _storage_override() -> AsyncGenerator[Storage, None]:
        yield mem

    app.dependency_overrides[get_storage] = _storage_override

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def api_register(client: AsyncClient) -> Callable[..., Awaitable[dict]]:
    """Register through the API and return the user payload."""

    async def _register(username: str, password: str = "hunter22") -> dict:
        response = await client.post("/api/auth/register", json={"username": username, "password": password})
        assert response.status_code == 201, response.text
        return response.json()

    return _register
