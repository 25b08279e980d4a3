"""Engine and sessions for the ``database`` storage backend.

Only initialized when ``EDUQUEST_STORAGE_BACKEND=database``. Each request gets
its own session; ``SqlStorage`` commits it explicitly and anything left
uncommitted is rolled back when the session closes.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from eduquest.config import Settings

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _engine_options(settings: Settings) -> dict[str, object]:
    options: dict[str, object] = {"echo": settings.db_echo, "pool_pre_ping": True}
    # SQLite pools take no sizing arguments
    if make_url(settings.database_url).get_backend_name() != "sqlite":
        options["pool_size"] = settings.db_pool_size
        options["max_overflow"] = settings.db_max_overflow
    return options


async def init_db(settings: Settings) -> None:
    """Create the engine and session factory from settings."""
    global _engine, _session_factory  # noqa: PLW0603
    _engine = create_async_engine(settings.database_url, **_engine_options(settings))
    _session_factory = async_sessionmaker(_engine, class_=AsyncSession, expire_on_commit=False)


async def close_db() -> None:
    global _engine, _session_factory  # noqa: PLW0603
    if _engine:
        await _engine.dispose()
        _engine = None
        _session_factory = None


async def open_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield one session for the lifetime of a request."""
    if _session_factory is None:
        msg = "Database backend not initialized. Call init_db() first."
        raise RuntimeError(msg)
    async with _session_factory() as session:
        yield session
