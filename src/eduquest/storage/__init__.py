"""Storage backend selection and the FastAPI dependency that hands it out."""

from __future__ import annotations

from collections.abc import AsyncGenerator

from eduquest.config import Settings
from eduquest.database import close_db, init_db, open_session
from eduquest.storage.base import Storage
from eduquest.storage.memory import MemStorage
from eduquest.storage.sql import SqlStorage

__all__ = ["MemStorage", "SqlStorage", "Storage", "close_storage", "get_storage", "init_storage"]

_backend: str | None = None
_memory: MemStorage | None = None


async def init_storage(settings: Settings) -> None:
    """Initialize the configured backend."""
    global _backend, _memory  # noqa: PLW0603
    _backend = settings.storage_backend
    if _backend == "database":
        await init_db(settings)
    else:
        _memory = MemStorage()


async def close_storage() -> None:
    """Release backend resources."""
    global _backend, _memory  # noqa: PLW0603
    if _backend == "database":
        await close_db()
    _backend = None
    _memory = None


async def get_storage() -> AsyncGenerator[Storage, None]:
    """Yield a storage handle for one request (FastAPI dependency)."""
    if _backend is None:
        msg = "Storage not initialized. Call init_storage() first."
        raise RuntimeError(msg)
    if _memory is not None:
        yield _memory
        return
    async for session in open_session():
        yield SqlStorage(session)
