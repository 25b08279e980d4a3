"""Shared Redis pool.

Redis is optional: the rate limiter skips counting and ``/ready`` reports a
degraded state when the pool was never initialized.
"""

import redis.asyncio as redis

KEY_PREFIX = "eduquest"

_pool: redis.Redis | None = None


def make_key(*parts: object) -> str:
    """Namespaced key, e.g. ``eduquest:ratelimit:10.0.0.1:29012345``."""
    return ":".join([KEY_PREFIX, *(str(p) for p in parts)])


async def init_redis(url: str) -> None:
    global _pool  # noqa: PLW0603
    _pool = redis.from_url(  # type: ignore[no-untyped-call]
        url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=50,
    )


async def close_redis() -> None:
    global _pool  # noqa: PLW0603
    if _pool:
        await _pool.aclose()
        _pool = None


def get_redis() -> redis.Redis:
    """The initialized pool. Raises RuntimeError before ``init_redis``."""
    if _pool is None:
        msg = "Redis not initialized. Call init_redis() first."
        raise RuntimeError(msg)
    return _pool
