"""Middleware tests: request ID, rate limiting, CORS, error handling."""

from typing import Any

import pytest
from httpx import AsyncClient

from eduquest.middleware import rate_limit


class _CountingPipeline:
    def __init__(self, counts: dict[str, int]) -> None:
        self._counts = counts
        self._key = ""

    def incr(self, key: str) -> None:
        self._key = key

    def expire(self, _key: str, _seconds: int) -> None:
        pass

    async def execute(self) -> list[Any]:
        self._counts[self._key] = self._counts.get(self._key, 0) + 1
        return [self._counts[self._key], True]


class _CountingRedis:
    """Just enough of the Redis client for the fixed window counter."""

    def __init__(self) -> None:
        self.counts: dict[str, int] = {}

    def pipeline(self) -> _CountingPipeline:
        return _CountingPipeline(self.counts)


@pytest.mark.asyncio
async def test_request_id_generated(client: AsyncClient) -> None:
    """Request ID is auto-generated when not provided."""
    response = await client.get("/health")
    assert "x-request-id" in response.headers
    assert len(response.headers["x-request-id"]) == 36  # UUID format


@pytest.mark.asyncio
async def test_request_id_preserved(client: AsyncClient) -> None:
    """Custom request ID is echoed back in response."""
    response = await client.get("/health", headers={"X-Request-Id": "test-abc-123"})
    assert response.headers["x-request-id"] == "test-abc-123"


@pytest.mark.asyncio
async def test_no_rate_limit_headers_without_redis(client: AsyncClient) -> None:
    response = await client.get("/version")
    assert response.status_code == 200
    assert "x-ratelimit-limit" not in response.headers


@pytest.mark.asyncio
async def test_rate_limit_blocks_excess(client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
    """101st request in a window returns 429 with Retry-After."""
    fake = _CountingRedis()
    monkeypatch.setattr(rate_limit, "get_redis", lambda: fake)

    for _ in range(100):
        response = await client.get("/version")
    assert response.headers["x-ratelimit-remaining"] == "0"

    response = await client.get("/version")
    assert response.status_code == 429
    assert "retry-after" in response.headers
    assert response.json() == {"message": "Rate limit exceeded. Try again later."}


@pytest.mark.asyncio
async def test_health_exempt_from_rate_limit(client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
    fake = _CountingRedis()
    monkeypatch.setattr(rate_limit, "get_redis", lambda: fake)

    for _ in range(150):
        response = await client.get("/health")
        assert response.status_code == 200
    assert fake.counts == {}


@pytest.mark.asyncio
async def test_cors_preflight(client: AsyncClient) -> None:
    """CORS preflight returns access-control-allow-origin for configured origin."""
    response = await client.options(
        "/api/leaderboard",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"


@pytest.mark.asyncio
async def test_not_found_shape(client: AsyncClient) -> None:
    """Unknown routes use the same error body as domain errors."""
    response = await client.get("/api/nope")
    assert response.status_code == 404
    assert response.json() == {"message": "Not Found"}


@pytest.mark.asyncio
async def test_malformed_json_is_400(client: AsyncClient) -> None:
    response = await client.post(
        "/api/auth/register",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Validation error"


@pytest.mark.asyncio
async def test_oversized_request_id_truncated(client: AsyncClient) -> None:
    response = await client.get("/health", headers={"X-Request-Id": "x" * 500})
    assert response.headers["x-request-id"] == "x" * 128


@pytest.mark.asyncio
async def test_rate_limit_keys_are_namespaced(client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
    fake = _CountingRedis()
    monkeypatch.setattr(rate_limit, "get_redis", lambda: fake)

    await client.get("/version")
    (key,) = fake.counts
    assert key.startswith("eduquest:ratelimit:")
