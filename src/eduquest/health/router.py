"""Health, readiness, and version endpoints."""

from fastapi import APIRouter, Depends

from eduquest.config import get_settings
from eduquest.redis_client import get_redis
from eduquest.storage import Storage, get_storage

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe: 200 while the process is alive."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness(
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> dict[str, object]:
    """Readiness probe: checks the storage backend and Redis."""
    checks: dict[str, object] = {}

    try:
        await storage.ping()
        checks["storage"] = "ok"
    except Exception as exc:
        checks["storage"] = f"error: {exc}"

    try:
        redis = get_redis()
        await redis.ping()
        checks["redis"] = "ok"
    except Exception as exc:
        checks["redis"] = f"error: {exc}"

    all_ok = all(v == "ok" for v in checks.values())
    return {"status": "ready" if all_ok else "degraded", "checks": checks}


@router.get("/version")
async def version() -> dict[str, str]:
    """Return API version, environment and storage backend."""
    settings = get_settings()
    return {
        "version": settings.app_version,
        "environment": settings.environment,
        "storage": settings.storage_backend,
    }
