"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from eduquest.auth.router import router as auth_router
from eduquest.competition.router import router as competition_router
from eduquest.config import get_settings
from eduquest.gamification.router import router as gamification_router
from eduquest.health.router import router as health_router
from eduquest.middleware import setup_middleware
from eduquest.quests.router import router as quests_router
from eduquest.redis_client import close_redis, init_redis
from eduquest.social.router import router as social_router
from eduquest.storage import close_storage, init_storage
from eduquest.subjects.router import router as subjects_router


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_storage(settings)
    await init_redis(settings.redis_url)

    yield

    await close_storage()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="EduQuest API",
        description="Backend API for EduQuest, a gamified study tracker",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(gamification_router)
    app.include_router(subjects_router)
    app.include_router(quests_router)
    app.include_router(competition_router)
    app.include_router(social_router)

    return app


app = create_app()
