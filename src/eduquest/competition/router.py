"""Leaderboard API endpoints."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query

from eduquest.auth.service import get_user
from eduquest.competition.leaderboard_service import get_leaderboard, get_user_rank
from eduquest.competition.schemas import LeaderboardEntry, UserRankResponse
from eduquest.config import get_settings
from eduquest.storage import Storage, get_storage

router = APIRouter(prefix="/api", tags=["Leaderboard"])

Timeframe = Literal["weekly", "monthly", "allTime"]


@router.get("/leaderboard", response_model=list[LeaderboardEntry])
async def leaderboard(
    timeframe: Timeframe = Query("weekly"),
    limit: int | None = Query(None, ge=1),
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> list[LeaderboardEntry]:
    """Top users by XP. Weekly and monthly rank XP earned since the period began."""
    settings = get_settings()
    if limit is None:
        limit = settings.leaderboard_default_limit
    limit = min(limit, settings.leaderboard_max_limit)
    return [LeaderboardEntry(**e) for e in await get_leaderboard(storage, timeframe, limit)]


@router.get("/users/{user_id}/rank", response_model=UserRankResponse)
async def user_rank(
    user_id: int,
    timeframe: Timeframe = Query("weekly"),
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> UserRankResponse:
    await get_user(storage, user_id)
    result = await get_user_rank(storage, user_id, timeframe)
    return UserRankResponse(
        timeframe=timeframe,
        rank=result.get("rank"),
        user_id=result.get("user_id"),
        username=result.get("username"),
        level=result.get("level"),
        xp=result.get("xp"),
        total=result.get("total"),
        percentile=result.get("percentile"),
    )
