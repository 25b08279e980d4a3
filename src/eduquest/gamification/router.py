"""Gamification API endpoints: stats, rewards, cosmetics and achievements."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from eduquest.gamification.achievement_service import check_achievements, list_user_achievements
from eduquest.gamification.schemas import (
    AchievementCondition,
    AchievementResponse,
    CheckAchievementsRequest,
    CheckAchievementsResponse,
    GrantCurrencyRequest,
    GrantXPRequest,
    SelectAvatarRequest,
    SelectTitleRequest,
    UserStatResponse,
)
from eduquest.gamification.xp_service import get_stats, grant_currency, grant_xp, select_avatar, select_title
from eduquest.storage import Storage, get_storage

router = APIRouter(prefix="/api", tags=["Gamification"])


# ── Stats & Rewards ──


@router.get("/users/{user_id}/stats", response_model=UserStatResponse)
async def get_user_stats(
    user_id: int,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> UserStatResponse:
    return UserStatResponse.from_stats(await get_stats(storage, user_id))


@router.post("/users/{user_id}/xp", response_model=UserStatResponse)
async def add_xp(
    user_id: int,
    body: GrantXPRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> UserStatResponse:
    """Grant XP; level-ups credit bonus currency and re-check level achievements."""
    stats = await grant_xp(storage, user_id, body.amount)
    await storage.commit()
    return UserStatResponse.from_stats(stats)


@router.post("/users/{user_id}/currency", response_model=UserStatResponse)
async def add_currency(
    user_id: int,
    body: GrantCurrencyRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> UserStatResponse:
    stats = await grant_currency(storage, user_id, body.coins, body.gems)
    await storage.commit()
    return UserStatResponse.from_stats(stats)


@router.post("/users/{user_id}/avatar", response_model=UserStatResponse)
@router.put("/users/{user_id}/avatar", response_model=UserStatResponse, include_in_schema=False)
async def update_avatar(
    user_id: int,
    body: SelectAvatarRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> UserStatResponse:
    stats = await select_avatar(storage, user_id, body.avatar_id)
    await storage.commit()
    return UserStatResponse.from_stats(stats)


@router.post("/users/{user_id}/title", response_model=UserStatResponse)
@router.put("/users/{user_id}/title", response_model=UserStatResponse, include_in_schema=False)
async def update_title(
    user_id: int,
    body: SelectTitleRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> UserStatResponse:
    stats = await select_title(storage, user_id, body.title_id)
    await storage.commit()
    return UserStatResponse.from_stats(stats)


# ── Achievements ──


@router.get("/users/{user_id}/achievements", response_model=list[AchievementResponse])
async def get_achievements(
    user_id: int,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> list[AchievementResponse]:
    """Full achievement catalog with the user's unlock status."""
    return [
        AchievementResponse(
            id=a["id"],
            title=a["title"],
            description=a["description"],
            category=a["category"],
            icon=a["icon"],
            condition=AchievementCondition(type=a["condition_type"], value=a["condition_value"]),
            xp_reward=a["xp_reward"],
            coin_reward=a["coin_reward"],
            gem_reward=a["gem_reward"],
            is_unlocked=a["is_unlocked"],
            unlocked_at=a["unlocked_at"],
        )
        for a in await list_user_achievements(storage, user_id)
    ]


@router.post("/users/{user_id}/achievements/check", response_model=CheckAchievementsResponse)
async def check_user_achievements(
    user_id: int,
    body: CheckAchievementsRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> CheckAchievementsResponse:
    newly_unlocked = await check_achievements(storage, user_id, body.type, body.value)
    await storage.commit()
    return CheckAchievementsResponse(newly_unlocked=newly_unlocked)
