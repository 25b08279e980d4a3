"""Reward granter: XP, currency and cosmetic selection on the user stat record."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from eduquest.config import get_settings
from eduquest.db.models import UserStat, XPLedger
from eduquest.errors import ForbiddenError, NotFoundError
from eduquest.gamification.catalog import LEVEL
from eduquest.gamification.levels import user_level
from eduquest.storage.base import Storage

logger = logging.getLogger(__name__)

DEFAULT_AVATAR = "default"
DEFAULT_TITLE = "Novice"


def new_user_stats(user_id: int, now: datetime) -> UserStat:
    """Starting stat record for a freshly registered user."""
    return UserStat(
        user_id=user_id,
        level=1,
        xp=0,
        coins=0,
        gems=0,
        streak=0,
        selected_avatar=DEFAULT_AVATAR,
        selected_title=DEFAULT_TITLE,
        unlocked_avatars=[DEFAULT_AVATAR],
        unlocked_titles=[DEFAULT_TITLE],
        last_login=now,
        study_sessions=0,
        quests_completed=0,
        epic_quests_completed=0,
        last_quest_refresh=None,
    )


async def get_stats(storage: Storage, user_id: int) -> UserStat:
    """Load a user's stats or raise NotFoundError."""
    stats = await storage.get_user_stats(user_id)
    if stats is None:
        raise NotFoundError("User stats not found")
    return stats


async def grant_xp(
    storage: Storage,
    user_id: int,
    amount: int,
    source: str = "manual",
    source_id: str | None = None,
) -> UserStat:
    """Grant XP to a user and return the updated stats.

    After granting:
    1. Append an entry to the XP ledger
    2. Recompute level from total XP
    3. If the level rose by N, credit N × level_up_coin_bonus coins and N × level_up_gem_bonus gems
    4. If the level rose, re-check level achievements
    """
    stats = await get_stats(storage, user_id)

    await storage.add_xp_entry(XPLedger(
        user_id=user_id,
        amount=amount,
        source=source,
        source_id=source_id,
        created_at=datetime.now(timezone.utc),
    ))

    old_level = stats.level
    stats.xp += amount
    stats.level = user_level(stats.xp)

    levels_gained = stats.level - old_level
    if levels_gained > 0:
        settings = get_settings()
        stats.coins += levels_gained * settings.level_up_coin_bonus
        stats.gems += levels_gained * settings.level_up_gem_bonus
        logger.info("User %d levelled up: %d -> %d", user_id, old_level, stats.level)

        from eduquest.gamification.achievement_service import check_achievements

        await check_achievements(storage, user_id, LEVEL, stats.level)

    return stats


async def grant_currency(storage: Storage, user_id: int, coins: int = 0, gems: int = 0) -> UserStat:
    """Credit coins and gems. No caps, no balance checks."""
    stats = await get_stats(storage, user_id)
    stats.coins += coins
    stats.gems += gems
    return stats


async def select_avatar(storage: Storage, user_id: int, avatar_id: str) -> UserStat:
    stats = await get_stats(storage, user_id)
    if avatar_id not in stats.unlocked_avatars:
        raise ForbiddenError("Avatar not unlocked")
    stats.selected_avatar = avatar_id
    return stats


async def select_title(storage: Storage, user_id: int, title: str) -> UserStat:
    stats = await get_stats(storage, user_id)
    if title not in stats.unlocked_titles:
        raise ForbiddenError("Title not unlocked")
    stats.selected_title = title
    return stats
