"""Achievement engine: evaluates unlock conditions and grants one-time rewards.

Rules:
- An achievement unlocks at most once per user and never re-locks
- All satisfied achievements of the checked condition type unlock in one pass
- ``level`` conditions compare against the live level on the stat record
- Unlocking adds the achievement title to the user's unlocked titles
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from eduquest.db.models import AchievementUnlock
from eduquest.errors import ValidationError
from eduquest.gamification.catalog import ACHIEVEMENTS, CONDITION_TYPES, LEVEL
from eduquest.gamification.xp_service import get_stats, grant_currency, grant_xp
from eduquest.storage.base import Storage

logger = logging.getLogger(__name__)


async def get_unlocked_ids(storage: Storage, user_id: int) -> set[str]:
    """IDs of every achievement the user has unlocked."""
    return {u.achievement_id for u in await storage.list_achievement_unlocks(user_id)}


async def check_achievements(
    storage: Storage,
    user_id: int,
    condition_type: str,
    current_value: int,
) -> list[str]:
    """Unlock every achievement of ``condition_type`` satisfied by ``current_value``.

    Returns the IDs unlocked by this call (may be empty).
    """
    if condition_type not in CONDITION_TYPES:
        raise ValidationError(f"Unknown condition type: {condition_type}")

    stats = await get_stats(storage, user_id)
    if condition_type == LEVEL:
        current_value = stats.level

    unlocked = await get_unlocked_ids(storage, user_id)
    candidates = [
        a for a in ACHIEVEMENTS
        if a["condition_type"] == condition_type
        and a["condition_value"] <= current_value
        and a["id"] not in unlocked
    ]

    newly_unlocked: list[str] = []
    for achievement in candidates:
        # Rewards below can level the user up and re-enter this function.
        if achievement["id"] in await get_unlocked_ids(storage, user_id):
            continue

        await storage.add_achievement_unlock(AchievementUnlock(
            user_id=user_id,
            achievement_id=achievement["id"],
            unlocked_at=datetime.now(timezone.utc),
        ))
        if achievement["title"] not in stats.unlocked_titles:
            stats.unlocked_titles = [*stats.unlocked_titles, achievement["title"]]
        newly_unlocked.append(achievement["id"])
        logger.info("Achievement unlocked: %s (user=%d)", achievement["id"], user_id)

        if achievement["xp_reward"]:
            await grant_xp(storage, user_id, achievement["xp_reward"], source="achievement", source_id=achievement["id"])
        await grant_currency(storage, user_id, achievement["coin_reward"], achievement["gem_reward"])

    return newly_unlocked


async def list_user_achievements(storage: Storage, user_id: int) -> list[dict]:
    """Full catalog merged with the user's unlock status."""
    await get_stats(storage, user_id)
    unlocks = {u.achievement_id: u.unlocked_at for u in await storage.list_achievement_unlocks(user_id)}
    return [
        {
            **achievement,
            "is_unlocked": achievement["id"] in unlocks,
            "unlocked_at": unlocks.get(achievement["id"]),
        }
        for achievement in ACHIEVEMENTS
    ]
