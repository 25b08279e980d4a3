"""Quest engine: progress tracking, completion, rewards and cross-quest cascades.

Rules:
- Progress is clamped to [0, max_progress]; reaching the maximum completes the quest
- Completion is terminal and grants the reward triple exactly once
- Completing a daily quest advances every active quest triggered by daily completions
- Daily quests are regenerated at most once per UTC day, lazily on read or on demand
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from eduquest.db.models import Quest, UserStat
from eduquest.errors import ConflictError, NotFoundError, ValidationError
from eduquest.gamification.achievement_service import check_achievements
from eduquest.gamification.catalog import EPIC_QUESTS_COMPLETED, QUESTS_COMPLETED
from eduquest.gamification.xp_service import get_stats, grant_currency, grant_xp
from eduquest.quests.catalog import (
    ABSOLUTE_TRIGGERS,
    DAILY,
    DAILY_QUEST_COMPLETED,
    DAILY_QUESTS,
    DIFFICULTIES,
    EPIC,
    EPIC_QUESTS,
    QUEST_TYPES,
)
from eduquest.storage.base import Storage

logger = logging.getLogger(__name__)


def _quest_from_template(user_id: int, quest_type: str, template: dict, now: datetime) -> Quest:
    return Quest(
        user_id=user_id,
        title=template["title"],
        description=template["description"],
        type=quest_type,
        difficulty=template["difficulty"],
        xp_reward=template["xp_reward"],
        coin_reward=template["coin_reward"],
        gem_reward=template["gem_reward"],
        is_completed=False,
        progress=0,
        max_progress=template["max_progress"],
        trigger=template["trigger"],
        created_at=now,
        completed_at=None,
    )


async def get_quest(storage: Storage, quest_id: int, user_id: int | None = None) -> Quest:
    """Load a quest, optionally checking it belongs to ``user_id``."""
    quest = await storage.get_quest(quest_id)
    if quest is None or (user_id is not None and quest.user_id != user_id):
        raise NotFoundError("Quest not found")
    return quest


async def create_starter_quests(storage: Storage, user_id: int, now: datetime) -> list[Quest]:
    """Create the daily and epic catalog quests for a new user."""
    stats = await get_stats(storage, user_id)
    quests = [
        await storage.add_quest(_quest_from_template(user_id, DAILY, t, now)) for t in DAILY_QUESTS
    ]
    quests += [
        await storage.add_quest(_quest_from_template(user_id, EPIC, t, now)) for t in EPIC_QUESTS
    ]
    stats.last_quest_refresh = now
    return quests


async def refresh_daily_quests(storage: Storage, user_id: int, now: datetime | None = None) -> list[Quest]:
    """Replace all of a user's daily quests with a fresh copy of the daily catalog."""
    if now is None:
        now = datetime.now(timezone.utc)
    stats = await get_stats(storage, user_id)

    for quest in await storage.list_quests(user_id, DAILY):
        await storage.delete_quest(quest)

    quests = [
        await storage.add_quest(_quest_from_template(user_id, DAILY, t, now)) for t in DAILY_QUESTS
    ]
    stats.last_quest_refresh = now
    logger.info("Daily quests refreshed for user %d", user_id)
    return quests


async def ensure_daily_quests(storage: Storage, user_id: int, now: datetime | None = None) -> bool:
    """Refresh daily quests if they were last generated on an earlier UTC day.

    Returns True if a refresh happened.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    stats = await get_stats(storage, user_id)
    last = stats.last_quest_refresh
    if last is not None and last.date() >= now.date():
        return False
    await refresh_daily_quests(storage, user_id, now)
    return True


async def request_daily_refresh(storage: Storage, user_id: int, now: datetime | None = None) -> list[Quest]:
    """On-demand refresh. Regenerates only on a new UTC day, then returns the current dailies."""
    await ensure_daily_quests(storage, user_id, now)
    return await storage.list_quests(user_id, DAILY)


async def list_quests(
    storage: Storage,
    user_id: int,
    quest_type: str | None = None,
    now: datetime | None = None,
) -> list[Quest]:
    await ensure_daily_quests(storage, user_id, now)
    return await storage.list_quests(user_id, quest_type)


async def create_custom_quest(
    storage: Storage,
    user_id: int,
    *,
    title: str,
    description: str,
    quest_type: str,
    difficulty: str,
    xp_reward: int,
    coin_reward: int,
    gem_reward: int,
    max_progress: int,
) -> Quest:
    """Create a user-defined quest. Custom quests have no automatic trigger."""
    await get_stats(storage, user_id)
    if quest_type not in QUEST_TYPES:
        raise ValidationError(f"Unknown quest type: {quest_type}")
    if difficulty not in DIFFICULTIES:
        raise ValidationError(f"Unknown difficulty: {difficulty}")
    if max_progress < 1:
        raise ValidationError("maxProgress must be at least 1")
    template = {
        "title": title,
        "description": description,
        "difficulty": difficulty,
        "xp_reward": xp_reward,
        "coin_reward": coin_reward,
        "gem_reward": gem_reward,
        "max_progress": max_progress,
        "trigger": None,
    }
    quest = await storage.add_quest(
        _quest_from_template(user_id, quest_type, template, datetime.now(timezone.utc))
    )
    logger.info("Custom quest created: %s (id=%d, user=%d)", title, quest.id, user_id)
    return quest


async def update_progress(storage: Storage, quest_id: int, new_progress: int) -> Quest:
    """Set quest progress, clamped to [0, max_progress].

    Reaching max_progress completes the quest. Completed quests are left untouched.
    """
    quest = await get_quest(storage, quest_id)
    if quest.is_completed:
        return quest

    quest.progress = max(0, min(new_progress, quest.max_progress))
    if quest.progress >= quest.max_progress:
        await complete_quest(storage, quest_id)
    return quest


async def complete_quest(storage: Storage, quest_id: int) -> tuple[Quest, UserStat]:
    """Complete a quest and grant its rewards.

    After completing:
    1. Grant XP, coins and gems from the quest
    2. Bump completion counters and check quest achievements
    3. For daily quests, advance quests triggered by daily completions
    """
    quest = await get_quest(storage, quest_id)
    if quest.is_completed:
        raise ConflictError("Quest already completed")

    quest.is_completed = True
    quest.progress = quest.max_progress
    quest.completed_at = datetime.now(timezone.utc)

    stats = await grant_xp(storage, quest.user_id, quest.xp_reward, source="quest", source_id=str(quest.id))
    await grant_currency(storage, quest.user_id, quest.coin_reward, quest.gem_reward)
    logger.info("Quest completed: %s (id=%d, user=%d)", quest.title, quest.id, quest.user_id)

    stats.quests_completed += 1
    await check_achievements(storage, quest.user_id, QUESTS_COMPLETED, stats.quests_completed)
    if quest.type == EPIC:
        stats.epic_quests_completed += 1
        await check_achievements(storage, quest.user_id, EPIC_QUESTS_COMPLETED, stats.epic_quests_completed)

    if quest.type == DAILY:
        await advance_quests(storage, quest.user_id, DAILY_QUEST_COMPLETED)

    return quest, stats


async def advance_quests(storage: Storage, user_id: int, trigger: str, amount: int = 1) -> list[Quest]:
    """Advance every active quest carrying ``trigger``.

    Counting triggers add ``amount``; absolute triggers raise progress to ``amount``.
    Returns the quests that were touched.
    """
    touched: list[Quest] = []
    for quest in await storage.list_quests(user_id):
        if quest.trigger != trigger or quest.is_completed:
            continue
        if trigger in ABSOLUTE_TRIGGERS:
            target = max(quest.progress, amount)
        else:
            target = quest.progress + amount
        touched.append(await update_progress(storage, quest.id, target))
    return touched
