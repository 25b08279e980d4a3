"""Daily login streak tracking.

Streak rules (UTC calendar days):
- Login on the same day as the last login: unchanged
- Login on the day after the last login: +1
- Any longer gap: reset to 1
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from eduquest.db.models import UserStat
from eduquest.gamification.achievement_service import check_achievements
from eduquest.gamification.catalog import STREAK
from eduquest.gamification.xp_service import get_stats
from eduquest.storage.base import Storage

logger = logging.getLogger(__name__)


def days_between(earlier: datetime, later: datetime) -> int:
    """Number of calendar-day boundaries between two instants."""
    return (later.date() - earlier.date()).days


def next_streak(current: int, last_login: datetime, now: datetime) -> int:
    gap = days_between(last_login, now)
    if gap <= 0:
        return current
    if gap == 1:
        return current + 1
    return 1


async def update_login_streak(storage: Storage, user_id: int, now: datetime | None = None) -> UserStat:
    """Advance or reset the streak for a login at ``now``, then check streak achievements."""
    if now is None:
        now = datetime.now(timezone.utc)

    stats = await get_stats(storage, user_id)
    previous = stats.streak
    stats.streak = next_streak(stats.streak, stats.last_login, now)
    stats.last_login = now

    if stats.streak != previous:
        logger.info("Streak for user %d: %d -> %d", user_id, previous, stats.streak)

    await check_achievements(storage, user_id, STREAK, stats.streak)
    return stats
