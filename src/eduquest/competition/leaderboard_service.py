"""Leaderboard service: ranks users by XP over a timeframe.

All-time ranking reads the denormalized XP on each stat record. Weekly and
monthly rankings sum the XP ledger from the start of the current ISO week or
calendar month. Ties are broken by user id.
"""

from __future__ import annotations

from datetime import datetime

from eduquest.competition.periods import calculate_percentile, period_start
from eduquest.storage.base import Storage


async def _ranked_entries(storage: Storage, timeframe: str, now: datetime | None = None) -> list[dict]:
    since = period_start(timeframe, now)
    stats_list = await storage.list_user_stats()
    users = {u.id: u for u in await storage.list_users([s.user_id for s in stats_list])}

    if since is None:
        scores = {s.user_id: s.xp for s in stats_list}
    else:
        totals = await storage.xp_totals_since(since)
        scores = {s.user_id: totals.get(s.user_id, 0) for s in stats_list}

    ordered = sorted(stats_list, key=lambda s: (-scores[s.user_id], s.user_id))
    entries = []
    for rank, stats in enumerate(ordered, start=1):
        user = users.get(stats.user_id)
        entries.append({
            "rank": rank,
            "user_id": stats.user_id,
            "username": user.username if user else f"user-{stats.user_id}",
            "level": stats.level,
            "xp": scores[stats.user_id],
            "avatar": stats.selected_avatar,
            "title": stats.selected_title,
        })
    return entries


async def get_leaderboard(
    storage: Storage,
    timeframe: str,
    limit: int,
    now: datetime | None = None,
) -> list[dict]:
    """Top ``limit`` users for the timeframe."""
    entries = await _ranked_entries(storage, timeframe, now)
    return entries[:limit]


async def get_user_rank(
    storage: Storage,
    user_id: int,
    timeframe: str,
    now: datetime | None = None,
) -> dict:
    """A single user's leaderboard entry, or ``{"rank": None}`` if they are not ranked."""
    entries = await _ranked_entries(storage, timeframe, now)
    for entry in entries:
        if entry["user_id"] == user_id:
            return {**entry, "total": len(entries), "percentile": calculate_percentile(entry["rank"], len(entries))}
    return {"rank": None}
