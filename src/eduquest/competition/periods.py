"""Leaderboard timeframe boundaries (UTC)."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

WEEKLY = "weekly"
MONTHLY = "monthly"
ALL_TIME = "allTime"


def get_monday(dt: datetime | date) -> date:
    """Get the Monday of the ISO week containing dt."""
    d = dt.date() if isinstance(dt, datetime) else dt
    return d - timedelta(days=d.weekday())


def period_start(timeframe: str, now: datetime | None = None) -> datetime | None:
    """Start of the window a timeframe covers, or None for all-time."""
    if now is None:
        now = datetime.now(timezone.utc)
    if timeframe == WEEKLY:
        return datetime.combine(get_monday(now), time.min, tzinfo=timezone.utc)
    if timeframe == MONTHLY:
        return datetime.combine(now.date().replace(day=1), time.min, tzinfo=timezone.utc)
    if timeframe == ALL_TIME:
        return None
    raise ValueError(f"Unknown timeframe: {timeframe}")


def calculate_percentile(rank: int, total: int) -> float:
    """Calculate percentile from rank and total participants.

    Rank 1 out of 100 → 99.0 (top 1%)
    Rank 100 out of 100 → 0.0 (bottom)
    """
    if total <= 0 or rank <= 0:
        return 0.0
    return round(100 - (rank / total * 100), 2)
