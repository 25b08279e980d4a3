"""Pydantic models for leaderboard endpoints."""

from __future__ import annotations

from eduquest.schemas import CamelModel


class LeaderboardEntry(CamelModel):
    rank: int
    user_id: int
    username: str
    level: int
    xp: int
    avatar: str
    title: str


class UserRankResponse(CamelModel):
    timeframe: str
    rank: int | None = None
    user_id: int | None = None
    username: str | None = None
    level: int | None = None
    xp: int | None = None
    total: int | None = None
    percentile: float | None = None
