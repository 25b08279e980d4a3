"""Leaderboard tests: timeframes, ordering and rank lookup."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from eduquest.competition.leaderboard_service import get_leaderboard, get_user_rank
from eduquest.competition.periods import calculate_percentile, get_monday, period_start
from eduquest.gamification.xp_service import grant_xp


class TestPeriods:
    """Window boundaries in UTC."""

    def test_weekly_starts_monday_midnight(self):
        wednesday = datetime(2026, 2, 25, 14, 30, tzinfo=timezone.utc)
        assert period_start("weekly", wednesday) == datetime(2026, 2, 23, tzinfo=timezone.utc)

    def test_monthly_starts_on_the_first(self):
        now = datetime(2026, 2, 25, 14, 30, tzinfo=timezone.utc)
        assert period_start("monthly", now) == datetime(2026, 2, 1, tzinfo=timezone.utc)

    def test_all_time_has_no_start(self):
        assert period_start("allTime") is None

    def test_unknown_timeframe(self):
        with pytest.raises(ValueError, match="Unknown timeframe"):
            period_start("daily")

    def test_sunday_belongs_to_previous_monday(self):
        sunday = datetime(2026, 3, 1, 23, 59, 59, tzinfo=timezone.utc)
        assert get_monday(sunday).isoformat() == "2026-02-23"

    @pytest.mark.parametrize(
        "rank,total,expected",
        [(1, 100, 99.0), (100, 100, 0.0), (1, 4, 75.0), (0, 10, 0.0), (1, 0, 0.0)],
    )
    def test_percentile(self, rank, total, expected):
        assert calculate_percentile(rank, total) == expected


class TestLeaderboard:
    """Ranking by XP."""

    @pytest.mark.asyncio
    async def test_all_time_orders_by_total_xp(self, storage, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob")
        await grant_xp(storage, alice.id, 100)
        await grant_xp(storage, bob.id, 200)

        entries = await get_leaderboard(storage, "allTime", 10)

        assert [(e["rank"], e["username"]) for e in entries] == [(1, "bob"), (2, "alice")]
        assert entries[0]["xp"] == 200
        assert entries[0]["avatar"] == "default"

    @pytest.mark.asyncio
    async def test_ties_broken_by_user_id(self, storage, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob")
        entries = await get_leaderboard(storage, "allTime", 10)
        assert [e["user_id"] for e in entries] == [alice.id, bob.id]

    @pytest.mark.asyncio
    async def test_limit(self, storage, make_user):
        await make_user("alice")
        await make_user("bob")
        assert len(await get_leaderboard(storage, "allTime", 1)) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("timeframe", ["weekly", "monthly"])
    async def test_periodic_boards_sum_the_ledger(self, storage, make_user, timeframe):
        alice = await make_user("alice")
        bob = await make_user("bob")
        await grant_xp(storage, alice.id, 30)
        await grant_xp(storage, bob.id, 5)

        entries = await get_leaderboard(storage, timeframe, 10)
        assert [(e["user_id"], e["xp"]) for e in entries] == [(alice.id, 30), (bob.id, 5)]

    @pytest.mark.asyncio
    async def test_xp_outside_the_window_is_ignored(self, storage, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob")
        await grant_xp(storage, bob.id, 500)

        next_month = datetime.now(timezone.utc) + timedelta(days=40)
        entries = await get_leaderboard(storage, "weekly", 10, now=next_month)

        assert all(e["xp"] == 0 for e in entries)
        assert entries[0]["user_id"] == alice.id


class TestUserRank:
    """A single user's standing."""

    @pytest.mark.asyncio
    async def test_rank_with_percentile(self, storage, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob")
        await grant_xp(storage, bob.id, 50)

        result = await get_user_rank(storage, alice.id, "allTime")
        assert result["rank"] == 2
        assert result["total"] == 2
        assert result["percentile"] == 0.0

    @pytest.mark.asyncio
    async def test_unranked_user(self, storage, make_user):
        await make_user("alice")
        assert await get_user_rank(storage, 999, "allTime") == {"rank": None}
