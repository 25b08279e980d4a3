"""Level curve tests for users and subjects."""

import random

import pytest

from eduquest.gamification.levels import (
    compute_level,
    subject_level,
    subject_xp_for_next_level,
    user_level,
    user_xp_for_next_level,
)
from eduquest.gamification.xp_service import grant_xp


class TestUserLevel:
    """User level = floor(sqrt(xp / 10)) + 1."""

    @pytest.mark.parametrize(
        "xp,expected_level",
        [
            (0, 1),
            (9, 1),
            (10, 2),
            (39, 2),
            (40, 3),
            (89, 3),
            (90, 4),
            (160, 5),
            (1000, 11),
            (3610, 20),
        ],
    )
    def test_level_boundaries(self, xp, expected_level):
        assert user_level(xp) == expected_level

    def test_negative_xp_clamps_to_level_1(self):
        assert user_level(-500) == 1

    def test_next_level_threshold(self):
        assert user_xp_for_next_level(1) == 10
        assert user_xp_for_next_level(2) == 40
        assert user_xp_for_next_level(10) == 1000

    def test_threshold_is_first_xp_of_next_level(self):
        for level in range(1, 30):
            threshold = user_xp_for_next_level(level)
            assert user_level(threshold - 1) == level
            assert user_level(threshold) == level + 1


class TestSubjectLevel:
    """Subject level = floor(cbrt(xp / 5)) + 1."""

    @pytest.mark.parametrize(
        "xp,expected_level",
        [
            (0, 1),
            (4, 1),
            (5, 2),
            (39, 2),
            (40, 3),
            (60, 3),
            (135, 4),
            (320, 5),
            (624, 5),
            (625, 6),
        ],
    )
    def test_level_boundaries(self, xp, expected_level):
        assert subject_level(xp) == expected_level

    def test_perfect_cubes_land_on_boundary(self):
        for level in range(1, 40):
            threshold = subject_xp_for_next_level(level)
            assert subject_level(threshold - 1) == level
            assert subject_level(threshold) == level + 1

    def test_negative_xp_clamps_to_level_1(self):
        assert subject_level(-1) == 1


class TestComputeLevel:
    """Progress-bar info."""

    def test_zero_xp(self):
        result = compute_level(0)
        assert result == {"level": 1, "xp_into_level": 0, "xp_for_level": 10, "next_level_xp": 10}

    def test_mid_level(self):
        result = compute_level(50)  # level 3 spans 40..89
        assert result["level"] == 3
        assert result["xp_into_level"] == 10
        assert result["xp_for_level"] == 50
        assert result["next_level_xp"] == 90

    def test_exact_boundary(self):
        result = compute_level(40)
        assert result["level"] == 3
        assert result["xp_into_level"] == 0


class TestLevelMonotonicity:
    """Non-negative XP grants never lower a level."""

    def test_curves_never_decrease(self):
        previous_user, previous_subject = 1, 1
        for xp in range(0, 5000, 7):
            assert user_level(xp) >= previous_user
            assert subject_level(xp) >= previous_subject
            previous_user, previous_subject = user_level(xp), subject_level(xp)

    @pytest.mark.asyncio
    async def test_grant_sequence_never_lowers_level(self, storage, user):
        rng = random.Random(20261019)
        previous = 1
        for _ in range(60):
            stats = await grant_xp(storage, user.id, rng.randint(0, 120))
            assert stats.level >= previous
            assert stats.level == user_level(stats.xp)
            previous = stats.level
        assert previous > 1
