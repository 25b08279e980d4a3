"""Level curves for users and subjects.

User:    level = floor(sqrt(xp / 10)) + 1, next threshold = level² × 10
Subject: level = floor(cbrt(xp / 5)) + 1,  next threshold = level³ × 5

Computed with integer roots so perfect squares and cubes land exactly on
their level boundary. Negative XP clamps to level 1.
"""

from __future__ import annotations

import math

USER_XP_DIVISOR = 10
SUBJECT_XP_DIVISOR = 5


def _icbrt(n: int) -> int:
    """Largest integer r with r**3 <= n, for n >= 0."""
    r = round(n ** (1 / 3))
    while r**3 > n:
        r -= 1
    while (r + 1) ** 3 <= n:
        r += 1
    return r


def user_level(xp: int) -> int:
    """Level for a cumulative user XP total."""
    if xp <= 0:
        return 1
    return math.isqrt(xp // USER_XP_DIVISOR) + 1


def user_xp_for_next_level(level: int) -> int:
    """Cumulative XP at which ``level`` rolls over to ``level + 1``."""
    return level * level * USER_XP_DIVISOR


def subject_level(xp: int) -> int:
    """Level for a cumulative subject XP total."""
    if xp <= 0:
        return 1
    return _icbrt(xp // SUBJECT_XP_DIVISOR) + 1


def subject_xp_for_next_level(level: int) -> int:
    return level**3 * SUBJECT_XP_DIVISOR


def compute_level(xp: int) -> dict:
    """Progress-bar info for a user XP total."""
    level = user_level(xp)
    floor_xp = user_xp_for_next_level(level - 1)
    next_xp = user_xp_for_next_level(level)
    return {
        "level": level,
        "xp_into_level": max(0, xp - floor_xp),
        "xp_for_level": next_xp - floor_xp,
        "next_level_xp": next_xp,
    }
