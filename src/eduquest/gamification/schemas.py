"""Pydantic models for user stats, rewards and achievements."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from eduquest.db.models import UserStat
from eduquest.gamification.levels import compute_level
from eduquest.schemas import CamelModel


# --- Stats ---


class UserStatResponse(CamelModel):
    user_id: int
    level: int
    xp: int
    coins: int
    gems: int
    streak: int
    selected_avatar: str
    selected_title: str
    unlocked_avatars: list[str]
    unlocked_titles: list[str]
    last_login: datetime
    study_sessions: int
    quests_completed: int
    epic_quests_completed: int
    xp_into_level: int
    next_level_xp: int

    @classmethod
    def from_stats(cls, stats: UserStat) -> UserStatResponse:
        info = compute_level(stats.xp)
        return cls(
            user_id=stats.user_id,
            level=stats.level,
            xp=stats.xp,
            coins=stats.coins,
            gems=stats.gems,
            streak=stats.streak,
            selected_avatar=stats.selected_avatar,
            selected_title=stats.selected_title,
            unlocked_avatars=list(stats.unlocked_avatars),
            unlocked_titles=list(stats.unlocked_titles),
            last_login=stats.last_login,
            study_sessions=stats.study_sessions,
            quests_completed=stats.quests_completed,
            epic_quests_completed=stats.epic_quests_completed,
            xp_into_level=info["xp_into_level"],
            next_level_xp=info["next_level_xp"],
        )


# --- Rewards ---


class GrantXPRequest(CamelModel):
    amount: int


class GrantCurrencyRequest(CamelModel):
    coins: int = 0
    gems: int = 0


class SelectAvatarRequest(CamelModel):
    avatar_id: str = Field(..., min_length=1)


class SelectTitleRequest(CamelModel):
    title_id: str = Field(..., min_length=1, description="Title of an unlocked achievement")


# --- Achievements ---


class AchievementCondition(CamelModel):
    type: str
    value: int


class AchievementResponse(CamelModel):
    id: str
    title: str
    description: str
    category: str
    icon: str
    condition: AchievementCondition
    xp_reward: int
    coin_reward: int
    gem_reward: int
    is_unlocked: bool
    unlocked_at: datetime | None = None


class CheckAchievementsRequest(CamelModel):
    type: str = Field(..., min_length=1)
    value: int


class CheckAchievementsResponse(CamelModel):
    newly_unlocked: list[str]
