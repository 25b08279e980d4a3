"""Pydantic models for quest endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from eduquest.gamification.schemas import UserStatResponse
from eduquest.schemas import CamelModel


class QuestResponse(CamelModel):
    id: int
    user_id: int
    title: str
    description: str
    type: str
    difficulty: str
    xp_reward: int
    coin_reward: int
    gem_reward: int
    is_completed: bool
    progress: int
    max_progress: int
    trigger: str | None = None
    created_at: datetime
    completed_at: datetime | None = None


class CreateQuestRequest(CamelModel):
    title: str = Field(..., min_length=1, max_length=128)
    description: str = Field("", max_length=256)
    type: Literal["daily", "epic"] = "epic"
    difficulty: Literal["easy", "medium", "hard", "very_hard"] = "medium"
    xp_reward: int = Field(0, ge=0)
    coin_reward: int = Field(0, ge=0)
    gem_reward: int = Field(0, ge=0)
    max_progress: int = Field(1, ge=1)


class QuestProgressRequest(CamelModel):
    user_id: int
    progress: int


class CompleteQuestRequest(CamelModel):
    user_id: int


class CompleteQuestResponse(CamelModel):
    quest: QuestResponse
    user_stats: UserStatResponse
