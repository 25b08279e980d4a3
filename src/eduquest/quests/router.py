"""Quest API endpoints."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query

from eduquest.gamification.schemas import UserStatResponse
from eduquest.gamification.xp_service import get_stats
from eduquest.quests.schemas import (
    CompleteQuestRequest,
    CompleteQuestResponse,
    CreateQuestRequest,
    QuestProgressRequest,
    QuestResponse,
)
from eduquest.quests.service import (
    complete_quest,
    create_custom_quest,
    get_quest,
    list_quests,
    request_daily_refresh,
    update_progress,
)
from eduquest.storage import Storage, get_storage

router = APIRouter(prefix="/api", tags=["Quests"])


@router.get("/users/{user_id}/quests", response_model=list[QuestResponse])
async def get_user_quests(
    user_id: int,
    type: Literal["daily", "epic"] | None = Query(None),  # noqa: A002
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> list[QuestResponse]:
    """List quests, regenerating daily quests first if the day has rolled over."""
    quests = await list_quests(storage, user_id, type)
    await storage.commit()
    return [QuestResponse.model_validate(q) for q in quests]


@router.post("/users/{user_id}/quests", response_model=QuestResponse, status_code=201)
async def create_quest(
    user_id: int,
    body: CreateQuestRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> QuestResponse:
    quest = await create_custom_quest(
        storage,
        user_id,
        title=body.title,
        description=body.description,
        quest_type=body.type,
        difficulty=body.difficulty,
        xp_reward=body.xp_reward,
        coin_reward=body.coin_reward,
        gem_reward=body.gem_reward,
        max_progress=body.max_progress,
    )
    await storage.commit()
    return QuestResponse.model_validate(quest)


@router.post("/users/{user_id}/quests/refresh", response_model=list[QuestResponse])
async def refresh_quests(
    user_id: int,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> list[QuestResponse]:
    """Regenerate daily quests once the UTC day has rolled over and return the current dailies."""
    quests = await request_daily_refresh(storage, user_id)
    await storage.commit()
    return [QuestResponse.model_validate(q) for q in quests]


@router.post("/quests/{quest_id}/progress", response_model=QuestResponse)
async def set_quest_progress(
    quest_id: int,
    body: QuestProgressRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> QuestResponse:
    """Set progress; reaching the maximum completes the quest and grants rewards."""
    await get_quest(storage, quest_id, body.user_id)
    quest = await update_progress(storage, quest_id, body.progress)
    await storage.commit()
    return QuestResponse.model_validate(quest)


@router.post("/quests/{quest_id}/complete", response_model=CompleteQuestResponse)
async def complete(
    quest_id: int,
    body: CompleteQuestRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> CompleteQuestResponse:
    await get_quest(storage, quest_id, body.user_id)
    quest, _ = await complete_quest(storage, quest_id)
    stats = await get_stats(storage, body.user_id)
    await storage.commit()
    return CompleteQuestResponse(
        quest=QuestResponse.model_validate(quest),
        user_stats=UserStatResponse.from_stats(stats),
    )
