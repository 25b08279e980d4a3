"""Pydantic models for subject, note and study endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from eduquest.gamification.schemas import UserStatResponse
from eduquest.schemas import CamelModel


class NoteResponse(CamelModel):
    id: int
    subject_id: int
    text: str
    created_at: datetime


class SubjectResponse(CamelModel):
    id: int
    user_id: int
    name: str
    description: str
    color: str
    icon: str
    level: int
    xp: int
    next_level_xp: int
    total_study_time: int
    last_studied: datetime | None = None
    is_default: bool
    notes: list[NoteResponse] = []


class CreateSubjectRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=64)
    description: str = Field(..., max_length=256)
    color: str = Field(..., min_length=1, max_length=16)
    icon: str = Field(..., min_length=1, max_length=32)


class StudyTimeRequest(CamelModel):
    duration: int = Field(..., gt=0, le=24 * 60, description="Minutes studied")


class StudyTimeResponse(CamelModel):
    subject: SubjectResponse
    user_stats: UserStatResponse


class CreateNoteRequest(CamelModel):
    text: str = Field(..., min_length=1)
