"""Subject API endpoints: subjects, study time and notes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from eduquest.db.models import Subject
from eduquest.gamification.levels import subject_xp_for_next_level
from eduquest.gamification.schemas import UserStatResponse
from eduquest.storage import Storage, get_storage
from eduquest.subjects.schemas import (
    CreateNoteRequest,
    CreateSubjectRequest,
    NoteResponse,
    StudyTimeRequest,
    StudyTimeResponse,
    SubjectResponse,
)
from eduquest.subjects.service import (
    add_note,
    add_study_time,
    create_subject,
    delete_note,
    delete_subject,
    list_notes,
    list_subjects,
)

router = APIRouter(prefix="/api", tags=["Subjects"])


# ── Helper ──


async def _build_subject_response(storage: Storage, subject: Subject) -> SubjectResponse:
    notes = await storage.list_notes(subject.id)
    return SubjectResponse(
        id=subject.id,
        user_id=subject.user_id,
        name=subject.name,
        description=subject.description,
        color=subject.color,
        icon=subject.icon,
        level=subject.level,
        xp=subject.xp,
        next_level_xp=subject_xp_for_next_level(subject.level),
        total_study_time=subject.total_study_time,
        last_studied=subject.last_studied,
        is_default=subject.is_default,
        notes=[NoteResponse.model_validate(n) for n in notes],
    )


# ── Subjects ──


@router.get("/users/{user_id}/subjects", response_model=list[SubjectResponse])
async def get_subjects(
    user_id: int,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> list[SubjectResponse]:
    return [await _build_subject_response(storage, s) for s in await list_subjects(storage, user_id)]


@router.post("/users/{user_id}/subjects", response_model=SubjectResponse, status_code=201)
async def create_subject_endpoint(
    user_id: int,
    body: CreateSubjectRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> SubjectResponse:
    subject = await create_subject(storage, user_id, body.name, body.description, body.color, body.icon)
    await storage.commit()
    return await _build_subject_response(storage, subject)


@router.delete("/users/{user_id}/subjects/{subject_id}", status_code=204)
async def delete_subject_endpoint(
    user_id: int,
    subject_id: int,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> Response:
    """Delete a custom subject. The four default subjects are protected."""
    await delete_subject(storage, user_id, subject_id)
    await storage.commit()
    return Response(status_code=204)


@router.post("/subjects/{subject_id}/study", response_model=StudyTimeResponse)
async def study(
    subject_id: int,
    body: StudyTimeRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> StudyTimeResponse:
    """Log study minutes: subject XP, user XP, achievements and quest progress."""
    subject, stats = await add_study_time(storage, subject_id, body.duration)
    await storage.commit()
    return StudyTimeResponse(
        subject=await _build_subject_response(storage, subject),
        user_stats=UserStatResponse.from_stats(stats),
    )


# ── Notes ──


@router.get("/subjects/{subject_id}/notes", response_model=list[NoteResponse])
async def get_notes(
    subject_id: int,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> list[NoteResponse]:
    return [NoteResponse.model_validate(n) for n in await list_notes(storage, subject_id)]


@router.post("/subjects/{subject_id}/notes", response_model=NoteResponse, status_code=201)
async def create_note(
    subject_id: int,
    body: CreateNoteRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> NoteResponse:
    note = await add_note(storage, subject_id, body.text)
    await storage.commit()
    return NoteResponse.model_validate(note)


@router.delete("/subjects/{subject_id}/notes/{note_id}", status_code=204)
async def delete_note_endpoint(
    subject_id: int,
    note_id: int,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> Response:
    await delete_note(storage, subject_id, note_id)
    await storage.commit()
    return Response(status_code=204)
