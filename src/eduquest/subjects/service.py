"""Subjects, notes and study-time logging.

Study time earns subject XP at 2 XP per minute; the user earns half of that.
The four default subjects created at registration cannot be deleted.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from eduquest.db.models import StudySession, Subject, SubjectNote, UserStat
from eduquest.errors import ConflictError, ForbiddenError, NotFoundError
from eduquest.gamification.achievement_service import check_achievements
from eduquest.gamification.catalog import STUDY_SESSIONS
from eduquest.gamification.levels import subject_level
from eduquest.gamification.xp_service import get_stats, grant_xp
from eduquest.quests.catalog import NOTE_TAKEN, STUDY_SESSION, SUBJECT_LEVEL
from eduquest.quests.service import advance_quests, ensure_daily_quests
from eduquest.storage.base import Storage

logger = logging.getLogger(__name__)

SUBJECT_XP_PER_MINUTE = 2

DEFAULT_SUBJECTS: list[dict] = [
    {
        "name": "Mathematics",
        "description": "Numbers, algebra, geometry and more",
        "color": "#FF5757",
        "icon": "calculator",
    },
    {
        "name": "Science",
        "description": "Physics, chemistry, biology and more",
        "color": "#4CAF50",
        "icon": "flask",
    },
    {
        "name": "Language Arts",
        "description": "Reading, writing, grammar and more",
        "color": "#2196F3",
        "icon": "book",
    },
    {
        "name": "History",
        "description": "Past events, civilizations and more",
        "color": "#FF9800",
        "icon": "clock",
    },
]


def _new_subject(user_id: int, data: dict, now: datetime, *, is_default: bool) -> Subject:
    return Subject(
        user_id=user_id,
        name=data["name"],
        description=data.get("description") or "",
        color=data["color"],
        icon=data["icon"],
        level=1,
        xp=0,
        total_study_time=0,
        last_studied=None,
        is_default=is_default,
        created_at=now,
    )


async def get_subject(storage: Storage, subject_id: int) -> Subject:
    subject = await storage.get_subject(subject_id)
    if subject is None:
        raise NotFoundError("Subject not found")
    return subject


async def create_default_subjects(storage: Storage, user_id: int, now: datetime) -> list[Subject]:
    return [
        await storage.add_subject(_new_subject(user_id, data, now, is_default=True))
        for data in DEFAULT_SUBJECTS
    ]


async def list_subjects(storage: Storage, user_id: int) -> list[Subject]:
    await get_stats(storage, user_id)
    return await storage.list_subjects(user_id)


async def create_subject(
    storage: Storage,
    user_id: int,
    name: str,
    description: str,
    color: str,
    icon: str,
) -> Subject:
    """Create a custom subject. Names are unique per user, case-insensitively."""
    await get_stats(storage, user_id)
    for existing in await storage.list_subjects(user_id):
        if existing.name.lower() == name.lower():
            raise ConflictError("A subject with this name already exists")

    subject = await storage.add_subject(_new_subject(
        user_id,
        {"name": name, "description": description, "color": color, "icon": icon},
        datetime.now(timezone.utc),
        is_default=False,
    ))
    logger.info("Subject created: %s (id=%d, user=%d)", name, subject.id, user_id)
    return subject


async def delete_subject(storage: Storage, user_id: int, subject_id: int) -> None:
    subject = await get_subject(storage, subject_id)
    if subject.user_id != user_id:
        raise NotFoundError("Subject not found")
    if subject.is_default:
        raise ForbiddenError("Default subjects cannot be removed")
    await storage.delete_subject(subject)
    logger.info("Subject deleted: id=%d (user=%d)", subject_id, user_id)


async def add_study_time(storage: Storage, subject_id: int, minutes: int) -> tuple[Subject, UserStat]:
    """Log a completed study session against a subject.

    After logging:
    1. Subject gains minutes × 2 XP and its level is recomputed
    2. User gains half of the subject XP
    3. Study session counter and study achievements are updated
    4. Study-session quests advance; subject-level quests follow the best subject level
    """
    subject = await get_subject(storage, subject_id)
    user_id = subject.user_id
    now = datetime.now(timezone.utc)

    earned = minutes * SUBJECT_XP_PER_MINUTE
    old_level = subject.level
    subject.xp += earned
    subject.level = subject_level(subject.xp)
    subject.total_study_time += minutes
    subject.last_studied = now

    await storage.add_study_session(StudySession(
        user_id=user_id,
        subject_id=subject.id,
        duration=minutes,
        xp_earned=earned,
        completed_at=now,
    ))

    stats = await grant_xp(storage, user_id, earned // 2, source="study", source_id=str(subject.id))
    stats.study_sessions += 1
    await check_achievements(storage, user_id, STUDY_SESSIONS, stats.study_sessions)

    await ensure_daily_quests(storage, user_id, now)
    await advance_quests(storage, user_id, STUDY_SESSION)
    if subject.level > old_level:
        logger.info("Subject %d levelled up: %d -> %d", subject.id, old_level, subject.level)
        best = max(s.level for s in await storage.list_subjects(user_id))
        await advance_quests(storage, user_id, SUBJECT_LEVEL, best)

    return subject, stats


# --- Notes ---


async def add_note(storage: Storage, subject_id: int, text: str) -> SubjectNote:
    subject = await get_subject(storage, subject_id)
    note = await storage.add_note(SubjectNote(
        subject_id=subject.id,
        text=text,
        created_at=datetime.now(timezone.utc),
    ))
    await ensure_daily_quests(storage, subject.user_id)
    await advance_quests(storage, subject.user_id, NOTE_TAKEN)
    return note


async def list_notes(storage: Storage, subject_id: int) -> list[SubjectNote]:
    await get_subject(storage, subject_id)
    return await storage.list_notes(subject_id)


async def delete_note(storage: Storage, subject_id: int, note_id: int) -> None:
    note = await storage.get_note(note_id)
    if note is None or note.subject_id != subject_id:
        raise NotFoundError("Note not found")
    await storage.delete_note(note)
