"""Scheduled group study sessions.

State machine: scheduled → in_progress → completed. Only the creator can
start or end a session; only group members can create or join one.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from eduquest.db.models import GroupStudySession, SessionParticipant
from eduquest.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from eduquest.social.group_service import get_group, require_membership
from eduquest.storage.base import Storage

logger = logging.getLogger(__name__)

SCHEDULED = "scheduled"
IN_PROGRESS = "in_progress"
COMPLETED = "completed"
CANCELLED = "cancelled"

JOINED = "joined"


def _as_utc(dt: datetime) -> datetime:
    return dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt


async def get_session(storage: Storage, session_id: int) -> GroupStudySession:
    session = await storage.get_group_session(session_id)
    if session is None:
        raise NotFoundError("Session not found")
    return session


async def create_session(
    storage: Storage,
    group_id: int,
    creator_id: int,
    title: str,
    scheduled_start: datetime,
    scheduled_end: datetime,
    description: str | None = None,
) -> GroupStudySession:
    """Schedule a session. The creator is enrolled as the first participant."""
    await get_group(storage, group_id)
    await require_membership(storage, group_id, creator_id)
    if _as_utc(scheduled_end) <= _as_utc(scheduled_start):
        raise ValidationError("scheduledEnd must be after scheduledStart")

    now = datetime.now(timezone.utc)
    session = await storage.add_group_session(GroupStudySession(
        group_id=group_id,
        creator_id=creator_id,
        title=title,
        description=description,
        scheduled_start=scheduled_start,
        scheduled_end=scheduled_end,
        actual_start=None,
        actual_end=None,
        status=SCHEDULED,
        created_at=now,
    ))
    await storage.add_session_participant(SessionParticipant(
        session_id=session.id,
        user_id=creator_id,
        joined_at=now,
        status=JOINED,
        total_time=0,
    ))
    logger.info("Group session %d scheduled in group %d by user %d", session.id, group_id, creator_id)
    return session


async def list_sessions(storage: Storage, group_id: int, status: str | None = None) -> list[GroupStudySession]:
    await get_group(storage, group_id)
    return await storage.list_group_sessions(group_id, status)


async def join_session(storage: Storage, session_id: int, user_id: int) -> SessionParticipant:
    session = await get_session(storage, session_id)
    await require_membership(storage, session.group_id, user_id)
    if session.status in (COMPLETED, CANCELLED):
        raise ConflictError(f"Session is {session.status}")
    if await storage.get_session_participant(session_id, user_id) is not None:
        raise ConflictError("User already joined this session")

    return await storage.add_session_participant(SessionParticipant(
        session_id=session_id,
        user_id=user_id,
        joined_at=datetime.now(timezone.utc),
        status=JOINED,
        total_time=0,
    ))


async def start_session(storage: Storage, session_id: int, user_id: int) -> GroupStudySession:
    session = await get_session(storage, session_id)
    if session.creator_id != user_id:
        raise ForbiddenError("Only the session creator can start it")
    if session.status != SCHEDULED:
        raise ConflictError(f"Cannot start a session that is {session.status}")

    session.status = IN_PROGRESS
    session.actual_start = datetime.now(timezone.utc)
    logger.info("Group session %d started", session_id)
    return session


async def end_session(storage: Storage, session_id: int, user_id: int) -> GroupStudySession:
    """End a running session and credit participants with the elapsed minutes."""
    session = await get_session(storage, session_id)
    if session.creator_id != user_id:
        raise ForbiddenError("Only the session creator can end it")
    if session.status != IN_PROGRESS or session.actual_start is None:
        raise ConflictError(f"Cannot end a session that is {session.status}")

    now = datetime.now(timezone.utc)
    session.status = COMPLETED
    session.actual_end = now
    minutes = int((now - _as_utc(session.actual_start)).total_seconds() // 60)

    for participant in await storage.list_session_participants(session_id):
        if participant.status == JOINED:
            participant.status = COMPLETED
            participant.total_time = minutes

    logger.info("Group session %d ended after %d minutes", session_id, minutes)
    return session
