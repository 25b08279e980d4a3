"""SQLAlchemy-backed storage. One instance wraps one AsyncSession (one request)."""

from __future__ import annotations

from datetime import datetime
from typing import Any, TypeVar

from sqlalchemy import and_, delete, func, or_, select, text, update
from sqlalchemy.ext.asyncio import AsyncSession

from eduquest.db.models import (
    AchievementUnlock,
    Challenge,
    Friendship,
    GroupMember,
    GroupMessage,
    GroupStudySession,
    Quest,
    SessionParticipant,
    StudyGroup,
    StudySession,
    Subject,
    SubjectNote,
    User,
    UserStat,
    XPLedger,
)
from eduquest.storage.base import Storage

T = TypeVar("T")


class SqlStorage(Storage):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _add(self, record: T) -> T:
        self.session.add(record)
        await self.session.flush()
        return record

    async def _all(self, stmt: Any) -> list[Any]:  # noqa: ANN401
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def _one(self, stmt: Any) -> Any:  # noqa: ANN401
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def _delete(self, record: object) -> None:
        await self.session.delete(record)
        await self.session.flush()

    # --- Users ---

    async def add_user(self, user: User) -> User:
        return await self._add(user)

    async def get_user(self, user_id: int) -> User | None:
        return await self.session.get(User, user_id)

    async def get_user_by_username(self, username: str) -> User | None:
        return await self._one(select(User).where(User.username == username))

    async def list_users(self, user_ids: list[int] | None = None) -> list[User]:
        stmt = select(User).order_by(User.id)
        if user_ids is not None:
            stmt = stmt.where(User.id.in_(user_ids))
        return await self._all(stmt)

    async def add_user_stats(self, stats: UserStat) -> UserStat:
        return await self._add(stats)

    async def get_user_stats(self, user_id: int) -> UserStat | None:
        return await self.session.get(UserStat, user_id)

    async def list_user_stats(self) -> list[UserStat]:
        return await self._all(select(UserStat).order_by(UserStat.user_id))

    # --- XP ledger ---

    async def add_xp_entry(self, entry: XPLedger) -> XPLedger:
        return await self._add(entry)

    async def xp_totals_since(self, since: datetime) -> dict[int, int]:
        result = await self.session.execute(
            select(XPLedger.user_id, func.sum(XPLedger.amount))
            .where(XPLedger.created_at >= since)
            .group_by(XPLedger.user_id)
        )
        return {user_id: int(total or 0) for user_id, total in result.all()}

    # --- Subjects ---

    async def add_subject(self, subject: Subject) -> Subject:
        return await self._add(subject)

    async def get_subject(self, subject_id: int) -> Subject | None:
        return await self.session.get(Subject, subject_id)

    async def list_subjects(self, user_id: int) -> list[Subject]:
        return await self._all(select(Subject).where(Subject.user_id == user_id).order_by(Subject.id))

    async def delete_subject(self, subject: Subject) -> None:
        await self.session.execute(delete(SubjectNote).where(SubjectNote.subject_id == subject.id))
        await self.session.execute(
            update(StudySession).where(StudySession.subject_id == subject.id).values(subject_id=None)
        )
        await self._delete(subject)

    async def add_note(self, note: SubjectNote) -> SubjectNote:
        return await self._add(note)

    async def get_note(self, note_id: int) -> SubjectNote | None:
        return await self.session.get(SubjectNote, note_id)

    async def list_notes(self, subject_id: int) -> list[SubjectNote]:
        return await self._all(
            select(SubjectNote).where(SubjectNote.subject_id == subject_id).order_by(SubjectNote.id)
        )

    async def delete_note(self, note: SubjectNote) -> None:
        await self._delete(note)

    async def add_study_session(self, session: StudySession) -> StudySession:
        return await self._add(session)

    async def list_study_sessions(self, user_id: int) -> list[StudySession]:
        return await self._all(
            select(StudySession).where(StudySession.user_id == user_id).order_by(StudySession.id)
        )

    # --- Quests ---

    async def add_quest(self, quest: Quest) -> Quest:
        return await self._add(quest)

    async def get_quest(self, quest_id: int) -> Quest | None:
        return await self.session.get(Quest, quest_id)

    async def list_quests(self, user_id: int, quest_type: str | None = None) -> list[Quest]:
        stmt = select(Quest).where(Quest.user_id == user_id)
        if quest_type is not None:
            stmt = stmt.where(Quest.type == quest_type)
        return await self._all(stmt.order_by(Quest.id))

    async def delete_quest(self, quest: Quest) -> None:
        await self._delete(quest)

    # --- Achievements ---

    async def add_achievement_unlock(self, unlock: AchievementUnlock) -> AchievementUnlock:
        return await self._add(unlock)

    async def list_achievement_unlocks(self, user_id: int) -> list[AchievementUnlock]:
        return await self._all(
            select(AchievementUnlock).where(AchievementUnlock.user_id == user_id).order_by(AchievementUnlock.id)
        )

    # --- Friendships ---

    async def add_friendship(self, friendship: Friendship) -> Friendship:
        return await self._add(friendship)

    async def get_friendship(self, friendship_id: int) -> Friendship | None:
        return await self.session.get(Friendship, friendship_id)

    async def find_friendship(self, user_a: int, user_b: int) -> Friendship | None:
        stmt = (
            select(Friendship)
            .where(
                or_(
                    and_(Friendship.user_id == user_a, Friendship.friend_id == user_b),
                    and_(Friendship.user_id == user_b, Friendship.friend_id == user_a),
                )
            )
            .order_by(Friendship.id)
            .limit(1)
        )
        return await self._one(stmt)

    async def list_friendships(self, user_id: int, status: str | None = None) -> list[Friendship]:
        stmt = select(Friendship).where(or_(Friendship.user_id == user_id, Friendship.friend_id == user_id))
        if status is not None:
            stmt = stmt.where(Friendship.status == status)
        return await self._all(stmt.order_by(Friendship.id))

    async def delete_friendship(self, friendship: Friendship) -> None:
        await self._delete(friendship)

    # --- Study groups ---

    async def add_group(self, group: StudyGroup) -> StudyGroup:
        return await self._add(group)

    async def get_group(self, group_id: int) -> StudyGroup | None:
        return await self.session.get(StudyGroup, group_id)

    async def get_group_by_invite_code(self, invite_code: str) -> StudyGroup | None:
        return await self._one(select(StudyGroup).where(StudyGroup.invite_code == invite_code))

    async def list_groups_for_user(self, user_id: int) -> list[StudyGroup]:
        stmt = (
            select(StudyGroup)
            .join(GroupMember, GroupMember.group_id == StudyGroup.id)
            .where(GroupMember.user_id == user_id)
            .order_by(StudyGroup.id)
        )
        return await self._all(stmt)

    async def delete_group(self, group: StudyGroup) -> None:
        session_ids = select(GroupStudySession.id).where(GroupStudySession.group_id == group.id)
        await self.session.execute(delete(SessionParticipant).where(SessionParticipant.session_id.in_(session_ids)))
        await self.session.execute(delete(GroupStudySession).where(GroupStudySession.group_id == group.id))
        await self.session.execute(delete(GroupMessage).where(GroupMessage.group_id == group.id))
        await self.session.execute(delete(GroupMember).where(GroupMember.group_id == group.id))
        await self._delete(group)

    async def add_group_member(self, member: GroupMember) -> GroupMember:
        return await self._add(member)

    async def get_group_member(self, group_id: int, user_id: int) -> GroupMember | None:
        return await self._one(
            select(GroupMember).where(GroupMember.group_id == group_id, GroupMember.user_id == user_id)
        )

    async def list_group_members(self, group_id: int) -> list[GroupMember]:
        return await self._all(
            select(GroupMember)
            .where(GroupMember.group_id == group_id)
            .order_by(GroupMember.joined_at, GroupMember.id)
        )

    async def delete_group_member(self, member: GroupMember) -> None:
        await self._delete(member)

    async def add_group_message(self, message: GroupMessage) -> GroupMessage:
        return await self._add(message)

    async def list_group_messages(self, group_id: int, limit: int, offset: int) -> list[GroupMessage]:
        return await self._all(
            select(GroupMessage)
            .where(GroupMessage.group_id == group_id)
            .order_by(GroupMessage.id)
            .limit(limit)
            .offset(offset)
        )

    # --- Group study sessions ---

    async def add_group_session(self, session: GroupStudySession) -> GroupStudySession:
        return await self._add(session)

    async def get_group_session(self, session_id: int) -> GroupStudySession | None:
        return await self.session.get(GroupStudySession, session_id)

    async def list_group_sessions(self, group_id: int, status: str | None = None) -> list[GroupStudySession]:
        stmt = select(GroupStudySession).where(GroupStudySession.group_id == group_id)
        if status is not None:
            stmt = stmt.where(GroupStudySession.status == status)
        return await self._all(stmt.order_by(GroupStudySession.id))

    async def add_session_participant(self, participant: SessionParticipant) -> SessionParticipant:
        return await self._add(participant)

    async def get_session_participant(self, session_id: int, user_id: int) -> SessionParticipant | None:
        return await self._one(
            select(SessionParticipant).where(
                SessionParticipant.session_id == session_id,
                SessionParticipant.user_id == user_id,
            )
        )

    async def list_session_participants(self, session_id: int) -> list[SessionParticipant]:
        return await self._all(
            select(SessionParticipant)
            .where(SessionParticipant.session_id == session_id)
            .order_by(SessionParticipant.id)
        )

    # --- Challenges ---

    async def add_challenge(self, challenge: Challenge) -> Challenge:
        return await self._add(challenge)

    async def get_challenge(self, challenge_id: int) -> Challenge | None:
        return await self.session.get(Challenge, challenge_id)

    async def list_challenges(self, user_id: int, status: str | None = None) -> list[Challenge]:
        stmt = select(Challenge).where(or_(Challenge.creator_id == user_id, Challenge.challenged_id == user_id))
        if status is not None:
            stmt = stmt.where(Challenge.status == status)
        return await self._all(stmt.order_by(Challenge.id))

    # --- Unit of work ---

    async def commit(self) -> None:
        await self.session.commit()

    async def ping(self) -> None:
        result = await self.session.execute(text("SELECT 1"))
        result.scalar()
