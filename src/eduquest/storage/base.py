"""Storage contract shared by the in-memory and SQL backends.

Services depend only on this interface. Records are the ORM model instances
from ``eduquest.db.models``; services mutate them in place and call
``commit()`` once the unit of work is complete.
"""

from __future__ import annotations

import abc
from datetime import datetime

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


class Storage(abc.ABC):
    """Async persistence operations used by the rules engine."""

    # --- Users ---

    @abc.abstractmethod
    async def add_user(self, user: User) -> User: ...

    @abc.abstractmethod
    async def get_user(self, user_id: int) -> User | None: ...

    @abc.abstractmethod
    async def get_user_by_username(self, username: str) -> User | None: ...

    @abc.abstractmethod
    async def list_users(self, user_ids: list[int] | None = None) -> list[User]: ...

    @abc.abstractmethod
    async def add_user_stats(self, stats: UserStat) -> UserStat: ...

    @abc.abstractmethod
    async def get_user_stats(self, user_id: int) -> UserStat | None: ...

    @abc.abstractmethod
    async def list_user_stats(self) -> list[UserStat]: ...

    # --- XP ledger ---

    @abc.abstractmethod
    async def add_xp_entry(self, entry: XPLedger) -> XPLedger: ...

    @abc.abstractmethod
    async def xp_totals_since(self, since: datetime) -> dict[int, int]:
        """Sum ledger XP per user for entries created at or after ``since``."""

    # --- Subjects ---

    @abc.abstractmethod
    async def add_subject(self, subject: Subject) -> Subject: ...

    @abc.abstractmethod
    async def get_subject(self, subject_id: int) -> Subject | None: ...

    @abc.abstractmethod
    async def list_subjects(self, user_id: int) -> list[Subject]: ...

    @abc.abstractmethod
    async def delete_subject(self, subject: Subject) -> None:
        """Delete a subject together with its notes."""

    @abc.abstractmethod
    async def add_note(self, note: SubjectNote) -> SubjectNote: ...

    @abc.abstractmethod
    async def get_note(self, note_id: int) -> SubjectNote | None: ...

    @abc.abstractmethod
    async def list_notes(self, subject_id: int) -> list[SubjectNote]: ...

    @abc.abstractmethod
    async def delete_note(self, note: SubjectNote) -> None: ...

    @abc.abstractmethod
    async def add_study_session(self, session: StudySession) -> StudySession: ...

    @abc.abstractmethod
    async def list_study_sessions(self, user_id: int) -> list[StudySession]: ...

    # --- Quests ---

    @abc.abstractmethod
    async def add_quest(self, quest: Quest) -> Quest: ...

    @abc.abstractmethod
    async def get_quest(self, quest_id: int) -> Quest | None: ...

    @abc.abstractmethod
    async def list_quests(self, user_id: int, quest_type: str | None = None) -> list[Quest]: ...

    @abc.abstractmethod
    async def delete_quest(self, quest: Quest) -> None: ...

    # --- Achievements ---

    @abc.abstractmethod
    async def add_achievement_unlock(self, unlock: AchievementUnlock) -> AchievementUnlock: ...

    @abc.abstractmethod
    async def list_achievement_unlocks(self, user_id: int) -> list[AchievementUnlock]: ...

    # --- Friendships ---

    @abc.abstractmethod
    async def add_friendship(self, friendship: Friendship) -> Friendship: ...

    @abc.abstractmethod
    async def get_friendship(self, friendship_id: int) -> Friendship | None: ...

    @abc.abstractmethod
    async def find_friendship(self, user_a: int, user_b: int) -> Friendship | None:
        """Find the friendship between two users in either direction."""

    @abc.abstractmethod
    async def list_friendships(self, user_id: int, status: str | None = None) -> list[Friendship]: ...

    @abc.abstractmethod
    async def delete_friendship(self, friendship: Friendship) -> None: ...

    # --- Study groups ---

    @abc.abstractmethod
    async def add_group(self, group: StudyGroup) -> StudyGroup: ...

    @abc.abstractmethod
    async def get_group(self, group_id: int) -> StudyGroup | None: ...

    @abc.abstractmethod
    async def get_group_by_invite_code(self, invite_code: str) -> StudyGroup | None: ...

    @abc.abstractmethod
    async def list_groups_for_user(self, user_id: int) -> list[StudyGroup]: ...

    @abc.abstractmethod
    async def delete_group(self, group: StudyGroup) -> None:
        """Delete a group and everything hanging off it."""

    @abc.abstractmethod
    async def add_group_member(self, member: GroupMember) -> GroupMember: ...

    @abc.abstractmethod
    async def get_group_member(self, group_id: int, user_id: int) -> GroupMember | None: ...

    @abc.abstractmethod
    async def list_group_members(self, group_id: int) -> list[GroupMember]:
        """Members ordered by join time, oldest first."""

    @abc.abstractmethod
    async def delete_group_member(self, member: GroupMember) -> None: ...

    @abc.abstractmethod
    async def add_group_message(self, message: GroupMessage) -> GroupMessage: ...

    @abc.abstractmethod
    async def list_group_messages(self, group_id: int, limit: int, offset: int) -> list[GroupMessage]: ...

    # --- Group study sessions ---

    @abc.abstractmethod
    async def add_group_session(self, session: GroupStudySession) -> GroupStudySession: ...

    @abc.abstractmethod
    async def get_group_session(self, session_id: int) -> GroupStudySession | None: ...

    @abc.abstractmethod
    async def list_group_sessions(self, group_id: int, status: str | None = None) -> list[GroupStudySession]: ...

    @abc.abstractmethod
    async def add_session_participant(self, participant: SessionParticipant) -> SessionParticipant: ...

    @abc.abstractmethod
    async def get_session_participant(self, session_id: int, user_id: int) -> SessionParticipant | None: ...

    @abc.abstractmethod
    async def list_session_participants(self, session_id: int) -> list[SessionParticipant]: ...

    # --- Challenges ---

    @abc.abstractmethod
    async def add_challenge(self, challenge: Challenge) -> Challenge: ...

    @abc.abstractmethod
    async def get_challenge(self, challenge_id: int) -> Challenge | None: ...

    @abc.abstractmethod
    async def list_challenges(self, user_id: int, status: str | None = None) -> list[Challenge]: ...

    # --- Unit of work ---

    @abc.abstractmethod
    async def commit(self) -> None: ...

    @abc.abstractmethod
    async def ping(self) -> None:
        """Raise if the backend is unreachable."""
