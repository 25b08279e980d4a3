"""In-process storage backend: id → record maps with per-table counters.

Used by tests and single-process deployments. State is lost on restart.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterator
from datetime import datetime
from typing import Generic, TypeVar

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


class _Table(dict, Generic[T]):
    """Record map that hands out sequential ids."""

    def __init__(self) -> None:
        super().__init__()
        self._ids: Iterator[int] = itertools.count(1)

    def insert(self, record: T) -> T:
        record.id = next(self._ids)  # type: ignore[attr-defined]
        self[record.id] = record  # type: ignore[attr-defined]
        return record

    def ordered(self) -> list[T]:
        return [self[key] for key in sorted(self)]


class MemStorage(Storage):
    def __init__(self) -> None:
        self.users: _Table[User] = _Table()
        self.user_stats: dict[int, UserStat] = {}
        self.xp_ledger: _Table[XPLedger] = _Table()
        self.subjects: _Table[Subject] = _Table()
        self.notes: _Table[SubjectNote] = _Table()
        self.study_sessions: _Table[StudySession] = _Table()
        self.quests: _Table[Quest] = _Table()
        self.achievement_unlocks: _Table[AchievementUnlock] = _Table()
        self.friendships: _Table[Friendship] = _Table()
        self.groups: _Table[StudyGroup] = _Table()
        self.group_members: _Table[GroupMember] = _Table()
        self.group_messages: _Table[GroupMessage] = _Table()
        self.group_sessions: _Table[GroupStudySession] = _Table()
        self.session_participants: _Table[SessionParticipant] = _Table()
        self.challenges: _Table[Challenge] = _Table()

    # --- Users ---

    async def add_user(self, user: User) -> User:
        return self.users.insert(user)

    async def get_user(self, user_id: int) -> User | None:
        return self.users.get(user_id)

    async def get_user_by_username(self, username: str) -> User | None:
        for user in self.users.values():
            if user.username == username:
                return user
        return None

    async def list_users(self, user_ids: list[int] | None = None) -> list[User]:
        users = self.users.ordered()
        if user_ids is not None:
            wanted = set(user_ids)
            users = [u for u in users if u.id in wanted]
        return users

    async def add_user_stats(self, stats: UserStat) -> UserStat:
        self.user_stats[stats.user_id] = stats
        return stats

    async def get_user_stats(self, user_id: int) -> UserStat | None:
        return self.user_stats.get(user_id)

    async def list_user_stats(self) -> list[UserStat]:
        return [self.user_stats[key] for key in sorted(self.user_stats)]

    # --- XP ledger ---

    async def add_xp_entry(self, entry: XPLedger) -> XPLedger:
        return self.xp_ledger.insert(entry)

    async def xp_totals_since(self, since: datetime) -> dict[int, int]:
        totals: dict[int, int] = {}
        for entry in self.xp_ledger.values():
            if entry.created_at >= since:
                totals[entry.user_id] = totals.get(entry.user_id, 0) + entry.amount
        return totals

    # --- Subjects ---

    async def add_subject(self, subject: Subject) -> Subject:
        return self.subjects.insert(subject)

    async def get_subject(self, subject_id: int) -> Subject | None:
        return self.subjects.get(subject_id)

    async def list_subjects(self, user_id: int) -> list[Subject]:
        return [s for s in self.subjects.ordered() if s.user_id == user_id]

    async def delete_subject(self, subject: Subject) -> None:
        for note in await self.list_notes(subject.id):
            del self.notes[note.id]
        for session in self.study_sessions.values():
            if session.subject_id == subject.id:
                session.subject_id = None
        self.subjects.pop(subject.id, None)

    async def add_note(self, note: SubjectNote) -> SubjectNote:
        return self.notes.insert(note)

    async def get_note(self, note_id: int) -> SubjectNote | None:
        return self.notes.get(note_id)

    async def list_notes(self, subject_id: int) -> list[SubjectNote]:
        return [n for n in self.notes.ordered() if n.subject_id == subject_id]

    async def delete_note(self, note: SubjectNote) -> None:
        self.notes.pop(note.id, None)

    async def add_study_session(self, session: StudySession) -> StudySession:
        return self.study_sessions.insert(session)

    async def list_study_sessions(self, user_id: int) -> list[StudySession]:
        return [s for s in self.study_sessions.ordered() if s.user_id == user_id]

    # --- Quests ---

    async def add_quest(self, quest: Quest) -> Quest:
        return self.quests.insert(quest)

    async def get_quest(self, quest_id: int) -> Quest | None:
        return self.quests.get(quest_id)

    async def list_quests(self, user_id: int, quest_type: str | None = None) -> list[Quest]:
        return [
            q for q in self.quests.ordered()
            if q.user_id == user_id and (quest_type is None or q.type == quest_type)
        ]

    async def delete_quest(self, quest: Quest) -> None:
        self.quests.pop(quest.id, None)

    # --- Achievements ---

    async def add_achievement_unlock(self, unlock: AchievementUnlock) -> AchievementUnlock:
        return self.achievement_unlocks.insert(unlock)

    async def list_achievement_unlocks(self, user_id: int) -> list[AchievementUnlock]:
        return [u for u in self.achievement_unlocks.ordered() if u.user_id == user_id]

    # --- Friendships ---

    async def add_friendship(self, friendship: Friendship) -> Friendship:
        return self.friendships.insert(friendship)

    async def get_friendship(self, friendship_id: int) -> Friendship | None:
        return self.friendships.get(friendship_id)

    async def find_friendship(self, user_a: int, user_b: int) -> Friendship | None:
        for f in self.friendships.ordered():
            if {f.user_id, f.friend_id} == {user_a, user_b}:
                return f
        return None

    async def list_friendships(self, user_id: int, status: str | None = None) -> list[Friendship]:
        return [
            f for f in self.friendships.ordered()
            if user_id in (f.user_id, f.friend_id) and (status is None or f.status == status)
        ]

    async def delete_friendship(self, friendship: Friendship) -> None:
        self.friendships.pop(friendship.id, None)

    # --- Study groups ---

    async def add_group(self, group: StudyGroup) -> StudyGroup:
        return self.groups.insert(group)

    async def get_group(self, group_id: int) -> StudyGroup | None:
        return self.groups.get(group_id)

    async def get_group_by_invite_code(self, invite_code: str) -> StudyGroup | None:
        for group in self.groups.values():
            if group.invite_code == invite_code:
                return group
        return None

    async def list_groups_for_user(self, user_id: int) -> list[StudyGroup]:
        group_ids = {m.group_id for m in self.group_members.values() if m.user_id == user_id}
        return [g for g in self.groups.ordered() if g.id in group_ids]

    async def delete_group(self, group: StudyGroup) -> None:
        session_ids = {s.id for s in self.group_sessions.values() if s.group_id == group.id}
        for table, matches in (
            (self.session_participants, lambda r: r.session_id in session_ids),
            (self.group_sessions, lambda r: r.group_id == group.id),
            (self.group_messages, lambda r: r.group_id == group.id),
            (self.group_members, lambda r: r.group_id == group.id),
        ):
            for key in [k for k, record in table.items() if matches(record)]:
                del table[key]
        self.groups.pop(group.id, None)

    async def add_group_member(self, member: GroupMember) -> GroupMember:
        return self.group_members.insert(member)

    async def get_group_member(self, group_id: int, user_id: int) -> GroupMember | None:
        for m in self.group_members.values():
            if m.group_id == group_id and m.user_id == user_id:
                return m
        return None

    async def list_group_members(self, group_id: int) -> list[GroupMember]:
        members = [m for m in self.group_members.ordered() if m.group_id == group_id]
        return sorted(members, key=lambda m: (m.joined_at, m.id))

    async def delete_group_member(self, member: GroupMember) -> None:
        self.group_members.pop(member.id, None)

    async def add_group_message(self, message: GroupMessage) -> GroupMessage:
        return self.group_messages.insert(message)

    async def list_group_messages(self, group_id: int, limit: int, offset: int) -> list[GroupMessage]:
        messages = [m for m in self.group_messages.ordered() if m.group_id == group_id]
        return messages[offset:offset + limit]

    # --- Group study sessions ---

    async def add_group_session(self, session: GroupStudySession) -> GroupStudySession:
        return self.group_sessions.insert(session)

    async def get_group_session(self, session_id: int) -> GroupStudySession | None:
        return self.group_sessions.get(session_id)

    async def list_group_sessions(self, group_id: int, status: str | None = None) -> list[GroupStudySession]:
        return [
            s for s in self.group_sessions.ordered()
            if s.group_id == group_id and (status is None or s.status == status)
        ]

    async def add_session_participant(self, participant: SessionParticipant) -> SessionParticipant:
        return self.session_participants.insert(participant)

    async def get_session_participant(self, session_id: int, user_id: int) -> SessionParticipant | None:
        for p in self.session_participants.values():
            if p.session_id == session_id and p.user_id == user_id:
                return p
        return None

    async def list_session_participants(self, session_id: int) -> list[SessionParticipant]:
        return [p for p in self.session_participants.ordered() if p.session_id == session_id]

    # --- Challenges ---

    async def add_challenge(self, challenge: Challenge) -> Challenge:
        return self.challenges.insert(challenge)

    async def get_challenge(self, challenge_id: int) -> Challenge | None:
        return self.challenges.get(challenge_id)

    async def list_challenges(self, user_id: int, status: str | None = None) -> list[Challenge]:
        return [
            c for c in self.challenges.ordered()
            if user_id in (c.creator_id, c.challenged_id) and (status is None or c.status == status)
        ]

    # --- Unit of work ---

    async def commit(self) -> None:
        return None

    async def ping(self) -> None:
        return None
