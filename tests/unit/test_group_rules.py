"""Study group tests: membership, ownership transfer, messages and sessions."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from eduquest.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from eduquest.social.group_service import (
    create_group,
    get_group,
    get_group_with_members,
    join_group,
    list_messages,
    list_user_groups,
    post_message,
    remove_member,
)
from eduquest.social.session_service import (
    create_session,
    end_session,
    join_session,
    list_sessions,
    start_session,
)


def _slot() -> tuple[datetime, datetime]:
    start = datetime.now(timezone.utc) + timedelta(hours=1)
    return start, start + timedelta(hours=2)


class TestGroupMembership:
    """Create, join and leave."""

    @pytest.mark.asyncio
    async def test_creator_is_owner(self, storage, user):
        group = await create_group(storage, user.id, "Night Owls", "Late study", is_private=True)
        _, members = await get_group_with_members(storage, group.id)
        assert group.owner_id == user.id
        assert len(group.invite_code) == 8
        assert [(m["user_id"], m["role"]) for m in members] == [(user.id, "owner")]

    @pytest.mark.asyncio
    async def test_join_by_invite_code_is_case_insensitive(self, storage, make_user, user):
        bob = await make_user("bob")
        group = await create_group(storage, user.id, "Night Owls")
        member = await join_group(storage, bob.id, group.invite_code.lower())
        assert member.role == "member"
        assert [g.id for g in await list_user_groups(storage, bob.id)] == [group.id]

    @pytest.mark.asyncio
    async def test_join_twice(self, storage, make_user, user):
        bob = await make_user("bob")
        group = await create_group(storage, user.id, "Night Owls")
        await join_group(storage, bob.id, group.invite_code)
        with pytest.raises(ConflictError):
            await join_group(storage, bob.id, group.invite_code)

    @pytest.mark.asyncio
    async def test_invalid_invite_code(self, storage, user):
        with pytest.raises(NotFoundError, match="Invalid invite code"):
            await join_group(storage, user.id, "ZZZZZZZZ")

    @pytest.mark.asyncio
    async def test_owner_leaving_passes_ownership_to_oldest_member(self, storage, make_user, user):
        bob = await make_user("bob")
        carol = await make_user("carol")
        group = await create_group(storage, user.id, "Night Owls")
        await join_group(storage, bob.id, group.invite_code)
        await join_group(storage, carol.id, group.invite_code)

        await remove_member(storage, group.id, user.id)

        group, members = await get_group_with_members(storage, group.id)
        assert group.owner_id == bob.id
        roles = {m["user_id"]: m["role"] for m in members}
        assert roles == {bob.id: "owner", carol.id: "member"}

    @pytest.mark.asyncio
    async def test_last_member_leaving_dissolves_group(self, storage, user):
        group = await create_group(storage, user.id, "Solo")
        await post_message(storage, group.id, user.id, "hello?")
        await remove_member(storage, group.id, user.id)
        with pytest.raises(NotFoundError):
            await get_group(storage, group.id)
        assert await list_user_groups(storage, user.id) == []

    @pytest.mark.asyncio
    async def test_remove_non_member(self, storage, make_user, user):
        bob = await make_user("bob")
        group = await create_group(storage, user.id, "Night Owls")
        with pytest.raises(NotFoundError):
            await remove_member(storage, group.id, bob.id)


class TestGroupMessages:
    """Members only, paginated in posting order."""

    @pytest.mark.asyncio
    async def test_non_member_cannot_post(self, storage, make_user, user):
        bob = await make_user("bob")
        group = await create_group(storage, user.id, "Night Owls")
        with pytest.raises(ForbiddenError):
            await post_message(storage, group.id, bob.id, "let me in")

    @pytest.mark.asyncio
    async def test_pagination(self, storage, user):
        group = await create_group(storage, user.id, "Night Owls")
        for i in range(5):
            await post_message(storage, group.id, user.id, f"message {i}")

        page = await list_messages(storage, group.id, limit=2, offset=1)
        assert [m.message for m in page] == ["message 1", "message 2"]


class TestGroupSessions:
    """Scheduled -> in progress -> completed, driven by the creator."""

    @pytest.mark.asyncio
    async def test_creator_joins_own_session(self, storage, user):
        group = await create_group(storage, user.id, "Night Owls")
        start, end = _slot()
        session = await create_session(storage, group.id, user.id, "Calculus review", start, end)
        assert session.status == "scheduled"
        [participant] = await storage.list_session_participants(session.id)
        assert participant.user_id == user.id

    @pytest.mark.asyncio
    async def test_end_must_follow_start(self, storage, user):
        group = await create_group(storage, user.id, "Night Owls")
        start, _ = _slot()
        with pytest.raises(ValidationError):
            await create_session(storage, group.id, user.id, "Backwards", start, start - timedelta(minutes=1))

    @pytest.mark.asyncio
    async def test_non_member_cannot_schedule_or_join(self, storage, make_user, user):
        bob = await make_user("bob")
        group = await create_group(storage, user.id, "Night Owls")
        start, end = _slot()
        with pytest.raises(ForbiddenError):
            await create_session(storage, group.id, bob.id, "Crash", start, end)
        session = await create_session(storage, group.id, user.id, "Calculus review", start, end)
        with pytest.raises(ForbiddenError):
            await join_session(storage, session.id, bob.id)

    @pytest.mark.asyncio
    async def test_lifecycle(self, storage, make_user, user):
        bob = await make_user("bob")
        group = await create_group(storage, user.id, "Night Owls")
        await join_group(storage, bob.id, group.invite_code)
        start, end = _slot()
        session = await create_session(storage, group.id, user.id, "Calculus review", start, end)

        await join_session(storage, session.id, bob.id)
        with pytest.raises(ConflictError):
            await join_session(storage, session.id, bob.id)

        with pytest.raises(ForbiddenError):
            await start_session(storage, session.id, bob.id)
        session = await start_session(storage, session.id, user.id)
        assert session.status == "in_progress"
        assert [s.id for s in await list_sessions(storage, group.id, "in_progress")] == [session.id]

        session = await end_session(storage, session.id, user.id)
        assert session.status == "completed"
        assert session.actual_end is not None
        participants = await storage.list_session_participants(session.id)
        assert {p.status for p in participants} == {"completed"}
        assert all(p.total_time == 0 for p in participants)

    @pytest.mark.asyncio
    async def test_cannot_end_a_scheduled_session(self, storage, user):
        group = await create_group(storage, user.id, "Night Owls")
        start, end = _slot()
        session = await create_session(storage, group.id, user.id, "Calculus review", start, end)
        with pytest.raises(ConflictError):
            await end_session(storage, session.id, user.id)
