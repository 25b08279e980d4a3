"""Study group business logic.

Rules:
- The creator joins as the owner
- Invite codes are server-generated, 8-char A-Z0-9
- A user can be a member of a group only once
- Ownership passes to the longest-serving member when the owner leaves
- Last member leaving dissolves the group
- Only members can post messages or schedule sessions
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from eduquest.db.models import GroupMember, GroupMessage, StudyGroup
from eduquest.errors import ConflictError, ForbiddenError, NotFoundError
from eduquest.social.invite_codes import generate_unique_invite_code, normalize_invite_code
from eduquest.storage.base import Storage

logger = logging.getLogger(__name__)

OWNER = "owner"
MEMBER = "member"


async def get_group(storage: Storage, group_id: int) -> StudyGroup:
    group = await storage.get_group(group_id)
    if group is None:
        raise NotFoundError("Group not found")
    return group


async def require_membership(storage: Storage, group_id: int, user_id: int) -> GroupMember:
    """Return the user's membership or raise ForbiddenError."""
    member = await storage.get_group_member(group_id, user_id)
    if member is None:
        raise ForbiddenError("User is not a member of this group")
    return member


async def create_group(
    storage: Storage,
    owner_id: int,
    name: str,
    description: str | None = None,
    is_private: bool = False,
) -> StudyGroup:
    """Create a study group. The creator becomes the owner."""
    if await storage.get_user(owner_id) is None:
        raise NotFoundError("User not found")

    now = datetime.now(timezone.utc)
    group = await storage.add_group(StudyGroup(
        name=name,
        description=description,
        owner_id=owner_id,
        is_private=is_private,
        invite_code=await generate_unique_invite_code(storage),
        created_at=now,
    ))
    await storage.add_group_member(GroupMember(
        group_id=group.id,
        user_id=owner_id,
        role=OWNER,
        joined_at=now,
    ))
    logger.info("Group created: %s (id=%d, owner=%d)", name, group.id, owner_id)
    return group


async def list_user_groups(storage: Storage, user_id: int) -> list[StudyGroup]:
    return await storage.list_groups_for_user(user_id)


async def get_group_with_members(storage: Storage, group_id: int) -> tuple[StudyGroup, list[dict]]:
    """The group plus its members (with usernames), oldest member first."""
    group = await get_group(storage, group_id)
    members = await storage.list_group_members(group_id)
    users = {u.id: u for u in await storage.list_users([m.user_id for m in members])}
    return group, [
        {
            "user_id": m.user_id,
            "username": users[m.user_id].username if m.user_id in users else None,
            "role": m.role,
            "joined_at": m.joined_at,
        }
        for m in members
    ]


async def join_group(storage: Storage, user_id: int, invite_code: str) -> GroupMember:
    """Join a group using an invite code."""
    if await storage.get_user(user_id) is None:
        raise NotFoundError("User not found")

    group = await storage.get_group_by_invite_code(normalize_invite_code(invite_code))
    if group is None:
        raise NotFoundError("Invalid invite code")
    if await storage.get_group_member(group.id, user_id) is not None:
        raise ConflictError("User is already a member of this group")

    member = await storage.add_group_member(GroupMember(
        group_id=group.id,
        user_id=user_id,
        role=MEMBER,
        joined_at=datetime.now(timezone.utc),
    ))
    logger.info("User %d joined group %d via invite code", user_id, group.id)
    return member


async def remove_member(storage: Storage, group_id: int, user_id: int) -> None:
    """Remove a user from a group, transferring ownership or dissolving as needed."""
    group = await get_group(storage, group_id)
    member = await storage.get_group_member(group_id, user_id)
    if member is None:
        raise NotFoundError("User is not a member of this group")

    remaining = [m for m in await storage.list_group_members(group_id) if m.user_id != user_id]
    if not remaining:
        await storage.delete_group(group)
        logger.info("Group %d dissolved (last member %d left)", group_id, user_id)
        return

    if member.role == OWNER:
        successor = remaining[0]
        successor.role = OWNER
        group.owner_id = successor.user_id
        logger.info("Group %d ownership passed from %d to %d", group_id, user_id, successor.user_id)

    await storage.delete_group_member(member)
    logger.info("User %d left group %d", user_id, group_id)


# --- Messages ---


async def post_message(storage: Storage, group_id: int, user_id: int, message: str) -> GroupMessage:
    await get_group(storage, group_id)
    await require_membership(storage, group_id, user_id)
    return await storage.add_group_message(GroupMessage(
        group_id=group_id,
        user_id=user_id,
        message=message,
        created_at=datetime.now(timezone.utc),
    ))


async def list_messages(storage: Storage, group_id: int, limit: int, offset: int = 0) -> list[GroupMessage]:
    """Messages in posting order, paginated."""
    await get_group(storage, group_id)
    return await storage.list_group_messages(group_id, limit, offset)
