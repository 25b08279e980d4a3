"""Friend requests and friendship lookups."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from eduquest.db.models import Friendship
from eduquest.errors import ConflictError, NotFoundError, ValidationError
from eduquest.storage.base import Storage

logger = logging.getLogger(__name__)

PENDING = "pending"
ACCEPTED = "accepted"
REJECTED = "rejected"
BLOCKED = "blocked"
RESPONSES = frozenset({ACCEPTED, REJECTED})


async def send_friend_request(storage: Storage, user_id: int, friend_id: int) -> Friendship:
    if user_id == friend_id:
        raise ValidationError("You cannot send a friend request to yourself")
    if await storage.get_user(user_id) is None or await storage.get_user(friend_id) is None:
        raise NotFoundError("User not found")
    if await storage.find_friendship(user_id, friend_id) is not None:
        raise ConflictError("Friendship already exists")

    now = datetime.now(timezone.utc)
    friendship = await storage.add_friendship(Friendship(
        user_id=user_id,
        friend_id=friend_id,
        status=PENDING,
        created_at=now,
        updated_at=now,
    ))
    logger.info("Friend request %d: %d -> %d", friendship.id, user_id, friend_id)
    return friendship


async def respond_to_request(storage: Storage, friendship_id: int, status: str) -> Friendship:
    if status not in RESPONSES:
        raise ValidationError("Status must be 'accepted' or 'rejected'")
    friendship = await storage.get_friendship(friendship_id)
    if friendship is None:
        raise NotFoundError("Friendship not found")
    if friendship.status != PENDING:
        raise ConflictError(f"Friend request already {friendship.status}")

    friendship.status = status
    friendship.updated_at = datetime.now(timezone.utc)
    logger.info("Friend request %d %s", friendship_id, status)
    return friendship


async def list_friends(storage: Storage, user_id: int, status: str | None = None) -> list[dict]:
    """Friendships involving the user, each paired with the other party."""
    if await storage.get_user(user_id) is None:
        raise NotFoundError("User not found")

    friendships = await storage.list_friendships(user_id, status)
    other_ids = [f.friend_id if f.user_id == user_id else f.user_id for f in friendships]
    others = {u.id: u for u in await storage.list_users(other_ids)}

    friends = []
    for friendship, other_id in zip(friendships, other_ids):
        other = others.get(other_id)
        stats = await storage.get_user_stats(other_id)
        friends.append({
            "friendship_id": friendship.id,
            "friend_id": other_id,
            "username": other.username if other else None,
            "level": stats.level if stats else 1,
            "avatar": stats.selected_avatar if stats else None,
            "status": friendship.status,
            "requested_by": friendship.user_id,
            "since": friendship.updated_at,
        })
    return friends


async def remove_friendship(storage: Storage, friendship_id: int) -> None:
    friendship = await storage.get_friendship(friendship_id)
    if friendship is None:
        raise NotFoundError("Friendship not found")
    await storage.delete_friendship(friendship)


async def are_friends(storage: Storage, user_a: int, user_b: int) -> bool:
    friendship = await storage.find_friendship(user_a, user_b)
    return friendship is not None and friendship.status == ACCEPTED
