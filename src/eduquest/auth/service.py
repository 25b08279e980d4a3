"""Registration and login.

Registering a user provisions everything the rules engine expects to exist:
the stat record, the four default subjects and the starter daily and epic
quests. Logging in advances the daily login streak.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from eduquest.auth.password import check_needs_rehash, hash_password, verify_password
from eduquest.db.models import User
from eduquest.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from eduquest.gamification.streak_service import update_login_streak
from eduquest.gamification.xp_service import new_user_stats
from eduquest.quests.service import create_starter_quests
from eduquest.storage.base import Storage
from eduquest.subjects.service import create_default_subjects

logger = logging.getLogger(__name__)


async def get_user(storage: Storage, user_id: int) -> User:
    user = await storage.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def register_user(storage: Storage, username: str, password: str) -> User:
    """Create a user with stats, default subjects and starter quests."""
    username = username.strip()
    if not username or not password:
        raise ValidationError("Username and password are required")
    if await storage.get_user_by_username(username) is not None:
        raise ConflictError("Username already exists")

    now = datetime.now(timezone.utc)
    user = await storage.add_user(User(
        username=username,
        password_hash=hash_password(password),
        created_at=now,
    ))
    await storage.add_user_stats(new_user_stats(user.id, now))
    await create_default_subjects(storage, user.id, now)
    await create_starter_quests(storage, user.id, now)

    logger.info("User registered: %s (id=%d)", username, user.id)
    return user


async def authenticate(storage: Storage, username: str, password: str, now: datetime | None = None) -> User:
    """Verify credentials and record the login against the streak."""
    user = await storage.get_user_by_username(username.strip())
    if user is None or not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid credentials")

    if check_needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)

    await update_login_streak(storage, user.id, now)
    return user
