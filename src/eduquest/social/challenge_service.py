"""Head-to-head challenges between friends.

Rules:
- Both users must have an accepted friendship to start a challenge
- Progress updates overwrite (not add to) the reporting side's counter
- The first update that takes either side to the target completes the challenge
- Winner: the side that reached the target; if both did, higher progress wins
  and an exact tie goes to the creator
- Only active challenges accept progress or cancellation
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from eduquest.db.models import Challenge
from eduquest.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from eduquest.social.friendship_service import are_friends
from eduquest.storage.base import Storage

logger = logging.getLogger(__name__)

ACTIVE = "active"
COMPLETED = "completed"
CANCELLED = "cancelled"

CREATOR = "creator"
CHALLENGED = "challenged"

CHALLENGE_TYPES = frozenset({"study_time", "xp_gain", "quest_completion"})


async def get_challenge(storage: Storage, challenge_id: int) -> Challenge:
    challenge = await storage.get_challenge(challenge_id)
    if challenge is None:
        raise NotFoundError("Challenge not found")
    return challenge


def role_of(challenge: Challenge, user_id: int) -> str:
    """Which side of the challenge ``user_id`` is on."""
    if user_id == challenge.creator_id:
        return CREATOR
    if user_id == challenge.challenged_id:
        return CHALLENGED
    raise ForbiddenError("User is not a participant in this challenge")


async def create_challenge(
    storage: Storage,
    creator_id: int,
    challenged_id: int,
    title: str,
    challenge_type: str,
    target: int,
    end_date: datetime,
    description: str | None = None,
) -> Challenge:
    if challenge_type not in CHALLENGE_TYPES:
        raise ValidationError(f"Unknown challenge type: {challenge_type}")
    if target < 1:
        raise ValidationError("target must be at least 1")
    if not await are_friends(storage, creator_id, challenged_id):
        raise ForbiddenError("Users must be friends to create a challenge")

    challenge = await storage.add_challenge(Challenge(
        creator_id=creator_id,
        challenged_id=challenged_id,
        title=title,
        description=description,
        type=challenge_type,
        target=target,
        creator_progress=0,
        challenged_progress=0,
        status=ACTIVE,
        winner_id=None,
        start_date=datetime.now(timezone.utc),
        end_date=end_date,
    ))
    logger.info("Challenge %d created: %d vs %d (%s, target=%d)", challenge.id, creator_id, challenged_id,
                challenge_type, target)
    return challenge


async def list_challenges(storage: Storage, user_id: int, status: str | None = None) -> list[Challenge]:
    return await storage.list_challenges(user_id, status)


async def update_challenge_progress(storage: Storage, challenge_id: int, role: str, progress: int) -> Challenge:
    """Overwrite one side's progress, then check for completion."""
    challenge = await get_challenge(storage, challenge_id)
    if challenge.status != ACTIVE:
        raise ConflictError(f"Challenge is {challenge.status}")

    if role == CREATOR:
        challenge.creator_progress = progress
    elif role == CHALLENGED:
        challenge.challenged_progress = progress
    else:
        raise ValidationError(f"Unknown challenge role: {role}")

    return await check_challenge_completion(storage, challenge_id)


async def check_challenge_completion(storage: Storage, challenge_id: int) -> Challenge:
    """Complete the challenge if either side has reached the target."""
    challenge = await get_challenge(storage, challenge_id)
    if challenge.status != ACTIVE:
        return challenge

    creator_done = challenge.creator_progress >= challenge.target
    challenged_done = challenge.challenged_progress >= challenge.target
    if not (creator_done or challenged_done):
        return challenge

    if creator_done and challenged_done:
        creator_wins = challenge.creator_progress >= challenge.challenged_progress
    else:
        creator_wins = creator_done

    challenge.status = COMPLETED
    challenge.winner_id = challenge.creator_id if creator_wins else challenge.challenged_id
    logger.info("Challenge %d completed, winner=%d", challenge_id, challenge.winner_id)
    return challenge


async def cancel_challenge(storage: Storage, challenge_id: int, user_id: int) -> Challenge:
    challenge = await get_challenge(storage, challenge_id)
    role_of(challenge, user_id)
    if challenge.status != ACTIVE:
        raise ConflictError(f"Challenge is {challenge.status}")
    challenge.status = CANCELLED
    logger.info("Challenge %d cancelled by user %d", challenge_id, user_id)
    return challenge
