"""Challenge tests: friendship gate, completion and tie-breaks."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from eduquest.errors import ConflictError, ForbiddenError, ValidationError
from eduquest.social.challenge_service import (
    CHALLENGED,
    CREATOR,
    cancel_challenge,
    check_challenge_completion,
    create_challenge,
    list_challenges,
    role_of,
    update_challenge_progress,
)
from eduquest.social.friendship_service import respond_to_request, send_friend_request


def _next_week() -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=7)


@pytest_asyncio.fixture
async def friends(storage, make_user, user):
    """alice and bob with an accepted friendship."""
    bob = await make_user("bob")
    friendship = await send_friend_request(storage, user.id, bob.id)
    await respond_to_request(storage, friendship.id, "accepted")
    return user, bob


@pytest_asyncio.fixture
async def challenge(storage, friends):
    alice, bob = friends
    return await create_challenge(storage, alice.id, bob.id, "Study sprint", "study_time", 60, _next_week())


class TestCreateChallenge:
    """Creation rules."""

    @pytest.mark.asyncio
    async def test_requires_accepted_friendship(self, storage, make_user, user):
        bob = await make_user("bob")
        await send_friend_request(storage, user.id, bob.id)
        with pytest.raises(ForbiddenError, match="friends"):
            await create_challenge(storage, user.id, bob.id, "Sprint", "study_time", 60, _next_week())

    @pytest.mark.asyncio
    async def test_starts_active(self, challenge):
        assert challenge.status == "active"
        assert challenge.creator_progress == 0
        assert challenge.challenged_progress == 0
        assert challenge.winner_id is None

    @pytest.mark.asyncio
    async def test_unknown_type(self, storage, friends):
        alice, bob = friends
        with pytest.raises(ValidationError, match="Unknown challenge type"):
            await create_challenge(storage, alice.id, bob.id, "Sprint", "push_ups", 60, _next_week())

    @pytest.mark.asyncio
    async def test_target_must_be_positive(self, storage, friends):
        alice, bob = friends
        with pytest.raises(ValidationError):
            await create_challenge(storage, alice.id, bob.id, "Sprint", "xp_gain", 0, _next_week())

    @pytest.mark.asyncio
    async def test_listed_for_both_sides(self, storage, friends, challenge):
        alice, bob = friends
        assert [c.id for c in await list_challenges(storage, alice.id)] == [challenge.id]
        assert [c.id for c in await list_challenges(storage, bob.id, "active")] == [challenge.id]
        assert await list_challenges(storage, bob.id, "completed") == []


class TestChallengeProgress:
    """Progress overwrites and the first side to the target wins."""

    @pytest.mark.asyncio
    async def test_creator_reaches_target(self, storage, friends, challenge):
        alice, _ = friends
        result = await update_challenge_progress(storage, challenge.id, CREATOR, 60)
        assert result.status == "completed"
        assert result.winner_id == alice.id

    @pytest.mark.asyncio
    async def test_progress_overwrites(self, storage, challenge):
        await update_challenge_progress(storage, challenge.id, CHALLENGED, 30)
        result = await update_challenge_progress(storage, challenge.id, CHALLENGED, 20)
        assert result.challenged_progress == 20
        assert result.status == "active"

    @pytest.mark.asyncio
    async def test_challenged_side_can_win(self, storage, friends, challenge):
        _, bob = friends
        await update_challenge_progress(storage, challenge.id, CREATOR, 59)
        result = await update_challenge_progress(storage, challenge.id, CHALLENGED, 61)
        assert result.winner_id == bob.id

    @pytest.mark.asyncio
    async def test_progress_after_completion_is_conflict(self, storage, challenge):
        await update_challenge_progress(storage, challenge.id, CREATOR, 60)
        with pytest.raises(ConflictError):
            await update_challenge_progress(storage, challenge.id, CHALLENGED, 90)


class TestTieBreak:
    """Both sides past the target: higher progress wins, exact tie goes to the creator."""

    @pytest.mark.asyncio
    async def test_higher_progress_wins(self, storage, friends, challenge):
        _, bob = friends
        challenge.creator_progress = 60
        challenge.challenged_progress = 75
        result = await check_challenge_completion(storage, challenge.id)
        assert result.winner_id == bob.id

    @pytest.mark.asyncio
    async def test_exact_tie_goes_to_creator(self, storage, friends, challenge):
        alice, _ = friends
        challenge.creator_progress = 70
        challenge.challenged_progress = 70
        result = await check_challenge_completion(storage, challenge.id)
        assert result.winner_id == alice.id

    @pytest.mark.asyncio
    async def test_neither_side_done(self, storage, challenge):
        result = await check_challenge_completion(storage, challenge.id)
        assert result.status == "active"


class TestCancelChallenge:
    """Either participant may cancel an active challenge."""

    @pytest.mark.asyncio
    async def test_participant_cancels(self, storage, friends, challenge):
        _, bob = friends
        result = await cancel_challenge(storage, challenge.id, bob.id)
        assert result.status == "cancelled"
        with pytest.raises(ConflictError):
            await update_challenge_progress(storage, challenge.id, CREATOR, 60)

    @pytest.mark.asyncio
    async def test_outsider_cannot_cancel(self, storage, make_user, challenge):
        carol = await make_user("carol")
        with pytest.raises(ForbiddenError):
            await cancel_challenge(storage, challenge.id, carol.id)

    @pytest.mark.asyncio
    async def test_role_of(self, friends, challenge):
        alice, bob = friends
        assert role_of(challenge, alice.id) == CREATOR
        assert role_of(challenge, bob.id) == CHALLENGED
        with pytest.raises(ForbiddenError):
            role_of(challenge, 999)
