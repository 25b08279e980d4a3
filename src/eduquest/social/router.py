"""Social API endpoints: friends, study groups, group sessions and challenges."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query, Response

from eduquest.config import get_settings
from eduquest.social.challenge_service import (
    cancel_challenge,
    create_challenge,
    get_challenge,
    list_challenges,
    role_of,
    update_challenge_progress,
)
from eduquest.social.friendship_service import (
    list_friends,
    remove_friendship,
    respond_to_request,
    send_friend_request,
)
from eduquest.social.group_service import (
    create_group,
    get_group_with_members,
    join_group,
    list_messages,
    list_user_groups,
    post_message,
    remove_member,
)
from eduquest.social.schemas import (
    ChallengeCancelRequest,
    ChallengeProgressRequest,
    ChallengeResponse,
    CreateChallengeRequest,
    CreateGroupRequest,
    CreateSessionRequest,
    FriendRequest,
    FriendResponse,
    FriendRespondRequest,
    FriendshipResponse,
    GroupDetailResponse,
    GroupMemberResponse,
    GroupResponse,
    JoinGroupRequest,
    MembershipResponse,
    MessageResponse,
    ParticipantResponse,
    PostMessageRequest,
    SessionActionRequest,
    SessionResponse,
)
from eduquest.social.session_service import (
    create_session,
    end_session,
    join_session,
    list_sessions,
    start_session,
)
from eduquest.storage import Storage, get_storage

router = APIRouter(prefix="/api/social", tags=["Social"])


# ── Friends ──


@router.post("/friends/request", response_model=FriendshipResponse, status_code=201)
async def request_friend(
    body: FriendRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> FriendshipResponse:
    friendship = await send_friend_request(storage, body.user_id, body.friend_id)
    await storage.commit()
    return FriendshipResponse.model_validate(friendship)


@router.put("/friends/respond", response_model=FriendshipResponse)
async def respond_friend(
    body: FriendRespondRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> FriendshipResponse:
    friendship = await respond_to_request(storage, body.friendship_id, body.status)
    await storage.commit()
    return FriendshipResponse.model_validate(friendship)


@router.get("/users/{user_id}/friends", response_model=list[FriendResponse])
async def get_friends(
    user_id: int,
    status: Literal["pending", "accepted", "rejected", "blocked"] | None = Query(None),
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> list[FriendResponse]:
    return [FriendResponse(**f) for f in await list_friends(storage, user_id, status)]


@router.delete("/friends/{friendship_id}", status_code=204)
async def delete_friend(
    friendship_id: int,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> Response:
    await remove_friendship(storage, friendship_id)
    await storage.commit()
    return Response(status_code=204)


# ── Groups ──


@router.post("/groups", response_model=GroupDetailResponse, status_code=201)
async def create_group_endpoint(
    body: CreateGroupRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> GroupDetailResponse:
    group = await create_group(storage, body.owner_id, body.name, body.description, body.is_private)
    await storage.commit()
    return await _group_detail(storage, group.id)


@router.get("/users/{user_id}/groups", response_model=list[GroupResponse])
async def get_user_groups(
    user_id: int,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> list[GroupResponse]:
    return [GroupResponse.model_validate(g) for g in await list_user_groups(storage, user_id)]


@router.get("/groups/{group_id}", response_model=GroupDetailResponse)
async def get_group_endpoint(
    group_id: int,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> GroupDetailResponse:
    return await _group_detail(storage, group_id)


@router.post("/groups/join", response_model=MembershipResponse, status_code=201)
async def join_group_endpoint(
    body: JoinGroupRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> MembershipResponse:
    member = await join_group(storage, body.user_id, body.invite_code)
    await storage.commit()
    return MembershipResponse.model_validate(member)


@router.delete("/groups/{group_id}/members/{user_id}", status_code=204)
async def leave_group(
    group_id: int,
    user_id: int,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> Response:
    """Remove a member. Ownership passes on, and the last member out dissolves the group."""
    await remove_member(storage, group_id, user_id)
    await storage.commit()
    return Response(status_code=204)


async def _group_detail(storage: Storage, group_id: int) -> GroupDetailResponse:
    group, members = await get_group_with_members(storage, group_id)
    return GroupDetailResponse(
        id=group.id,
        name=group.name,
        description=group.description,
        owner_id=group.owner_id,
        is_private=group.is_private,
        invite_code=group.invite_code,
        created_at=group.created_at,
        members=[GroupMemberResponse(**m) for m in members],
    )


# ── Group Messages ──


@router.post("/groups/{group_id}/messages", response_model=MessageResponse, status_code=201)
async def create_message(
    group_id: int,
    body: PostMessageRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> MessageResponse:
    message = await post_message(storage, group_id, body.user_id, body.message)
    await storage.commit()
    return MessageResponse.model_validate(message)


@router.get("/groups/{group_id}/messages", response_model=list[MessageResponse])
async def get_messages(
    group_id: int,
    limit: int | None = Query(None, ge=1, le=200),
    offset: int = Query(0, ge=0),
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> list[MessageResponse]:
    if limit is None:
        limit = get_settings().group_message_page_size
    messages = await list_messages(storage, group_id, limit, offset)
    return [MessageResponse.model_validate(m) for m in messages]


# ── Group Study Sessions ──


@router.post("/groups/{group_id}/sessions", response_model=SessionResponse, status_code=201)
async def create_session_endpoint(
    group_id: int,
    body: CreateSessionRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> SessionResponse:
    session = await create_session(
        storage,
        group_id,
        body.creator_id,
        body.title,
        body.scheduled_start,
        body.scheduled_end,
        body.description,
    )
    await storage.commit()
    return SessionResponse.model_validate(session)


@router.get("/groups/{group_id}/sessions", response_model=list[SessionResponse])
async def get_sessions(
    group_id: int,
    status: Literal["scheduled", "in_progress", "completed", "cancelled"] | None = Query(None),
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> list[SessionResponse]:
    return [SessionResponse.model_validate(s) for s in await list_sessions(storage, group_id, status)]


@router.post("/sessions/{session_id}/join", response_model=ParticipantResponse, status_code=201)
async def join_session_endpoint(
    session_id: int,
    body: SessionActionRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> ParticipantResponse:
    participant = await join_session(storage, session_id, body.user_id)
    await storage.commit()
    return ParticipantResponse.model_validate(participant)


@router.put("/sessions/{session_id}/start", response_model=SessionResponse)
async def start_session_endpoint(
    session_id: int,
    body: SessionActionRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> SessionResponse:
    session = await start_session(storage, session_id, body.user_id)
    await storage.commit()
    return SessionResponse.model_validate(session)


@router.put("/sessions/{session_id}/end", response_model=SessionResponse)
async def end_session_endpoint(
    session_id: int,
    body: SessionActionRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> SessionResponse:
    session = await end_session(storage, session_id, body.user_id)
    await storage.commit()
    return SessionResponse.model_validate(session)


# ── Challenges ──


@router.post("/challenges", response_model=ChallengeResponse, status_code=201)
async def create_challenge_endpoint(
    body: CreateChallengeRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> ChallengeResponse:
    challenge = await create_challenge(
        storage,
        body.creator_id,
        body.challenged_id,
        body.title,
        body.type,
        body.target,
        body.end_date,
        body.description,
    )
    await storage.commit()
    return ChallengeResponse.model_validate(challenge)


@router.get("/users/{user_id}/challenges", response_model=list[ChallengeResponse])
async def get_challenges(
    user_id: int,
    status: Literal["active", "completed", "cancelled"] | None = Query(None),
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> list[ChallengeResponse]:
    return [ChallengeResponse.model_validate(c) for c in await list_challenges(storage, user_id, status)]


@router.put("/challenges/{challenge_id}/progress", response_model=ChallengeResponse)
async def challenge_progress(
    challenge_id: int,
    body: ChallengeProgressRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> ChallengeResponse:
    """Report the caller's progress. Reaching the target completes the challenge."""
    role = role_of(await get_challenge(storage, challenge_id), body.user_id)
    challenge = await update_challenge_progress(storage, challenge_id, role, body.progress)
    await storage.commit()
    return ChallengeResponse.model_validate(challenge)


@router.put("/challenges/{challenge_id}/cancel", response_model=ChallengeResponse)
async def cancel_challenge_endpoint(
    challenge_id: int,
    body: ChallengeCancelRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> ChallengeResponse:
    challenge = await cancel_challenge(storage, challenge_id, body.user_id)
    await storage.commit()
    return ChallengeResponse.model_validate(challenge)
