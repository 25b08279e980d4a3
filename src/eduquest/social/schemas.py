"""Pydantic models for friends, groups, group sessions and challenges."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from eduquest.schemas import CamelModel

# --- Friends ---


class FriendRequest(CamelModel):
    user_id: int
    friend_id: int


class FriendRespondRequest(CamelModel):
    friendship_id: int
    status: Literal["accepted", "rejected"]


class FriendshipResponse(CamelModel):
    id: int
    user_id: int
    friend_id: int
    status: str
    created_at: datetime
    updated_at: datetime


class FriendResponse(CamelModel):
    friendship_id: int
    friend_id: int
    username: str | None = None
    level: int
    avatar: str | None = None
    status: str
    requested_by: int
    since: datetime


# --- Groups ---


class CreateGroupRequest(CamelModel):
    owner_id: int
    name: str = Field(..., min_length=1, max_length=64)
    description: str | None = Field(None, max_length=256)
    is_private: bool = False


class JoinGroupRequest(CamelModel):
    user_id: int
    invite_code: str = Field(..., min_length=1, max_length=16)


class GroupResponse(CamelModel):
    id: int
    name: str
    description: str | None = None
    owner_id: int
    is_private: bool
    invite_code: str
    created_at: datetime


class GroupMemberResponse(CamelModel):
    user_id: int
    username: str | None = None
    role: str
    joined_at: datetime


class GroupDetailResponse(GroupResponse):
    members: list[GroupMemberResponse] = []


class MembershipResponse(CamelModel):
    id: int
    group_id: int
    user_id: int
    role: str
    joined_at: datetime


class PostMessageRequest(CamelModel):
    user_id: int
    message: str = Field(..., min_length=1, max_length=2000)


class MessageResponse(CamelModel):
    id: int
    group_id: int
    user_id: int
    message: str
    created_at: datetime


# --- Group study sessions ---


class CreateSessionRequest(CamelModel):
    creator_id: int
    title: str = Field(..., min_length=1, max_length=128)
    description: str | None = Field(None, max_length=256)
    scheduled_start: datetime
    scheduled_end: datetime


class SessionActionRequest(CamelModel):
    user_id: int


class SessionResponse(CamelModel):
    id: int
    group_id: int
    creator_id: int
    title: str
    description: str | None = None
    scheduled_start: datetime
    scheduled_end: datetime
    actual_start: datetime | None = None
    actual_end: datetime | None = None
    status: str
    created_at: datetime


class ParticipantResponse(CamelModel):
    id: int
    session_id: int
    user_id: int
    joined_at: datetime
    status: str
    total_time: int


# --- Challenges ---


class CreateChallengeRequest(CamelModel):
    creator_id: int
    challenged_id: int
    title: str = Field(..., min_length=1, max_length=128)
    description: str | None = Field(None, max_length=256)
    type: Literal["study_time", "xp_gain", "quest_completion"]
    target: int = Field(..., ge=1)
    end_date: datetime


class ChallengeProgressRequest(CamelModel):
    user_id: int
    progress: int = Field(..., ge=0)


class ChallengeCancelRequest(CamelModel):
    user_id: int


class ChallengeResponse(CamelModel):
    id: int
    creator_id: int
    challenged_id: int
    title: str
    description: str | None = None
    type: str
    target: int
    creator_progress: int
    challenged_progress: int
    status: str
    winner_id: int | None = None
    start_date: datetime
    end_date: datetime
