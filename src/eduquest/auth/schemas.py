"""Pydantic models for registration, login and user lookup."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from eduquest.schemas import CamelModel


class CredentialsRequest(CamelModel):
    username: str = Field(..., max_length=64)
    password: str = Field(..., max_length=256)


class UserResponse(CamelModel):
    """Public view of a user. The password hash never leaves the service."""

    id: int
    username: str
    created_at: datetime
