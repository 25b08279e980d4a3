"""Auth and user API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from eduquest.auth.schemas import CredentialsRequest, UserResponse
from eduquest.auth.service import authenticate, get_user, register_user
from eduquest.storage import Storage, get_storage

router = APIRouter(prefix="/api", tags=["Auth"])


@router.post("/auth/register", response_model=UserResponse, status_code=201)
async def register(
    body: CredentialsRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> UserResponse:
    """Create an account with stats, default subjects and starter quests."""
    user = await register_user(storage, body.username, body.password)
    await storage.commit()
    return UserResponse.model_validate(user)


@router.post("/auth/login", response_model=UserResponse)
async def login(
    body: CredentialsRequest,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> UserResponse:
    user = await authenticate(storage, body.username, body.password)
    await storage.commit()
    return UserResponse.model_validate(user)


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user_endpoint(
    user_id: int,
    storage: Storage = Depends(get_storage),  # noqa: B008
) -> UserResponse:
    return UserResponse.model_validate(await get_user(storage, user_id))
