"""Endpoints for the signed-in user's own account."""
from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from arboretum.core.dependencies import get_current_identity, get_db, get_session_store
from arboretum.core.errors import NotFoundError
from arboretum.core.sessions import Identity, SessionStore
from arboretum.db.session import commit
from arboretum.schemas.user import AvatarResponse, ProfileResponse, UserRead
from arboretum.services import avatars as avatar_service
from arboretum.services import users as user_service

router = APIRouter(prefix="/user", tags=["user"])


@router.get("/profile", response_model=ProfileResponse)
async def profile(
    session: AsyncSession = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> ProfileResponse:
    user = await user_service.get_user_by_id(session, identity.id)
    if user is None:
        raise NotFoundError("User not found")
    return ProfileResponse(user=UserRead.model_validate(user))


@router.post("/avatar", response_model=AvatarResponse)
async def upload_avatar(
    avatar: UploadFile | None = File(default=None),
    session: AsyncSession = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store),
    identity: Identity = Depends(get_current_identity),
) -> AvatarResponse:
    avatar_path = await avatar_service.save_avatar(avatar, identity.id)
    try:
        await user_service.update_avatar(session, identity.id, avatar_path)
        await commit(session)
    except Exception:
        await avatar_service.discard_avatar(avatar_path)
        raise
    # Session snapshots are not re-read from the database, so push the change.
    await sessions.update_user(identity.id, avatar=avatar_path)
    return AvatarResponse(avatar=avatar_path)
