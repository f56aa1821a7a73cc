"""Administrative user management endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from arboretum.core.dependencies import get_db, get_session_store, require_admin
from arboretum.core.sessions import Identity, SessionStore
from arboretum.db.session import commit
from arboretum.schemas.common import MessageResponse
from arboretum.schemas.user import UserListResponse, UserRead, UserWithTreeCount
from arboretum.services import users as user_service

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=UserListResponse)
async def list_users(
    session: AsyncSession = Depends(get_db),
    admin: Identity = Depends(require_admin),
) -> UserListResponse:
    rows = await user_service.list_users_with_tree_counts(session, admin)
    users = [
        UserWithTreeCount(**UserRead.model_validate(user).model_dump(), trees_count=count)
        for user, count in rows
    ]
    return UserListResponse(users=users)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    session: AsyncSession = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store),
    admin: Identity = Depends(require_admin),
) -> MessageResponse:
    await user_service.delete_user(session, admin, user_id)
    await commit(session)
    await sessions.destroy_user(user_id)
    return MessageResponse(message="User deleted")
