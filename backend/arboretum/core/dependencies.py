"""Reusable dependencies for FastAPI routes."""
from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from arboretum.core.config import get_settings
from arboretum.core.errors import ForbiddenError, UnauthenticatedError
from arboretum.core.security import SessionSigner
from arboretum.core.sessions import Identity, SessionStore
from arboretum.db.session import get_session


async def get_db() -> AsyncIterator[AsyncSession]:
    async with get_session() as session:
        yield session


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def read_session_token(request: Request) -> str | None:
    """Return the session token from the signed cookie, or None if absent or tampered."""
    settings = get_settings()
    cookie = request.cookies.get(settings.session_cookie_name)
    if not cookie:
        return None
    try:
        return SessionSigner().loads(cookie, max_age=settings.session_ttl_seconds)
    except ValueError:
        return None


async def get_optional_identity(
    request: Request,
    sessions: SessionStore = Depends(get_session_store),
) -> Identity | None:
    return await sessions.resolve(read_session_token(request))


async def get_current_identity(identity: Identity | None = Depends(get_optional_identity)) -> Identity:
    if identity is None:
        raise UnauthenticatedError()
    return identity


async def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    if not identity.is_admin:
        raise ForbiddenError("Admin access required")
    return identity
