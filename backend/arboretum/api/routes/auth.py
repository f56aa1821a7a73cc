"""Authentication endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from arboretum.core.config import get_settings
from arboretum.core.dependencies import get_db, get_optional_identity, get_session_store, read_session_token
from arboretum.core.errors import AuthError
from arboretum.core.security import SessionSigner
from arboretum.core.sessions import Identity, SessionStore
from arboretum.db.session import commit
from arboretum.models.user import User
from arboretum.schemas.auth import AuthCheckResponse, IdentityRead, LoginRequest, RegisterRequest
from arboretum.schemas.common import MessageResponse
from arboretum.services.users import authenticate_user, create_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


async def _open_session(request: Request, response: Response, sessions: SessionStore, user: User) -> None:
    # A login or registration replaces whatever session this browser held.
    await sessions.destroy(read_session_token(request))
    token = await sessions.create(Identity.from_user(user))
    settings = get_settings()
    response.set_cookie(
        key=settings.session_cookie_name,
        value=SessionSigner().dumps(token),
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite=settings.session_cookie_samesite,
        max_age=settings.session_ttl_seconds,
    )


@router.get("/check", response_model=AuthCheckResponse)
async def check(identity: Identity | None = Depends(get_optional_identity)) -> AuthCheckResponse:
    if identity is None:
        return AuthCheckResponse(loggedIn=False, user=None)
    return AuthCheckResponse(loggedIn=True, user=IdentityRead(**identity.as_dict()))


@router.post("/register", response_model=MessageResponse)
async def register(
    payload: RegisterRequest,
    request: Request,
    response: Response,
    session: AsyncSession = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store),
) -> MessageResponse:
    user = await create_user(session, payload.username, payload.email, payload.password)
    await commit(session)
    await _open_session(request, response, sessions, user)
    return MessageResponse(message="Registration successful")


@router.post("/login", response_model=MessageResponse)
async def login(
    payload: LoginRequest,
    request: Request,
    response: Response,
    session: AsyncSession = Depends(get_db),
    sessions: SessionStore = Depends(get_session_store),
) -> MessageResponse:
    try:
        user = await authenticate_user(session, payload.username, payload.password)
    except AuthError:
        logger.info("Failed login attempt")
        raise
    await _open_session(request, response, sessions, user)
    logger.info("User %s logged in", user.id)
    return MessageResponse(message="Logged in")


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    response: Response,
    sessions: SessionStore = Depends(get_session_store),
) -> MessageResponse:
    token = read_session_token(request)
    identity = await sessions.resolve(token)
    await sessions.destroy(token)
    if identity is not None:
        logger.info("User %s logged out", identity.id)
    response.delete_cookie(get_settings().session_cookie_name)
    return MessageResponse()
