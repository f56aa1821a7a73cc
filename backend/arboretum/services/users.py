"""User service functions for registration, authentication and administration."""
from __future__ import annotations

import logging

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from arboretum.core import policy
from arboretum.core.errors import (
    AuthError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    SelfDeleteError,
    ValidationError,
)
from arboretum.core.security import DUMMY_PASSWORD_HASH, PasswordHasher
from arboretum.core.sessions import ROLE_ADMIN, ROLE_USER, Identity
from arboretum.db.session import is_row_id, storage_call
from arboretum.models.tree import Tree
from arboretum.models.user import User
from arboretum.schemas.auth import PASSWORD_MIN_LENGTH

logger = logging.getLogger(__name__)


@storage_call
async def get_user_by_id(session: AsyncSession, user_id: int) -> User | None:
    if not is_row_id(user_id):
        return None
    return await session.get(User, user_id)


@storage_call
async def get_user_by_login(session: AsyncSession, login: str) -> User | None:
    """Find a user whose username or email equals ``login``."""
    result = await session.execute(
        select(User).where(or_(User.username == login, User.email == login)).order_by(User.id).limit(1)
    )
    return result.scalars().first()


def _validate_registration(username: str, email: str, password: str) -> None:
    if not username or not username.strip() or not email or not email.strip() or not password:
        raise ValidationError("All fields are required")
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")


@storage_call
async def create_user(
    session: AsyncSession, username: str, email: str, password: str, role: str = ROLE_USER
) -> User:
    _validate_registration(username, email, password)
    if role not in (ROLE_USER, ROLE_ADMIN):
        raise ValidationError(f"Unknown role: {role}")

    existing = await session.execute(
        select(User.id).where(or_(User.username == username, User.email == email)).limit(1)
    )
    if existing.first() is not None:
        raise ConflictError()

    password_hash = await PasswordHasher.hash_async(password)
    user = User(username=username, email=email, password_hash=password_hash, avatar=None, role=role)
    session.add(user)
    try:
        await session.flush()
    except IntegrityError as exc:
        # Lost a race with a concurrent registration for the same name/email.
        await session.rollback()
        raise ConflictError() from exc
    logger.info("Registered user %s (id=%s, role=%s)", user.username, user.id, user.role)
    return user


async def authenticate_user(session: AsyncSession, login: str, password: str) -> User:
    user = await get_user_by_login(session, login)
    if user is None:
        await PasswordHasher.verify_async(password, DUMMY_PASSWORD_HASH)
        raise AuthError()
    if not await PasswordHasher.verify_async(password, user.password_hash):
        raise AuthError()
    return user


@storage_call
async def update_avatar(session: AsyncSession, user_id: int, avatar_path: str) -> User:
    user = await session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    user.avatar = avatar_path
    await session.flush()
    logger.info("Updated avatar for user %s", user_id)
    return user


@storage_call
async def list_users_with_tree_counts(session: AsyncSession, actor: Identity) -> list[tuple[User, int]]:
    if not actor.is_admin:
        raise ForbiddenError("Admin access required")
    trees_count = func.count(Tree.id).label("trees_count")
    result = await session.execute(
        select(User, trees_count)
        .outerjoin(Tree, Tree.created_by == User.id)
        .group_by(User.id)
        .order_by(User.created_at.desc(), User.id.desc())
    )
    return [(user, count) for user, count in result.all()]


@storage_call
async def delete_user(session: AsyncSession, actor: Identity, user_id: int) -> None:
    """Delete a user account. Their trees are kept with ``created_by`` cleared."""
    if not actor.is_admin:
        raise ForbiddenError("Admin access required")
    if not policy.can_delete_user(actor, user_id):
        raise SelfDeleteError()

    user = await session.get(User, user_id) if is_row_id(user_id) else None
    if user is None:
        raise NotFoundError("User not found")

    await session.execute(update(Tree).where(Tree.created_by == user_id).values(created_by=None))
    await session.delete(user)
    await session.flush()
    logger.info("Admin %s deleted user %s (%s)", actor.id, user_id, user.username)


async def ensure_admin(session: AsyncSession, username: str, email: str, password: str) -> User | None:
    """Create the configured admin account unless its username or email is taken."""
    existing = await get_user_by_login(session, username) or await get_user_by_login(session, email)
    if existing is not None:
        if existing.role != ROLE_ADMIN:
            logger.warning("Configured admin name %s belongs to a non-admin account", username)
        return None
    return await create_user(session, username, email, password, role=ROLE_ADMIN)
