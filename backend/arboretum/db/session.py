"""Database session and engine management."""
from __future__ import annotations

import asyncio
import functools
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, TypeVar

from sqlalchemy import event
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from arboretum.core.config import get_settings
from arboretum.core.errors import ServiceUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Driver-level failures meaning "the database is not reachable right now".
STORAGE_UNAVAILABLE_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError, asyncio.TimeoutError)

# Largest primary key a 64-bit INTEGER column can hold.
MAX_ROW_ID = 2**63 - 1


def _engine_options(database_url: str, timeout: float) -> dict[str, Any]:
    if database_url.startswith("sqlite"):
        # SQLite files are cheap to open; a fresh connection per checkout keeps
        # connections from outliving the event loop that created them.
        return {"poolclass": NullPool, "connect_args": {"timeout": timeout}}
    return {"pool_timeout": timeout, "pool_pre_ping": True}


_settings = get_settings()
engine = create_async_engine(
    _settings.database_url,
    future=True,
    echo=False,
    **_engine_options(_settings.database_url, _settings.database_timeout_seconds),
)
async_session_factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

if _settings.database_url.startswith("sqlite"):

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_conn, connection_record) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@asynccontextmanager
async def get_session() -> AsyncIterator[AsyncSession]:
    """Provide a transactional scope around a series of operations."""

    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


def storage_call(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """Bound a storage coroutine by the configured timeout.

    A stall or a connectivity failure becomes ``ServiceUnavailableError`` so
    callers can tell a dead database apart from bad input.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        timeout = get_settings().database_timeout_seconds
        try:
            return await asyncio.wait_for(func(*args, **kwargs), timeout=timeout)
        except STORAGE_UNAVAILABLE_ERRORS as exc:
            logger.error("Storage call %s failed: %s", func.__qualname__, exc.__class__.__name__)
            raise ServiceUnavailableError("Database unavailable") from exc

    return wrapper


@storage_call
async def commit(session: AsyncSession) -> None:
    """Commit ``session`` under the same timeout as every other storage call."""
    await session.commit()


def is_row_id(value: int) -> bool:
    """Whether ``value`` could be a primary key; anything else cannot match a row."""
    return 0 < value <= MAX_ROW_ID
