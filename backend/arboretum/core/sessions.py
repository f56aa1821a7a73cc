"""Server-held session store mapping opaque tokens to identity snapshots."""
from __future__ import annotations

import asyncio
import logging
import secrets
import time
from dataclasses import dataclass, replace
from typing import Any, Callable

logger = logging.getLogger(__name__)

ROLE_USER = "user"
ROLE_ADMIN = "admin"


@dataclass(frozen=True, slots=True)
class Identity:
    """Snapshot of the authenticated user taken when the session was opened."""

    id: int
    username: str
    avatar: str | None = None
    role: str = ROLE_USER

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @classmethod
    def from_user(cls, user: Any) -> "Identity":
        return cls(id=user.id, username=user.username, avatar=user.avatar, role=user.role)

    def as_dict(self) -> dict[str, Any]:
        return {"id": self.id, "username": self.username, "avatar": self.avatar, "role": self.role}


@dataclass(slots=True)
class _Entry:
    identity: Identity
    expires_at: float


class SessionStore:
    """In-memory token -> identity map with a fixed absolute expiry.

    A user may hold any number of sessions at once (one per browser, tab, or
    client). Resolving a session never extends its lifetime.
    """

    def __init__(self, ttl_seconds: int, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._lock = asyncio.Lock()

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    async def create(self, identity: Identity) -> str:
        token = secrets.token_urlsafe(32)
        async with self._lock:
            self._entries[token] = _Entry(identity=identity, expires_at=self._clock() + self._ttl)
        logger.debug("Opened session for user %s", identity.id)
        return token

    async def resolve(self, token: str | None) -> Identity | None:
        if not token:
            return None
        async with self._lock:
            entry = self._entries.get(token)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[token]
                return None
            return entry.identity

    async def destroy(self, token: str | None) -> None:
        if not token:
            return
        async with self._lock:
            self._entries.pop(token, None)

    async def update_user(self, user_id: int, **changes: Any) -> int:
        """Rewrite the snapshot of every live session belonging to ``user_id``."""
        updated = 0
        async with self._lock:
            for entry in self._entries.values():
                if entry.identity.id == user_id:
                    entry.identity = replace(entry.identity, **changes)
                    updated += 1
        return updated

    async def destroy_user(self, user_id: int) -> int:
        async with self._lock:
            tokens = [token for token, entry in self._entries.items() if entry.identity.id == user_id]
            for token in tokens:
                del self._entries[token]
        if tokens:
            logger.info("Dropped %d session(s) for user %s", len(tokens), user_id)
        return len(tokens)

    async def purge_expired(self) -> int:
        now = self._clock()
        async with self._lock:
            expired = [token for token, entry in self._entries.items() if entry.expires_at <= now]
            for token in expired:
                del self._entries[token]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)
