"""Security helpers for password hashing and session cookie signing."""
from __future__ import annotations

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

from .config import get_settings


_password_context = CryptContext(schemes=["argon2"], deprecated="auto")


class PasswordHasher:
    """Hash and verify user passwords using Argon2id.

    Every hash carries its own random salt and cost parameters, so two hashes
    of the same password never compare equal as strings. The async variants
    push the work onto the thread pool; request handlers should use those.
    """

    @staticmethod
    def hash(password: str) -> str:
        return _password_context.hash(password)

    @staticmethod
    def verify(password: str, hashed: str) -> bool:
        try:
            return _password_context.verify(password, hashed)
        except (ValueError, TypeError):
            # Unknown or corrupted digest format.
            return False

    @staticmethod
    async def hash_async(password: str) -> str:
        return await run_in_threadpool(PasswordHasher.hash, password)

    @staticmethod
    async def verify_async(password: str, hashed: str) -> bool:
        return await run_in_threadpool(PasswordHasher.verify, password, hashed)


# Verified against when a login name matches no user, so that path costs the
# same as a wrong password.
DUMMY_PASSWORD_HASH = PasswordHasher.hash("arboretum-timing-equalizer")


class SessionSigner:
    """Sign and unsign the session token stored in the browser cookie."""

    def __init__(self, salt: str = "arboretum-session") -> None:
        settings = get_settings()
        self._serializer = URLSafeTimedSerializer(settings.secret_key, salt=salt)

    def dumps(self, token: str) -> str:
        return self._serializer.dumps({"sid": token})

    def loads(self, value: str, max_age: int | None = None) -> str:
        try:
            payload = self._serializer.loads(value, max_age=max_age)
        except (BadSignature, SignatureExpired) as exc:
            raise ValueError("Invalid or expired session cookie") from exc
        token = payload.get("sid") if isinstance(payload, dict) else None
        if not isinstance(token, str) or not token:
            raise ValueError("Invalid session cookie payload")
        return token
