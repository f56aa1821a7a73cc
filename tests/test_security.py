"""
tests/test_security.py -- Password hashing and session cookie signing.
"""

from __future__ import annotations

import asyncio

import pytest

from arboretum.core.security import PasswordHasher, SessionSigner


class TestPasswordHasher:
    def test_verify_accepts_the_original_password(self) -> None:
        digest = PasswordHasher.hash("secret1")
        assert PasswordHasher.verify("secret1", digest)

    def test_verify_rejects_a_different_password(self) -> None:
        digest = PasswordHasher.hash("secret1")
        assert not PasswordHasher.verify("secret2", digest)

    def test_each_hash_uses_a_fresh_salt(self) -> None:
        first = PasswordHasher.hash("secret1")
        second = PasswordHasher.hash("secret1")
        assert first != second
        assert "secret1" not in first

    def test_malformed_digest_is_a_mismatch_not_an_error(self) -> None:
        assert not PasswordHasher.verify("secret1", "not-a-hash")

    def test_async_variants(self) -> None:
        async def roundtrip() -> tuple[bool, bool]:
            digest = await PasswordHasher.hash_async("secret1")
            return (
                await PasswordHasher.verify_async("secret1", digest),
                await PasswordHasher.verify_async("wrong-one", digest),
            )

        assert asyncio.run(roundtrip()) == (True, False)


class TestSessionSigner:
    def test_signed_token_reads_back(self) -> None:
        signer = SessionSigner()
        assert signer.loads(signer.dumps("token-123")) == "token-123"

    def test_tampered_cookie_is_rejected(self) -> None:
        signer = SessionSigner()
        value = signer.dumps("token-123")
        with pytest.raises(ValueError):
            signer.loads(value[:-2] + "xx")

    def test_cookie_signed_with_another_salt_is_rejected(self) -> None:
        value = SessionSigner(salt="other").dumps("token-123")
        with pytest.raises(ValueError):
            SessionSigner().loads(value)
