"""
tests/conftest.py -- Shared fixtures for Arboretum tests.

Settings are read from the environment once, when arboretum.core.config is
first imported, so every ARBORETUM_* variable must be set before any
arboretum import below. Each test gets a freshly created SQLite schema and a
TestClient whose lifespan builds a new session store and bootstraps the admin
account configured here.
"""

from __future__ import annotations

import asyncio
import os
import tempfile
from collections.abc import Iterator
from pathlib import Path

_TMP_DIR = Path(tempfile.mkdtemp(prefix="arboretum-tests-"))

os.environ["ARBORETUM_DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR / 'arboretum-test.db'}"
os.environ["ARBORETUM_UPLOAD_DIR"] = str(_TMP_DIR / "uploads")
os.environ["ARBORETUM_SECRET_KEY"] = "test-secret-key"
os.environ["ARBORETUM_ADMIN_USERNAME"] = "root"
os.environ["ARBORETUM_ADMIN_EMAIL"] = "root@example.com"
os.environ["ARBORETUM_ADMIN_PASSWORD"] = "rootpass1"
os.environ["ARBORETUM_LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

import arboretum.models  # noqa: F401  (registers tables on Base.metadata)
from arboretum.db.base import Base
from arboretum.db.session import engine
from arboretum.main import app


async def _reset_database() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()


@pytest.fixture
def client() -> Iterator[TestClient]:
    """TestClient over an empty database that contains only the admin account."""
    asyncio.run(_reset_database())
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def upload_dir() -> Path:
    return _TMP_DIR / "uploads"
