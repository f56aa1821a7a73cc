#!/usr/bin/env python3
"""Create an administrator account from the command line."""
from __future__ import annotations

import argparse
import asyncio
import getpass
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from arboretum.core.errors import ArboretumError
from arboretum.core.sessions import ROLE_ADMIN
from arboretum.db.base import Base
from arboretum.db.session import commit, engine, get_session
from arboretum.services.users import create_user


async def _create_admin(username: str, email: str, password: str) -> int:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with get_session() as session:
        user = await create_user(session, username, email, password, role=ROLE_ADMIN)
        await commit(session)
    await engine.dispose()
    return user.id


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("username")
    parser.add_argument("email")
    parser.add_argument("--password", help="prompted for when omitted")
    args = parser.parse_args(argv)

    password = args.password or getpass.getpass("Password: ")
    try:
        user_id = asyncio.run(_create_admin(args.username, args.email, password))
    except ArboretumError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        return 1
    print(f"Created admin {args.username} (id={user_id})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
