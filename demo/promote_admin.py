#!/usr/bin/env python3
"""Promote an existing user to ADMIN. Run on the server.

Usage:
    python demo/promote_admin.py <username>
"""
import asyncio
import sys

from sqlalchemy import update
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from cardfolio.config import settings
from cardfolio.models.user import User, UserRole


async def promote(username: str) -> int:
    engine = create_async_engine(settings.DATABASE_URL)
    sf = async_sessionmaker(engine, class_=AsyncSession)
    async with sf() as s:
        r = await s.execute(
            update(User)
            .where(User.username == username)
            .values(role=UserRole.ADMIN)
        )
        await s.commit()
    await engine.dispose()
    return r.rowcount


if __name__ == "__main__":
    if len(sys.argv) != 2:
        sys.exit(__doc__)
    rows = asyncio.run(promote(sys.argv[1]))
    print(f"Rows updated: {rows}")
