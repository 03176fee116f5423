"""
agency_core.db.init_db

DB initialization helpers (dev/test convenience).
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from agency_core.db import models  # noqa: F401  # register tables on Base.metadata
from agency_core.db.base import Base


async def init_db(engine: AsyncEngine) -> None:
    """
    Dev/test bootstrap: create tables if they don't exist.
    Production runs the Alembic migrations under `alembic/versions` instead.
    """

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
