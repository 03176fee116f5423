"""
agency_core.db.repositories.creators

Repository for `Creator` entities.

Responsibilities:
- Insert/fetch/update/delete creator rows.
- List an agency's roster with per-creator deal counts.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from agency_core.db.models import Creator, Deal


class CreatorRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, agency_id: uuid.UUID, values: dict[str, Any]) -> Creator:
        creator = Creator(agency_id=agency_id, **values)
        self._session.add(creator)
        await self._session.flush()
        return creator

    async def get(self, creator_id: uuid.UUID, *, for_update: bool = False) -> Creator | None:
        return await self._session.get(Creator, creator_id, with_for_update=for_update)

    async def list_for_agency(self, agency_id: uuid.UUID) -> list[tuple[Creator, int]]:
        # Newest first, each row paired with the number of deals it owns.
        deal_count = (
            select(func.count(Deal.id))
            .where(Deal.creator_id == Creator.id)
            .correlate(Creator)
            .scalar_subquery()
        )
        stmt = (
            select(Creator, deal_count)
            .where(Creator.agency_id == agency_id)
            .order_by(desc(Creator.created_at))
        )
        rows = (await self._session.execute(stmt)).all()
        return [(creator, int(count or 0)) for creator, count in rows]

    async def count_deals(self, creator_id: uuid.UUID) -> int:
        stmt = select(func.count(Deal.id)).where(Deal.creator_id == creator_id)
        return int((await self._session.execute(stmt)).scalar_one())

    async def apply(self, creator: Creator, values: dict[str, Any]) -> Creator:
        for key, value in values.items():
            setattr(creator, key, value)
        await self._session.flush()
        return creator

    async def delete(self, creator: Creator) -> None:
        await self._session.delete(creator)
        await self._session.flush()
