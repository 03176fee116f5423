"""
agency_core.db.repositories.deals

Repository for `Deal` entities.

Responsibilities:
- Insert/fetch/update/delete deal rows.
- Agency-scoped listing (joined through the owning creator) and pipeline totals.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import delete, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from agency_core.db.models import Creator, Deal
from agency_core.domain.lifecycle import DealStatus


class DealRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, creator_id: uuid.UUID, values: dict[str, Any]) -> Deal:
        deal = Deal(creator_id=creator_id, **values)
        self._session.add(deal)
        await self._session.flush()
        return deal

    async def get(self, deal_id: uuid.UUID, *, for_update: bool = False) -> Deal | None:
        return await self._session.get(Deal, deal_id, with_for_update=for_update)

    async def list_for_agency(
        self,
        agency_id: uuid.UUID,
        *,
        creator_id: uuid.UUID | None = None,
        status: DealStatus | None = None,
    ) -> list[Deal]:
        stmt = (
            select(Deal)
            .join(Creator, Deal.creator_id == Creator.id)
            .where(Creator.agency_id == agency_id)
            .order_by(desc(Deal.created_at))
        )
        if creator_id is not None:
            stmt = stmt.where(Deal.creator_id == creator_id)
        if status is not None:
            stmt = stmt.where(Deal.status == status)
        return list((await self._session.execute(stmt)).scalars().all())

    async def status_totals(self, agency_id: uuid.UUID) -> list[tuple[DealStatus, int, float]]:
        # (status, deal count, summed amount) per status present in the agency.
        stmt = (
            select(Deal.status, func.count(Deal.id), func.coalesce(func.sum(Deal.amount), 0.0))
            .join(Creator, Deal.creator_id == Creator.id)
            .where(Creator.agency_id == agency_id)
            .group_by(Deal.status)
        )
        rows = (await self._session.execute(stmt)).all()
        return [(status, int(count), float(total)) for status, count, total in rows]

    async def apply(self, deal: Deal, values: dict[str, Any]) -> Deal:
        for key, value in values.items():
            setattr(deal, key, value)
        await self._session.flush()
        return deal

    async def delete(self, deal: Deal) -> None:
        await self._session.delete(deal)
        await self._session.flush()

    async def delete_for_creator(self, creator_id: uuid.UUID) -> int:
        result = await self._session.execute(
            delete(Deal)
            .where(Deal.creator_id == creator_id)
            .execution_options(synchronize_session="fetch")
        )
        await self._session.flush()
        return int(result.rowcount or 0)
