"""
agency_core.db.repositories.agencies

Repository for `Agency` entities.
"""

from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from agency_core.db.models import Agency, User


class AgencyRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, *, name: str, description: str | None, admin: User) -> Agency:
        agency = Agency(name=name, description=description)
        self._session.add(agency)
        await self._session.flush()
        # Membership lives on the user row (users.agency_id).
        admin.agency_id = agency.id
        await self._session.flush()
        return agency

    async def get(self, agency_id: uuid.UUID) -> Agency | None:
        return await self._session.get(Agency, agency_id)
