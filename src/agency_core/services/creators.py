"""
agency_core.services.creators

Creator registry scoped to the caller's agency.

Responsibilities:
- Create creators under an agency.
- Guarded get/list/update/delete.
- Cascade deletion of a creator's deals within the same transaction.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from agency_core.db.base import row_key
from agency_core.db.models import Agency, Creator, User
from agency_core.db.repositories.creators import CreatorRepo
from agency_core.db.repositories.deals import DealRepo
from agency_core.domain.schemas import CreatorCreate, CreatorUpdate, parse_fields
from agency_core.observability.logging import get_logger
from agency_core.services.identity import IdentityResolver
from agency_core.services.ownership import OwnershipGuard
from agency_core.services.transactions import unit_of_work

log = get_logger(__name__)

Fields = Mapping[str, Any] | BaseModel


class CreatorRegistry:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._creators = CreatorRepo(session)
        self._deals = DealRepo(session)
        self._guard = OwnershipGuard(session)
        self._identity = IdentityResolver(session)

    async def create(self, agency: Agency, fields: Fields) -> Creator:
        data = parse_fields(CreatorCreate, fields)
        agency_id = row_key(agency)
        async with unit_of_work(self._session):
            creator = await self._creators.create(agency_id=agency_id, values=data.model_dump())
        log.info("creator_created", creator_id=str(creator.id), agency_id=str(agency_id))
        return creator

    async def get(self, user: User, creator_id: uuid.UUID) -> Creator:
        async with unit_of_work(self._session):
            return await self._guard.authorize_creator(user, creator_id)

    async def deal_count(self, user: User, creator_id: uuid.UUID) -> int:
        async with unit_of_work(self._session):
            await self._guard.authorize_creator(user, creator_id)
            return await self._creators.count_deals(creator_id)

    async def list_creators(self, user: User) -> list[tuple[Creator, int]]:
        async with unit_of_work(self._session):
            agency = await self._identity.require_agency(user)
            return await self._creators.list_for_agency(agency.id)

    async def update(self, user: User, creator_id: uuid.UUID, fields: Fields) -> Creator:
        async with unit_of_work(self._session):
            creator = await self._guard.authorize_creator(user, creator_id, for_update=True)
            data = parse_fields(CreatorUpdate, fields)
            creator = await self._creators.apply(creator, data.model_dump(exclude_unset=True))
        log.info(
            "creator_updated", creator_id=str(creator_id), fields=sorted(data.model_fields_set)
        )
        return creator

    async def delete(self, user: User, creator_id: uuid.UUID) -> int:
        """
        Delete a creator and every deal it owns in one transaction.

        Returns the number of deals removed. Either all rows go or none do.
        """
        async with unit_of_work(self._session):
            creator = await self._guard.authorize_creator(user, creator_id, for_update=True)
            removed = await self._deals.delete_for_creator(creator.id)
            await self._creators.delete(creator)
        log.info("creator_deleted", creator_id=str(creator_id), deals_removed=removed)
        return removed


# --- Module Notes -----------------------------------------------------------
# The cascade is explicit here rather than an ON DELETE CASCADE in the schema, so
# it holds the same way on every storage backend.
