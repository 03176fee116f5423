"""
agency_core.services.ownership

Ownership guard for creators and deals.

Every read, update and delete of a creator or a deal goes through
`OwnershipGuard.authorize`, which walks the ownership chain

    Deal -> Creator -> Agency -> member Users

and answers with the entity, `NotFound` or `Forbidden`. The order is fixed
for both entity kinds: existence first, then membership. Nothing is cached;
membership is queried from storage on each call.
"""

from __future__ import annotations

import enum
import uuid
from typing import Literal, overload

from sqlalchemy.ext.asyncio import AsyncSession

from agency_core.db.base import row_key
from agency_core.db.models import Agency, Creator, Deal, User
from agency_core.db.repositories.creators import CreatorRepo
from agency_core.db.repositories.deals import DealRepo
from agency_core.db.repositories.users import UserRepo
from agency_core.errors import Forbidden, NotFound
from agency_core.observability.logging import get_logger

log = get_logger(__name__)


class EntityKind(enum.StrEnum):
    creator = "creator"
    deal = "deal"


class OwnershipGuard:
    def __init__(self, session: AsyncSession) -> None:
        self._users = UserRepo(session)
        self._creators = CreatorRepo(session)
        self._deals = DealRepo(session)

    @overload
    async def authorize(
        self,
        user: User,
        kind: Literal[EntityKind.creator],
        entity_id: uuid.UUID,
        *,
        for_update: bool = ...,
    ) -> Creator: ...

    @overload
    async def authorize(
        self,
        user: User,
        kind: Literal[EntityKind.deal],
        entity_id: uuid.UUID,
        *,
        for_update: bool = ...,
    ) -> Deal: ...

    async def authorize(
        self,
        user: User,
        kind: EntityKind,
        entity_id: uuid.UUID,
        *,
        for_update: bool = False,
    ) -> Creator | Deal:
        if kind is EntityKind.creator:
            creator = await self._creators.get(entity_id, for_update=for_update)
            if creator is None:
                raise NotFound("Creator not found")
            await self._require_member(user, creator.agency_id, kind, entity_id)
            return creator

        deal = await self._deals.get(entity_id, for_update=for_update)
        if deal is None:
            raise NotFound("Deal not found")
        owner = await self._creators.get(deal.creator_id)
        if owner is None:
            # Deals never outlive their creator; a dangling row is not accessible.
            raise NotFound("Deal not found")
        await self._require_member(user, owner.agency_id, kind, entity_id)
        return deal

    async def authorize_creator(
        self, user: User, creator_id: uuid.UUID, *, for_update: bool = False
    ) -> Creator:
        return await self.authorize(user, EntityKind.creator, creator_id, for_update=for_update)

    async def authorize_deal(
        self, user: User, deal_id: uuid.UUID, *, for_update: bool = False
    ) -> Deal:
        return await self.authorize(user, EntityKind.deal, deal_id, for_update=for_update)

    async def authorize_parent_creator(self, agency: Agency, creator_id: uuid.UUID) -> Creator:
        """
        Creation-time check: the referenced creator must belong to `agency`.

        A missing creator and a foreign one are both `Forbidden`, so the
        create path does not reveal which ids exist in other agencies.
        """
        agency_id = row_key(agency)
        creator = await self._creators.get(creator_id)
        if creator is None or creator.agency_id != agency_id:
            log.warning(
                "parent_creator_denied",
                agency_id=str(agency_id),
                creator_id=str(creator_id),
            )
            raise Forbidden("Creator not found or access denied")
        return creator

    async def _require_member(
        self, user: User, agency_id: uuid.UUID, kind: EntityKind, entity_id: uuid.UUID
    ) -> None:
        user_id = row_key(user)
        if not await self._users.is_member(user_id=user_id, agency_id=agency_id):
            log.warning(
                "access_denied",
                user_id=str(user_id),
                entity_kind=kind.value,
                entity_id=str(entity_id),
            )
            raise Forbidden()


# --- Module Notes -----------------------------------------------------------
# Callers obtain `user` from `IdentityResolver.resolve` within the same request.
