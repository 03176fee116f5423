"""
agency_core.services.deals

Deal lifecycle manager.

Responsibilities:
- Create deals under a creator owned by the caller's agency.
- Guarded get/list/update/delete, resolved Deal -> Creator -> Agency.
- Enforce the status graph on every explicit status change, whoever the caller is.
- Pipeline summary across the agency (counts per status, total value).
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from agency_core.db.models import Agency, Deal, User
from agency_core.db.repositories.deals import DealRepo
from agency_core.domain.lifecycle import INITIAL_STATUS, DealStatus, validate_transition
from agency_core.domain.schemas import DealCreate, DealUpdate, parse_fields
from agency_core.errors import ValidationError
from agency_core.observability.logging import get_logger
from agency_core.services.identity import IdentityResolver
from agency_core.services.ownership import OwnershipGuard
from agency_core.services.transactions import unit_of_work

log = get_logger(__name__)

Fields = Mapping[str, Any] | BaseModel


@dataclass(frozen=True, slots=True)
class DealSummary:
    total: int
    total_value: float
    by_status: dict[DealStatus, int] = field(default_factory=dict)


def coerce_status(raw: DealStatus | str) -> DealStatus:
    try:
        return DealStatus(raw)
    except ValueError as e:
        raise ValidationError(
            f"Unknown deal status: {raw}",
            errors=[{"loc": ["status"], "msg": "unknown status", "type": "enum"}],
        ) from e


class DealLifecycleManager:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._deals = DealRepo(session)
        self._guard = OwnershipGuard(session)
        self._identity = IdentityResolver(session)

    async def create(self, agency: Agency, creator_id: uuid.UUID, fields: Fields) -> Deal:
        data = parse_fields(DealCreate, fields)
        async with unit_of_work(self._session):
            creator = await self._guard.authorize_parent_creator(agency, creator_id)
            values = data.column_values(only_set=False)
            values["status"] = INITIAL_STATUS
            deal = await self._deals.create(creator_id=creator.id, values=values)
        log.info("deal_created", deal_id=str(deal.id), creator_id=str(creator_id))
        return deal

    async def get(self, user: User, deal_id: uuid.UUID) -> Deal:
        async with unit_of_work(self._session):
            return await self._guard.authorize_deal(user, deal_id)

    async def list_deals(
        self,
        user: User,
        *,
        creator_id: uuid.UUID | None = None,
        status: DealStatus | str | None = None,
    ) -> list[Deal]:
        wanted = coerce_status(status) if status is not None else None
        async with unit_of_work(self._session):
            agency = await self._identity.require_agency(user)
            if creator_id is not None:
                # Filtering by a foreign creator is an access attempt, not an empty result.
                await self._guard.authorize_creator(user, creator_id)
            return await self._deals.list_for_agency(
                agency.id, creator_id=creator_id, status=wanted
            )

    async def update(self, user: User, deal_id: uuid.UUID, fields: Fields) -> Deal:
        """
        Apply a partial update.

        Free-form fields are accepted in any status. A `status` key that differs
        from the current status is checked against the lifecycle graph; one that
        equals it is not a change.
        """
        async with unit_of_work(self._session):
            deal = await self._guard.authorize_deal(user, deal_id, for_update=True)
            data = parse_fields(DealUpdate, fields)
            values = data.column_values(only_set=True)

            target = values.pop("status", None)
            previous = deal.status
            if target is not None and target != previous:
                validate_transition(previous, target)
                values["status"] = target

            deal = await self._deals.apply(deal, values)

        if target is not None and target != previous:
            self._log_transition(deal, previous)
        log.info("deal_updated", deal_id=str(deal_id), fields=sorted(values))
        return deal

    async def transition(self, user: User, deal_id: uuid.UUID, target: DealStatus | str) -> Deal:
        wanted = coerce_status(target)
        async with unit_of_work(self._session):
            deal = await self._guard.authorize_deal(user, deal_id, for_update=True)
            previous = deal.status
            validate_transition(previous, wanted)
            deal = await self._deals.apply(deal, {"status": wanted})
        self._log_transition(deal, previous)
        return deal

    async def delete(self, user: User, deal_id: uuid.UUID) -> None:
        async with unit_of_work(self._session):
            deal = await self._guard.authorize_deal(user, deal_id, for_update=True)
            await self._deals.delete(deal)
        log.info("deal_deleted", deal_id=str(deal_id))

    async def summary(self, user: User) -> DealSummary:
        async with unit_of_work(self._session):
            agency = await self._identity.require_agency(user)
            rows = await self._deals.status_totals(agency.id)

        by_status = {s: 0 for s in DealStatus}
        for status, count, _ in rows:
            by_status[status] = count
        return DealSummary(
            total=sum(by_status.values()),
            total_value=sum(total for _, _, total in rows),
            by_status=by_status,
        )

    @staticmethod
    def _log_transition(deal: Deal, previous: DealStatus) -> None:
        log.info(
            "deal_transitioned",
            deal_id=str(deal.id),
            from_status=previous.value,
            to_status=deal.status.value,
        )
