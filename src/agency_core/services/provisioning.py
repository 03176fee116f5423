"""
agency_core.services.provisioning

Agency provisioning.

Responsibilities:
- Create the one agency a user may own, attach the user as its first member
  and promote the user to ADMIN, all in a single transaction.
- Read the caller's agency with its members and roster.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from agency_core.db.base import row_key
from agency_core.db.models import Agency, Creator, User, UserRole
from agency_core.db.repositories.agencies import AgencyRepo
from agency_core.db.repositories.creators import CreatorRepo
from agency_core.db.repositories.users import UserRepo
from agency_core.domain.schemas import AgencyCreate, parse_fields
from agency_core.errors import Conflict, Unauthenticated
from agency_core.observability.logging import get_logger
from agency_core.services.identity import IdentityResolver
from agency_core.services.transactions import unit_of_work

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class AgencyOverview:
    agency: Agency
    members: list[User]
    creators: list[tuple[Creator, int]]


class AgencyProvisioningService:
    def __init__(self, *, session: AsyncSession) -> None:
        self._session = session
        self._users = UserRepo(session)
        self._agencies = AgencyRepo(session)
        self._creators = CreatorRepo(session)
        self._identity = IdentityResolver(session)

    async def provision(self, user: User, *, name: str, description: str | None = None) -> Agency:
        data = parse_fields(AgencyCreate, {"name": name, "description": description})

        async with unit_of_work(self._session):
            # Row lock serializes concurrent provisioning attempts by the same user.
            locked = await self._users.get(row_key(user), for_update=True)
            if locked is None:
                raise Unauthenticated("Unknown user")
            if locked.agency_id is not None:
                raise Conflict("User already has an agency")

            agency = await self._agencies.create(
                name=data.name, description=data.description, admin=locked
            )
            locked.role = UserRole.admin
            await self._session.flush()

        log.info("agency_provisioned", agency_id=str(agency.id), admin_id=str(locked.id))
        return agency

    async def get_agency(self, user: User) -> AgencyOverview:
        async with unit_of_work(self._session):
            agency = await self._identity.require_agency(user)
            members = await self._users.list_for_agency(agency.id)
            creators = await self._creators.list_for_agency(agency.id)
        return AgencyOverview(agency=agency, members=members, creators=creators)


# --- Module Notes -----------------------------------------------------------
# This is the only place a role is ever changed.
