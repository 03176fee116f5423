"""
agency_core.services.identity

Identity resolution: verified principal -> User -> Agency.

Responsibilities:
- Load the User row for an authenticated principal.
- Re-derive the caller's agency from storage on every call.
"""

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from agency_core.auth.models import Principal
from agency_core.db.base import row_key
from agency_core.db.models import Agency, User
from agency_core.db.repositories.agencies import AgencyRepo
from agency_core.db.repositories.users import UserRepo
from agency_core.errors import NotFound, Unauthenticated


class IdentityResolver:
    def __init__(self, session: AsyncSession) -> None:
        self._users = UserRepo(session)
        self._agencies = AgencyRepo(session)

    async def resolve(self, principal: Principal | None) -> User:
        if principal is None:
            raise Unauthenticated()
        user_id = principal.user_id
        if user_id is None:
            raise Unauthenticated("Invalid token subject")
        user = await self._users.get(user_id)
        if user is None:
            raise Unauthenticated("Unknown user")
        structlog.contextvars.bind_contextvars(user_id=str(user.id))
        return user

    async def require_agency(self, user: User) -> Agency:
        # Membership may have changed since `user` was loaded; read it again.
        fresh = await self._users.get(row_key(user))
        if fresh is None:
            raise Unauthenticated("Unknown user")
        agency = await self._agencies.get(fresh.agency_id) if fresh.agency_id else None
        if agency is None:
            raise NotFound("No agency found")
        structlog.contextvars.bind_contextvars(agency_id=str(agency.id))
        return agency
