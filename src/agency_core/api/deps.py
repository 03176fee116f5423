"""
agency_core.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide request-scoped DB sessions from the sessionmaker on app.state.
- Resolve the bearer principal into a `User` row.
- Hand out the shared email drafter.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from agency_core.auth.deps import get_principal
from agency_core.auth.models import Principal
from agency_core.db.models import User
from agency_core.services.drafting import EmailDrafter
from agency_core.services.identity import IdentityResolver


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # Created in the app lifespan, see `agency_core.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Commit/rollback is owned by the service layer (`services.transactions.unit_of_work`).
    async with session_factory() as session:
        yield session


async def current_user(
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
) -> User:
    return await IdentityResolver(session).resolve(principal)


def email_drafter(request: Request) -> EmailDrafter:
    return request.app.state.email_drafter  # type: ignore[attr-defined]
