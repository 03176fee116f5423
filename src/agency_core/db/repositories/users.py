from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agency_core.db.models import User, UserRole


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        email: str,
        name: str | None,
        password_hash: str | None = None,
        role: UserRole = UserRole.user,
    ) -> User:
        user = User(
            email=normalize_email(email),
            name=name,
            password_hash=password_hash,
            role=role,
            agency_id=None,
        )
        self._session.add(user)
        await self._session.flush()
        return user

    async def get(self, user_id: uuid.UUID, *, for_update: bool = False) -> User | None:
        # populate_existing re-reads the row even if the session already holds it.
        return await self._session.get(
            User, user_id, with_for_update=for_update, populate_existing=True
        )

    async def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == normalize_email(email))
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def is_member(self, *, user_id: uuid.UUID, agency_id: uuid.UUID) -> bool:
        stmt = select(User.id).where(User.id == user_id, User.agency_id == agency_id)
        return (await self._session.execute(stmt)).scalar_one_or_none() is not None

    async def list_for_agency(self, agency_id: uuid.UUID) -> list[User]:
        stmt = select(User).where(User.agency_id == agency_id).order_by(User.created_at)
        return list((await self._session.execute(stmt)).scalars().all())
