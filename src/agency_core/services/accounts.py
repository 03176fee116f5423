"""
agency_core.services.accounts

User accounts: password registration, password sign-in, external sign-in,
and access-token issuing.
"""

from __future__ import annotations

import asyncio
from datetime import timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from agency_core.auth.jwt import JwtConfig, issue_token
from agency_core.auth.passwords import hash_password, verify_password
from agency_core.db.base import row_key
from agency_core.db.models import User
from agency_core.db.repositories.users import UserRepo
from agency_core.domain.schemas import ExternalIdentity, UserRegistration, parse_fields
from agency_core.errors import Conflict, StorageError, Unauthenticated
from agency_core.observability.logging import get_logger
from agency_core.services.transactions import unit_of_work
from agency_core.settings import Settings

log = get_logger(__name__)

_BAD_CREDENTIALS = "Invalid email or password"


class AccountService:
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._users = UserRepo(session)

    async def register(self, *, email: str, password: str, name: str | None = None) -> User:
        data = parse_fields(UserRegistration, {"email": email, "password": password, "name": name})
        # bcrypt is CPU-bound; keep it off the event loop.
        password_hash = await asyncio.to_thread(
            hash_password, data.password, rounds=self._settings.bcrypt_rounds
        )
        try:
            async with unit_of_work(self._session):
                if await self._users.get_by_email(data.email) is not None:
                    raise Conflict("Email already registered")
                user = await self._users.create(
                    email=data.email, name=data.name, password_hash=password_hash
                )
        except StorageError as e:
            # Concurrent registrations race on the unique index over users.email.
            if isinstance(e.__cause__, IntegrityError):
                raise Conflict("Email already registered") from e
            raise
        log.info("user_registered", new_user_id=str(user.id))
        return user

    async def authenticate(self, *, email: str, password: str) -> User:
        async with unit_of_work(self._session):
            user = await self._users.get_by_email(email)
        # Same error for unknown email, passwordless account and wrong password.
        if user is None or user.password_hash is None:
            raise Unauthenticated(_BAD_CREDENTIALS)
        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            raise Unauthenticated(_BAD_CREDENTIALS)
        return user

    async def sign_in_external(self, *, email: str, name: str | None = None) -> User:
        """Get-or-create a user vouched for by an external identity provider."""
        data = parse_fields(ExternalIdentity, {"email": email, "name": name})
        async with unit_of_work(self._session):
            user = await self._users.get_by_email(data.email)
            if user is None:
                user = await self._users.create(email=data.email, name=data.name)
                log.info("external_user_created", new_user_id=str(user.id))
        return user

    def issue_access_token(self, user: User) -> str:
        return issue_token(
            cfg=JwtConfig.from_settings(self._settings),
            subject=str(row_key(user)),
            ttl=timedelta(minutes=self._settings.jwt_ttl_minutes),
        )
