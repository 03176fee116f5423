"""
tests.conftest

Shared fixtures: a per-test SQLite database, a session on it, user/agency
factories and a fake drafting collaborator.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from agency_core.api.app import create_app
from agency_core.db.init_db import init_db
from agency_core.db.models import Agency, User
from agency_core.db.repositories.users import UserRepo
from agency_core.db.session import create_engine, create_sessionmaker, session_scope
from agency_core.services.provisioning import AgencyProvisioningService
from agency_core.settings import Settings


class FakeDrafter:
    def __init__(self, reply: str = "Subject: Partnership\n\nHello!", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    async def draft(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'agency.db'}",
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def engine(settings: Settings) -> AsyncIterator[AsyncEngine]:
    engine = create_engine(settings)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    async with session_scope(create_sessionmaker(engine)) as s:
        yield s


@pytest.fixture
def make_user(session: AsyncSession) -> Callable[..., Awaitable[User]]:
    async def _make(email: str, name: str | None = None) -> User:
        user = await UserRepo(session).create(email=email, name=name)
        await session.commit()
        return user

    return _make


@pytest.fixture
def make_agency(session: AsyncSession) -> Callable[..., Awaitable[Agency]]:
    async def _make(user: User, name: str = "Acme Talent") -> Agency:
        return await AgencyProvisioningService(session=session).provision(user, name=name)

    return _make


@pytest.fixture
def fake_drafter() -> FakeDrafter:
    return FakeDrafter()


@pytest_asyncio.fixture
async def client(settings: Settings, fake_drafter: FakeDrafter) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app(settings=settings, drafter=fake_drafter)
    # httpx ASGITransport does not run lifespan; drive it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            yield c


@pytest.fixture
def login(client: httpx.AsyncClient) -> Callable[..., Awaitable[dict[str, str]]]:
    """Sign in through the dev route and return bearer headers."""

    async def _login(email: str, name: str | None = None) -> dict[str, str]:
        r = await client.post("/v1/dev/token", json={"email": email, "name": name})
        assert r.status_code == 200, r.text
        return {"Authorization": f"Bearer {r.json()['access_token']}"}

    return _login
