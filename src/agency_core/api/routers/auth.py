"""
agency_core.api.routers.auth

Account endpoints: registration, password sign-in, and the non-prod external
sign-in used for local development.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED

from agency_core.api.deps import db_session
from agency_core.api.schemas import UserOut
from agency_core.errors import NotFound
from agency_core.services.accounts import AccountService
from agency_core.settings import Settings, get_settings

router = APIRouter(prefix="/v1/auth", tags=["auth"])
dev_router = APIRouter(prefix="/v1/dev", tags=["dev"])


class RegisterRequest(BaseModel):
    email: str = Field(max_length=320)
    password: str = Field(max_length=256)
    name: str | None = Field(default=None, max_length=256)


class TokenRequest(BaseModel):
    email: str = Field(max_length=320)
    password: str = Field(max_length=256)


class DevTokenRequest(BaseModel):
    email: str = Field(max_length=320)
    name: str | None = Field(default=None, max_length=256)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


def _accounts(session: AsyncSession, settings: Settings) -> AccountService:
    return AccountService(session=session, settings=settings)


@router.post("/register", response_model=UserOut, status_code=HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(get_settings),
) -> UserOut:
    user = await _accounts(session, settings).register(
        email=body.email, password=body.password, name=body.name
    )
    return UserOut.from_row(user)


@router.post("/token", response_model=TokenResponse)
async def sign_in(
    body: TokenRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(get_settings),
) -> TokenResponse:
    accounts = _accounts(session, settings)
    user = await accounts.authenticate(email=body.email, password=body.password)
    return TokenResponse(access_token=accounts.issue_access_token(user), user=UserOut.from_row(user))


@dev_router.post("/token", response_model=TokenResponse)
async def dev_sign_in(
    body: DevTokenRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(get_settings),
) -> TokenResponse:
    # Stands in for an external identity provider outside prod.
    if settings.env == "prod":
        raise NotFound("Not found")
    accounts = _accounts(session, settings)
    user = await accounts.sign_in_external(email=body.email, name=body.name)
    return TokenResponse(access_token=accounts.issue_access_token(user), user=UserOut.from_row(user))
