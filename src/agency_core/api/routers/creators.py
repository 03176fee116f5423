"""
agency_core.api.routers.creators

Creator roster endpoints, scoped to the caller's agency.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED

from agency_core.api.deps import current_user, db_session
from agency_core.api.schemas import CreatorOut
from agency_core.db.models import User
from agency_core.domain.schemas import CreatorCreate, CreatorUpdate
from agency_core.services.creators import CreatorRegistry
from agency_core.services.identity import IdentityResolver

router = APIRouter(prefix="/v1/creators", tags=["creators"])


class CreatorDeleted(BaseModel):
    id: uuid.UUID
    deals_removed: int


@router.post("", response_model=CreatorOut, status_code=HTTP_201_CREATED)
async def create_creator(
    body: CreatorCreate,
    user: User = Depends(current_user),
    session: AsyncSession = Depends(db_session),
) -> CreatorOut:
    agency = await IdentityResolver(session).require_agency(user)
    creator = await CreatorRegistry(session=session).create(agency, body)
    return CreatorOut.from_row(creator, deal_count=0)


@router.get("", response_model=list[CreatorOut])
async def list_creators(
    user: User = Depends(current_user),
    session: AsyncSession = Depends(db_session),
) -> list[CreatorOut]:
    rows = await CreatorRegistry(session=session).list_creators(user)
    return [CreatorOut.from_row(creator, deal_count=n) for creator, n in rows]


@router.get("/{creator_id}", response_model=CreatorOut)
async def get_creator(
    creator_id: uuid.UUID,
    user: User = Depends(current_user),
    session: AsyncSession = Depends(db_session),
) -> CreatorOut:
    registry = CreatorRegistry(session=session)
    creator = await registry.get(user, creator_id)
    return CreatorOut.from_row(creator, deal_count=await registry.deal_count(user, creator_id))


@router.patch("/{creator_id}", response_model=CreatorOut)
async def update_creator(
    creator_id: uuid.UUID,
    body: CreatorUpdate,
    user: User = Depends(current_user),
    session: AsyncSession = Depends(db_session),
) -> CreatorOut:
    registry = CreatorRegistry(session=session)
    creator = await registry.update(user, creator_id, body)
    return CreatorOut.from_row(creator, deal_count=await registry.deal_count(user, creator_id))


@router.delete("/{creator_id}", response_model=CreatorDeleted)
async def delete_creator(
    creator_id: uuid.UUID,
    user: User = Depends(current_user),
    session: AsyncSession = Depends(db_session),
) -> CreatorDeleted:
    removed = await CreatorRegistry(session=session).delete(user, creator_id)
    return CreatorDeleted(id=creator_id, deals_removed=removed)
