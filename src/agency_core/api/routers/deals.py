"""
agency_core.api.routers.deals

Deal endpoints: CRUD, explicit status transitions and the pipeline summary.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from agency_core.api.deps import current_user, db_session
from agency_core.api.schemas import DealOut
from agency_core.db.models import User
from agency_core.domain.lifecycle import DealStatus
from agency_core.domain.schemas import DealCreate, DealUpdate
from agency_core.services.deals import DealLifecycleManager
from agency_core.services.identity import IdentityResolver

router = APIRouter(prefix="/v1/deals", tags=["deals"])


class NewDeal(DealCreate):
    creator_id: uuid.UUID


class TransitionRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: str


class DealSummaryOut(BaseModel):
    total: int
    total_value: float
    by_status: dict[DealStatus, int]


@router.post("", response_model=DealOut, status_code=HTTP_201_CREATED)
async def create_deal(
    body: NewDeal,
    user: User = Depends(current_user),
    session: AsyncSession = Depends(db_session),
) -> DealOut:
    agency = await IdentityResolver(session).require_agency(user)
    fields = body.model_dump(mode="json", exclude={"creator_id"}, exclude_unset=True)
    deal = await DealLifecycleManager(session=session).create(agency, body.creator_id, fields)
    return DealOut.from_row(deal)


@router.get("", response_model=list[DealOut])
async def list_deals(
    creator_id: uuid.UUID | None = Query(default=None),
    status: str | None = Query(default=None),
    user: User = Depends(current_user),
    session: AsyncSession = Depends(db_session),
) -> list[DealOut]:
    deals = await DealLifecycleManager(session=session).list_deals(
        user, creator_id=creator_id, status=status
    )
    return [DealOut.from_row(d) for d in deals]


@router.get("/summary", response_model=DealSummaryOut)
async def deal_summary(
    user: User = Depends(current_user),
    session: AsyncSession = Depends(db_session),
) -> DealSummaryOut:
    summary = await DealLifecycleManager(session=session).summary(user)
    return DealSummaryOut(
        total=summary.total, total_value=summary.total_value, by_status=summary.by_status
    )


@router.get("/{deal_id}", response_model=DealOut)
async def get_deal(
    deal_id: uuid.UUID,
    user: User = Depends(current_user),
    session: AsyncSession = Depends(db_session),
) -> DealOut:
    return DealOut.from_row(await DealLifecycleManager(session=session).get(user, deal_id))


@router.patch("/{deal_id}", response_model=DealOut)
async def update_deal(
    deal_id: uuid.UUID,
    body: DealUpdate,
    user: User = Depends(current_user),
    session: AsyncSession = Depends(db_session),
) -> DealOut:
    deal = await DealLifecycleManager(session=session).update(user, deal_id, body)
    return DealOut.from_row(deal)


@router.post("/{deal_id}/transition", response_model=DealOut)
async def transition_deal(
    deal_id: uuid.UUID,
    body: TransitionRequest,
    user: User = Depends(current_user),
    session: AsyncSession = Depends(db_session),
) -> DealOut:
    deal = await DealLifecycleManager(session=session).transition(user, deal_id, body.status)
    return DealOut.from_row(deal)


@router.delete("/{deal_id}", status_code=HTTP_204_NO_CONTENT)
async def delete_deal(
    deal_id: uuid.UUID,
    user: User = Depends(current_user),
    session: AsyncSession = Depends(db_session),
) -> None:
    await DealLifecycleManager(session=session).delete(user, deal_id)
