"""
agency_core.api.routers.agency

Agency provisioning and the caller's agency overview.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED

from agency_core.api.deps import current_user, db_session
from agency_core.api.schemas import AgencyOut, CreatorOut, UserOut
from agency_core.db.models import User
from agency_core.domain.schemas import AgencyCreate
from agency_core.services.provisioning import AgencyProvisioningService

router = APIRouter(prefix="/v1/agency", tags=["agency"])


class AgencyDetail(AgencyOut):
    members: list[UserOut]
    creators: list[CreatorOut]


@router.post("", response_model=AgencyOut, status_code=HTTP_201_CREATED)
async def provision_agency(
    body: AgencyCreate,
    user: User = Depends(current_user),
    session: AsyncSession = Depends(db_session),
) -> AgencyOut:
    agency = await AgencyProvisioningService(session=session).provision(
        user, name=body.name, description=body.description
    )
    return AgencyOut.from_row(agency)


@router.get("", response_model=AgencyDetail)
async def get_agency(
    user: User = Depends(current_user),
    session: AsyncSession = Depends(db_session),
) -> AgencyDetail:
    overview = await AgencyProvisioningService(session=session).get_agency(user)
    return AgencyDetail(
        **AgencyOut.from_row(overview.agency).model_dump(),
        members=[UserOut.from_row(u) for u in overview.members],
        creators=[CreatorOut.from_row(c, deal_count=n) for c, n in overview.creators],
    )
