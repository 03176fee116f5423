"""
agency_core.api.schemas

Response models shared by several routers.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from agency_core.db.models import Agency, Creator, Deal, User
from agency_core.domain.lifecycle import DealStatus, allowed_transitions, is_terminal


class UserOut(BaseModel):
    id: uuid.UUID
    email: str
    name: str | None
    role: str

    @classmethod
    def from_row(cls, user: User) -> UserOut:
        return cls(id=user.id, email=user.email, name=user.name, role=user.role.value)


class AgencyOut(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None
    created_at: datetime

    @classmethod
    def from_row(cls, agency: Agency) -> AgencyOut:
        return cls(
            id=agency.id,
            name=agency.name,
            description=agency.description,
            created_at=agency.created_at,
        )


def _public_handles(raw: dict[str, Any] | None) -> dict[str, dict[str, str | None]]:
    # Platform tokens are write-only.
    return {
        platform: {"handle": (value or {}).get("handle")}
        for platform, value in (raw or {}).items()
    }


class CreatorOut(BaseModel):
    id: uuid.UUID
    agency_id: uuid.UUID
    name: str
    email: str | None
    niche: str
    social_handles: dict[str, dict[str, str | None]]
    base_rate: float | None
    deal_count: int | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, creator: Creator, *, deal_count: int | None = None) -> CreatorOut:
        return cls(
            id=creator.id,
            agency_id=creator.agency_id,
            name=creator.name,
            email=creator.email,
            niche=creator.niche,
            social_handles=_public_handles(creator.social_handles),
            base_rate=creator.base_rate,
            deal_count=deal_count,
            created_at=creator.created_at,
            updated_at=creator.updated_at,
        )


class DealOut(BaseModel):
    id: uuid.UUID
    creator_id: uuid.UUID
    brand: str
    contact_name: str | None
    contact_email: str | None
    amount: float | None
    currency: str
    status: DealStatus
    allowed_transitions: list[DealStatus]
    terminal: bool
    description: str | None
    requirements: str | None
    deliverables: str | None
    notes: str | None
    next_action_at: datetime | None
    contract_url: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, deal: Deal) -> DealOut:
        return cls(
            id=deal.id,
            creator_id=deal.creator_id,
            brand=deal.brand,
            contact_name=deal.contact_name,
            contact_email=deal.contact_email,
            amount=deal.amount,
            currency=deal.currency,
            status=deal.status,
            allowed_transitions=allowed_transitions(deal.status),
            terminal=is_terminal(deal.status),
            description=deal.description,
            requirements=deal.requirements,
            deliverables=deal.deliverables,
            notes=deal.notes,
            next_action_at=deal.next_action_at,
            contract_url=deal.contract_url,
            created_at=deal.created_at,
            updated_at=deal.updated_at,
        )
