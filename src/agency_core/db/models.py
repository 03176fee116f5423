"""
agency_core.db.models

Persistence schema for agencies, their members, creators and deals.

Responsibilities:
- Define ORM models along the ownership chain:
  - User: authenticated identity, member of at most one Agency
  - Agency: tenant boundary
  - Creator: talent profile owned by exactly one Agency
  - Deal: brand partnership owned by exactly one Creator
"""

from __future__ import annotations

import enum
import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Enum, Float, ForeignKey, Index, String, Text
from sqlalchemy import Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agency_core.db.base import Base
from agency_core.domain.lifecycle import INITIAL_STATUS, DealStatus


def utcnow() -> datetime:
    # Naive UTC timestamps across all tables.
    return datetime.now(UTC).replace(tzinfo=None)


class UserRole(enum.StrEnum):
    user = "USER"
    admin = "ADMIN"


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    name: Mapped[str | None] = mapped_column(String(256), nullable=True)
    # NULL for identities authenticated by an external provider.
    password_hash: Mapped[str | None] = mapped_column(String(128), nullable=True)
    role: Mapped[UserRole] = mapped_column(Enum(UserRole), nullable=False, default=UserRole.user)

    # A single nullable FK: a user belongs to at most one agency.
    agency_id: Mapped[uuid.UUID | None] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("agencies.id"), nullable=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    agency: Mapped[Agency | None] = relationship(back_populates="users")


class Agency(Base):
    __tablename__ = "agencies"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    users: Mapped[list[User]] = relationship(back_populates="agency")
    creators: Mapped[list[Creator]] = relationship(back_populates="agency")


class Creator(Base):
    __tablename__ = "creators"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    agency_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("agencies.id"), nullable=False, index=True
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    niche: Mapped[str] = mapped_column(String(200), nullable=False)
    # {"instagram": {"handle": "...", "token": "..."}, ...}
    social_handles: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    base_rate: Mapped[float | None] = mapped_column(Float, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    agency: Mapped[Agency] = relationship(back_populates="creators")
    # No ORM cascade: deal removal is an explicit step in CreatorRegistry.delete.
    deals: Mapped[list[Deal]] = relationship(back_populates="creator", passive_deletes="all")

    __table_args__ = (Index("ix_creators_agency_created", "agency_id", "created_at"),)


class Deal(Base):
    __tablename__ = "deals"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    creator_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("creators.id"), nullable=False, index=True
    )

    brand: Mapped[str] = mapped_column(String(200), nullable=False)
    contact_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    amount: Mapped[float | None] = mapped_column(Float, nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    status: Mapped[DealStatus] = mapped_column(
        Enum(DealStatus), nullable=False, default=INITIAL_STATUS, index=True
    )

    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    requirements: Mapped[str | None] = mapped_column(Text, nullable=True)
    deliverables: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    next_action_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    contract_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    creator: Mapped[Creator] = relationship(back_populates="deals")

    __table_args__ = (Index("ix_deals_creator_created", "creator_id", "created_at"),)


# --- Module Notes -----------------------------------------------------------
# Enum values (UserRole, DealStatus) are stored in the DB; treat them as a stable contract.
