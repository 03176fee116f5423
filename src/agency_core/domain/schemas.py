"""
agency_core.domain.schemas

Field constraints for agency, creator, deal and account input.

Responsibilities:
- Define the accepted shape of create/update payloads (Pydantic models).
- Convert Pydantic validation failures into the core `ValidationError`.

Update models are partial: only the keys a caller actually sent are applied
(`model_fields_set`). Ownership references (`agency_id`, `creator_id`) are not
part of any update model, so they cannot be changed after creation.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, TypeVar

import pydantic
from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    HttpUrl,
    field_validator,
    model_validator,
)

from agency_core.domain.lifecycle import DealStatus
from agency_core.errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

_STRICT = ConfigDict(extra="forbid", str_strip_whitespace=True)


def parse_fields(model: type[ModelT], fields: Mapping[str, Any] | BaseModel) -> ModelT:
    """
    Validate raw input into `model`, raising the core `ValidationError` on failure.

    An instance of `model` is passed through untouched (the API layer has
    already validated it).
    """
    if isinstance(fields, model):
        return fields
    if isinstance(fields, BaseModel):
        fields = fields.model_dump(exclude_unset=True)
    try:
        return model.model_validate(dict(fields))
    except pydantic.ValidationError as e:
        errors = [
            {"loc": [str(p) for p in err["loc"]], "msg": err["msg"], "type": err["type"]}
            for err in e.errors()
        ]
        raise ValidationError(f"Invalid {model.__name__} payload", errors=errors) from e


def _reject_explicit_null(model: BaseModel, names: tuple[str, ...]) -> None:
    for name in names:
        if name in model.model_fields_set and getattr(model, name) is None:
            raise ValueError(f"{name} cannot be null")


def _naive_utc(value: datetime | None) -> datetime | None:
    # Timestamps are stored as naive UTC.
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


# --- Agency -----------------------------------------------------------------


class AgencyCreate(BaseModel):
    model_config = _STRICT

    name: str = Field(min_length=2, max_length=200)
    description: str | None = Field(default=None, max_length=5000)


# --- Creator ----------------------------------------------------------------


class SocialHandle(BaseModel):
    model_config = _STRICT

    handle: str | None = Field(default=None, max_length=256)
    token: str | None = Field(default=None, max_length=4096)


SocialHandles = dict[str, SocialHandle]


class CreatorCreate(BaseModel):
    model_config = _STRICT

    name: str = Field(min_length=2, max_length=200)
    email: EmailStr | None = None
    niche: str = Field(min_length=2, max_length=200)
    social_handles: SocialHandles = Field(default_factory=dict)
    base_rate: float | None = Field(default=None, gt=0, allow_inf_nan=False)

    @field_validator("social_handles")
    @classmethod
    def _platform_names(cls, value: SocialHandles | None) -> SocialHandles | None:
        if value and any(not platform.strip() for platform in value):
            raise ValueError("platform name must not be empty")
        return value


class CreatorUpdate(CreatorCreate):
    name: str | None = Field(default=None, min_length=2, max_length=200)  # type: ignore[assignment]
    niche: str | None = Field(default=None, min_length=2, max_length=200)  # type: ignore[assignment]
    social_handles: SocialHandles | None = None  # type: ignore[assignment]

    @model_validator(mode="after")
    def _required_columns(self) -> CreatorUpdate:
        _reject_explicit_null(self, ("name", "niche", "social_handles"))
        return self


# --- Deal -------------------------------------------------------------------


class DealFields(BaseModel):
    """Free-form deal fields shared by create and update."""

    model_config = _STRICT

    brand: str = Field(min_length=2, max_length=200)
    contact_name: str | None = Field(default=None, max_length=200)
    contact_email: EmailStr | None = None
    amount: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    currency: str = Field(default="USD", pattern=r"^[A-Z]{3}$")
    description: str | None = None
    requirements: str | None = None
    deliverables: str | None = None
    notes: str | None = None
    next_action_at: datetime | None = None
    contract_url: HttpUrl | None = None

    @field_validator("currency", mode="before")
    @classmethod
    def _upper_currency(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator("next_action_at")
    @classmethod
    def _utc(cls, value: datetime | None) -> datetime | None:
        return _naive_utc(value)

    def column_values(self, *, only_set: bool) -> dict[str, Any]:
        """Values ready to assign onto the ORM row."""
        data = self.model_dump(exclude_unset=only_set)
        if data.get("contract_url") is not None:
            data["contract_url"] = str(data["contract_url"])
        return data


class DealCreate(DealFields):
    pass


class DealUpdate(DealFields):
    brand: str | None = Field(default=None, min_length=2, max_length=200)  # type: ignore[assignment]
    currency: str | None = Field(default=None, pattern=r"^[A-Z]{3}$")  # type: ignore[assignment]
    status: DealStatus | None = None

    @model_validator(mode="after")
    def _required_columns(self) -> DealUpdate:
        _reject_explicit_null(self, ("brand", "currency", "status"))
        return self


# --- Accounts ---------------------------------------------------------------


class UserRegistration(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    name: str | None = Field(default=None, max_length=256)
    password: str = Field(min_length=8, repr=False)

    @field_validator("password")
    @classmethod
    def _bcrypt_limit(cls, value: str) -> str:
        if len(value.encode("utf-8")) > 72:
            raise ValueError("password must be at most 72 bytes")
        return value


class ExternalIdentity(BaseModel):
    """Identity asserted by an external sign-in provider (no password)."""

    model_config = _STRICT

    email: EmailStr
    name: str | None = Field(default=None, max_length=256)


# --- Module Notes -----------------------------------------------------------
# bcrypt only hashes the first 72 bytes of a password; `UserRegistration` rejects longer ones.
