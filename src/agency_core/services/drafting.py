"""
agency_core.services.drafting

AI-assisted email drafting.

Responsibilities:
- Build a templated prompt from the email type and deal/creator context.
- Call the drafting collaborator and hand back its text.

The drafted text is returned to the caller only. It is never persisted and
never read by any authorization or lifecycle decision, so a drafting failure
cannot affect stored state.
"""

from __future__ import annotations

import enum
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

from agency_core.db.models import User
from agency_core.errors import Unauthenticated
from agency_core.observability.logging import get_logger

log = get_logger(__name__)


class EmailType(enum.StrEnum):
    outreach = "outreach"
    negotiation = "negotiation"
    followup = "followup"
    collaboration = "collaboration"
    thank_you = "thank_you"


class Tone(enum.StrEnum):
    professional = "professional"
    friendly = "friendly"
    casual = "casual"
    formal = "formal"


class DraftContext(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    creator_name: str = Field(min_length=1, max_length=200)
    creator_niche: str = Field(min_length=1, max_length=200)
    brand_name: str = Field(min_length=1, max_length=200)
    campaign_details: str | None = Field(default=None, max_length=2000)
    previous_context: str | None = Field(default=None, max_length=4000)
    tone: Tone = Tone.professional
    key_points: list[str] = Field(default_factory=list, max_length=20)


class EmailDraftRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: EmailType
    context: DraftContext


class EmailDraft(BaseModel):
    email: str
    type: EmailType
    context: DraftContext


class EmailDrafter(Protocol):
    async def draft(self, prompt: str) -> str: ...


def build_prompt(email_type: EmailType, ctx: DraftContext) -> str:
    tone = ctx.tone.value
    match email_type:
        case EmailType.outreach:
            prompt = (
                f"Draft a professional outreach email to {ctx.brand_name} introducing "
                f"{ctx.creator_name}, a {ctx.creator_niche} content creator. The email should "
                f"be {tone} and highlight the creator's strengths and potential collaboration "
                "opportunities."
            )
        case EmailType.negotiation:
            prompt = (
                f"Draft a professional negotiation email for {ctx.creator_name} "
                f"({ctx.creator_niche} creator) to {ctx.brand_name}. The email should be "
                f"{tone} and focus on terms, rates, and deliverables."
            )
        case EmailType.followup:
            previous = ctx.previous_context or "Previous communication about potential collaboration"
            prompt = (
                f"Draft a follow-up email for {ctx.creator_name} to {ctx.brand_name}. "
                f"Previous context: {previous}. The tone should be {tone} and politely "
                "check on the status."
            )
        case EmailType.collaboration:
            details = ctx.campaign_details or "Brand partnership"
            prompt = (
                f"Draft a collaboration proposal email from {ctx.creator_name} "
                f"({ctx.creator_niche} creator) to {ctx.brand_name}. Campaign details: "
                f"{details}. The tone should be {tone} and include specific collaboration ideas."
            )
        case EmailType.thank_you:
            prompt = (
                f"Draft a thank you email from {ctx.creator_name} to {ctx.brand_name} after a "
                f"successful collaboration. The tone should be {tone} and express gratitude "
                "while leaving the door open for future partnerships."
            )

    points = [p.strip() for p in ctx.key_points if p.strip()]
    if points:
        prompt += f" Make sure to include these key points: {', '.join(points)}."

    prompt += " Include a subject line. Format the response as a professional email."
    return prompt


class EmailDraftService:
    def __init__(self, *, drafter: EmailDrafter) -> None:
        self._drafter = drafter

    async def draft(self, user: User | None, request: EmailDraftRequest) -> EmailDraft:
        if user is None:
            raise Unauthenticated()
        prompt = build_prompt(request.type, request.context)
        # DraftingUnavailable from the collaborator propagates as-is.
        text = await self._drafter.draft(prompt)
        log.info("email_drafted", email_type=request.type.value, chars=len(text))
        return EmailDraft(email=text, type=request.type, context=request.context)
