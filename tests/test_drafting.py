"""
tests.test_drafting

Prompt templates, the drafting service and the OpenAI-backed drafter.
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from agency_core.drafting_clients.openai_client import SYSTEM_PROMPT, OpenAIEmailDrafter
from agency_core.errors import DraftingUnavailable, Unauthenticated
from agency_core.services.drafting import (
    DraftContext,
    EmailDraftRequest,
    EmailDraftService,
    EmailType,
    Tone,
    build_prompt,
)
from agency_core.settings import Settings

CTX = DraftContext(creator_name="Sarah Chen", creator_niche="Lifestyle", brand_name="Nike")


@pytest.mark.parametrize("email_type", list(EmailType))
def test_every_template_mentions_the_parties(email_type: EmailType) -> None:
    prompt = build_prompt(email_type, CTX)
    assert "Sarah Chen" in prompt
    assert "Nike" in prompt
    assert "professional" in prompt
    assert prompt.endswith("Include a subject line. Format the response as a professional email.")


def test_optional_context_and_key_points() -> None:
    ctx = CTX.model_copy(
        update={
            "tone": Tone.friendly,
            "campaign_details": "Spring running line",
            "key_points": ["three reels", "usage rights for 6 months"],
        }
    )
    prompt = build_prompt(EmailType.collaboration, ctx)
    assert "Campaign details: Spring running line." in prompt
    assert "should be friendly" in prompt
    assert "include these key points: three reels, usage rights for 6 months." in prompt

    followup = build_prompt(EmailType.followup, CTX)
    assert "Previous communication about potential collaboration" in followup


@pytest.mark.asyncio
async def test_service_returns_draft_without_persisting(fake_drafter) -> None:
    request = EmailDraftRequest(type=EmailType.outreach, context=CTX)
    draft = await EmailDraftService(drafter=fake_drafter).draft(object(), request)  # type: ignore[arg-type]

    assert draft.email == fake_drafter.reply
    assert draft.type is EmailType.outreach
    assert draft.context == CTX
    assert fake_drafter.prompts == [build_prompt(EmailType.outreach, CTX)]


@pytest.mark.asyncio
async def test_service_requires_user(fake_drafter) -> None:
    request = EmailDraftRequest(type=EmailType.outreach, context=CTX)
    with pytest.raises(Unauthenticated):
        await EmailDraftService(drafter=fake_drafter).draft(None, request)
    assert fake_drafter.prompts == []


def _fake_openai(content: str | None, calls: list[dict]) -> SimpleNamespace:
    async def create(**kwargs):
        calls.append(kwargs)
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])

    return SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))


@pytest.mark.asyncio
async def test_openai_drafter_sends_system_and_user_prompt() -> None:
    calls: list[dict] = []
    settings = Settings(env="test", openai_model="gpt-4", draft_max_tokens=321)
    drafter = OpenAIEmailDrafter(settings=settings, client=_fake_openai("  Subject: Hi  ", calls))

    assert await drafter.draft("Draft something") == "Subject: Hi"
    (call,) = calls
    assert call["model"] == "gpt-4"
    assert call["max_tokens"] == 321
    assert call["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT}
    assert call["messages"][1] == {"role": "user", "content": "Draft something"}


@pytest.mark.asyncio
async def test_openai_drafter_failures() -> None:
    settings = Settings(env="test", openai_api_key=None)
    with pytest.raises(DraftingUnavailable):
        await OpenAIEmailDrafter(settings=settings).draft("prompt")

    empty = OpenAIEmailDrafter(settings=settings, client=_fake_openai("", []))
    with pytest.raises(DraftingUnavailable, match="No content generated"):
        await empty.draft("prompt")
