"""
agency_core.drafting_clients.openai_client

OpenAI-backed implementation of the email drafter.

Responsibilities:
- Send the templated prompt to the chat completions API.
- Turn provider failures and empty completions into `DraftingUnavailable`.
"""

from __future__ import annotations

from openai import AsyncOpenAI, OpenAIError

from agency_core.errors import DraftingUnavailable
from agency_core.observability.logging import get_logger
from agency_core.settings import Settings

log = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a professional talent manager with expertise in influencer marketing "
    "communications."
)


class OpenAIEmailDrafter:
    def __init__(self, *, settings: Settings, client: AsyncOpenAI | None = None) -> None:
        self._settings = settings
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self._settings.openai_api_key:
                raise DraftingUnavailable("AI drafting is not configured")
            self._client = AsyncOpenAI(
                api_key=self._settings.openai_api_key,
                timeout=self._settings.draft_timeout_seconds,
                max_retries=0,
            )
        return self._client

    async def draft(self, prompt: str) -> str:
        client = self._get_client()
        try:
            resp = await client.chat.completions.create(
                model=self._settings.openai_model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=self._settings.draft_temperature,
                max_tokens=self._settings.draft_max_tokens,
            )
        except OpenAIError as e:
            log.warning("drafting_failed", error=str(e))
            raise DraftingUnavailable() from e

        content = (resp.choices[0].message.content or "").strip() if resp.choices else ""
        if not content:
            raise DraftingUnavailable("No content generated")
        return content

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()


# --- Module Notes -----------------------------------------------------------
# The client is created lazily so the service boots without an API key; only
# drafting requests fail when none is configured.
