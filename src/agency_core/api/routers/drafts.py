"""
agency_core.api.routers.drafts

AI email drafting. The result is returned to the caller and never stored.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from agency_core.api.deps import current_user, email_drafter
from agency_core.db.models import User
from agency_core.services.drafting import (
    EmailDraft,
    EmailDraftRequest,
    EmailDrafter,
    EmailDraftService,
)

router = APIRouter(prefix="/v1/drafts", tags=["drafts"])


@router.post("/email", response_model=EmailDraft)
async def draft_email(
    body: EmailDraftRequest,
    user: User = Depends(current_user),
    drafter: EmailDrafter = Depends(email_drafter),
) -> EmailDraft:
    return await EmailDraftService(drafter=drafter).draft(user, body)
