"""
agency_core.auth.models

Auth domain models.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Verified caller identity, as carried by the bearer token.

    Only the subject (the user id) is trusted. Role and agency are re-read
    from storage on every request by the identity resolver.
    """

    subject: str

    @property
    def user_id(self) -> uuid.UUID | None:
        try:
            return uuid.UUID(self.subject)
        except ValueError:
            return None
