"""
agency_core.auth.deps

FastAPI dependency functions for authentication.

Responsibilities:
- Convert a bearer token into a typed `Principal`, or fail `Unauthenticated`.
"""

from __future__ import annotations

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from agency_core.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate
from agency_core.auth.models import Principal
from agency_core.errors import Unauthenticated
from agency_core.settings import Settings, get_settings

_bearer = HTTPBearer(auto_error=False)


def get_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(get_settings),
) -> Principal:
    if creds is None or not creds.credentials:
        raise Unauthenticated("Missing bearer token")

    try:
        payload = decode_and_validate(cfg=JwtConfig.from_settings(settings), token=creds.credentials)
    except JwtValidationError as e:
        raise Unauthenticated(f"Invalid token: {e}") from e

    subject = str(payload.get("sub", ""))
    if not subject:
        raise Unauthenticated("Invalid token subject")
    return Principal(subject=subject)


# --- Module Notes -----------------------------------------------------------
# Turning the principal into a User row is the identity resolver's job
# (`services.identity`), wired in `api.deps.current_user`.
