"""
agency_core.errors

Error taxonomy shared by the services and the API layer.

Every failure a core operation can report is a subclass of `AgencyCoreError`.
The API layer maps `status_code` straight onto the HTTP response; nothing in
the core retries on these errors.
"""

from __future__ import annotations

from typing import Any


class AgencyCoreError(Exception):
    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "detail": self.message}


class Unauthenticated(AgencyCoreError):
    status_code = 401
    code = "unauthenticated"

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class NotFound(AgencyCoreError):
    status_code = 404
    code = "not_found"


class Forbidden(AgencyCoreError):
    status_code = 403
    code = "forbidden"

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message)


class ValidationError(AgencyCoreError):
    status_code = 422
    code = "validation_error"

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "errors": self.errors}


class Conflict(AgencyCoreError):
    status_code = 409
    code = "conflict"


class InvalidTransition(AgencyCoreError):
    status_code = 409
    code = "invalid_transition"

    def __init__(self, current: str, target: str, allowed: list[str]) -> None:
        self.current = current
        self.target = target
        self.allowed = allowed
        super().__init__(
            f"Invalid status transition: {current} -> {target}. "
            f"Allowed from {current}: {', '.join(allowed) or 'none'}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "current": self.current,
            "target": self.target,
            "allowed": self.allowed,
        }


class DraftingUnavailable(AgencyCoreError):
    status_code = 502
    code = "drafting_unavailable"

    def __init__(self, message: str = "Failed to generate email") -> None:
        super().__init__(message)


class StorageError(AgencyCoreError):
    status_code = 500
    code = "storage_error"

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)


# --- Module Notes -----------------------------------------------------------
# `ValidationError` shares its name with pydantic's; modules needing both import
# pydantic's qualified as `pydantic.ValidationError`.
