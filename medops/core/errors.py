"""Error types for the MedOps service.

Defines a small hierarchy of exceptions raised by the business rules and the
service layer. Each error carries the HTTP status code the API layer should
answer with, so routers never translate errors by hand.
"""

from __future__ import annotations

from typing import Optional


class MedOpsError(Exception):
    """Base error for all MedOps domain exceptions."""

    status_code: int = 400

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ValidationFailedError(MedOpsError):
    """Raised when a request is well-formed but violates a business rule."""


class AuthenticationError(MedOpsError):
    """Raised when credentials are missing, wrong, or belong to an inactive user."""

    status_code = 401


class PermissionDeniedError(MedOpsError):
    """Raised when the acting user lacks the role or ownership an operation needs."""

    status_code = 403


class NotFoundError(MedOpsError):
    """Raised when a referenced record does not exist."""

    status_code = 404

    def __init__(self, entity: str, entity_id: Optional[str] = None) -> None:
        if entity_id is None:
            super().__init__(f"{entity} not found")
        else:
            super().__init__(f"{entity} not found: '{entity_id}'")
        self.entity = entity
        self.entity_id = entity_id


class ConflictError(MedOpsError):
    """Raised when a record already exists or a unique value is taken."""


class InvalidStateError(MedOpsError):
    """Raised when a record is in the wrong stage or status for an operation."""


class TransitionError(InvalidStateError):
    """Raised when a pre-authorization decision is not allowed from its current status."""

    def __init__(self, current: str, action: str, reason: str) -> None:
        super().__init__(f"Cannot {action.lower().replace('_', '-')} pre-auth in status {current}: {reason}")
        self.current = current
        self.action = action
        self.reason = reason
