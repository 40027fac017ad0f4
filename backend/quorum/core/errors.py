"""Domain errors raised by the engine and the service layer.

Each error carries a stable ``code`` so API clients can render a specific
message, and the HTTP status the application maps it to.
"""

from __future__ import annotations

from fastapi import status


class QuorumError(Exception):
    code: str = "ERROR"
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(QuorumError):
    """Malformed input, rejected before any write."""

    code = "VALIDATION"
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(QuorumError):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(QuorumError):
    """A uniqueness rule would be broken (duplicate override, exception, name)."""

    code = "CONFLICT"
    status_code = status.HTTP_409_CONFLICT


class PolicyViolationError(QuorumError):
    """The write targets a date or time the calendar policy does not admit."""

    code = "POLICY_VIOLATION"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
