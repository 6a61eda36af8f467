"""Controlled domain errors.

Every failure a request can hit is mapped to one of these; the HTTP layer
renders them as `{"error": message}` with the matching status code.
"""

from __future__ import annotations


class AgoraError(Exception):
    """Base error; carries the HTTP status used when rendered."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidArgument(AgoraError):
    """Missing or malformed field, bad enum value, inverted dates."""

    status_code = 400
    default_message = "Invalid request"


class Unauthorized(AgoraError):
    status_code = 401
    default_message = "Authentication required"


class Forbidden(AgoraError):
    status_code = 403
    default_message = "Insufficient permissions"


class NotFound(AgoraError):
    status_code = 404
    default_message = "Not found"


class Conflict(AgoraError):
    status_code = 409
    default_message = "Resource already exists"


class StoreError(AgoraError):
    """Backing store query failed."""

    status_code = 500
    default_message = "Database error"
