"""Domain error types raised by the service layer.

Routers can let these propagate: ``towgo.server.exception_handlers`` maps each
class to its HTTP status and renders ``{"detail": message}``.
"""

from __future__ import annotations

from typing import Any, Optional


class TowGoError(Exception):
    """Base error for business rule failures.

    Args:
        message: Human-readable error description, returned to the client.
        details: Optional structured payload with more context.
    """

    status_code: int = 400

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(TowGoError):
    status_code = 400


class PermissionDeniedError(TowGoError):
    status_code = 403


class NotFoundError(TowGoError):
    status_code = 404


class ConflictError(TowGoError):
    status_code = 409


class ServiceUnavailableError(TowGoError):
    """A required third-party service is not configured."""

    status_code = 503


class AuthenticationError(TowGoError):
    """Credentials are missing or wrong."""

    status_code = 401


class SearchFailedError(TowGoError):
    """Every web-search tier failed."""

    status_code = 500
