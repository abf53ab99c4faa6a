"""Error types raised by the integration clients.

Purpose:
- Give callers one exception family to catch for any third-party failure.
- Carry HTTP-oriented context (status code, response body) for diagnosis.

Usage:
- Catch ``IntegrationError`` for general failures and inspect ``status_code``
  or ``details``.
- Catch ``WebhookSignatureError`` when a Stripe webhook cannot be trusted.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx


class IntegrationError(Exception):
    """Base error for third-party API failures.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code associated with the failure.
        details: Optional structured payload from the server (e.g., JSON body).
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details

    @classmethod
    def from_status_error(cls, service: str, exc: httpx.HTTPStatusError) -> "IntegrationError":
        response = exc.response
        try:
            details: Any = response.json()
        except ValueError:
            details = response.text
        return cls(f"{service} request failed: {response.status_code}", status_code=response.status_code, details=details)


class PerplexityError(IntegrationError):
    """Perplexity returned an error or an unusable answer."""


class StripeError(IntegrationError):
    """Stripe returned an error response."""


class WebhookSignatureError(StripeError):
    """The ``Stripe-Signature`` header does not match the payload."""


class OAuthError(IntegrationError):
    """Token exchange or profile lookup with an identity provider failed."""


class ScrapeError(IntegrationError):
    """A search result page could not be fetched."""
