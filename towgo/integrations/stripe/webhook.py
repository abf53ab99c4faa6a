"""Stripe webhook signature verification.

Stripe signs each delivery with the endpoint secret and sends
``Stripe-Signature: t=<unix ts>,v1=<hex hmac>[,v1=...]``. Verification is
done by the Stripe SDK; events older than the tolerance are rejected to
prevent replays.
"""

from __future__ import annotations

import json
from typing import Any, Dict

import stripe

from ..errors import WebhookSignatureError

DEFAULT_TOLERANCE_SECONDS = 300


def construct_event(
    payload: bytes,
    sig_header: str,
    secret: str,
    *,
    tolerance: int = DEFAULT_TOLERANCE_SECONDS,
) -> Dict[str, Any]:
    """Verify a webhook delivery and decode its event.

    Args:
        payload: Raw request body, exactly as received.
        sig_header: Value of the ``Stripe-Signature`` header.
        secret: Endpoint signing secret (``whsec_...``).
        tolerance: Maximum accepted age of the signature in seconds; 0 disables the check.

    Returns:
        The decoded event as a plain dict.

    Raises:
        WebhookSignatureError: If the header is malformed, no signature matches,
            the timestamp is outside the tolerance, or the body is not a JSON event.
    """
    try:
        body = payload.decode("utf-8")
    except UnicodeDecodeError as e:
        raise WebhookSignatureError("Webhook payload is not valid UTF-8") from e

    try:
        stripe.WebhookSignature.verify_header(body, sig_header, secret, tolerance)
    except stripe.SignatureVerificationError as e:
        raise WebhookSignatureError(str(e)) from e

    try:
        event = json.loads(body)
    except ValueError as e:
        raise WebhookSignatureError("Webhook payload is not valid JSON") from e
    if not isinstance(event, dict) or "type" not in event:
        raise WebhookSignatureError("Webhook payload is not a Stripe event")
    return event
