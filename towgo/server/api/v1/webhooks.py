"""
Stripe Webhook Endpoint.

Verifies the ``Stripe-Signature`` of each delivery and routes the event to
the subscription or payment handler.
"""

from typing import Optional

from fastapi import APIRouter, Header, HTTPException, Request, status

from towgo.core.logging_config import get_logger
from towgo.core.models.io.payments import WebhookResponse
from towgo.core.monitoring import log_payment_event
from towgo.integrations.errors import WebhookSignatureError
from towgo.integrations.stripe import construct_event
from towgo.server.core.config import settings
from towgo.server.services.deps import PaymentServiceDep, SubscriptionServiceDep

logger = get_logger(__name__)

router = APIRouter()

SUBSCRIPTION_EVENT_PREFIX = "customer.subscription."


@router.post(
    "/webhook",
    response_model=WebhookResponse,
    summary="Stripe Webhook",
    description="Receive Stripe events for checkout, payment intents and subscriptions.",
    responses={400: {"description": "Missing or invalid signature"}},
)
async def stripe_webhook(
    request: Request,
    payments: PaymentServiceDep,
    subscriptions: SubscriptionServiceDep,
    stripe_signature: Optional[str] = Header(default=None, alias="Stripe-Signature"),
) -> WebhookResponse:
    secret = settings.stripe.webhook_secret
    if not stripe_signature or not secret:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing Stripe signature or webhook secret")

    payload = await request.body()
    try:
        event = construct_event(payload, stripe_signature, secret)
    except WebhookSignatureError as e:
        logger.warning(f"Rejected Stripe webhook: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Webhook Error: {e}") from e

    event_type = event["type"]
    if event_type.startswith(SUBSCRIPTION_EVENT_PREFIX):
        result = await subscriptions.handle_event(event)
    else:
        result = await payments.handle_event(event)

    log_payment_event(event_type, result.status, {"event_id": event.get("id")})
    return WebhookResponse(status=result.status, message=result.message)
