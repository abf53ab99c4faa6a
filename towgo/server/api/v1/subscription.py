"""
Subscription Endpoints.

Premium plan pricing, subscription checkout, free trials and premium access
checks.
"""

from typing import List

from fastapi import APIRouter

from towgo.core.models.io.common import MessageResponse
from towgo.core.models.io.payments import CheckoutSessionResponse
from towgo.core.models.io.subscription import (
    PremiumAccess,
    SubscriptionCheckoutRequest,
    SubscriptionPlan,
    SubscriptionStatus,
)
from towgo.server.services.deps import CurrentUser, SubscriptionServiceDep
from towgo.server.services.subscription import has_premium, subscription_status

router = APIRouter()


@router.get(
    "/plans",
    response_model=List[SubscriptionPlan],
    summary="List Plans",
    description="Return the available subscription plans. Prices are in cents.",
)
async def list_plans(service: SubscriptionServiceDep) -> List[SubscriptionPlan]:
    return await service.list_plans()


@router.post(
    "/checkout",
    response_model=CheckoutSessionResponse,
    summary="Subscribe",
    description="Open a Stripe checkout session for a paid plan, including its trial period.",
    responses={
        400: {"description": "The free plan needs no checkout"},
        404: {"description": "Subscription plan not found"},
        503: {"description": "Stripe not configured"},
    },
)
async def subscription_checkout(
    data: SubscriptionCheckoutRequest, user: CurrentUser, service: SubscriptionServiceDep
) -> CheckoutSessionResponse:
    """
    Start a subscription.

    - **plan_id**: Plan to subscribe to (`premium`)
    - **success_url**: Where Stripe sends the user after subscribing
    - **cancel_url**: Where Stripe sends the user after cancelling
    """
    return await service.create_checkout(user, data.plan_id, data.success_url, data.cancel_url)


@router.post(
    "/trial",
    response_model=MessageResponse,
    summary="Start Trial",
    description="Start the premium trial. Refused while a trial or subscription is active.",
)
async def start_trial(user: CurrentUser, service: SubscriptionServiceDep) -> MessageResponse:
    return await service.start_trial(user)


@router.get(
    "/status",
    response_model=SubscriptionStatus,
    summary="Subscription Status",
    description="Return the signed-in user's subscription and trial state.",
)
async def get_status(user: CurrentUser) -> SubscriptionStatus:
    return subscription_status(user)


@router.get(
    "/access",
    response_model=PremiumAccess,
    summary="Premium Access",
    description="Whether the signed-in user has an active subscription or trial.",
)
async def premium_access(user: CurrentUser) -> PremiumAccess:
    return PremiumAccess(has_premium=has_premium(user))
