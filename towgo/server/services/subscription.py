"""
Premium subscriptions.

Two plans exist: ``free`` and ``premium``. The premium plan is backed by a
Stripe product and a monthly recurring price which are looked up (or created)
on demand. Subscription state is stored on the user and kept in sync by the
``customer.subscription.*`` webhook events.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from towgo.core.database.base import as_utc, utc_now
from towgo.core.database.entities import SubscriptionTier, User
from towgo.core.database.repositories import UserRepository
from towgo.core.errors import NotFoundError, ServiceUnavailableError, ValidationError
from towgo.core.logging_config import get_logger
from towgo.core.models.io.common import MessageResponse
from towgo.core.models.io.payments import CheckoutSessionResponse, WebhookResult
from towgo.core.models.io.subscription import SubscriptionPlan, SubscriptionStatus
from towgo.integrations.errors import StripeError
from towgo.integrations.stripe import StripeClient

from .payments import ensure_customer

logger = get_logger(__name__)

FREE_PLAN_ID = "free"
PREMIUM_PLAN_ID = "premium"
PREMIUM_PRICE = 999
TRIAL_DAYS = 1

PLANS: List[SubscriptionPlan] = [
    SubscriptionPlan(
        id=FREE_PLAN_ID,
        name="Free",
        description="Basic access with limited features",
        price=0,
        interval="month",
        trial_days=0,
        features=["Limited search functionality", "Basic location services", "Standard map view"],
    ),
    SubscriptionPlan(
        id=PREMIUM_PLAN_ID,
        name="Premium",
        description="Full access to all features",
        price=PREMIUM_PRICE,
        interval="month",
        trial_days=TRIAL_DAYS,
        features=[
            "Unlimited searches",
            "Advanced location tracking",
            "AI-powered search enhancements",
            "Premium support",
            "No ads",
        ],
    ),
]


def get_plan(plan_id: str) -> SubscriptionPlan:
    for plan in PLANS:
        if plan.id == plan_id:
            return plan
    raise NotFoundError("Subscription plan not found")


def is_trial_active(user: User, now: Optional[datetime] = None) -> bool:
    return bool(user.trial_end_date and (now or utc_now()) < as_utc(user.trial_end_date))


def subscription_status(user: User) -> SubscriptionStatus:
    trial_active = is_trial_active(user)
    return SubscriptionStatus(
        status=user.subscription_status,
        tier=user.subscription_tier,
        trial_end=user.trial_end_date,
        is_trial_active=trial_active,
        is_subscription_active=user.subscription_status == "active" or trial_active,
    )


def has_premium(user: User) -> bool:
    return subscription_status(user).is_subscription_active


class SubscriptionService:
    def __init__(self, stripe: StripeClient, users: UserRepository) -> None:
        self.stripe = stripe
        self.users = users

    async def list_plans(self) -> List[SubscriptionPlan]:
        """Plans for the pricing page; the premium price id is filled in when Stripe is reachable."""
        plans = [plan.model_copy() for plan in PLANS]
        if not self.stripe.is_configured:
            logger.info("Stripe not configured; plans returned without price ids")
            return plans
        try:
            price_id = await self.ensure_premium_price()
        except StripeError as e:
            logger.error(f"Error initializing subscription products: {e}")
            return plans
        for plan in plans:
            if plan.id == PREMIUM_PLAN_ID:
                plan.price_id = price_id
        return plans

    async def ensure_premium_price(self) -> str:
        """Find or create the premium product and its monthly price."""
        premium = get_plan(PREMIUM_PLAN_ID)
        products = await self.stripe.list_products()
        product = next(
            (p for p in products if (p.get("metadata") or {}).get("plan_id") == premium.id or p.get("name") == premium.name),
            None,
        )
        if product is None:
            product = await self.stripe.create_product(
                name=premium.name, description=premium.description, metadata={"plan_id": premium.id}
            )
            logger.info(f"Created premium product {product['id']}")

        prices = await self.stripe.list_prices(product=product["id"])
        price = next((p for p in prices if self._matches_plan(p, premium)), None)
        if price is None:
            price = await self.stripe.create_price(
                product=product["id"], unit_amount=premium.price, recurring={"interval": premium.interval}
            )
            logger.info(f"Created premium price {price['id']}")
        return price["id"]

    @staticmethod
    def _matches_plan(price: Dict[str, Any], plan: SubscriptionPlan) -> bool:
        recurring = price.get("recurring") or {}
        return price.get("unit_amount") == plan.price and recurring.get("interval") == plan.interval

    async def create_checkout(self, user: User, plan_id: str, success_url: str, cancel_url: str) -> CheckoutSessionResponse:
        """
        Open a ``subscription`` mode checkout session.

        Raises:
            ServiceUnavailableError: Stripe is not configured
            NotFoundError: Unknown plan
            ValidationError: The free plan needs no checkout
        """
        if not self.stripe.is_configured:
            raise ServiceUnavailableError("Stripe is not configured")
        plan = get_plan(plan_id)
        if plan.price == 0:
            raise ValidationError("The free plan does not require checkout")

        price_id = await self.ensure_premium_price()
        customer_id = await ensure_customer(self.stripe, self.users, user)
        session = await self.stripe.create_checkout_session(
            customer=customer_id,
            price_id=price_id,
            mode="subscription",
            success_url=success_url,
            cancel_url=cancel_url,
            metadata={"userId": str(user.id), "planId": plan.id},
            trial_period_days=plan.trial_days,
        )
        logger.info(f"Subscription checkout {session['id']} opened for user {user.id}")
        return CheckoutSessionResponse(id=session["id"], url=session.get("url"))

    async def start_trial(self, user: User) -> MessageResponse:
        """Start the premium trial; refused (success=False) while a trial or subscription is active."""
        if is_trial_active(user) or user.subscription_status == "active":
            return MessageResponse(success=False, message="User already has an active trial or subscription")
        now = utc_now()
        user.trial_start_date = now
        user.trial_end_date = now + timedelta(days=TRIAL_DAYS)
        user.subscription_status = "trialing"
        user.subscription_tier = SubscriptionTier.PREMIUM.value
        user = await self.users.update(user)
        logger.info(f"User {user.id} started a trial ending {user.trial_end_date.isoformat()}")
        return MessageResponse(message=f"Trial started successfully. Expires on {user.trial_end_date.isoformat()}")

    async def handle_event(self, event: Dict[str, Any]) -> WebhookResult:
        """Mirror a ``customer.subscription.*`` event onto the subscribing user."""
        event_type = event.get("type", "")
        subscription: Dict[str, Any] = (event.get("data") or {}).get("object") or {}
        customer_id = subscription.get("customer")
        user = await self.users.get_by_customer_id(customer_id) if customer_id else None
        if user is None:
            logger.warning(f"No user found for Stripe customer {customer_id}")
            return WebhookResult(status="error", message="User not found for subscription")

        if event_type in ("customer.subscription.created", "customer.subscription.updated"):
            user.subscription_id = subscription.get("id")
            user.subscription_status = subscription.get("status")
            user.subscription_tier = SubscriptionTier.PREMIUM.value
        elif event_type == "customer.subscription.deleted":
            user.subscription_status = "canceled"
            user.subscription_tier = SubscriptionTier.FREE.value
        else:
            return WebhookResult(status="ignored", message=f"Unhandled event type: {event_type}")

        await self.users.update(user)
        return WebhookResult(status="success", message=f"Subscription {user.subscription_status} for user {user.id}")
