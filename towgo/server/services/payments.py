"""
Service checkout and payment bookkeeping.

Checkout creates (once) the Stripe customer for the user and the Stripe
product/price for the catalog service, opens a ``payment`` mode checkout
session and records a pending payment. Webhook events then move the payment
to its final status.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from towgo.core.database.entities import Payment, PaymentStatus, User
from towgo.core.database.repositories import PaymentRepository, ServiceRepository, UserRepository
from towgo.core.errors import NotFoundError, PermissionDeniedError, ServiceUnavailableError
from towgo.core.logging_config import get_logger
from towgo.core.models.io.payments import CheckoutSessionResponse, WebhookResult
from towgo.integrations.stripe import StripeClient

logger = get_logger(__name__)


async def ensure_customer(stripe: StripeClient, users: UserRepository, user: User) -> str:
    """Return the user's Stripe customer id, creating the customer on first use."""
    if user.customer_id:
        return user.customer_id
    customer = await stripe.create_customer(email=user.email, metadata={"userId": str(user.id)})
    user.customer_id = customer["id"]
    await users.update(user)
    logger.info(f"Created Stripe customer {user.customer_id} for user {user.id}")
    return user.customer_id


class PaymentService:
    def __init__(
        self,
        stripe: StripeClient,
        users: UserRepository,
        services: ServiceRepository,
        payments: PaymentRepository,
    ) -> None:
        self.stripe = stripe
        self.users = users
        self.services = services
        self.payments = payments

    async def get_for_user(self, payment_id: int, user: User) -> Payment:
        payment = await self.payments.get_by_id(payment_id)
        if payment is None:
            raise NotFoundError("Payment not found")
        if payment.user_id != user.id:
            raise PermissionDeniedError("Not authorized to view this payment")
        return payment

    async def create_checkout(
        self, user: User, service_id: int, success_url: str, cancel_url: str
    ) -> CheckoutSessionResponse:
        """
        Open a checkout session for a catalog service.

        Args:
            user: Buyer
            service_id: Catalog service to buy
            success_url: Redirect after payment
            cancel_url: Redirect when the buyer cancels

        Returns:
            Session id and hosted checkout URL

        Raises:
            ServiceUnavailableError: Stripe is not configured
            NotFoundError: Unknown service
            StripeError: A Stripe call failed
        """
        if not self.stripe.is_configured:
            raise ServiceUnavailableError("Stripe is not configured")
        service = await self.services.get_by_id(service_id)
        if service is None:
            raise NotFoundError("Service not found")

        customer_id = await ensure_customer(self.stripe, self.users, user)
        if not service.price_id:
            product = await self.stripe.create_product(
                name=service.name, description=service.description, metadata={"serviceId": str(service.id)}
            )
            price = await self.stripe.create_price(product=product["id"], unit_amount=round(service.price * 100))
            service.price_id = price["id"]
            service = await self.services.update(service)
            logger.info(f"Created Stripe price {service.price_id} for service {service.id}")

        session = await self.stripe.create_checkout_session(
            customer=customer_id,
            price_id=service.price_id,
            mode="payment",
            success_url=success_url,
            cancel_url=cancel_url,
            metadata={"userId": str(user.id), "serviceId": str(service.id)},
        )
        await self.payments.create(
            Payment(
                user_id=user.id,
                service_id=service.id,
                amount=service.price,
                currency="usd",
                status=PaymentStatus.PENDING.value,
                session_id=session["id"],
                payment_intent_id=session.get("payment_intent"),
            )
        )
        logger.info(f"Checkout session {session['id']} opened for user {user.id}, service {service.id}")
        return CheckoutSessionResponse(id=session["id"], url=session.get("url"))

    async def status_for_session(self, session_id: str) -> str:
        payment = await self.payments.get_by_session_id(session_id)
        if payment is None:
            raise NotFoundError("Payment not found")
        return payment.status

    async def handle_event(self, event: Dict[str, Any]) -> WebhookResult:
        """Apply a checkout or payment intent event to the matching payment."""
        event_type = event.get("type", "")
        obj: Dict[str, Any] = (event.get("data") or {}).get("object") or {}

        if event_type == "checkout.session.completed":
            payment = await self.payments.get_by_session_id(obj.get("id", ""))
            new_status = PaymentStatus.COMPLETED
        elif event_type == "payment_intent.succeeded":
            payment = await self._by_intent(obj.get("id"))
            new_status = PaymentStatus.SUCCEEDED
        elif event_type == "payment_intent.payment_failed":
            payment = await self._by_intent(obj.get("id"))
            new_status = PaymentStatus.FAILED
        else:
            return WebhookResult(status="ignored", message=f"Unhandled event type: {event_type}")

        if payment is None:
            logger.warning(f"No payment found for Stripe event {event_type}")
            return WebhookResult(status="error", message="Payment not found")

        intent = obj.get("payment_intent") if event_type == "checkout.session.completed" else None
        await self.payments.update_status(payment, new_status.value, payment_intent_id=intent)
        return WebhookResult(status="success", message=f"Payment {payment.id} marked {new_status.value}")

    async def _by_intent(self, payment_intent_id: Optional[str]) -> Optional[Payment]:
        if not payment_intent_id:
            return None
        return await self.payments.get_by_payment_intent_id(payment_intent_id)
