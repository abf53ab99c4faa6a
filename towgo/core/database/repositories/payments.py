"""
Payment repository.

Payments are looked up by owner for the history endpoints, and by Stripe
identifiers when webhook events arrive.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..base import utc_now
from ..entities.payments import Payment
from .base import AsyncSQLModelRepository


class PaymentRepository(AsyncSQLModelRepository[Payment]):
    """Repository for payment data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Payment)

    async def list_for_user(self, user_id: int) -> List[Payment]:
        """Get a user's payments, newest first."""
        stmt = select(Payment).where(Payment.user_id == user_id).order_by(Payment.created_at.desc())  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_session_id(self, session_id: str) -> Optional[Payment]:
        return await self._first(select(Payment).where(Payment.session_id == session_id))

    async def get_by_payment_intent_id(self, payment_intent_id: str) -> Optional[Payment]:
        return await self._first(select(Payment).where(Payment.payment_intent_id == payment_intent_id))

    async def update_status(self, payment: Payment, status: str, *, payment_intent_id: Optional[str] = None) -> Payment:
        """Move a payment to a new status.

        Args:
            payment: Payment to update
            status: New status value
            payment_intent_id: Stripe payment intent to record when it was not known at checkout

        Returns:
            Updated Payment instance
        """
        payment.status = status
        if payment_intent_id and not payment.payment_intent_id:
            payment.payment_intent_id = payment_intent_id
        payment.updated_at = utc_now()
        return await self.update(payment)
