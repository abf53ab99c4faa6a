"""
Payment entity.

One row per Stripe checkout session. The status moves from ``pending`` to
``completed``/``succeeded``/``failed`` as webhook events arrive.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field

from ..base import Base, utc_now


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class Payment(Base, table=True):
    """Purchase of a catalog service.

    Table: payments
    """

    __tablename__ = "payments"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    service_id: int = Field(foreign_key="services.id", index=True)
    amount: float
    currency: str = Field(default="usd", max_length=8)
    status: str = Field(default=PaymentStatus.PENDING.value, index=True)
    session_id: Optional[str] = Field(default=None, unique=True, index=True)
    payment_intent_id: Optional[str] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"Payment(id={self.id}, user_id={self.user_id}, status={self.status})"
