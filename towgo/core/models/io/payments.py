"""
Payment and checkout I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PaymentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    service_id: int
    amount: float
    currency: str
    status: str
    session_id: Optional[str] = None
    payment_intent_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CheckoutRequest(BaseModel):
    service_id: int = Field(gt=0)
    success_url: str = Field(min_length=1)
    cancel_url: str = Field(min_length=1)


class CheckoutSessionResponse(BaseModel):
    id: str
    url: Optional[str] = None


class PaymentStatusResponse(BaseModel):
    status: str


class WebhookResult(BaseModel):
    """Outcome of handling one Stripe event."""

    status: str
    message: str


class WebhookResponse(WebhookResult):
    received: bool = True
