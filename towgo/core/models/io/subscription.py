"""
Subscription I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SubscriptionPlan(BaseModel):
    """A plan offered on the pricing page. ``price`` is in cents."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: str
    price: int
    interval: str = "month"
    trial_days: int = Field(default=0, alias="trialDays")
    features: List[str]
    price_id: Optional[str] = Field(default=None, alias="priceId")


class SubscriptionCheckoutRequest(BaseModel):
    plan_id: str = Field(min_length=1)
    success_url: str = Field(min_length=1)
    cancel_url: str = Field(min_length=1)


class SubscriptionStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: Optional[str] = None
    tier: str
    trial_end: Optional[datetime] = Field(default=None, alias="trialEnd")
    is_trial_active: bool = Field(alias="isTrialActive")
    is_subscription_active: bool = Field(alias="isSubscriptionActive")


class PremiumAccess(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    has_premium: bool = Field(alias="hasPremium")
