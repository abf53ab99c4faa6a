"""
User entity models.

A user signs in with a password, through an OAuth provider, or both. The row
also carries the Stripe customer and subscription state and the user's
referral code, so most features only need this table to authorize a request.
"""

from __future__ import annotations

import secrets
import string
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from sqlalchemy import DateTime
from sqlmodel import JSON, Column, Field

from ..base import Base, utc_now

REFERRAL_CODE_ALPHABET = string.ascii_uppercase + string.digits
REFERRAL_CODE_LENGTH = 8


def generate_referral_code() -> str:
    """Random 8 character code drawn from ``A-Z0-9``."""
    return "".join(secrets.choice(REFERRAL_CODE_ALPHABET) for _ in range(REFERRAL_CODE_LENGTH))


class SubscriptionTier(str, Enum):
    FREE = "free"
    PREMIUM = "premium"


class User(Base, table=True):
    """Registered TowGo user.

    Table: users
    """

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True, max_length=64)
    email: Optional[str] = Field(default=None, index=True, unique=True, max_length=255)
    password_hash: Optional[str] = Field(default=None, description="bcrypt hash; empty for OAuth-only accounts")
    display_name: Optional[str] = Field(default=None, max_length=128)
    avatar: Optional[str] = Field(default=None)

    # Email verification and password reset
    email_verified: bool = Field(default=False)
    verification_token: Optional[str] = Field(default=None, index=True)
    verification_token_expires: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    reset_password_token: Optional[str] = Field(default=None, index=True)
    reset_password_expires: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))

    # Social sign-in
    provider_id: Optional[str] = Field(default=None, description="OAuth provider (google, github)")
    provider_user_id: Optional[str] = Field(default=None, index=True)

    # Profile
    vehicle_info: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))

    # Stripe
    customer_id: Optional[str] = Field(default=None, index=True)
    subscription_id: Optional[str] = Field(default=None)
    subscription_status: Optional[str] = Field(default=None)
    subscription_tier: str = Field(default=SubscriptionTier.FREE.value)
    trial_start_date: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    trial_end_date: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))

    # Referral program
    referral_code: str = Field(default_factory=generate_referral_code, unique=True, index=True, max_length=16)
    referred_by_id: Optional[int] = Field(default=None, foreign_key="users.id")
    total_invites: int = Field(default=0)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"User(id={self.id}, username={self.username}, tier={self.subscription_tier})"
