"""
Referral entity: who brought whom to TowGo.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field

from ..base import Base, utc_now


class Referral(Base, table=True):
    """A completed referral. A user can be referred only once.

    Table: referrals
    """

    __tablename__ = "referrals"

    id: Optional[int] = Field(default=None, primary_key=True)
    referrer_id: int = Field(foreign_key="users.id", index=True)
    referred_user_id: int = Field(foreign_key="users.id", unique=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"Referral(referrer_id={self.referrer_id}, referred_user_id={self.referred_user_id})"
