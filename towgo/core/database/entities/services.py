"""
Purchasable service catalog entity (towing, jump start, lockout, ...).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field

from ..base import Base, utc_now


class Service(Base, table=True):
    """Service offered for one-off purchase through Stripe checkout.

    Table: services
    """

    __tablename__ = "services"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=255)
    description: str
    price: float = Field(description="Price in USD")
    price_id: Optional[str] = Field(default=None, description="Stripe price created for this service")
    active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"Service(id={self.id}, name={self.name}, price={self.price})"
