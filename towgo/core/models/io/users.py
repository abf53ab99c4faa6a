"""
Profile I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import VehicleInfo


class ProfileRead(BaseModel):
    """The signed-in user's own profile."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    email_verified: bool = False
    avatar: Optional[str] = None
    vehicle_info: Optional[VehicleInfo] = None
    subscription_tier: str = "free"
    subscription_status: Optional[str] = None
    trial_end_date: Optional[datetime] = None
    referral_code: str
    provider_id: Optional[str] = None
    created_at: datetime


class ProfileUpdate(BaseModel):
    display_name: Optional[str] = Field(default=None, max_length=128)
    avatar: Optional[str] = None
    vehicle_info: Optional[VehicleInfo] = None
