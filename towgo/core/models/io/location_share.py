"""
Location sharing I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import GeoPoint, VehicleInfo

Accuracy = Literal["exact", "approximate", "city"]


class LocationShare(BaseModel):
    """A location snapshot shared through an unguessable link."""

    model_config = ConfigDict(populate_by_name=True)

    address: str
    location: Optional[GeoPoint] = None
    accuracy: Accuracy
    expires: datetime
    include_vehicle_info: bool = Field(default=False, alias="includeVehicleInfo")
    vehicle_info: Optional[VehicleInfo] = Field(default=None, alias="vehicleInfo")


class LocationShareCreated(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    share_id: str = Field(alias="shareId")
    expires_at: datetime = Field(alias="expiresAt")


class LocationShareEntry(BaseModel):
    id: str
    data: LocationShare


class LocationShareList(BaseModel):
    count: int
    shares: List[LocationShareEntry]
