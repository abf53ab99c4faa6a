"""
Shared I/O building blocks.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class GeoPoint(BaseModel):
    """WGS84 coordinate pair."""

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class VehicleInfo(BaseModel):
    """Description of the user's vehicle, shown to the tow operator."""

    model_config = ConfigDict(populate_by_name=True)

    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[str] = None
    color: Optional[str] = None
    type: Optional[str] = None
    license_plate: Optional[str] = Field(default=None, alias="licensePlate")


class MessageResponse(BaseModel):
    success: bool = True
    message: str
