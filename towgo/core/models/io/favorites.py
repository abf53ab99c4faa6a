"""
Favorite I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import GeoPoint


class FavoriteCreate(BaseModel):
    """Schema for bookmarking a business."""

    place_id: str = Field(min_length=1, max_length=255, description="Map provider place identifier")
    name: str = Field(min_length=1)
    address: str
    phone_number: Optional[str] = None
    location: GeoPoint


class FavoriteRead(BaseModel):
    """Schema for reading a favorite from the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    place_id: str
    name: str
    address: str
    phone_number: Optional[str] = None
    location: GeoPoint
    created_at: datetime
