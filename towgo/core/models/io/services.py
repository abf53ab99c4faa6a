"""
Service catalog I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ServiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    price: float
    price_id: Optional[str] = None
    active: bool
    created_at: datetime
    updated_at: datetime


class ServiceCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str
    price: float = Field(gt=0, description="Price in USD")
    price_id: Optional[str] = None
    active: bool = True


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, gt=0)
    price_id: Optional[str] = None
    active: Optional[bool] = None

    @field_validator("name", "description", "price", "active")
    @classmethod
    def not_null(cls, value):
        """Only ``price_id`` may be cleared; the other columns are required."""
        if value is None:
            raise ValueError("must not be null")
        return value
