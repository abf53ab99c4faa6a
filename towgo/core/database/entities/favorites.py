"""
Favorite place entity.

Stores the places a user bookmarked from search results. ``place_id`` is the
identifier of the place in the map provider, unique per user.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import JSON, Column, Field

from ..base import Base, utc_now


class Favorite(Base, table=True):
    """A bookmarked business.

    Table: favorites
    """

    __tablename__ = "favorites"
    __table_args__ = (UniqueConstraint("user_id", "place_id", name="uq_favorites_user_place"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    place_id: str = Field(max_length=255)
    name: str
    address: str
    phone_number: Optional[str] = Field(default=None)
    location: Dict[str, Any] = Field(sa_column=Column(JSON, nullable=False), description="{lat, lng}")
    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"Favorite(id={self.id}, user_id={self.user_id}, place_id={self.place_id})"
