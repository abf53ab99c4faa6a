"""
Per-user achievement progress.

The achievement catalog itself (titles, points, goals) is static and lives in
``towgo.server.services.achievements``; this table only stores what a user has
done so far.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field

from ..base import Base


class UserAchievement(Base, table=True):
    """Progress of one user on one achievement.

    Table: user_achievements
    """

    __tablename__ = "user_achievements"
    __table_args__ = (UniqueConstraint("user_id", "achievement_id", name="uq_user_achievements_user_achievement"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    achievement_id: str = Field(max_length=64)
    progress: int = Field(default=0)
    unlocked: bool = Field(default=False)
    unlocked_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"UserAchievement(user_id={self.user_id}, achievement_id={self.achievement_id}, unlocked={self.unlocked})"
