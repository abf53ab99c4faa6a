"""
Achievement I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AchievementRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    description: str
    icon: str
    points: int
    unlocked: bool = False
    unlocked_at: Optional[datetime] = Field(default=None, alias="unlockedAt")
    progress: Optional[int] = None
    max_progress: Optional[int] = Field(default=None, alias="maxProgress")


class AchievementList(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    achievements: List[AchievementRead]
    total_points: int = Field(alias="totalPoints")


class ProgressRequest(BaseModel):
    amount: int = Field(default=1, ge=1, le=1000)
