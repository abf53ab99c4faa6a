"""
User achievement repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.achievements import UserAchievement
from .base import AsyncSQLModelRepository


class AchievementRepository(AsyncSQLModelRepository[UserAchievement]):
    """Repository for per-user achievement progress."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, UserAchievement)

    async def list_for_user(self, user_id: int) -> List[UserAchievement]:
        stmt = select(UserAchievement).where(UserAchievement.user_id == user_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_for_user(self, user_id: int, achievement_id: str) -> Optional[UserAchievement]:
        stmt = select(UserAchievement).where(
            (UserAchievement.user_id == user_id) & (UserAchievement.achievement_id == achievement_id)
        )
        return await self._first(stmt)

    async def get_or_create(self, user_id: int, achievement_id: str) -> UserAchievement:
        """Get the progress row for a user, creating an empty one on first use."""
        existing = await self.get_for_user(user_id, achievement_id)
        if existing is not None:
            return existing
        return await self.create(UserAchievement(user_id=user_id, achievement_id=achievement_id))
