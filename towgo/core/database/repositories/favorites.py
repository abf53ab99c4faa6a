"""
Favorite repository: per-user bookmarks keyed by map place id.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.favorites import Favorite
from .base import AsyncSQLModelRepository


class FavoriteRepository(AsyncSQLModelRepository[Favorite]):
    """Repository for favorite data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Favorite)

    async def list_for_user(self, user_id: int) -> List[Favorite]:
        """Get all favorites of a user, oldest first.

        Args:
            user_id: Owner of the favorites

        Returns:
            List of Favorite instances
        """
        stmt = select(Favorite).where(Favorite.user_id == user_id).order_by(Favorite.created_at.asc())  # type: ignore[attr-defined]
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_for_user(self, user_id: int, place_id: str) -> Optional[Favorite]:
        stmt = select(Favorite).where((Favorite.user_id == user_id) & (Favorite.place_id == place_id))
        return await self._first(stmt)

    async def delete_for_user(self, user_id: int, place_id: str) -> bool:
        """Delete a user's favorite by place id.

        Returns:
            True if deleted, False if the user had no such favorite
        """
        favorite = await self.get_for_user(user_id, place_id)
        if favorite is None:
            return False
        await self.session.delete(favorite)
        await self.session.commit()
        return True
