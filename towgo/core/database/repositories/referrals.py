"""
Referral repository.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.referrals import Referral
from .base import AsyncSQLModelRepository


class ReferralRepository(AsyncSQLModelRepository[Referral]):
    """Repository for referral data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Referral)

    async def get_by_referred_user(self, user_id: int) -> Optional[Referral]:
        return await self._first(select(Referral).where(Referral.referred_user_id == user_id))

    async def count_for_referrer(self, referrer_id: int) -> int:
        """Number of users brought in by ``referrer_id``."""
        stmt = select(func.count()).select_from(Referral).where(Referral.referrer_id == referrer_id)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
