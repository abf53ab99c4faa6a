"""
User repository.

Lookups used by sign-in (username, email, OAuth identity), the email flows
(verification and reset tokens), Stripe webhooks (customer id) and the
referral program (referral code).
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.users import User
from .base import AsyncSQLModelRepository


class UserRepository(AsyncSQLModelRepository[User]):
    """Repository for user data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_username(self, username: str) -> Optional[User]:
        return await self._first(select(User).where(User.username == username))

    async def get_by_email(self, email: str) -> Optional[User]:
        """Case-insensitive email lookup."""
        return await self._first(select(User).where(func.lower(User.email) == email.lower()))

    async def get_by_verification_token(self, token: str) -> Optional[User]:
        return await self._first(select(User).where(User.verification_token == token))

    async def get_by_reset_token(self, token: str) -> Optional[User]:
        return await self._first(select(User).where(User.reset_password_token == token))

    async def get_by_provider(self, provider_id: str, provider_user_id: str) -> Optional[User]:
        """Get the user linked to an OAuth identity.

        Args:
            provider_id: Provider name (``google`` or ``github``)
            provider_user_id: Subject identifier issued by the provider

        Returns:
            User instance or None
        """
        stmt = select(User).where((User.provider_id == provider_id) & (User.provider_user_id == provider_user_id))
        return await self._first(stmt)

    async def get_by_customer_id(self, customer_id: str) -> Optional[User]:
        return await self._first(select(User).where(User.customer_id == customer_id))

    async def get_by_referral_code(self, code: str) -> Optional[User]:
        return await self._first(select(User).where(User.referral_code == code.upper()))

    async def username_exists(self, username: str) -> bool:
        return await self.get_by_username(username) is not None
