"""
Referral program.

Every user owns a referral code. Redeeming someone else's code links the two
accounts once; the referrer earns points and moves towards the rewards
below.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from towgo.core.database.entities import Referral, User
from towgo.core.database.repositories import ReferralRepository, UserRepository
from towgo.core.errors import ConflictError, NotFoundError, ValidationError
from towgo.core.logging_config import get_logger
from towgo.core.models.io.referrals import ReferralReward, ReferralSummary

from .achievements import REFERRAL_CHAMP, AchievementService

logger = get_logger(__name__)

POINTS_PER_REFERRAL = 25


@dataclass(frozen=True)
class RewardTier:
    id: str
    title: str
    description: str
    threshold: int


REWARD_TIERS: List[RewardTier] = [
    RewardTier("discount", "Premium Discount", "Get 25% off on premium features for 3 months", 3),
    RewardTier("priority", "Priority Service", "Get priority tow truck assistance for 1 month", 5),
    RewardTier("points", "Bonus Points", "Earn 500 bonus points to unlock higher tier rewards", 10),
    RewardTier("premium", "Premium Account", "Unlock premium account features for 6 months", 15),
    RewardTier("year-free", "One Year Free", "Get one year of premium service completely free", 25),
    RewardTier("lifetime", "Lifetime Membership", "Get lifetime membership with all premium features", 50),
]


class ReferralService:
    def __init__(
        self,
        users: UserRepository,
        referrals: ReferralRepository,
        achievements: AchievementService,
        app_url: str,
    ) -> None:
        self.users = users
        self.referrals = referrals
        self.achievements = achievements
        self.app_url = app_url.rstrip("/")

    def referral_url(self, code: str) -> str:
        return f"{self.app_url}/ref/{code}"

    async def summary(self, user: User) -> ReferralSummary:
        count = await self.referrals.count_for_referrer(user.id)
        return ReferralSummary(
            code=user.referral_code,
            url=self.referral_url(user.referral_code),
            referral_count=count,
            total_invites=user.total_invites,
            points=count * POINTS_PER_REFERRAL,
            rewards=[
                ReferralReward(
                    id=tier.id,
                    title=tier.title,
                    description=tier.description,
                    threshold=tier.threshold,
                    unlocked=count >= tier.threshold,
                )
                for tier in REWARD_TIERS
            ],
        )

    async def record_invites(self, user: User, count: int = 1) -> ReferralSummary:
        user.total_invites += count
        user = await self.users.update(user)
        return await self.summary(user)

    async def redeem(self, user: User, code: str) -> User:
        """
        Record that ``user`` was referred by the owner of ``code``.

        Args:
            user: The newly referred user
            code: Referral code, case-insensitive

        Returns:
            The referrer

        Raises:
            NotFoundError: No user owns the code
            ValidationError: The code is the user's own
            ConflictError: The user was already referred
        """
        referrer = await self.users.get_by_referral_code(code.strip())
        if referrer is None:
            raise NotFoundError("Referral code not found")
        if referrer.id == user.id:
            raise ValidationError("You cannot use your own referral code")
        if user.referred_by_id is not None or await self.referrals.get_by_referred_user(user.id) is not None:
            raise ConflictError("You have already been referred")

        await self.referrals.create(Referral(referrer_id=referrer.id, referred_user_id=user.id))
        user.referred_by_id = referrer.id
        await self.users.update(user)
        await self.achievements.add_progress(referrer.id, REFERRAL_CHAMP)
        logger.info(f"User {user.id} referred by user {referrer.id}")
        return referrer
