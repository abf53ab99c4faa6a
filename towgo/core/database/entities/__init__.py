"""
Database entity models.

Importing this package registers every table on ``Base.metadata``.
"""

from .achievements import UserAchievement
from .favorites import Favorite
from .payments import Payment, PaymentStatus
from .referrals import Referral
from .services import Service
from .users import SubscriptionTier, User, generate_referral_code

__all__ = [
    "Favorite",
    "Payment",
    "PaymentStatus",
    "Referral",
    "Service",
    "SubscriptionTier",
    "User",
    "UserAchievement",
    "generate_referral_code",
]
