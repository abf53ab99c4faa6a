"""
Repository layer: one async repository per table.
"""

from .achievements import AchievementRepository
from .base import AsyncBaseRepository, AsyncSQLModelRepository, QueryBuilder
from .favorites import FavoriteRepository
from .payments import PaymentRepository
from .referrals import ReferralRepository
from .services import ServiceRepository
from .users import UserRepository

__all__ = [
    "AchievementRepository",
    "AsyncBaseRepository",
    "AsyncSQLModelRepository",
    "FavoriteRepository",
    "PaymentRepository",
    "QueryBuilder",
    "ReferralRepository",
    "ServiceRepository",
    "UserRepository",
]
