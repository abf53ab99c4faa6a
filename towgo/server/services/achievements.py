"""
Achievement catalog and progress tracking.

The catalog is static. Per-user progress is stored in ``user_achievements``
and merged with the catalog when listed. Progress achievements (those with a
``max_progress``) unlock when their counter reaches the goal; the others
unlock directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from towgo.core.database.base import utc_now
from towgo.core.database.entities import UserAchievement
from towgo.core.database.repositories import AchievementRepository
from towgo.core.errors import NotFoundError, ValidationError
from towgo.core.logging_config import get_logger
from towgo.core.models.io.achievements import AchievementList, AchievementRead

logger = get_logger(__name__)


@dataclass(frozen=True)
class AchievementDefinition:
    id: str
    title: str
    description: str
    icon: str
    points: int
    max_progress: Optional[int] = None


FIRST_SEARCH = "first-search"
LOCATION_MASTER = "location-master"
VEHICLE_EXPERT = "vehicle-expert"
REFERRAL_CHAMP = "referral-champ"
GOLD_MEMBER = "gold-member"

CATALOG: List[AchievementDefinition] = [
    AchievementDefinition(FIRST_SEARCH, "First Search", "Complete your first tow truck search", "search", 10),
    AchievementDefinition(LOCATION_MASTER, "Location Master", "Share your location 5 times", "map-pin", 25, 5),
    AchievementDefinition(VEHICLE_EXPERT, "Vehicle Expert", "Add details for 3 different vehicles", "car", 30, 3),
    AchievementDefinition("five-star", "Five Star", "Rate 10 tow services", "star", 50, 10),
    AchievementDefinition("quick-caller", "Quick Caller", "Call 5 tow services", "phone", 40, 5),
    AchievementDefinition(REFERRAL_CHAMP, "Referral Champion", "Refer 3 friends who complete a search", "gift", 75, 3),
    AchievementDefinition("social-sharer", "Social Sharer", "Share the app on social media", "share-2", 20),
    AchievementDefinition("feedback-provider", "Feedback Provider", "Provide feedback on the app", "thumbs-up", 15),
    AchievementDefinition(GOLD_MEMBER, "Gold Member", "Reach 500 points", "medal", 100, 500),
    AchievementDefinition("help-others", "Helping Hand", "Share a location to help another driver", "award", 35),
]

CATALOG_BY_ID: Dict[str, AchievementDefinition] = {a.id: a for a in CATALOG}


def get_definition(achievement_id: str) -> AchievementDefinition:
    definition = CATALOG_BY_ID.get(achievement_id)
    if definition is None:
        raise NotFoundError("Achievement not found")
    return definition


def to_read(definition: AchievementDefinition, row: Optional[UserAchievement]) -> AchievementRead:
    """Merge a catalog entry with the user's stored progress."""
    return AchievementRead(
        id=definition.id,
        title=definition.title,
        description=definition.description,
        icon=definition.icon,
        points=definition.points,
        unlocked=bool(row and row.unlocked),
        unlocked_at=row.unlocked_at if row else None,
        progress=(row.progress if row else 0) if definition.max_progress else None,
        max_progress=definition.max_progress,
    )


class AchievementService:
    """Reads and advances a user's achievements."""

    def __init__(self, repository: AchievementRepository) -> None:
        self.repository = repository

    async def list_for_user(self, user_id: int) -> AchievementList:
        rows = {row.achievement_id: row for row in await self.repository.list_for_user(user_id)}
        achievements = [to_read(definition, rows.get(definition.id)) for definition in CATALOG]
        total = sum(a.points for a in achievements if a.unlocked)
        return AchievementList(achievements=achievements, total_points=total)

    async def total_points(self, user_id: int) -> int:
        rows = await self.repository.list_for_user(user_id)
        return sum(CATALOG_BY_ID[r.achievement_id].points for r in rows if r.unlocked and r.achievement_id in CATALOG_BY_ID)

    async def unlock(self, user_id: int, achievement_id: str) -> AchievementRead:
        """
        Unlock an achievement. Unlocking twice keeps the first unlock time.

        Raises:
            NotFoundError: Unknown achievement id
        """
        definition = get_definition(achievement_id)
        row = await self.repository.get_or_create(user_id, achievement_id)
        if not row.unlocked:
            self._mark_unlocked(row, definition)
            row = await self.repository.update(row)
            logger.info(f"User {user_id} unlocked achievement '{achievement_id}'")
            await self._sync_gold_member(user_id, achievement_id)
        return to_read(definition, row)

    async def add_progress(self, user_id: int, achievement_id: str, amount: int = 1) -> AchievementRead:
        """
        Advance a progress achievement, capped at its goal.

        Args:
            user_id: Owner of the progress
            achievement_id: Catalog id
            amount: Steps to add

        Raises:
            NotFoundError: Unknown achievement id
            ValidationError: The achievement has no progress counter
        """
        definition = get_definition(achievement_id)
        if not definition.max_progress:
            raise ValidationError("Achievement does not track progress")
        row = await self.repository.get_or_create(user_id, achievement_id)
        if row.unlocked:
            return to_read(definition, row)

        row.progress = min(row.progress + amount, definition.max_progress)
        just_unlocked = row.progress >= definition.max_progress
        if just_unlocked:
            self._mark_unlocked(row, definition)
        row = await self.repository.update(row)
        if just_unlocked:
            logger.info(f"User {user_id} unlocked achievement '{achievement_id}'")
            await self._sync_gold_member(user_id, achievement_id)
        return to_read(definition, row)

    async def set_progress(self, user_id: int, achievement_id: str, value: int) -> AchievementRead:
        """Set a progress counter to an absolute value, never moving it backwards."""
        row = await self.repository.get_or_create(user_id, achievement_id)
        delta = value - row.progress
        if delta <= 0:
            return to_read(get_definition(achievement_id), row)
        return await self.add_progress(user_id, achievement_id, delta)

    @staticmethod
    def _mark_unlocked(row: UserAchievement, definition: AchievementDefinition) -> None:
        row.unlocked = True
        row.unlocked_at = utc_now()
        if definition.max_progress:
            row.progress = definition.max_progress

    async def _sync_gold_member(self, user_id: int, changed_id: str) -> None:
        if changed_id == GOLD_MEMBER:
            return
        points = await self.total_points(user_id)
        goal = CATALOG_BY_ID[GOLD_MEMBER].max_progress or 0
        await self.set_progress(user_id, GOLD_MEMBER, min(points, goal))
