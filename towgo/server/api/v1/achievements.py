"""
Achievement Endpoints.
"""

from typing import Optional

from fastapi import APIRouter

from towgo.core.models.io.achievements import AchievementList, AchievementRead, ProgressRequest
from towgo.server.services.deps import AchievementServiceDep, CurrentUser

router = APIRouter()


@router.get(
    "",
    response_model=AchievementList,
    summary="List Achievements",
    description="Return every achievement with the signed-in user's progress and their total points.",
)
async def list_achievements(user: CurrentUser, service: AchievementServiceDep) -> AchievementList:
    return await service.list_for_user(user.id)


@router.post(
    "/{achievement_id}/unlock",
    response_model=AchievementRead,
    summary="Unlock Achievement",
    description="Unlock an achievement for the signed-in user. Unlocking again has no effect.",
    responses={404: {"description": "Achievement not found"}},
)
async def unlock_achievement(achievement_id: str, user: CurrentUser, service: AchievementServiceDep) -> AchievementRead:
    return await service.unlock(user.id, achievement_id)


@router.post(
    "/{achievement_id}/progress",
    response_model=AchievementRead,
    summary="Add Achievement Progress",
    description="Advance a progress achievement by `amount` (default 1); it unlocks when the goal is reached.",
    responses={
        400: {"description": "Achievement does not track progress"},
        404: {"description": "Achievement not found"},
    },
)
async def add_progress(
    achievement_id: str, user: CurrentUser, service: AchievementServiceDep, data: Optional[ProgressRequest] = None
) -> AchievementRead:
    data = data or ProgressRequest()
    return await service.add_progress(user.id, achievement_id, data.amount)
