"""
Profile Endpoints.

The signed-in user's own profile, including vehicle details shown to tow
operators.
"""

from fastapi import APIRouter

from towgo.core.models.io.users import ProfileRead, ProfileUpdate
from towgo.server.services.achievements import VEHICLE_EXPERT
from towgo.server.services.deps import AchievementServiceDep, CurrentUser, UserRepositoryDep

router = APIRouter()


@router.get(
    "/me",
    response_model=ProfileRead,
    summary="Get Profile",
    description="Return the signed-in user's profile.",
    responses={401: {"description": "Not authenticated"}},
)
async def get_profile(user: CurrentUser) -> ProfileRead:
    return ProfileRead.model_validate(user)


@router.patch(
    "/me",
    response_model=ProfileRead,
    summary="Update Profile",
    description="Partially update the display name, avatar or vehicle details.",
    responses={401: {"description": "Not authenticated"}},
)
async def update_profile(
    update: ProfileUpdate,
    user: CurrentUser,
    users: UserRepositoryDep,
    achievements: AchievementServiceDep,
) -> ProfileRead:
    """
    Update profile fields.

    - **display_name**: Name shown in the app
    - **avatar**: Avatar image URL
    - **vehicle_info**: make, model, year, color, type, licensePlate

    Saving vehicle details counts towards the *Vehicle Expert* achievement.
    """
    update_data = update.model_dump(exclude_unset=True)
    vehicle_changed = "vehicle_info" in update_data and update.vehicle_info is not None
    if "vehicle_info" in update_data:
        update_data["vehicle_info"] = update.vehicle_info.model_dump(exclude_none=True) if update.vehicle_info else None
    for key, value in update_data.items():
        setattr(user, key, value)
    user = await users.update(user)

    if vehicle_changed:
        await achievements.add_progress(user.id, VEHICLE_EXPERT)
    return ProfileRead.model_validate(user)
