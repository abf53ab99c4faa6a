"""
Location Sharing Endpoints.

Time-limited location shares addressed by an unguessable id. Shares are held
in memory and disappear when they expire.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, HTTPException, Response, status
from pydantic import ValidationError

from towgo.core.logging_config import get_logger
from towgo.core.models.io.location_share import (
    LocationShare,
    LocationShareCreated,
    LocationShareEntry,
    LocationShareList,
)
from towgo.server.services.achievements import LOCATION_MASTER
from towgo.server.services.deps import AchievementServiceDep, LocationShareStoreDep, OptionalUser
from towgo.server.services.location_sharing import apply_privacy

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/location-share",
    response_model=LocationShareCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Share Location",
    description="Create a location share that expires at the given time.",
    response_description="The share id and its expiry.",
    responses={400: {"description": "Invalid location data"}},
)
async def create_location_share(
    store: LocationShareStoreDep,
    achievements: AchievementServiceDep,
    user: OptionalUser,
    payload: Dict[str, Any] = Body(...),
) -> LocationShareCreated:
    """
    Share a location.

    - **address**: Human-readable address
    - **location**: Optional `{lat, lng}`
    - **accuracy**: `exact`, `approximate` or `city`
    - **expires**: ISO datetime in the future
    - **includeVehicleInfo** / **vehicleInfo**: Optional vehicle details to show
    """
    try:
        share = LocationShare.model_validate(payload)
        share_id = store.create(share)
    except (ValidationError, ValueError) as e:
        logger.info(f"Rejected location share: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid location data") from e

    if user is not None:
        await achievements.add_progress(user.id, LOCATION_MASTER)
    return LocationShareCreated(share_id=share_id, expires_at=share.expires)


@router.get(
    "/location-share/{share_id}",
    response_model=LocationShare,
    summary="Get Shared Location",
    description="Return a share with the privacy of its accuracy level applied.",
    responses={404: {"description": "Location share not found or expired"}},
)
async def get_location_share(share_id: str, store: LocationShareStoreDep) -> LocationShare:
    share = store.get(share_id)
    if share is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location share not found or expired")
    return apply_privacy(share)


@router.delete(
    "/location-share/{share_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Stop Sharing",
    description="Delete a share before it expires.",
    responses={404: {"description": "Location share not found or already deleted"}},
)
async def delete_location_share(share_id: str, store: LocationShareStoreDep) -> Response:
    if not store.delete(share_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Location share not found or already deleted"
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/location-shares",
    response_model=LocationShareList,
    summary="List Active Shares",
    description="Return every share that has not expired.",
)
async def list_location_shares(store: LocationShareStoreDep) -> LocationShareList:
    shares = [LocationShareEntry(id=share_id, data=share) for share_id, share in store.list_active()]
    return LocationShareList(count=len(shares), shares=shares)
