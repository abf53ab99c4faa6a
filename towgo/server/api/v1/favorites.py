"""
Favorites Endpoints.

Bookmarked tow businesses of the signed-in user.
"""

from typing import List

from fastapi import APIRouter, HTTPException, Response, status

from towgo.core.database.entities import Favorite
from towgo.core.models.io.favorites import FavoriteCreate, FavoriteRead
from towgo.server.services.deps import CurrentUser, FavoriteRepositoryDep

router = APIRouter()


@router.get(
    "",
    response_model=List[FavoriteRead],
    summary="List Favorites",
    description="Return the signed-in user's favorites, oldest first.",
    responses={401: {"description": "Not authenticated"}},
)
async def list_favorites(user: CurrentUser, favorites: FavoriteRepositoryDep) -> List[FavoriteRead]:
    return [FavoriteRead.model_validate(f) for f in await favorites.list_for_user(user.id)]


@router.post(
    "",
    response_model=FavoriteRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Favorite",
    description="Bookmark a business by its map place id.",
    responses={409: {"description": "Favorite already exists"}},
)
async def create_favorite(data: FavoriteCreate, user: CurrentUser, favorites: FavoriteRepositoryDep) -> FavoriteRead:
    """
    Add a favorite.

    - **place_id**: Map provider place identifier (unique per user)
    - **name**: Business name
    - **address**: Business address
    - **phone_number**: Optional phone number
    - **location**: `{lat, lng}`
    """
    if await favorites.get_for_user(user.id, data.place_id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Favorite already exists")
    favorite = Favorite(user_id=user.id, **data.model_dump(exclude={"location"}), location=data.location.model_dump())
    favorite = await favorites.create(favorite)
    return FavoriteRead.model_validate(favorite)


@router.delete(
    "/{place_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Favorite",
    description="Remove a favorite by its place id.",
    responses={404: {"description": "Favorite not found"}},
)
async def delete_favorite(place_id: str, user: CurrentUser, favorites: FavoriteRepositoryDep) -> Response:
    if not await favorites.delete_for_user(user.id, place_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Favorite not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
