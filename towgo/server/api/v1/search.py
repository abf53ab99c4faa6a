"""
Search Enhancement Endpoints.

The map screen runs the actual place search on the client; these endpoints
refine the query with Perplexity and suggest business categories.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status
from pydantic import ValidationError

from towgo.core.logging_config import get_logger
from towgo.core.models.io.search import PerplexityResult, RecommendationsResponse, SearchParams, SearchResponse
from towgo.server.services.achievements import FIRST_SEARCH
from towgo.server.services.deps import AchievementServiceDep, FavoriteRepositoryDep, OptionalUser, PerplexityDep

logger = get_logger(__name__)

router = APIRouter()

DEFAULT_BUSINESS_TYPE = "popular businesses"


@router.get(
    "/search",
    response_model=SearchResponse,
    summary="Enhance Map Search",
    description="Validate the map search parameters and enhance the business type with Perplexity.",
    response_description="Original and enhanced query with citations. `results` is filled in by the client.",
    responses={400: {"description": "Invalid search parameters"}},
)
async def search(
    perplexity: PerplexityDep,
    achievements: AchievementServiceDep,
    user: OptionalUser,
    location: Optional[str] = None,
    latitude: Optional[str] = None,
    longitude: Optional[str] = None,
    radius: Optional[str] = None,
    sort_by: Optional[str] = Query(default=None, alias="sortBy"),
    business_type: Optional[str] = Query(default=None, alias="businessType"),
) -> SearchResponse:
    """
    Enhance a map search.

    - **location**: Human-readable location used as context
    - **latitude** / **longitude**: Map center
    - **radius**: Search radius in meters (1 to 50000, default 5000)
    - **sortBy**: `distance`, `relevance` or `category`
    - **businessType**: What to look for (default "popular businesses")
    """
    raw = {
        "location": location,
        "latitude": latitude,
        "longitude": longitude,
        "radius": radius,
        "sortBy": sort_by,
        "businessType": business_type,
    }
    try:
        params = SearchParams.model_validate({k: v for k, v in raw.items() if v is not None})
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid search parameters") from e

    result = await perplexity.enhance_search_query(params.business_type or DEFAULT_BUSINESS_TYPE, params.location)
    if user is not None:
        await achievements.unlock(user.id, FIRST_SEARCH)
    return SearchResponse(
        original_query=result.original_query,
        enhanced_query=result.enhanced_query,
        is_enhanced=result.is_enhanced,
        citations=result.citations,
    )


@router.get(
    "/perplexity",
    response_model=PerplexityResult,
    summary="Direct Perplexity Query",
    description="Run a free-text query through the Perplexity enhancement.",
    responses={400: {"description": "Query parameter is required"}, 503: {"description": "Perplexity not configured"}},
)
async def perplexity_query(
    perplexity: PerplexityDep, query: Optional[str] = None, location: Optional[str] = None
) -> PerplexityResult:
    if not query:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Query parameter is required")
    if not perplexity.is_configured:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Perplexity API key not configured")
    return await perplexity.enhance_search_query(query, location)


@router.get(
    "/recommendations",
    response_model=RecommendationsResponse,
    summary="Get Recommendations",
    description="Suggest business categories based on the caller's favorites.",
)
async def recommendations(
    perplexity: PerplexityDep,
    favorites: FavoriteRepositoryDep,
    user: OptionalUser,
    location: Optional[str] = None,
) -> RecommendationsResponse:
    preferences = [f.name for f in await favorites.list_for_user(user.id) if f.name] if user else []
    return RecommendationsResponse(recommendations=await perplexity.generate_recommendations(preferences, location))
