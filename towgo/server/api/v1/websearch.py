"""
Web Search Endpoint.

Finds tow businesses through the Perplexity, scraping and simulated search
tiers.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from towgo.core.models.io.search import WebSearchResult
from towgo.server.services.deps import WebSearchServiceDep

router = APIRouter()


@router.get(
    "/websearch",
    response_model=WebSearchResult,
    summary="Web Search",
    description="Search the web for tow truck businesses, falling back through the available search tiers.",
    response_description="Businesses found and the sources that produced them.",
    responses={400: {"description": "Query parameter is required"}, 500: {"description": "All search methods failed"}},
)
async def websearch(
    service: WebSearchServiceDep,
    query: Optional[str] = None,
    location: Optional[str] = None,
    radius: Optional[int] = Query(default=None, ge=1, description="Radius in meters"),
) -> WebSearchResult:
    """
    Search for tow businesses.

    - **query**: What to search for; non-tow queries are turned into "tow truck ... services"
    - **location**: Optional location name
    - **radius**: Optional radius in meters, converted to miles in the query
    """
    if not query:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Query parameter is required")
    return await service.search(query, location, radius)
