"""
Search I/O models.

The wire format of search results uses camelCase keys, as consumed by the map
and web-search screens of the client. Python attributes stay snake_case.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

SortBy = Literal["distance", "relevance", "category"]
SourceType = Literal["search", "directory", "social"]


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SearchParams(CamelModel):
    """Query parameters of ``GET /api/search``."""

    location: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    radius: int = Field(default=5000, ge=1, le=50000, description="Search radius in meters")
    sort_by: SortBy = Field(default="distance", alias="sortBy")
    business_type: Optional[str] = Field(default=None, alias="businessType")


class Citation(CamelModel):
    url: str
    title: Optional[str] = None
    text: Optional[str] = None


class PerplexityResult(CamelModel):
    """Outcome of a query enhancement."""

    original_query: str = Field(alias="originalQuery")
    enhanced_query: str = Field(alias="enhancedQuery")
    is_enhanced: bool = Field(alias="isEnhanced")
    citations: Optional[List[Citation]] = None


class SearchResponse(CamelModel):
    results: List[dict] = Field(default_factory=list)
    status: str = "SUCCESS"
    original_query: str = Field(alias="originalQuery")
    enhanced_query: str = Field(alias="enhancedQuery")
    is_enhanced: bool = Field(alias="isEnhanced")
    citations: Optional[List[Citation]] = None


class RecommendationsResponse(BaseModel):
    recommendations: List[str]


class ScrapedBusiness(CamelModel):
    """A business found by one of the web-search tiers."""

    title: str
    url: str
    description: str = ""
    phone: Optional[str] = None
    address: Optional[str] = None
    rating: Optional[str] = None
    hours: Optional[List[str]] = None
    categories: Optional[List[str]] = None
    website: Optional[str] = None
    source: str
    source_type: SourceType = Field(alias="sourceType")


class WebSearchResult(CamelModel):
    original_query: str = Field(alias="originalQuery")
    businesses: List[ScrapedBusiness]
    total_results: int = Field(alias="totalResults")
    time_taken: str = Field(alias="timeTaken", description="Elapsed seconds formatted as '0.42s'")
    sources: List[str]
