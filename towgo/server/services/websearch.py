"""
Web search fallback chain.

A query goes through three tiers and the first one that produces businesses
answers it:

1. Perplexity business search (when an API key is configured)
2. Google/Bing result page scraping
3. Deterministic simulated results

Only the last tier failing makes the search fail.
"""

from __future__ import annotations

import re
import time
from typing import Any, Dict, Optional, Tuple

from towgo.core.errors import SearchFailedError
from towgo.core.logging_config import get_logger
from towgo.core.models.io.search import ScrapedBusiness, WebSearchResult
from towgo.core.monitoring import log_search
from towgo.integrations.errors import PerplexityError
from towgo.integrations.perplexity import PerplexityClient
from towgo.integrations.websearch import SearchPageScraper, simulate_business_search

logger = get_logger(__name__)

METERS_PER_MILE = 1609.34
DEFAULT_CATEGORIES = ["Tow Truck", "Roadside Assistance"]

_LOCATION_PATTERN = re.compile(r"(in|near|around)\s+([^,]+)", re.IGNORECASE)
_CLEAN_QUERY_PATTERN = re.compile(r"^(tow truck|.*?)\s+(within|in|near)", re.IGNORECASE)


def build_full_query(query: str, location: Optional[str] = None, radius: Optional[int] = None) -> str:
    """
    Turn the user's text into a tow-focused search query.

    >>> build_full_query("flatbed", "Austin, TX", 8047)
    'tow truck flatbed services in Austin, TX within 5 miles radius'
    """
    lowered = query.lower()
    full_query = query if ("tow" in lowered or "truck" in lowered) else f"tow truck {query} services"
    if location:
        full_query += f" in {location}"
    if radius:
        full_query += f" within {round(radius / METERS_PER_MILE)} miles radius"
    return full_query


def fallback_terms(full_query: str, location: Optional[str] = None) -> Tuple[str, Optional[str]]:
    """Recover a short query and a location from the full query for the simulated tier."""
    if not location:
        match = _LOCATION_PATTERN.search(full_query)
        location = match.group(2) if match else None
    match = _CLEAN_QUERY_PATTERN.search(full_query)
    clean_query = match.group(1) if match else "tow truck"
    return clean_query, location


def business_from_perplexity(raw: Dict[str, Any]) -> ScrapedBusiness:
    """Normalise one business object returned by Perplexity."""
    categories = raw.get("categories")
    if isinstance(categories, list):
        categories = [str(c) for c in categories]
    elif categories:
        categories = [str(categories)]
    else:
        categories = list(DEFAULT_CATEGORIES)
    rating = raw.get("rating")
    hours = raw.get("hours")
    return ScrapedBusiness(
        title=raw.get("title") or "Unknown Business",
        url=raw.get("website") or "",
        description=raw.get("description") or "",
        phone=raw.get("phone") or None,
        address=raw.get("address") or None,
        rating=str(rating) if rating not in (None, "") else None,
        categories=categories,
        website=raw.get("website") or None,
        hours=[str(h) for h in hours] if isinstance(hours, list) else None,
        source="Google Search",
        source_type="search",
    )


class WebSearchService:
    """Runs a query through the search tiers."""

    def __init__(self, perplexity: PerplexityClient, scraper: SearchPageScraper) -> None:
        self.perplexity = perplexity
        self.scraper = scraper

    async def search(self, query: str, location: Optional[str] = None, radius: Optional[int] = None) -> WebSearchResult:
        """
        Find tow businesses for a query.

        Args:
            query: The user's search text
            location: Optional location name
            radius: Optional radius in meters

        Returns:
            The first non-empty tier result, else the simulated result

        Raises:
            SearchFailedError: The simulated tier could not produce a result
        """
        full_query = build_full_query(query, location, radius)
        logger.info(f"Web search for '{full_query}'")

        result = await self._perplexity_tier(query, full_query)
        if result is not None:
            return result

        result = await self._scrape_tier(query, full_query)
        if result is not None:
            return result

        return self._simulated_tier(full_query, location)

    async def _perplexity_tier(self, query: str, full_query: str) -> Optional[WebSearchResult]:
        if not self.perplexity.is_configured:
            logger.info("Perplexity not configured; skipping AI search tier")
            return None
        started = time.perf_counter()
        try:
            raw_businesses, citations = await self.perplexity.search_businesses(full_query)
        except PerplexityError as e:
            logger.warning(f"Perplexity search failed, falling back: {e}")
            return None

        businesses = [business_from_perplexity(raw) for raw in raw_businesses]
        if not businesses:
            logger.info("Perplexity returned no businesses, falling back")
            return None
        elapsed = time.perf_counter() - started
        log_search("perplexity", full_query, len(businesses), elapsed * 1000)
        return WebSearchResult(
            original_query=query,
            businesses=businesses,
            total_results=len(businesses),
            time_taken=f"{elapsed:.2f}s",
            sources=citations or ["Google Search"],
        )

    async def _scrape_tier(self, query: str, full_query: str) -> Optional[WebSearchResult]:
        started = time.perf_counter()
        result = await self.scraper.search(full_query)
        if not result.businesses:
            logger.info("Scraping returned no businesses, falling back to simulated results")
            return None
        log_search("scrape", full_query, result.total_results, (time.perf_counter() - started) * 1000)
        return result.model_copy(update={"original_query": query})

    def _simulated_tier(self, full_query: str, location: Optional[str]) -> WebSearchResult:
        clean_query, fallback_location = fallback_terms(full_query, location)
        try:
            result = simulate_business_search(clean_query, fallback_location)
        except ValueError as e:
            logger.error(f"All search methods failed for '{full_query}': {e}")
            raise SearchFailedError("All search methods failed", details=str(e)) from e
        log_search("simulated", full_query, result.total_results)
        return result
