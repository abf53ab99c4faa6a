"""
Unit tests for the web search fallback chain.

The Perplexity client and the page scraper are replaced with mocks so each
tier can be switched on or off independently.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from towgo.core.errors import SearchFailedError
from towgo.core.models.io.search import ScrapedBusiness, WebSearchResult
from towgo.integrations.errors import PerplexityError
from towgo.server.services.websearch import (
    DEFAULT_CATEGORIES,
    WebSearchService,
    build_full_query,
    business_from_perplexity,
    fallback_terms,
)


def scraped(*titles: str) -> WebSearchResult:
    businesses = [
        ScrapedBusiness(title=t, url=f"https://{t.lower()}.example.org", source="Bing Search", source_type="search")
        for t in titles
    ]
    return WebSearchResult(
        original_query="ignored", businesses=businesses, total_results=len(businesses), time_taken="0.10s", sources=["Bing Search"]
    )


@pytest.fixture
def perplexity():
    client = MagicMock()
    client.is_configured = True
    client.search_businesses = AsyncMock(return_value=([], []))
    return client


@pytest.fixture
def scraper():
    mock = MagicMock()
    mock.search = AsyncMock(return_value=scraped())
    return mock


@pytest.fixture
def service(perplexity, scraper):
    return WebSearchService(perplexity, scraper)


class TestQueryHelpers:
    @pytest.mark.parametrize(
        "query,location,radius,expected",
        [
            ("flatbed", None, None, "tow truck flatbed services"),
            ("tow service", None, None, "tow service"),
            ("Truck repair", "Reno", None, "Truck repair in Reno"),
            ("winch", "Austin, TX", 16093, "tow truck winch services in Austin, TX within 10 miles radius"),
        ],
    )
    def test_build_full_query(self, query, location, radius, expected):
        assert build_full_query(query, location, radius) == expected

    def test_fallback_terms_recover_location(self):
        assert fallback_terms("tow truck flatbed services in Austin within 5 miles radius") == (
            "tow truck flatbed services",
            "Austin within 5 miles radius",
        )

    def test_fallback_terms_keep_given_location(self):
        query, location = fallback_terms("tow truck winch services in Reno", "Reno, NV")
        assert location == "Reno, NV"
        assert query == "tow truck winch services"

    def test_fallback_terms_without_keywords(self):
        assert fallback_terms("heavy recovery") == ("tow truck", None)

    def test_business_from_perplexity_defaults(self):
        business = business_from_perplexity({"rating": 4, "categories": "Towing", "hours": ["24/7"]})
        assert business.title == "Unknown Business"
        assert business.url == ""
        assert business.rating == "4"
        assert business.categories == ["Towing"]
        assert business.hours == ["24/7"]
        assert business_from_perplexity({}).categories == DEFAULT_CATEGORIES


@pytest.mark.asyncio
class TestWebSearchService:
    async def test_perplexity_answers_first(self, service, perplexity, scraper):
        perplexity.search_businesses.return_value = ([{"title": "Lone Star Towing"}], ["https://src.example.org"])

        result = await service.search("flatbed", "Austin")

        assert [b.title for b in result.businesses] == ["Lone Star Towing"]
        assert result.sources == ["https://src.example.org"]
        assert result.original_query == "flatbed"
        perplexity.search_businesses.assert_awaited_once_with("tow truck flatbed services in Austin")
        scraper.search.assert_not_called()

    async def test_perplexity_without_citations_names_default_source(self, service, perplexity):
        perplexity.search_businesses.return_value = ([{"title": "A"}], [])
        result = await service.search("tow")
        assert result.sources == ["Google Search"]

    async def test_perplexity_error_falls_through_to_scraping(self, service, perplexity, scraper):
        perplexity.search_businesses.side_effect = PerplexityError("boom")
        scraper.search.return_value = scraped("Ace")

        result = await service.search("tow truck")

        assert [b.title for b in result.businesses] == ["Ace"]
        assert result.original_query == "tow truck"

    async def test_unconfigured_perplexity_is_skipped(self, service, perplexity, scraper):
        perplexity.is_configured = False
        scraper.search.return_value = scraped("Ace")

        await service.search("tow truck")

        perplexity.search_businesses.assert_not_called()

    async def test_simulated_when_nothing_found(self, service, scraper):
        result = await service.search("flatbed", "Austin")
        scraper.search.assert_awaited_once()
        assert result.total_results > 0
        assert any(b.source_type == "social" for b in result.businesses)

    async def test_simulated_failure_is_a_search_failure(self, service, monkeypatch):
        def broken(query, location=None):
            raise ValueError("Query cannot be empty")

        monkeypatch.setattr("towgo.server.services.websearch.simulate_business_search", broken)
        with pytest.raises(SearchFailedError) as exc_info:
            await service.search("tow")
        assert exc_info.value.status_code == 500
