"""Search result page scraper

Second tier of the web-search chain. Fetches the Google and Bing result
pages for a query, parses the organic results with BeautifulSoup, and pulls
the first phone number and street address out of each snippet.

Each engine is scraped independently: a blocked or failing engine contributes
no results instead of failing the whole search.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import List, Optional
from urllib.parse import unquote

import httpx
from bs4 import BeautifulSoup

from towgo.core.models.io.search import ScrapedBusiness, WebSearchResult

from ..errors import ScrapeError
from .extract import first_address, first_phone
from .simulated import unique_sources

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html",
    "Accept-Language": "en-US,en;q=0.9",
}


def _unwrap_google_link(href: str) -> str:
    """Google wraps result links as ``/url?q=<target>&sa=...``."""
    if href.startswith("/url?q="):
        target = href[len("/url?q=") :]
        return unquote(target.split("&", 1)[0])
    return href


def parse_google_results(html: str) -> List[ScrapedBusiness]:
    """Parse organic results (``div.g``) of a Google result page."""
    soup = BeautifulSoup(html, "html.parser")
    businesses: List[ScrapedBusiness] = []
    for element in soup.select(".g"):
        heading = element.find("h3")
        link = element.find("a", href=True)
        title = heading.get_text(strip=True) if heading else ""
        url = link["href"] if link else ""
        if not title or not url:
            continue
        snippet = element.select_one(".VwiC3b")
        content = element.get_text(" ", strip=True)
        businesses.append(
            ScrapedBusiness(
                title=title,
                url=_unwrap_google_link(url),
                description=snippet.get_text(" ", strip=True) if snippet else "",
                phone=first_phone(content),
                address=first_address(content),
                source="Google Search",
                source_type="search",
            )
        )
    return businesses


def parse_bing_results(html: str) -> List[ScrapedBusiness]:
    """Parse organic results (``li.b_algo``) of a Bing result page."""
    soup = BeautifulSoup(html, "html.parser")
    businesses: List[ScrapedBusiness] = []
    for element in soup.select(".b_algo"):
        heading = element.find("h2")
        link = element.select_one("h2 a[href]")
        title = heading.get_text(strip=True) if heading else ""
        url = link["href"] if link else ""
        if not title or not url:
            continue
        snippet = element.select_one(".b_caption p")
        content = element.get_text(" ", strip=True)
        businesses.append(
            ScrapedBusiness(
                title=title,
                url=url,
                description=snippet.get_text(" ", strip=True) if snippet else "",
                phone=first_phone(content),
                address=first_address(content),
                source="Bing Search",
                source_type="search",
            )
        )
    return businesses


def merge_results(*result_sets: List[ScrapedBusiness]) -> List[ScrapedBusiness]:
    """Deduplicate by URL (first occurrence wins) and list businesses with a phone first."""
    seen: set[str] = set()
    merged: List[ScrapedBusiness] = []
    for results in result_sets:
        for business in results:
            if business.url in seen:
                continue
            seen.add(business.url)
            merged.append(business)
    merged.sort(key=lambda b: b.phone is None)
    return merged


class SearchPageScraper:
    """Fetches and parses Google and Bing result pages."""

    def __init__(
        self,
        *,
        google_url: str = "https://www.google.com/search",
        bing_url: str = "https://www.bing.com/search",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.google_url = google_url
        self.bing_url = bing_url
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._logger = logging.getLogger(__name__)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _fetch(self, url: str, query: str) -> str:
        try:
            response = await self._client.get(url, params={"q": query}, headers=BROWSER_HEADERS)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ScrapeError(f"Search page returned {e.response.status_code}", status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            raise ScrapeError(f"Search page request failed: {e}") from e
        return response.text

    async def _scrape_google(self, query: str) -> List[ScrapedBusiness]:
        try:
            return parse_google_results(await self._fetch(self.google_url, query))
        except ScrapeError as e:
            self._logger.warning(f"Google scrape failed: {e}")
            return []

    async def _scrape_bing(self, query: str) -> List[ScrapedBusiness]:
        try:
            return parse_bing_results(await self._fetch(self.bing_url, query))
        except ScrapeError as e:
            self._logger.warning(f"Bing scrape failed: {e}")
            return []

    async def search(self, query: str, location: Optional[str] = None) -> WebSearchResult:
        """Scrape both engines concurrently and merge their results.

        Args:
            query: Search text.
            location: Optional location appended as "in <location>".

        Returns:
            ``WebSearchResult``; ``businesses`` is empty when both engines failed.
        """
        started = time.perf_counter()
        search_query = f"{query} in {location}" if location else query
        google, bing = await asyncio.gather(self._scrape_google(search_query), self._scrape_bing(search_query))
        businesses = merge_results(google, bing)
        elapsed = time.perf_counter() - started
        self._logger.debug(f"Scraped {len(businesses)} results for '{search_query}' in {elapsed:.2f}s")
        return WebSearchResult(
            original_query=query,
            businesses=businesses,
            total_results=len(businesses),
            time_taken=f"{elapsed:.2f}s",
            sources=unique_sources(businesses),
        )
