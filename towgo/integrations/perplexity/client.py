"""Perplexity AI client

Overview
--------
Thin async client for Perplexity's OpenAI-compatible chat completions API
(``POST /chat/completions``). TowGo uses it three ways:

- ``enhance_search_query``: rewrite a short business type ("tow") into a
  map-friendly query, with the web citations Perplexity used.
- ``generate_recommendations``: suggest five business categories from the
  names of a user's favorites.
- ``search_businesses``: first tier of the web-search chain; asks for a JSON
  array of tow businesses matching a free-text query.

Failure policy
--------------
The first two never raise: search must keep working without Perplexity, so
they log and fall back to the unenhanced query or the default recommendation
list. ``search_businesses`` raises ``PerplexityError`` so the caller can move
on to the next tier.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

import httpx

from towgo.core.models.io.search import Citation, PerplexityResult

from ..errors import IntegrationError, PerplexityError
from . import prompts

DEFAULT_RECOMMENDATIONS: List[str] = [
    "Coffee Shops",
    "Local Restaurants",
    "Shopping Centers",
    "Entertainment Venues",
    "Outdoor Activities",
]

_FENCED_JSON = re.compile(r"```json\n([\s\S]*?)```")
_FENCED_ANY = re.compile(r"```\n([\s\S]*?)```")


def extract_json_text(content: str) -> str:
    """Return the JSON payload of a model answer, unwrapping a markdown code fence."""
    match = _FENCED_JSON.search(content) or _FENCED_ANY.search(content)
    return match.group(1) if match else content


def parse_string_array(content: str) -> List[str]:
    """Parse a JSON array of strings out of free text.

    Tries the whole content first, then the outermost ``[...]`` substring.
    Returns an empty list when neither parses.
    """
    candidates = [content]
    start, end = content.find("["), content.rfind("]")
    if start != -1 and end > start:
        candidates.append(content[start : end + 1])
    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(parsed, list):
            return [str(item) for item in parsed if isinstance(item, (str, int, float))]
    return []


def citations_from_urls(urls: List[str]) -> List[Citation]:
    """Build citations titled by the last path segment of each URL."""
    return [Citation(url=url, title=url.split("/")[-1] or url) for url in urls]


class PerplexityClient:
    """Async HTTP client for the Perplexity chat completions API."""

    def __init__(
        self,
        api_key: Optional[str],
        *,
        base_url: str = "https://api.perplexity.ai",
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Create a Perplexity client.

        Args:
            api_key: Perplexity API key. When empty every method short-circuits.
            base_url: API base URL.
            timeout: Default HTTP timeout for the internal client.
            client: Optional preconfigured ``httpx.AsyncClient`` to use.
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    async def aclose(self) -> None:
        await self._client.aclose()

    async def chat(self, messages: List[Dict[str, str]], *, model: str, **params: Any) -> Dict[str, Any]:
        """Call ``POST /chat/completions``.

        Args:
            messages: Chat messages (``role``/``content`` dicts).
            model: Perplexity model name.
            **params: Extra sampling parameters (``temperature``, ``max_tokens``...).

        Returns:
            The decoded JSON response.

        Raises:
            PerplexityError: When the key is missing, the request fails, or the
                response is not JSON.
        """
        if not self.is_configured:
            raise PerplexityError("Perplexity API key not configured")
        payload = {"model": model, "messages": messages, **params}
        self._logger.debug("PerplexityClient.chat: model=%s", model)
        try:
            response = await self._client.post(f"{self.base_url}/chat/completions", headers=self._headers(), json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            error = IntegrationError.from_status_error("Perplexity", e)
            raise PerplexityError(str(error), status_code=error.status_code, details=error.details) from e
        except httpx.HTTPError as e:
            raise PerplexityError(f"Perplexity request failed: {e}") from e
        try:
            return response.json()
        except ValueError as e:
            raise PerplexityError("Perplexity returned a non-JSON response", details=response.text) from e

    @staticmethod
    def _content(data: Dict[str, Any]) -> str:
        try:
            return str(data["choices"][0]["message"]["content"]).strip()
        except (KeyError, IndexError, TypeError) as e:
            raise PerplexityError("Perplexity response has no message content", details=data) from e

    async def enhance_search_query(self, query: str, location_context: Optional[str] = None) -> PerplexityResult:
        """Rewrite a business type into a more specific map query.

        Args:
            query: The user's business type or free text.
            location_context: Optional human-readable location appended as "near ...".

        Returns:
            ``PerplexityResult``; ``is_enhanced`` is False when the query came
            back unchanged or Perplexity could not be used.
        """
        unenhanced = PerplexityResult(original_query=query, enhanced_query=query, is_enhanced=False)
        if not self.is_configured:
            self._logger.info("Skipping search enhancement: no Perplexity API key")
            return unenhanced

        messages = [
            {"role": "system", "content": prompts.ENHANCE_SYSTEM_PROMPT},
            {"role": "user", "content": prompts.enhance_user_prompt(query, location_context)},
        ]
        try:
            data = await self.chat(
                messages,
                model=prompts.ENHANCE_MODEL,
                max_tokens=150,
                temperature=0.1,
                search_recency_filter="day",
                top_p=0.95,
            )
            enhanced = self._content(data)
        except PerplexityError as e:
            self._logger.warning(f"Perplexity enhancement failed, using original query: {e}")
            return unenhanced

        citations = citations_from_urls([str(url) for url in data.get("citations") or []])
        return PerplexityResult(
            original_query=query,
            enhanced_query=enhanced,
            is_enhanced=enhanced != query,
            citations=citations or None,
        )

    async def generate_recommendations(self, preferences: List[str], location: Optional[str] = None) -> List[str]:
        """Suggest business categories from a user's preferences.

        Returns ``DEFAULT_RECOMMENDATIONS`` when unconfigured, when there are no
        preferences, or when the call fails.
        """
        if not self.is_configured:
            self._logger.info("Skipping recommendations: no Perplexity API key")
            return list(DEFAULT_RECOMMENDATIONS)
        if not preferences:
            return list(DEFAULT_RECOMMENDATIONS)

        messages = [
            {"role": "system", "content": prompts.RECOMMENDATIONS_SYSTEM_PROMPT},
            {"role": "user", "content": prompts.recommendations_user_prompt(preferences, location)},
        ]
        try:
            data = await self.chat(
                messages,
                model=prompts.RECOMMENDATIONS_MODEL,
                max_tokens=200,
                temperature=0.1,
                search_recency_filter="day",
                top_p=0.95,
            )
            content = self._content(data)
        except PerplexityError as e:
            self._logger.warning(f"Perplexity recommendations failed, using defaults: {e}")
            return list(DEFAULT_RECOMMENDATIONS)
        return parse_string_array(content)

    async def search_businesses(self, full_query: str) -> Tuple[List[Dict[str, Any]], List[str]]:
        """Ask Perplexity for tow businesses matching ``full_query``.

        Returns:
            A tuple of (raw business dicts, citation URLs).

        Raises:
            PerplexityError: When the call fails or the answer is not a JSON array.
        """
        messages = [
            {"role": "system", "content": prompts.BUSINESS_SEARCH_SYSTEM_PROMPT},
            {"role": "user", "content": prompts.business_search_user_prompt(full_query)},
        ]
        data = await self.chat(messages, model=prompts.BUSINESS_SEARCH_MODEL, temperature=0.1)
        content = self._content(data)
        try:
            businesses = json.loads(extract_json_text(content))
        except ValueError as e:
            raise PerplexityError("Failed to parse Perplexity response", details=content) from e
        if not isinstance(businesses, list):
            raise PerplexityError("Perplexity response is not a JSON array", details=content)
        sources = [str(url) for url in data.get("citations") or []]
        return [b for b in businesses if isinstance(b, dict)], sources
