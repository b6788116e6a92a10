import logging
from typing import Any, Dict, List, Optional

import httpx

from .. import config
from .nlu_config import get_default_tables
from .relevance_ranker import SearchHit

logger = logging.getLogger(__name__)

FALLBACK_RESULTS = 5
FALLBACK_TIMEOUT = 10.0


class WebSearchError(Exception):
    pass


def needs_web_search(query: Any) -> bool:
    """True when the query asks for market, price, finance or locality data."""
    if not isinstance(query, str):
        return False
    lowered = query.lower()
    return any(keyword.lower() in lowered for keyword in get_default_tables()["web_search_keywords"])


class WebSearchClient:
    """Google Custom Search client restricted to recent Indian results"""

    def __init__(self,
                 api_key: str = config.GOOGLE_API_KEY,
                 search_engine_id: str = config.GOOGLE_SEARCH_ENGINE_ID,
                 base_url: str = config.GOOGLE_SEARCH_URL,
                 timeout: float = config.SEARCH_TIMEOUT,
                 transport: Optional[httpx.BaseTransport] = None) -> None:
        self.api_key = api_key
        self.search_engine_id = config.search_engine_id_from(search_engine_id)
        self.base_url = base_url
        self.timeout = timeout
        self.transport = transport

    def _params(self, query: str, num: int) -> Dict[str, Any]:
        if not self.api_key or not self.search_engine_id:
            logger.error(
                f"[SEARCH] Missing configuration: GOOGLE_API_KEY={'Set' if self.api_key else 'Not Set'} "
                f"GOOGLE_SEARCH_ENGINE_ID={'Set' if self.search_engine_id else 'Not Set'}"
            )
            raise WebSearchError("GOOGLE_API_KEY or GOOGLE_SEARCH_ENGINE_ID is not set")
        return {"key": self.api_key, "cx": self.search_engine_id, "q": query, "num": num}

    def search(self, query: str, num: int = 10, timeout: Optional[float] = None,
               **extra_params: Any) -> List[Dict[str, Any]]:
        """
        Run one search request and return the raw result items.

        Raises:
            WebSearchError: missing credentials, HTTP error status, transport
                failure or a body that is not a JSON object
        """
        params = self._params(query, num)
        params.update(extra_params)

        try:
            with httpx.Client(timeout=timeout or self.timeout, transport=self.transport) as client:
                resp = client.get(self.base_url, params=params)
        except httpx.HTTPError as e:
            raise WebSearchError(f"Search request failed: {e}") from e

        if resp.status_code >= 400:
            raise WebSearchError(f"Search API error {resp.status_code}: {resp.text[:300]}")

        try:
            body = resp.json()
        except ValueError as e:
            raise WebSearchError(f"Search API returned a non-JSON body: {resp.text[:300]}") from e
        if not isinstance(body, dict):
            raise WebSearchError(f"Unexpected search response type: {type(body).__name__}")

        items = body.get("items") or []
        if not isinstance(items, list):
            return []
        return items

    def search_real_estate_info(self, query: str, enhanced_query: Optional[str] = None) -> List[SearchHit]:
        """
        Search real estate listings for a user query.

        Uses the enhanced query when given. If the request fails, retries once
        with a simplified query; a second failure yields an empty list.
        """
        primary = enhanced_query or query
        try:
            items = self.search(
                primary,
                num=10,
                cr="countryIN",
                gl="in",
                safe="active",
                sort="date",
                filter="1",
                dateRestrict="y1",
            )
            logger.info(f"[SEARCH] Found {len(items)} results")
            return [SearchHit.from_search_item(item) for item in items]
        except WebSearchError as e:
            logger.error(f"[SEARCH] Primary search failed: {e}")

        simplified = " ".join((query or "").split(" ")[:3]) + " real estate"
        try:
            items = self.search(simplified, num=FALLBACK_RESULTS, timeout=FALLBACK_TIMEOUT)
            logger.info(f"[SEARCH] Fallback search found {len(items)} results")
            return [SearchHit.from_search_item(item) for item in items]
        except WebSearchError as e:
            logger.error(f"[SEARCH] Fallback search also failed: {e}")
            return []
