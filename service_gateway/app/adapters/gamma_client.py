"""
Polymarket Gamma API client (events, markets, tags).
"""

from typing import Any, Dict, List, Optional

import httpx

from shared.metrics import MetricsCollector
from ..models import EventQuery, MarketQuery
from .base import UpstreamClient


class GammaClient(UpstreamClient):
    """Client for the Polymarket market-data API."""

    upstream_name = "gamma"
    error_code = "POLYMARKET_API_ERROR"
    rate_limit_message = "Polymarket API rate limit exceeded"
    server_error_message = "Polymarket API server error"
    timeout_message = "Polymarket API request timeout"
    unavailable_message = "Polymarket API service unavailable"

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        metrics: Optional[MetricsCollector] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(base_url, timeout, metrics=metrics, transport=transport)

    async def list_events(self, query: EventQuery) -> List[Dict[str, Any]]:
        events = await self._request("GET", "/events", params={
            "limit": query.limit,
            "offset": query.offset,
            "active": query.active,
            "closed": query.closed,
            "archived": query.archived,
            "ascending": query.ascending,
            "tag_id": query.tag_id,
        })
        events = self._expect_list(events, "/events")
        self.logger.info("Fetched events", count=len(events))
        return events

    async def get_event_by_slug(self, slug: str) -> Dict[str, Any]:
        event = await self._request("GET", f"/events/{slug}")
        self.logger.info("Fetched event", slug=slug)
        return event

    async def list_markets(self, query: MarketQuery) -> List[Dict[str, Any]]:
        markets = await self._request("GET", "/markets", params={
            "limit": query.limit,
            "offset": query.offset,
            "active": query.active,
            "closed": query.closed,
            "archived": query.archived,
            "tag": query.tag,
        })
        markets = self._expect_list(markets, "/markets")
        self.logger.info("Fetched markets", count=len(markets))
        return markets

    async def get_market_by_slug(self, slug: str) -> Dict[str, Any]:
        return await self._request("GET", f"/markets/{slug}")

    async def get_market_by_id(self, market_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/markets/id/{market_id}")

    async def search_markets(self, query: str) -> List[Dict[str, Any]]:
        markets = await self._request("GET", "/markets/search", params={"query": query})
        markets = self._expect_list(markets, "/markets/search")
        self.logger.info("Searched markets", query=query, count=len(markets))
        return markets

    async def get_featured_markets(self) -> List[Dict[str, Any]]:
        markets = await self._request("GET", "/markets/featured")
        return self._expect_list(markets, "/markets/featured")

    async def get_trending_markets(self) -> List[Dict[str, Any]]:
        markets = await self._request("GET", "/markets/trending")
        return self._expect_list(markets, "/markets/trending")

    async def list_tags(self) -> List[Dict[str, Any]]:
        tags = await self._request("GET", "/tags")
        tags = self._expect_list(tags, "/tags")
        self.logger.info("Fetched tags", count=len(tags))
        return tags

    async def list_events_by_tag(self, tag_id: str, query: EventQuery) -> List[Dict[str, Any]]:
        events = await self._request("GET", "/events", params={
            "tag_id": tag_id,
            "limit": query.limit,
            "offset": query.offset,
            "active": query.active,
            "closed": query.closed,
            "archived": query.archived,
        })
        events = self._expect_list(events, "/events")
        self.logger.info("Fetched events for tag", tag_id=tag_id, count=len(events))
        return events
