"""
Polymarket comments API client.
"""

from typing import Any, Dict, List, Optional

import httpx

from shared.metrics import MetricsCollector
from ..models import CommentsQuery
from .base import UpstreamClient


class CommentsClient(UpstreamClient):
    """Client for the comments endpoint of the Polymarket market-data API."""

    upstream_name = "comments"
    error_code = "COMMENTS_API_ERROR"
    unavailable_message = "Polymarket comments service unavailable"

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        metrics: Optional[MetricsCollector] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(base_url, timeout, metrics=metrics, transport=transport)

    async def list_comments(self, query: CommentsQuery) -> List[Dict[str, Any]]:
        comments = await self._request("GET", "/comments", params={
            "limit": query.limit,
            "offset": query.offset,
            "order": query.order,
            "ascending": query.ascending,
            "parent_entity_type": query.parent_entity_type,
            "parent_entity_id": query.parent_entity_id,
            "get_positions": query.get_positions,
            "holders_only": query.holders_only,
        })
        comments = self._expect_list(comments, "/comments")
        self.logger.info("Fetched comments", count=len(comments))
        return comments
