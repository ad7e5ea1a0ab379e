"""
Read-only market data routes backed by the Gamma API.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from shared import responses
from ..adapters.gamma_client import GammaClient
from ..domain.auth_middleware import AuthGate
from ..domain.validation import or_default, parse_bool_flag
from ..models import EventQuery, MarketQuery

EVENTS_DEFAULT_LIMIT = 50
EVENTS_BY_TAG_DEFAULT_LIMIT = 200
MARKETS_DEFAULT_LIMIT = 50


def build_markets_router(gamma: GammaClient, auth_gate: AuthGate) -> APIRouter:
    router = APIRouter(
        prefix="/markets",
        tags=["markets"],
        dependencies=[Depends(auth_gate.optional)],
    )

    @router.get("/tags")
    async def list_tags():
        tags = await gamma.list_tags()
        return responses.success({"count": len(tags), "tags": tags})

    @router.get("/events")
    async def list_events(
        limit: Optional[int] = Query(None, ge=0),
        offset: Optional[int] = Query(None, ge=0),
        active: Optional[str] = None,
        closed: Optional[str] = None,
        archived: Optional[str] = None,
        ascending: Optional[str] = None,
        tag_id: Optional[str] = None,
    ):
        events = await gamma.list_events(EventQuery(
            limit=or_default(limit, EVENTS_DEFAULT_LIMIT),
            offset=or_default(offset, 0),
            active=parse_bool_flag(active),
            closed=parse_bool_flag(closed),
            archived=parse_bool_flag(archived),
            ascending=parse_bool_flag(ascending),
            tag_id=tag_id,
        ))
        return responses.success({"count": len(events), "events": events})

    @router.get("/events/tag/{tag_id}")
    async def list_events_by_tag(
        tag_id: str,
        limit: Optional[int] = Query(None, ge=0),
        offset: Optional[int] = Query(None, ge=0),
        active: Optional[str] = None,
        closed: Optional[str] = None,
        archived: Optional[str] = None,
    ):
        events = await gamma.list_events_by_tag(tag_id, EventQuery(
            limit=or_default(limit, EVENTS_BY_TAG_DEFAULT_LIMIT),
            offset=or_default(offset, 0),
            active=parse_bool_flag(active),
            closed=parse_bool_flag(closed),
            archived=parse_bool_flag(archived),
        ))
        return responses.success({"count": len(events), "tagId": tag_id, "events": events})

    @router.get("/events/{slug}")
    async def get_event(slug: str):
        return responses.success(await gamma.get_event_by_slug(slug))

    @router.get("")
    async def list_markets(
        limit: Optional[int] = Query(None, ge=0),
        offset: Optional[int] = Query(None, ge=0),
        active: Optional[str] = None,
        closed: Optional[str] = None,
        archived: Optional[str] = None,
        tag: Optional[str] = None,
    ):
        markets = await gamma.list_markets(MarketQuery(
            limit=or_default(limit, MARKETS_DEFAULT_LIMIT),
            offset=or_default(offset, 0),
            active=parse_bool_flag(active),
            closed=parse_bool_flag(closed),
            archived=parse_bool_flag(archived),
            tag=tag,
        ))
        return responses.success({"count": len(markets), "markets": markets})

    @router.get("/featured")
    async def featured_markets():
        markets = await gamma.get_featured_markets()
        return responses.success({"count": len(markets), "markets": markets})

    @router.get("/trending")
    async def trending_markets():
        markets = await gamma.get_trending_markets()
        return responses.success({"count": len(markets), "markets": markets})

    @router.get("/search")
    async def search_markets(q: str = Query(..., min_length=1)):
        markets = await gamma.search_markets(q)
        return responses.success({"count": len(markets), "query": q, "markets": markets})

    @router.get("/slug/{slug}")
    async def get_market_by_slug(slug: str):
        return responses.success(await gamma.get_market_by_slug(slug))

    @router.get("/{market_id}")
    async def get_market(market_id: str):
        return responses.success(await gamma.get_market_by_id(market_id))

    return router
