"""
Unit tests for the Polymarket upstream clients.
"""

import json

import httpx
import pytest

from service_gateway.app.adapters import ClobClient, CommentsClient, GammaClient
from service_gateway.app.models import CommentsQuery, EventQuery, MarketQuery
from shared.errors import ErrorKind, GatewayError
from shared.metrics import MetricsCollector


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler):
        self.requests = []

        def record(request):
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


def json_response(payload, status_code=200):
    return lambda request: httpx.Response(status_code, json=payload)


class TestGammaClient:
    """Test cases for GammaClient."""

    @pytest.mark.asyncio
    async def test_list_events_forwards_explicit_zero(self):
        transport = RecordingTransport(json_response([{"id": "1"}]))
        client = GammaClient("https://gamma.test", transport=transport)

        events = await client.list_events(EventQuery(limit=0, offset=0, active=True))

        assert events == [{"id": "1"}]
        params = transport.requests[0].url.params
        assert transport.requests[0].url.path == "/events"
        assert params["limit"] == "0"
        assert params["offset"] == "0"
        assert params["active"] == "true"
        assert "closed" not in params
        assert "tag_id" not in params
        await client.close()

    @pytest.mark.asyncio
    async def test_list_markets_renders_false_flags(self):
        transport = RecordingTransport(json_response([]))
        client = GammaClient("https://gamma.test", transport=transport)

        await client.list_markets(MarketQuery(limit=50, offset=0, closed=False, tag="politics"))

        params = transport.requests[0].url.params
        assert params["closed"] == "false"
        assert params["tag"] == "politics"
        assert "active" not in params
        await client.close()

    @pytest.mark.asyncio
    async def test_entity_paths(self):
        transport = RecordingTransport(json_response({"id": "x"}))
        client = GammaClient("https://gamma.test", transport=transport)

        await client.get_event_by_slug("us-election")
        await client.get_market_by_slug("will-it-rain")
        await client.get_market_by_id("12345")

        paths = [request.url.path for request in transport.requests]
        assert paths == ["/events/us-election", "/markets/will-it-rain", "/markets/id/12345"]
        await client.close()

    @pytest.mark.asyncio
    async def test_search_uses_query_parameter(self):
        transport = RecordingTransport(json_response([]))
        client = GammaClient("https://gamma.test", transport=transport)

        await client.search_markets("bitcoin")

        request = transport.requests[0]
        assert request.url.path == "/markets/search"
        assert request.url.params["query"] == "bitcoin"
        await client.close()

    @pytest.mark.asyncio
    async def test_events_by_tag(self):
        transport = RecordingTransport(json_response([]))
        client = GammaClient("https://gamma.test", transport=transport)

        await client.list_events_by_tag("21", EventQuery(limit=200, offset=0))

        params = transport.requests[0].url.params
        assert params["tag_id"] == "21"
        assert params["limit"] == "200"
        await client.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code, kind, expected_status, message", [
        (404, ErrorKind.NOT_FOUND, 404, "Resource not found"),
        (429, ErrorKind.RATE_LIMIT_EXCEEDED, 429, "Polymarket API rate limit exceeded"),
        (500, ErrorKind.SERVER_ERROR, 500, "Polymarket API server error"),
        (502, ErrorKind.SERVICE_UNAVAILABLE, 503, "Polymarket API service unavailable"),
        (503, ErrorKind.SERVICE_UNAVAILABLE, 503, "Polymarket API service unavailable"),
    ])
    async def test_error_status_translation(self, status_code, kind, expected_status, message):
        client = GammaClient("https://gamma.test", transport=httpx.MockTransport(json_response({}, status_code)))

        with pytest.raises(GatewayError) as exc_info:
            await client.get_trending_markets()

        assert exc_info.value.kind is kind
        assert exc_info.value.status_code == expected_status
        assert exc_info.value.message == message
        await client.close()

    @pytest.mark.asyncio
    async def test_bad_request_keeps_upstream_message(self):
        transport = httpx.MockTransport(json_response({"message": "invalid tag"}, 400))
        client = GammaClient("https://gamma.test", transport=transport)

        with pytest.raises(GatewayError) as exc_info:
            await client.list_tags()

        assert exc_info.value.kind is ErrorKind.BAD_REQUEST
        assert exc_info.value.message == "invalid tag"
        await client.close()

    @pytest.mark.asyncio
    async def test_unmapped_status_keeps_upstream_status(self):
        client = GammaClient("https://gamma.test", transport=httpx.MockTransport(json_response({}, 418)))

        with pytest.raises(GatewayError) as exc_info:
            await client.list_tags()

        assert exc_info.value.kind is ErrorKind.UPSTREAM
        assert exc_info.value.status_code == 418
        assert exc_info.value.code == "POLYMARKET_API_ERROR"
        await client.close()

    @pytest.mark.asyncio
    async def test_timeout_maps_to_504(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = GammaClient("https://gamma.test", transport=httpx.MockTransport(handler))

        with pytest.raises(GatewayError) as exc_info:
            await client.get_featured_markets()

        assert exc_info.value.kind is ErrorKind.TIMEOUT
        assert exc_info.value.status_code == 504
        await client.close()

    @pytest.mark.asyncio
    async def test_invalid_json_maps_to_502(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"<html>"))
        client = GammaClient("https://gamma.test", transport=transport)

        with pytest.raises(GatewayError) as exc_info:
            await client.list_tags()

        assert exc_info.value.status_code == 502
        await client.close()

    @pytest.mark.asyncio
    async def test_empty_body_for_list_maps_to_502(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b""))
        client = GammaClient("https://gamma.test", transport=transport)

        with pytest.raises(GatewayError) as exc_info:
            await client.list_tags()

        assert exc_info.value.kind is ErrorKind.UPSTREAM
        assert exc_info.value.status_code == 502
        assert exc_info.value.code == "POLYMARKET_API_ERROR"
        assert exc_info.value.message == "gamma returned an invalid response"
        await client.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{"data": []}, "markets", 42])
    async def test_non_list_markets_maps_to_502(self, payload):
        client = GammaClient("https://gamma.test", transport=httpx.MockTransport(json_response(payload)))

        with pytest.raises(GatewayError) as exc_info:
            await client.list_markets(MarketQuery())

        assert exc_info.value.status_code == 502
        await client.close()

    @pytest.mark.asyncio
    async def test_upstream_calls_are_counted(self):
        metrics = MetricsCollector("test")
        client = GammaClient("https://gamma.test", metrics=metrics, transport=httpx.MockTransport(json_response([])))

        await client.list_tags()
        await client.list_tags()

        assert metrics.sample_value(
            "upstream_requests_total", {"upstream": "gamma", "outcome": "200"}
        ) == 2.0
        await client.close()


class TestClobClient:
    """Test cases for ClobClient."""

    @pytest.mark.asyncio
    async def test_orderbook_with_depth(self):
        transport = RecordingTransport(json_response({"bids": [], "asks": []}))
        client = ClobClient("https://clob.test", transport=transport)

        await client.get_orderbook_depth("tok-1", 5)

        request = transport.requests[0]
        assert request.url.path == "/orderbook"
        assert request.url.params["token_id"] == "tok-1"
        assert request.url.params["depth"] == "5"
        await client.close()

    @pytest.mark.asyncio
    async def test_midpoint_is_numeric(self):
        client = ClobClient("https://clob.test", transport=httpx.MockTransport(json_response({"price": "0.535"})))

        assert await client.get_midpoint_price("tok-1") == pytest.approx(0.535)
        await client.close()

    @pytest.mark.asyncio
    async def test_midpoint_reads_mid_field(self):
        client = ClobClient("https://clob.test", transport=httpx.MockTransport(json_response({"mid": "0.535"})))

        assert await client.get_midpoint_price("tok-1") == pytest.approx(0.535)
        await client.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{}, {"mid": "n/a"}, ["0.5"]])
    async def test_midpoint_with_unexpected_payload_maps_to_502(self, payload):
        client = ClobClient("https://clob.test", transport=httpx.MockTransport(json_response(payload)))

        with pytest.raises(GatewayError) as exc_info:
            await client.get_midpoint_price("tok-1")

        assert exc_info.value.kind is ErrorKind.UPSTREAM
        assert exc_info.value.status_code == 502
        assert exc_info.value.code == "CLOB_API_ERROR"
        await client.close()

    @pytest.mark.asyncio
    async def test_tick_size_without_field_maps_to_502(self):
        client = ClobClient("https://clob.test", transport=httpx.MockTransport(json_response({"token_id": "tok-1"})))

        with pytest.raises(GatewayError) as exc_info:
            await client.get_tick_size("tok-1")

        assert exc_info.value.status_code == 502
        await client.close()

    @pytest.mark.asyncio
    async def test_empty_trades_body_maps_to_502(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b""))
        client = ClobClient("https://clob.test", transport=transport)

        with pytest.raises(GatewayError) as exc_info:
            await client.list_trades(market="0xmarket")

        assert exc_info.value.status_code == 502
        assert exc_info.value.code == "CLOB_API_ERROR"
        await client.close()

    @pytest.mark.asyncio
    async def test_tick_and_min_order_size(self):
        def handler(request):
            if request.url.path == "/tick-size":
                return httpx.Response(200, json={"tick_size": "0.01"})
            return httpx.Response(200, json={"min_size": "5"})

        client = ClobClient("https://clob.test", transport=httpx.MockTransport(handler))

        assert await client.get_tick_size("tok-1") == "0.01"
        assert await client.get_min_order_size("tok-1") == "5"
        await client.close()

    @pytest.mark.asyncio
    async def test_create_order_forwards_signed_order_unchanged(self):
        order = {
            "order": {"salt": 123, "maker": "0xabc", "signature": "0xsig"},
            "owner": "api-key",
            "orderType": "GTC",
        }
        transport = RecordingTransport(json_response({"success": True, "orderID": "0x1"}))
        client = ClobClient("https://clob.test", transport=transport)

        result = await client.create_order(order)

        request = transport.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/order"
        assert json.loads(request.content) == order
        assert result["orderID"] == "0x1"
        await client.close()

    @pytest.mark.asyncio
    async def test_cancel_order_sends_body_with_delete(self):
        transport = RecordingTransport(json_response({"canceled": ["0x1"]}))
        client = ClobClient("https://clob.test", transport=transport)

        await client.cancel_order("0x1")

        request = transport.requests[0]
        assert request.method == "DELETE"
        assert json.loads(request.content) == {"orderID": "0x1"}
        await client.close()

    @pytest.mark.asyncio
    async def test_cancel_all_orders_omits_unset_filters(self):
        transport = RecordingTransport(json_response({"cancelled": 3}))
        client = ClobClient("https://clob.test", transport=transport)

        await client.cancel_all_orders("0xowner", market="0xmarket")

        assert json.loads(transport.requests[0].content) == {"address": "0xowner", "market": "0xmarket"}
        await client.close()

    @pytest.mark.asyncio
    async def test_user_orders_by_owner(self):
        transport = RecordingTransport(json_response([]))
        client = ClobClient("https://clob.test", transport=transport)

        await client.list_user_orders("0xowner")

        assert transport.requests[0].url.params["owner"] == "0xowner"
        await client.close()

    @pytest.mark.asyncio
    async def test_connection_failure_maps_to_503(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = ClobClient("https://clob.test", transport=httpx.MockTransport(handler))

        with pytest.raises(GatewayError) as exc_info:
            await client.get_spread("tok-1")

        assert exc_info.value.kind is ErrorKind.SERVICE_UNAVAILABLE
        assert exc_info.value.status_code == 503
        assert exc_info.value.message == "CLOB service unavailable"
        await client.close()


class TestCommentsClient:
    """Test cases for CommentsClient."""

    @pytest.mark.asyncio
    async def test_list_comments_params(self):
        transport = RecordingTransport(json_response([{"id": 1}, {"id": 2}]))
        client = CommentsClient("https://gamma.test", transport=transport)

        comments = await client.list_comments(CommentsQuery(
            limit=10,
            parent_entity_type="Event",
            parent_entity_id=42,
            holders_only=True,
        ))

        assert len(comments) == 2
        params = transport.requests[0].url.params
        assert transport.requests[0].url.path == "/comments"
        assert params["limit"] == "10"
        assert params["parent_entity_type"] == "Event"
        assert params["parent_entity_id"] == "42"
        assert params["holders_only"] == "true"
        assert "offset" not in params
        await client.close()

    @pytest.mark.asyncio
    async def test_unmapped_status_uses_comments_code(self):
        client = CommentsClient("https://gamma.test", transport=httpx.MockTransport(json_response({}, 422)))

        with pytest.raises(GatewayError) as exc_info:
            await client.list_comments(CommentsQuery())

        assert exc_info.value.code == "COMMENTS_API_ERROR"
        assert exc_info.value.status_code == 422
        await client.close()

    @pytest.mark.asyncio
    async def test_non_list_comments_maps_to_502(self):
        client = CommentsClient("https://gamma.test", transport=httpx.MockTransport(json_response({"comments": []})))

        with pytest.raises(GatewayError) as exc_info:
            await client.list_comments(CommentsQuery())

        assert exc_info.value.status_code == 502
        assert exc_info.value.code == "COMMENTS_API_ERROR"
        await client.close()
