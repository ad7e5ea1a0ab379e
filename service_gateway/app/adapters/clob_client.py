"""
Polymarket CLOB API client (orderbook, prices, trades, orders).
"""

from typing import Any, Dict, List, Optional

import httpx

from shared.metrics import MetricsCollector
from ..models import SignedOrder
from .base import UpstreamClient


class ClobClient(UpstreamClient):
    """Client for the Polymarket orderbook/trading API."""

    upstream_name = "clob"
    error_code = "CLOB_API_ERROR"
    unavailable_message = "CLOB service unavailable"

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        metrics: Optional[MetricsCollector] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(base_url, timeout, metrics=metrics, transport=transport)

    async def get_orderbook(self, token_id: str) -> Dict[str, Any]:
        return await self._request("GET", "/orderbook", params={"token_id": token_id})

    async def get_orderbook_depth(self, token_id: str, depth: int = 10) -> Dict[str, Any]:
        return await self._request("GET", "/orderbook", params={"token_id": token_id, "depth": depth})

    async def get_market_price(self, token_id: str) -> Dict[str, Any]:
        return await self._request("GET", "/price", params={"token_id": token_id})

    async def get_midpoint_price(self, token_id: str) -> float:
        payload = await self._request("GET", "/midpoint", params={"token_id": token_id})
        price = self._as_float(self._expect_field(payload, "/midpoint", "mid", "price"), "/midpoint")
        self.logger.info("Fetched midpoint price", token_id=token_id, price=price)
        return price

    async def get_spread(self, token_id: str) -> Dict[str, Any]:
        return await self._request("GET", "/spread", params={"token_id": token_id})

    async def list_trades(
        self,
        market: Optional[str] = None,
        asset_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        trades = await self._request("GET", "/trades", params={
            "market": market,
            "asset_id": asset_id,
            "limit": limit,
            "offset": offset,
        })
        trades = self._expect_list(trades, "/trades")
        self.logger.info("Fetched trades", count=len(trades))
        return trades

    async def list_recent_trades(self, token_id: str, limit: int = 20) -> List[Dict[str, Any]]:
        trades = await self._request("GET", "/trades", params={"asset_id": token_id, "limit": limit})
        return self._expect_list(trades, "/trades")

    async def list_user_orders(self, address: str) -> List[Dict[str, Any]]:
        orders = await self._request("GET", "/orders", params={"owner": address})
        orders = self._expect_list(orders, "/orders")
        self.logger.info("Fetched orders", address=address, count=len(orders))
        return orders

    async def get_order(self, order_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/orders/{order_id}")

    async def create_order(self, order: SignedOrder) -> Dict[str, Any]:
        result = await self._request("POST", "/order", json=order)
        self.logger.info("Created order", order_id=(result or {}).get("orderID"))
        return result

    async def cancel_order(self, order_id: str) -> Dict[str, Any]:
        result = await self._request("DELETE", "/order", json={"orderID": order_id})
        self.logger.info("Cancelled order", order_id=order_id)
        return result

    async def cancel_all_orders(
        self,
        address: str,
        market: Optional[str] = None,
        asset_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"address": address}
        if market:
            payload["market"] = market
        if asset_id:
            payload["asset_id"] = asset_id
        result = await self._request("DELETE", "/orders", json=payload)
        self.logger.info("Cancelled orders", address=address, cancelled=(result or {}).get("cancelled"))
        return result

    async def get_tick_size(self, token_id: str) -> str:
        payload = await self._request("GET", "/tick-size", params={"token_id": token_id})
        return self._expect_field(payload, "/tick-size", "tick_size", "minimum_tick_size")

    async def get_min_order_size(self, token_id: str) -> str:
        payload = await self._request("GET", "/min-order-size", params={"token_id": token_id})
        return self._expect_field(payload, "/min-order-size", "min_size")

    def _as_float(self, value: Any, path: str) -> float:
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            self.logger.error("Upstream returned a non-numeric price", path=path, value=value)
            raise self._invalid_response() from e
