"""
Orderbook, pricing and order management routes backed by the CLOB API.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query

from shared import responses
from shared.logging import get_logger
from ..adapters.clob_client import ClobClient
from ..domain.auth_middleware import AuthGate
from ..domain.validation import or_default
from ..models import CancelAllOrdersRequest, CancelOrderRequest, Identity

TRADES_DEFAULT_LIMIT = 20

logger = get_logger("gateway.routes.trading")


def build_trading_router(clob: ClobClient, auth_gate: AuthGate) -> APIRouter:
    router = APIRouter(prefix="/trading", tags=["trading"])
    optional_auth = [Depends(auth_gate.optional)]

    @router.get("/orderbook/{token_id}", dependencies=optional_auth)
    async def get_orderbook(token_id: str, depth: Optional[int] = Query(None, ge=1)):
        if depth is not None:
            orderbook = await clob.get_orderbook_depth(token_id, depth)
        else:
            orderbook = await clob.get_orderbook(token_id)
        return responses.success(orderbook)

    @router.get("/price/{token_id}", dependencies=optional_auth)
    async def get_price(token_id: str):
        return responses.success(await clob.get_market_price(token_id))

    @router.get("/midpoint/{token_id}", dependencies=optional_auth)
    async def get_midpoint(token_id: str):
        price = await clob.get_midpoint_price(token_id)
        return responses.success({"tokenId": token_id, "midpointPrice": price})

    @router.get("/spread/{token_id}", dependencies=optional_auth)
    async def get_spread(token_id: str):
        spread = await clob.get_spread(token_id)
        return responses.success({"tokenId": token_id, **(spread or {})})

    @router.get("/trades", dependencies=optional_auth)
    async def list_trades(
        market: Optional[str] = None,
        asset_id: Optional[str] = None,
        limit: Optional[int] = Query(None, ge=0),
        offset: Optional[int] = Query(None, ge=0),
    ):
        trades = await clob.list_trades(
            market=market,
            asset_id=asset_id,
            limit=or_default(limit, TRADES_DEFAULT_LIMIT),
            offset=or_default(offset, 0),
        )
        return responses.success({"count": len(trades), "trades": trades})

    @router.get("/trades/{token_id}", dependencies=optional_auth)
    async def list_recent_trades(token_id: str, limit: Optional[int] = Query(None, ge=0)):
        trades = await clob.list_recent_trades(token_id, or_default(limit, TRADES_DEFAULT_LIMIT))
        return responses.success({"count": len(trades), "tokenId": token_id, "trades": trades})

    @router.get("/tick-size/{token_id}", dependencies=optional_auth)
    async def get_tick_size(token_id: str):
        tick_size = await clob.get_tick_size(token_id)
        return responses.success({"tokenId": token_id, "tickSize": tick_size})

    @router.get("/min-order-size/{token_id}", dependencies=optional_auth)
    async def get_min_order_size(token_id: str):
        min_size = await clob.get_min_order_size(token_id)
        return responses.success({"tokenId": token_id, "minOrderSize": min_size})

    @router.get("/orders/{address}")
    async def list_user_orders(address: str, identity: Identity = Depends(auth_gate.require)):
        orders = await clob.list_user_orders(address)
        return responses.success({"count": len(orders), "address": address, "orders": orders})

    @router.get("/order/{order_id}")
    async def get_order(order_id: str, identity: Identity = Depends(auth_gate.require)):
        return responses.success(await clob.get_order(order_id))

    @router.post("/order")
    async def create_order(
        identity: Identity = Depends(auth_gate.require),
        signed_order: Dict[str, Any] = Body(...),
    ):
        result = await clob.create_order(signed_order)
        logger.info("Order created", user_id=identity.id, order_id=(result or {}).get("orderID"))
        return responses.created(result)

    @router.delete("/order")
    async def cancel_order(
        identity: Identity = Depends(auth_gate.require),
        payload: CancelOrderRequest = Body(...),
    ):
        result = await clob.cancel_order(payload.orderID)
        logger.info("Order cancelled", user_id=identity.id, order_id=payload.orderID)
        return responses.success(result)

    @router.delete("/orders")
    async def cancel_all_orders(
        identity: Identity = Depends(auth_gate.require),
        payload: CancelAllOrdersRequest = Body(...),
    ):
        result = await clob.cancel_all_orders(payload.address, payload.market, payload.asset_id)
        logger.info("Orders cancelled", user_id=identity.id, address=payload.address)
        return responses.success(result)

    return router
