"""
Spot Orders Service

High-frequency (HF) spot order placement, cancellation and queries.

API Documentation: https://www.kucoin.com/docs-new/rest/spot-trading/orders
"""

import logging
from datetime import datetime
from typing import Any, Literal

import pandas as pd

from ..exchanges.client import KucoinClient
from ..exchanges.pagination import cursor_paginate, pages_to_frame
from ..models import OrderRequest
from ..utils import add_datetime_column, require_id, require_ticker, to_frame, to_kucoin_time

logger = logging.getLogger(__name__)

ORDERS_ENDPOINT = "/api/v1/hf/orders"

# KuCoin accepts at most this many orders per batch
MAX_BATCH_ORDERS = 20


def _as_order(order: OrderRequest | dict[str, Any]) -> OrderRequest:
    if isinstance(order, OrderRequest):
        return order
    return OrderRequest(**order)


def _check_limit(limit: int) -> int:
    if not 1 <= limit <= 100:
        raise ValueError("limit must be between 1 and 100")
    return limit


class SpotOrders:
    """Spot HF order endpoints."""

    def __init__(self, kucoin: KucoinClient):
        self.kucoin = kucoin

    async def add_order(self, order: OrderRequest | None = None, **fields: Any) -> pd.DataFrame:
        """
        Place a spot order.

        Pass either an OrderRequest or its fields as keyword arguments.

        Returns:
            Single-row DataFrame with orderId and clientOid
        """
        if order is None:
            order = OrderRequest(**fields)
        logger.info(
            f"Placing {order.type} {order.side} order on {order.symbol} "
            f"(clientOid={order.client_oid})"
        )
        data = await self.kucoin.request("POST", ORDERS_ENDPOINT, body=order.to_body())
        return to_frame(data)

    async def add_order_test(self, order: OrderRequest | None = None, **fields: Any) -> pd.DataFrame:
        """Validate an order on the exchange without placing it."""
        if order is None:
            order = OrderRequest(**fields)
        data = await self.kucoin.request("POST", f"{ORDERS_ENDPOINT}/test", body=order.to_body())
        return to_frame(data)

    async def add_order_batch(self, orders: list[OrderRequest | dict[str, Any]]) -> pd.DataFrame:
        """
        Place up to 20 orders in one request.

        Every order is validated before anything is sent.

        Returns:
            One row per order with orderId, clientOid, success and failMsg
        """
        if not 1 <= len(orders) <= MAX_BATCH_ORDERS:
            raise ValueError(f"A batch holds 1 to {MAX_BATCH_ORDERS} orders")
        order_list = [_as_order(order).to_body() for order in orders]
        logger.info(f"Placing batch of {len(order_list)} orders")
        data = await self.kucoin.request(
            "POST", f"{ORDERS_ENDPOINT}/multi", body={"orderList": order_list}
        )
        return to_frame(data)

    async def cancel_order(self, order_id: str, symbol: str) -> pd.DataFrame:
        """Cancel one order by its exchange id."""
        data = await self.kucoin.request(
            "DELETE",
            f"{ORDERS_ENDPOINT}/{require_id(order_id, 'order_id')}",
            query={"symbol": require_ticker(symbol)},
        )
        logger.info(f"Cancelled order {order_id} on {symbol}")
        return to_frame(data)

    async def cancel_order_by_client_oid(self, client_oid: str, symbol: str) -> pd.DataFrame:
        """Cancel one order by the clientOid it was placed with."""
        data = await self.kucoin.request(
            "DELETE",
            f"{ORDERS_ENDPOINT}/client-order/{require_id(client_oid, 'client_oid')}",
            query={"symbol": require_ticker(symbol)},
        )
        logger.info(f"Cancelled order clientOid={client_oid} on {symbol}")
        return to_frame(data)

    async def cancel_partial_order(
        self, order_id: str, symbol: str, cancel_size: str
    ) -> pd.DataFrame:
        """Reduce an open order by ``cancel_size``, leaving the rest on the book."""
        data = await self.kucoin.request(
            "DELETE",
            f"{ORDERS_ENDPOINT}/cancel/{require_id(order_id, 'order_id')}",
            query={"symbol": require_ticker(symbol), "cancelSize": cancel_size},
        )
        logger.info(f"Cancelled {cancel_size} of order {order_id} on {symbol}")
        return to_frame(data)

    async def cancel_all_orders(self, symbol: str) -> str:
        """Cancel every open order on a symbol."""
        data = await self.kucoin.request(
            "DELETE", ORDERS_ENDPOINT, query={"symbol": require_ticker(symbol)}
        )
        logger.info(f"Cancelled all orders on {symbol}")
        return data

    async def cancel_all_orders_all_symbols(self) -> pd.DataFrame:
        """Cancel every open order on every symbol."""
        data = await self.kucoin.request("DELETE", f"{ORDERS_ENDPOINT}/cancelAll")
        logger.info("Cancelled all orders on all symbols")
        data = data or {}
        rows = [
            {"symbol": symbol, "success": True, "error": None}
            for symbol in data.get("succeedSymbols", [])
        ] + [
            {"symbol": failed.get("symbol"), "success": False, "error": failed.get("error")}
            for failed in data.get("failedSymbols", [])
        ]
        return pd.DataFrame(rows, columns=["symbol", "success", "error"])

    async def get_order(self, order_id: str, symbol: str) -> pd.DataFrame:
        """Details of one order."""
        data = await self.kucoin.request(
            "GET",
            f"{ORDERS_ENDPOINT}/{require_id(order_id, 'order_id')}",
            query={"symbol": require_ticker(symbol)},
        )
        return add_datetime_column(to_frame(data), "createdAt")

    async def get_order_by_client_oid(self, client_oid: str, symbol: str) -> pd.DataFrame:
        """Details of one order, looked up by clientOid."""
        data = await self.kucoin.request(
            "GET",
            f"{ORDERS_ENDPOINT}/client-order/{require_id(client_oid, 'client_oid')}",
            query={"symbol": require_ticker(symbol)},
        )
        return add_datetime_column(to_frame(data), "createdAt")

    async def get_open_orders(self, symbol: str) -> pd.DataFrame:
        """All active orders on a symbol."""
        data = await self.kucoin.request(
            "GET",
            f"{ORDERS_ENDPOINT}/active",
            query={"symbol": require_ticker(symbol)},
        )
        return add_datetime_column(to_frame(data), "createdAt")

    async def get_symbols_with_open_orders(self) -> list[str]:
        """Symbols that currently have active orders."""
        data = await self.kucoin.request("GET", f"{ORDERS_ENDPOINT}/active/symbols")
        return list((data or {}).get("symbols", []))

    async def get_closed_orders(
        self,
        symbol: str,
        side: Literal["buy", "sell"] | None = None,
        order_type: Literal["limit", "market"] | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = 20,
        max_pages: int | None = None,
    ) -> pd.DataFrame:
        """
        Filled and cancelled orders of a symbol, newest first.

        Pages are chained through the ``lastId`` cursor until the exchange
        returns an empty page or ``max_pages`` is reached.

        Args:
            symbol: Trading pair, e.g. "BTC-USDT"
            side: Only orders of this side
            order_type: Only orders of this type
            start: Aware datetime lower bound
            end: Aware datetime upper bound
            limit: Orders per page (1 to 100)
            max_pages: Stop after this many pages
        """
        query = {
            "symbol": require_ticker(symbol),
            "side": side,
            "type": order_type,
            "startAt": to_kucoin_time(start) if start else None,
            "endAt": to_kucoin_time(end) if end else None,
            "limit": _check_limit(limit),
        }

        async def fetch_page(q):
            return await self.kucoin.request("GET", f"{ORDERS_ENDPOINT}/done", query=q)

        df = await cursor_paginate(
            fetch_page, query=query, reduce=pages_to_frame, max_pages=max_pages
        )
        df = add_datetime_column(df, "createdAt")
        return add_datetime_column(df, "lastUpdatedAt")

    async def get_trade_history(
        self,
        symbol: str | None = None,
        order_id: str | None = None,
        side: Literal["buy", "sell"] | None = None,
        order_type: Literal["limit", "market"] | None = None,
        last_id: int | None = None,
        limit: int = 20,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> pd.DataFrame:
        """
        One batch of fills, selected either by order or by symbol.

        When ``order_id`` is given the symbol, side and type filters are not sent.
        Pass the previous batch's last fill id as ``last_id`` for the next batch.
        """
        if order_id is not None:
            query: dict[str, Any] = {"orderId": require_id(order_id, "order_id")}
        elif symbol is not None:
            query = {"symbol": require_ticker(symbol), "side": side, "type": order_type}
        else:
            raise ValueError("Either symbol or order_id is required")
        query.update({
            "lastId": last_id,
            "limit": _check_limit(limit),
            "startAt": to_kucoin_time(start) if start else None,
            "endAt": to_kucoin_time(end) if end else None,
        })

        data = await self.kucoin.request("GET", "/api/v1/hf/fills", query=query)
        return add_datetime_column(to_frame((data or {}).get("items")), "createdAt")
