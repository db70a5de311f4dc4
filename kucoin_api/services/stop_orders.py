"""
Stop Orders Service

Conditional spot orders that are placed once the market reaches a trigger
price, plus their cancellation and queries.
"""

import logging
from datetime import datetime
from typing import Any

import pandas as pd

from ..exchanges.client import KucoinClient
from ..exchanges.pagination import auto_paginate, pages_to_frame
from ..models import StopOrderRequest
from ..utils import add_datetime_column, require_id, require_ticker, to_frame, to_kucoin_time

logger = logging.getLogger(__name__)

STOP_ORDER_ENDPOINT = "/api/v1/stop-order"


class StopOrders:
    """Spot stop order endpoints."""

    def __init__(self, kucoin: KucoinClient):
        self.kucoin = kucoin

    async def add_stop_order(
        self, order: StopOrderRequest | None = None, **fields: Any
    ) -> pd.DataFrame:
        """
        Place a stop order.

        Pass either a StopOrderRequest or its fields as keyword arguments.

        Returns:
            Single-row DataFrame with orderId and clientOid
        """
        if order is None:
            order = StopOrderRequest(**fields)
        logger.info(
            f"Placing {order.type} {order.side} stop order on {order.symbol} "
            f"at {order.stop_price} (clientOid={order.client_oid})"
        )
        data = await self.kucoin.request("POST", STOP_ORDER_ENDPOINT, body=order.to_body())
        return to_frame(data)

    async def cancel_stop_order(self, order_id: str) -> list[str]:
        """Cancel a stop order by its exchange id; returns the cancelled ids."""
        data = await self.kucoin.request(
            "DELETE", f"{STOP_ORDER_ENDPOINT}/{require_id(order_id, 'order_id')}"
        )
        logger.info(f"Cancelled stop order {order_id}")
        return list((data or {}).get("cancelledOrderIds", []))

    async def cancel_stop_order_by_client_oid(
        self, client_oid: str, symbol: str | None = None
    ) -> pd.DataFrame:
        """Cancel a stop order by its clientOid."""
        data = await self.kucoin.request(
            "DELETE",
            f"{STOP_ORDER_ENDPOINT}/cancelOrderByClientOid",
            query={
                "clientOid": require_id(client_oid, "client_oid"),
                "symbol": require_ticker(symbol) if symbol else None,
            },
        )
        logger.info(f"Cancelled stop order clientOid={client_oid}")
        return to_frame(data)

    async def cancel_stop_orders(
        self,
        symbol: str | None = None,
        order_ids: list[str] | None = None,
        trade_type: str | None = None,
    ) -> list[str]:
        """Cancel stop orders in bulk, optionally filtered by symbol or ids."""
        data = await self.kucoin.request(
            "DELETE",
            f"{STOP_ORDER_ENDPOINT}/cancel",
            query={
                "symbol": require_ticker(symbol) if symbol else None,
                "tradeType": trade_type,
                "orderIds": ",".join(order_ids) if order_ids else None,
            },
        )
        cancelled = list((data or {}).get("cancelledOrderIds", []))
        logger.info(f"Cancelled {len(cancelled)} stop orders")
        return cancelled

    async def get_stop_order(self, order_id: str) -> pd.DataFrame:
        data = await self.kucoin.request(
            "GET", f"{STOP_ORDER_ENDPOINT}/{require_id(order_id, 'order_id')}"
        )
        return add_datetime_column(to_frame(data), "createdAt")

    async def get_stop_order_by_client_oid(
        self, client_oid: str, symbol: str | None = None
    ) -> pd.DataFrame:
        data = await self.kucoin.request(
            "GET",
            f"{STOP_ORDER_ENDPOINT}/queryOrderByClientOid",
            query={
                "clientOid": require_id(client_oid, "client_oid"),
                "symbol": require_ticker(symbol) if symbol else None,
            },
        )
        return add_datetime_column(to_frame(data), "createdAt")

    async def get_stop_orders(
        self,
        symbol: str | None = None,
        side: str | None = None,
        order_type: str | None = None,
        trade_type: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        page_size: int = 50,
        max_pages: int | None = None,
    ) -> pd.DataFrame:
        """Untriggered stop orders, all pages aggregated into one table."""
        query = {
            "currentPage": 1,
            "pageSize": page_size,
            "symbol": require_ticker(symbol) if symbol else None,
            "side": side,
            "type": order_type,
            "tradeType": trade_type,
            "startAt": to_kucoin_time(start) if start else None,
            "endAt": to_kucoin_time(end) if end else None,
        }

        async def fetch_page(q):
            return await self.kucoin.request("GET", STOP_ORDER_ENDPOINT, query=q)

        df = await auto_paginate(
            fetch_page, query=query, reduce=pages_to_frame, max_pages=max_pages
        )
        return add_datetime_column(df, "createdAt")
