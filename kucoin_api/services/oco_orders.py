"""
OCO Orders Service

One-cancels-the-other spot orders: a limit order paired with a stop-limit
order, where execution of either cancels the other.
"""

import logging
from datetime import datetime
from typing import Any

import pandas as pd

from ..exchanges.client import KucoinClient
from ..exchanges.pagination import auto_paginate, pages_to_frame
from ..models import OcoOrderRequest
from ..utils import add_datetime_column, require_id, require_ticker, to_frame, to_kucoin_time

logger = logging.getLogger(__name__)

OCO_ENDPOINT = "/api/v3/oco"


class OcoOrders:
    """Spot OCO order endpoints."""

    def __init__(self, kucoin: KucoinClient):
        self.kucoin = kucoin

    async def add_oco_order(
        self, order: OcoOrderRequest | None = None, **fields: Any
    ) -> pd.DataFrame:
        """Place an OCO order; returns a single row with orderId."""
        if order is None:
            order = OcoOrderRequest(**fields)
        logger.info(
            f"Placing OCO {order.side} order on {order.symbol} "
            f"(clientOid={order.client_oid})"
        )
        data = await self.kucoin.request("POST", f"{OCO_ENDPOINT}/order", body=order.to_body())
        return to_frame(data)

    async def cancel_oco_order(self, order_id: str) -> list[str]:
        """Cancel an OCO order by its exchange id; returns both leg ids."""
        data = await self.kucoin.request(
            "DELETE", f"{OCO_ENDPOINT}/order/{require_id(order_id, 'order_id')}"
        )
        logger.info(f"Cancelled OCO order {order_id}")
        return list((data or {}).get("cancelledOrderIds", []))

    async def cancel_oco_order_by_client_oid(self, client_oid: str) -> list[str]:
        data = await self.kucoin.request(
            "DELETE", f"{OCO_ENDPOINT}/client-order/{require_id(client_oid, 'client_oid')}"
        )
        logger.info(f"Cancelled OCO order clientOid={client_oid}")
        return list((data or {}).get("cancelledOrderIds", []))

    async def cancel_oco_orders(
        self, order_ids: list[str] | None = None, symbol: str | None = None
    ) -> list[str]:
        """Cancel OCO orders in bulk; all of them when no filter is given."""
        data = await self.kucoin.request(
            "DELETE",
            f"{OCO_ENDPOINT}/orders",
            query={
                "orderIds": ",".join(order_ids) if order_ids else None,
                "symbol": require_ticker(symbol) if symbol else None,
            },
        )
        cancelled = list((data or {}).get("cancelledOrderIds", []))
        logger.info(f"Cancelled {len(cancelled)} OCO order legs")
        return cancelled

    async def get_oco_order(self, order_id: str) -> pd.DataFrame:
        data = await self.kucoin.request(
            "GET", f"{OCO_ENDPOINT}/order/{require_id(order_id, 'order_id')}"
        )
        return add_datetime_column(to_frame(data), "orderTime")

    async def get_oco_order_by_client_oid(self, client_oid: str) -> pd.DataFrame:
        data = await self.kucoin.request(
            "GET", f"{OCO_ENDPOINT}/client-order/{require_id(client_oid, 'client_oid')}"
        )
        return add_datetime_column(to_frame(data), "orderTime")

    async def get_oco_order_detail(self, order_id: str) -> pd.DataFrame:
        """
        Both legs of an OCO order.

        Returns:
            One row per leg; the parent's orderId, symbol, clientOid, status
            and orderTime are repeated on every row with an ``oco_`` prefix
        """
        data = await self.kucoin.request(
            "GET", f"{OCO_ENDPOINT}/order/details/{require_id(order_id, 'order_id')}"
        )
        data = data or {}
        legs = to_frame(data.get("orders"))
        for field in ("orderId", "symbol", "clientOid", "status", "orderTime"):
            if field in data:
                legs[f"oco_{field}"] = data[field]
        return add_datetime_column(legs, "oco_orderTime")

    async def get_oco_orders(
        self,
        symbol: str | None = None,
        order_ids: list[str] | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        page_size: int = 50,
        max_pages: int | None = None,
    ) -> pd.DataFrame:
        """Active OCO orders, all pages aggregated into one table."""
        query = {
            "currentPage": 1,
            "pageSize": page_size,
            "symbol": require_ticker(symbol) if symbol else None,
            "orderIds": ",".join(order_ids) if order_ids else None,
            "startAt": to_kucoin_time(start) if start else None,
            "endAt": to_kucoin_time(end) if end else None,
        }

        async def fetch_page(q):
            return await self.kucoin.request("GET", f"{OCO_ENDPOINT}/orders", query=q)

        df = await auto_paginate(
            fetch_page, query=query, reduce=pages_to_frame, max_pages=max_pages
        )
        return add_datetime_column(df, "orderTime")
