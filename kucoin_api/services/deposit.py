"""
Deposit Service

Deposit addresses and deposit history.
"""

import logging
from datetime import datetime

import pandas as pd

from ..exchanges.client import KucoinClient
from ..exchanges.pagination import auto_paginate, pages_to_frame
from ..utils import add_datetime_column, to_frame, to_kucoin_time

logger = logging.getLogger(__name__)

DEPOSIT_STATUSES = ("PROCESSING", "SUCCESS", "FAILURE")


class Deposits:
    """Deposit endpoints."""

    def __init__(self, kucoin: KucoinClient):
        self.kucoin = kucoin

    async def add_deposit_address(
        self, currency: str, chain: str | None = None, to: str | None = None
    ) -> pd.DataFrame:
        """Create a deposit address for a currency."""
        body = {"currency": currency}
        if chain:
            body["chain"] = chain
        if to:
            body["to"] = to
        data = await self.kucoin.request(
            "POST", "/api/v3/deposit-address/create", body=body
        )
        return to_frame(data)

    async def get_deposit_addresses(
        self, currency: str, chain: str | None = None
    ) -> pd.DataFrame:
        """All deposit addresses of a currency."""
        data = await self.kucoin.request(
            "GET",
            "/api/v3/deposit-addresses",
            query={"currency": currency, "chain": chain},
        )
        return to_frame(data)

    async def get_deposit_history(
        self,
        currency: str | None = None,
        status: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        page_size: int = 50,
        max_pages: int | None = None,
    ) -> pd.DataFrame:
        """Deposit records, all pages aggregated."""
        if status is not None and status not in DEPOSIT_STATUSES:
            raise ValueError(f"status must be one of {', '.join(DEPOSIT_STATUSES)}")

        query = {
            "currentPage": 1,
            "pageSize": page_size,
            "currency": currency,
            "status": status,
            "startAt": to_kucoin_time(start) if start else None,
            "endAt": to_kucoin_time(end) if end else None,
        }

        async def fetch_page(q):
            return await self.kucoin.request("GET", "/api/v1/deposits", query=q)

        df = await auto_paginate(
            fetch_page, query=query, reduce=pages_to_frame, max_pages=max_pages
        )
        df = add_datetime_column(df, "createdAt")
        return add_datetime_column(df, "updatedAt")
