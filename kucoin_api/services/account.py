"""
Account & Funding Service

Private endpoints describing the user, the API key, and spot and margin
balances.
"""

import logging
from datetime import datetime

import pandas as pd

from ..exchanges.client import KucoinClient
from ..exchanges.pagination import auto_paginate, pages_to_frame
from ..utils import add_datetime_column, require_id, require_ticker, to_frame, to_kucoin_time

logger = logging.getLogger(__name__)

CROSS_QUERY_TYPES = ("MARGIN", "MARGIN_V2", "ALL")
ISOLATED_QUERY_TYPES = ("ISOLATED", "ISOLATED_V2", "ALL")


class AccountAndFunding:
    """Account summary, API key info, spot and margin accounts, and ledger."""

    def __init__(self, kucoin: KucoinClient):
        self.kucoin = kucoin

    async def get_account_summary(self) -> pd.DataFrame:
        """Sub-account counts and VIP level of the master account."""
        data = await self.kucoin.request("GET", "/api/v2/user-info")
        return to_frame(data)

    async def get_api_key_info(self) -> pd.DataFrame:
        """Permissions and metadata of the API key in use."""
        data = await self.kucoin.request("GET", "/api/v1/user/api-key")
        return add_datetime_column(to_frame(data), "createdAt")

    async def get_spot_accounts(
        self, currency: str | None = None, account_type: str | None = None
    ) -> pd.DataFrame:
        """Balances of spot/margin/trade accounts."""
        data = await self.kucoin.request(
            "GET",
            "/api/v1/accounts",
            query={"currency": currency, "type": account_type},
        )
        return to_frame(data)

    async def get_spot_account_type(self) -> bool:
        """True if the account trades through the high-frequency spot account."""
        return bool(await self.kucoin.request("GET", "/api/v1/hf/accounts/opened"))

    async def get_spot_account_detail(self, account_id: str) -> pd.DataFrame:
        """Balance of one account, by the id listed in ``get_spot_accounts``."""
        data = await self.kucoin.request(
            "GET", f"/api/v1/accounts/{require_id(account_id, 'account_id')}"
        )
        df = to_frame(data)
        if not df.empty:
            df.insert(0, "accountId", account_id)
        return df

    async def get_cross_margin_account(
        self, quote_currency: str = "USDT", query_type: str = "MARGIN"
    ) -> dict[str, pd.DataFrame]:
        """
        Cross margin account overview.

        Args:
            quote_currency: Currency totals are expressed in
            query_type: "MARGIN", "MARGIN_V2" or "ALL"

        Returns:
            ``{"summary": ..., "accounts": ...}``: a one-row table of the
            totals, debt ratio and status, and one row per currency
        """
        if query_type not in CROSS_QUERY_TYPES:
            raise ValueError(f"query_type must be one of {', '.join(CROSS_QUERY_TYPES)}")
        data = await self.kucoin.request(
            "GET",
            "/api/v3/margin/accounts",
            query={"quoteCurrency": quote_currency, "queryType": query_type},
        )
        data = dict(data or {})
        accounts = to_frame(data.pop("accounts", None))
        return {"summary": to_frame(data), "accounts": accounts}

    async def get_isolated_margin_account(
        self,
        symbol: str | None = None,
        quote_currency: str = "USDT",
        query_type: str = "ISOLATED",
    ) -> dict[str, pd.DataFrame]:
        """
        Isolated margin accounts, one per trading pair.

        Returns:
            ``{"summary": ..., "assets": ...}``: a one-row table of the
            totals, and one row per pair with the nested base and quote
            balances flattened to ``base_*`` and ``quote_*`` columns
        """
        if query_type not in ISOLATED_QUERY_TYPES:
            raise ValueError(f"query_type must be one of {', '.join(ISOLATED_QUERY_TYPES)}")
        data = await self.kucoin.request(
            "GET",
            "/api/v3/isolated/accounts",
            query={
                "symbol": require_ticker(symbol) if symbol else None,
                "quoteCurrency": quote_currency,
                "queryType": query_type,
            },
        )
        data = dict(data or {})
        assets = data.pop("assets", None) or []
        if assets:
            assets_df = pd.json_normalize(assets, sep="_")
            assets_df.columns = [
                col.replace("baseAsset_", "base_").replace("quoteAsset_", "quote_")
                for col in assets_df.columns
            ]
        else:
            assets_df = pd.DataFrame()
        summary = add_datetime_column(to_frame(data), "timestamp")
        return {"summary": summary, "assets": assets_df}

    async def get_spot_ledger(
        self,
        currency: str | None = None,
        direction: str | None = None,
        biz_type: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        page_size: int = 50,
        max_pages: int | None = None,
    ) -> pd.DataFrame:
        """
        Ledger entries of the spot and margin accounts.

        Args:
            currency: Comma separated currencies, e.g. "BTC,ETH"
            direction: "in" or "out"
            biz_type: Business type, e.g. "TRANSFER", "TRADE_EXCHANGE"
            start: Aware datetime lower bound
            end: Aware datetime upper bound
            page_size: Entries per page (10 to 500)
            max_pages: Stop after this many pages

        Returns:
            DataFrame of all fetched entries with a createdAt_datetime column
        """
        if direction is not None and direction not in ("in", "out"):
            raise ValueError("direction must be 'in' or 'out'")

        query = {
            "currentPage": 1,
            "pageSize": page_size,
            "currency": currency,
            "direction": direction,
            "bizType": biz_type,
            "startAt": to_kucoin_time(start) if start else None,
            "endAt": to_kucoin_time(end) if end else None,
        }

        async def fetch_page(q):
            return await self.kucoin.request("GET", "/api/v1/accounts/ledgers", query=q)

        df = await auto_paginate(
            fetch_page, query=query, reduce=pages_to_frame, max_pages=max_pages
        )
        logger.info(f"Fetched {len(df)} ledger entries")
        return add_datetime_column(df, "createdAt")
