"""
Sub-Account Service
"""

import logging

import pandas as pd

from ..exchanges.client import KucoinClient
from ..exchanges.pagination import auto_paginate, pages_to_frame
from ..models import SubAccountRequest
from ..utils import add_datetime_column, require_id, to_frame

logger = logging.getLogger(__name__)

SUB_ACCOUNT_TYPES = ("mainAccounts", "tradeAccounts", "marginAccounts", "tradeHFAccounts")


class SubAccounts:
    """Sub-account creation, listing and balances."""

    def __init__(self, kucoin: KucoinClient):
        self.kucoin = kucoin

    async def add_sub_account(
        self, password: str, sub_name: str, access: str, remarks: str | None = None
    ) -> pd.DataFrame:
        """Create a sub-account."""
        request = SubAccountRequest(
            password=password, sub_name=sub_name, access=access, remarks=remarks
        )
        data = await self.kucoin.request(
            "POST", "/api/v2/sub/user/created", body=request.to_body()
        )
        logger.info(f"Created sub-account {sub_name}")
        return to_frame(data)

    async def get_sub_accounts(
        self, page_size: int = 10, max_pages: int | None = None
    ) -> pd.DataFrame:
        """Summary of every sub-account."""

        async def fetch_page(q):
            return await self.kucoin.request("GET", "/api/v2/sub/user", query=q)

        df = await auto_paginate(
            fetch_page,
            query={"currentPage": 1, "pageSize": page_size},
            reduce=pages_to_frame,
            max_pages=max_pages,
        )
        return add_datetime_column(df, "createdAt")

    async def get_sub_account_balance(
        self, sub_user_id: str, include_base_amount: bool = False
    ) -> pd.DataFrame:
        """
        Balances of one sub-account across its account types.

        Returns:
            One row per currency and account type, with an ``accountType``
            column (mainAccounts, tradeAccounts, marginAccounts or
            tradeHFAccounts) and the sub-account's subUserId and subName
        """
        data = await self.kucoin.request(
            "GET",
            f"/api/v1/sub-accounts/{require_id(sub_user_id, 'sub_user_id')}",
            query={"includeBaseAmount": include_base_amount},
        )
        data = data or {}
        frames = []
        for account_type in SUB_ACCOUNT_TYPES:
            balances = data.get(account_type)
            if balances:
                df = to_frame(balances)
                df["accountType"] = account_type
                frames.append(df)
        if not frames:
            return pd.DataFrame(columns=["currency", "accountType", "subUserId", "subName"])
        df = pd.concat(frames, ignore_index=True)
        df["subUserId"] = data.get("subUserId")
        df["subName"] = data.get("subName")
        return df
