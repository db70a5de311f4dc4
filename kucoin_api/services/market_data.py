"""
Market Data Service

Public KuCoin spot market endpoints: server time, symbols, tickers,
candles, currencies and announcements.

API Documentation: https://www.kucoin.com/docs-new/rest/spot-trading/market-data
"""

import logging
from datetime import datetime, timedelta, timezone

import pandas as pd

from ..exchanges.client import KucoinClient
from ..exchanges.pagination import auto_paginate, concat_pages
from ..utils import (
    add_datetime_column,
    require_ticker,
    resolve_time_range,
    to_frame,
    to_kucoin_time,
)

logger = logging.getLogger(__name__)

# Candle interval name -> duration in seconds
KLINE_INTERVALS = {
    "1min": 60,
    "3min": 180,
    "5min": 300,
    "15min": 900,
    "30min": 1800,
    "1hour": 3600,
    "2hour": 7200,
    "4hour": 14400,
    "6hour": 21600,
    "8hour": 28800,
    "12hour": 43200,
    "1day": 86400,
    "1week": 604800,
    "1month": 2592000,
}

# KuCoin returns at most this many candles per request
MAX_CANDLES = 1500

KLINE_COLUMNS = ["timestamp", "open", "close", "high", "low", "volume", "turnover"]


def split_time_range(
    start: datetime, end: datetime, interval_s: int, max_candles: int = MAX_CANDLES
) -> list[tuple[datetime, datetime]]:
    """Split [start, end] into segments of at most ``max_candles`` candles."""
    if start >= end:
        raise ValueError("start must be earlier than end")
    segment = timedelta(seconds=interval_s * max_candles)
    segments = []
    seg_start = start
    while seg_start < end:
        seg_end = min(seg_start + segment, end)
        segments.append((seg_start, seg_end))
        seg_start = seg_end
    return segments


class MarketData:
    """Public market data endpoints."""

    def __init__(self, kucoin: KucoinClient):
        self.kucoin = kucoin

    async def get_server_time(self) -> int:
        """Server time in milliseconds."""
        return await self.kucoin.server_time()

    async def get_symbols(self, market: str | None = None) -> pd.DataFrame:
        """All trading pairs, optionally restricted to one market (e.g. "USDS")."""
        data = await self.kucoin.request(
            "GET", "/api/v2/symbols", query={"market": market}, signed=False
        )
        return to_frame(data)

    async def get_ticker(self, symbol: str) -> pd.DataFrame:
        """Level 1 order book snapshot (best bid/ask and last price) for a symbol."""
        data = await self.kucoin.request(
            "GET",
            "/api/v1/market/orderbook/level1",
            query={"symbol": require_ticker(symbol)},
            signed=False,
        )
        df = to_frame(data)
        if not df.empty:
            df.insert(0, "symbol", symbol)
        return add_datetime_column(df, "time")

    async def get_all_tickers(self) -> pd.DataFrame:
        """24h ticker of every trading pair."""
        data = await self.kucoin.request("GET", "/api/v1/market/allTickers", signed=False)
        df = to_frame((data or {}).get("ticker"))
        if not df.empty:
            df["snapshot_time"] = data.get("time")
        return add_datetime_column(df, "snapshot_time")

    async def get_24hr_stats(self, symbol: str) -> pd.DataFrame:
        """24h statistics for a symbol."""
        data = await self.kucoin.request(
            "GET",
            "/api/v1/market/stats",
            query={"symbol": require_ticker(symbol)},
            signed=False,
        )
        return add_datetime_column(to_frame(data), "time")

    async def get_currencies(self) -> pd.DataFrame:
        """Currency list with their chains."""
        data = await self.kucoin.request("GET", "/api/v3/currencies", signed=False)
        return to_frame(data)

    async def get_klines(
        self,
        symbol: str,
        interval: str = "15min",
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> pd.DataFrame:
        """
        Candles for a symbol over a time range, oldest first.

        Ranges longer than 1500 candles are fetched segment by segment.

        Args:
            symbol: Trading pair, e.g. "BTC-USDT"
            interval: One of KLINE_INTERVALS
            start: Aware datetime, defaults to 24 hours before ``end``
            end: Aware datetime, defaults to now

        Returns:
            DataFrame with columns datetime, timestamp, open, close, high,
            low, volume, turnover
        """
        require_ticker(symbol)
        if interval not in KLINE_INTERVALS:
            raise ValueError(
                f"Invalid interval. Allowed values are: {', '.join(KLINE_INTERVALS)}"
            )
        start, end = resolve_time_range(start, end or datetime.now(timezone.utc))

        frames = []
        for seg_start, seg_end in split_time_range(start, end, KLINE_INTERVALS[interval]):
            data = await self.kucoin.request(
                "GET",
                "/api/v1/market/candles",
                query={
                    "symbol": symbol,
                    "type": interval,
                    "startAt": to_kucoin_time(seg_start, "s"),
                    "endAt": to_kucoin_time(seg_end, "s"),
                },
                signed=False,
            )
            if data:
                frames.append(pd.DataFrame(data, columns=KLINE_COLUMNS))

        if not frames:
            return pd.DataFrame(columns=["datetime"] + KLINE_COLUMNS)

        df = pd.concat(frames, ignore_index=True).apply(pd.to_numeric)
        df = df.drop_duplicates(subset="timestamp").sort_values("timestamp")
        df.insert(0, "datetime", pd.to_datetime(df["timestamp"], unit="s", utc=True))
        logger.debug(f"Fetched {len(df)} {interval} candles for {symbol}")
        return df.reset_index(drop=True)

    async def get_announcements(
        self,
        ann_type: str = "latest-announcements",
        lang: str = "en_US",
        start: datetime | None = None,
        end: datetime | None = None,
        page_size: int = 50,
        max_pages: int | None = None,
    ) -> pd.DataFrame:
        """Exchange announcements, all pages aggregated into one table."""
        query = {
            "currentPage": 1,
            "pageSize": page_size,
            "annType": ann_type,
            "lang": lang,
            "startTime": to_kucoin_time(start) if start else None,
            "endTime": to_kucoin_time(end) if end else None,
        }

        async def fetch_page(q):
            return await self.kucoin.request(
                "GET", "/api/v3/announcements", query=q, signed=False
            )

        def reduce(batches):
            items = [
                {**item, "annType": ";".join(item["annType"])}
                if isinstance(item.get("annType"), list)
                else item
                for item in concat_pages(batches)
            ]
            return add_datetime_column(to_frame(items), "cTime")

        return await auto_paginate(
            fetch_page, query=query, reduce=reduce, max_pages=max_pages
        )
