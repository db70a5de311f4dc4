"""
Helpers shared by the KuCoin endpoint services.

Query-string construction, KuCoin timestamp conversion and ticker checks.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Literal
from urllib.parse import urlencode

import pandas as pd

TimeUnit = Literal["ms", "s", "ns"]

_UNIT_SCALE = {"s": 1, "ms": 1_000, "ns": 1_000_000_000}

TICKER_PATTERN = re.compile(r"^[A-Z0-9]+-[A-Z0-9]+$")


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_query(params: dict[str, Any] | None) -> str:
    """
    Build a query string from a mapping, dropping None values.

    The result must be appended to the endpoint both when signing and when
    sending the request.

    Returns:
        "" when no parameters remain, otherwise "?key=value&..."
    """
    if not params:
        return ""
    pairs = [(key, _query_value(value)) for key, value in params.items() if value is not None]
    if not pairs:
        return ""
    return "?" + urlencode(pairs, safe=",:")


def to_kucoin_time(value: datetime, unit: TimeUnit = "ms") -> int:
    """Convert an aware datetime to a KuCoin epoch timestamp."""
    if not isinstance(value, datetime):
        raise TypeError("value must be a datetime")
    if value.tzinfo is None:
        raise ValueError("value must be timezone-aware")
    if unit not in _UNIT_SCALE:
        raise ValueError(f"Unknown time unit: {unit}")
    # Integer arithmetic keeps nanoseconds exact
    delta = value - datetime(1970, 1, 1, tzinfo=timezone.utc)
    micros = (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds
    return micros * _UNIT_SCALE[unit] // 1_000_000


def from_kucoin_time(value: int | float | str, unit: TimeUnit = "ms") -> datetime:
    """Convert a KuCoin epoch timestamp to a UTC datetime."""
    if unit not in _UNIT_SCALE:
        raise ValueError(f"Unknown time unit: {unit}")
    if isinstance(value, bool):
        raise TypeError("value must be numeric")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise TypeError(f"value must be numeric, got {value!r}")
    return datetime.fromtimestamp(number / _UNIT_SCALE[unit], tz=timezone.utc)


def resolve_time_range(
    start: datetime | None = None, end: datetime | None = None
) -> tuple[datetime, datetime]:
    """
    Resolve an optional start/end pair into two aware datetimes.

    A missing bound defaults to a 24 hour window around the other one; when
    both are missing the window ends now.
    """
    for bound in (start, end):
        if bound is not None and bound.tzinfo is None:
            raise ValueError("start and end must be timezone-aware")

    window = timedelta(hours=24)
    if start is None and end is None:
        end = datetime.now(timezone.utc)
        start = end - window
    elif start is None:
        start = end - window
    elif end is None:
        end = start + window

    if start > end:
        raise ValueError("start must be before end")

    return start, end


def verify_ticker(ticker: str) -> bool:
    """Check a symbol has the KuCoin ``BASE-QUOTE`` format."""
    return bool(TICKER_PATTERN.match(ticker or ""))


def to_frame(data: Any) -> pd.DataFrame:
    """Tabulate an endpoint payload: objects become a single row."""
    if data is None:
        return pd.DataFrame()
    if isinstance(data, dict):
        return pd.DataFrame([data])
    if isinstance(data, list):
        return pd.DataFrame(data)
    return pd.DataFrame({"value": [data]})


def add_datetime_column(df: pd.DataFrame, column: str, unit: TimeUnit = "ms") -> pd.DataFrame:
    """Add ``<column>_datetime`` holding the UTC datetime of an epoch column."""
    if column in df.columns:
        df[f"{column}_datetime"] = pd.to_datetime(
            pd.to_numeric(df[column]), unit=unit, utc=True
        )
    return df


def require_ticker(symbol: str) -> str:
    """Return ``symbol`` if it is a valid ticker, else raise ValueError."""
    if not verify_ticker(symbol):
        raise ValueError(f"Invalid symbol format: {symbol}")
    return symbol


def require_id(value: str, name: str) -> str:
    """Return ``value`` if it is a non-empty string, else raise ValueError."""
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{name} must be a non-empty string")
    return value
