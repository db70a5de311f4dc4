# Async client for the KuCoin REST API
from .config import Credentials, KucoinConfig, Settings, load_config
from .exchanges import (
    ApiError,
    ClockUnavailable,
    HttpError,
    InvalidCredentials,
    KucoinClient,
    KucoinError,
    MalformedResponse,
    PaginationFailed,
    auto_paginate,
    build_headers,
    process_response,
)

__version__ = "0.1.0"

__all__ = [
    "Credentials",
    "KucoinConfig",
    "Settings",
    "load_config",
    "ApiError",
    "ClockUnavailable",
    "HttpError",
    "InvalidCredentials",
    "KucoinClient",
    "KucoinError",
    "MalformedResponse",
    "PaginationFailed",
    "auto_paginate",
    "build_headers",
    "process_response",
]
