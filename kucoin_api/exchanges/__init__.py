# KuCoin REST core: signing, validation, pagination and the HTTP client
from .base import (
    ApiError,
    ClockUnavailable,
    HttpError,
    InvalidCredentials,
    KucoinError,
    MalformedResponse,
    PaginationFailed,
)
from .auth import build_headers, compose_headers, get_server_time
from .response import process_response
from .pagination import auto_paginate, concat_pages, cursor_paginate, pages_to_frame
from .client import KucoinClient

__all__ = [
    "ApiError",
    "ClockUnavailable",
    "HttpError",
    "InvalidCredentials",
    "KucoinError",
    "MalformedResponse",
    "PaginationFailed",
    "build_headers",
    "compose_headers",
    "get_server_time",
    "process_response",
    "auto_paginate",
    "concat_pages",
    "cursor_paginate",
    "pages_to_frame",
    "KucoinClient",
]
