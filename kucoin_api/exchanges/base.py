"""
KuCoin Base Definitions

Error hierarchy and constants shared by the authenticator, the response
validator, the paginator and the HTTP client.
"""

from typing import Any

# Sole success sentinel of the KuCoin response envelope
SUCCESS_CODE = "200000"

NO_ERROR_MESSAGE = "No error message provided."
UNREADABLE_BODY = "<unreadable response body>"


class KucoinError(Exception):
    """Base exception for KuCoin client errors."""
    pass


class InvalidCredentials(KucoinError):
    """Raised when a required credential field is missing or empty."""
    pass


class ClockUnavailable(KucoinError):
    """Raised when the server time could not be obtained."""
    pass


class MalformedResponse(KucoinError):
    """Raised when a response body is not a JSON envelope with a code."""
    pass


class HttpError(KucoinError):
    """Raised when a request returns a non-200 HTTP status."""

    def __init__(self, status: int, body: str, url: str | None = None):
        self.status = status
        self.body = body
        self.url = url
        message = f"HTTP error {status}: {body}"
        if url:
            message = f"HTTP error {status} for URL {url}: {body}"
        super().__init__(message)


class ApiError(KucoinError):
    """Raised when the envelope carries a code other than 200000."""

    def __init__(self, code: Any, message: str):
        self.code = str(code)
        self.message = message
        super().__init__(f"API error {self.code}: {message}")


class PaginationFailed(KucoinError):
    """Raised when fetching a page fails; the original error is the cause."""

    def __init__(self, page: Any, cause: BaseException):
        self.page = page
        super().__init__(f"Failed to fetch page {page}: {cause}")
