"""
KuCoin Response Validation

Turns a received HTTP response into the envelope's ``data`` payload or a
typed error.
"""

import logging
from typing import Any

import httpx

from .base import (
    NO_ERROR_MESSAGE,
    SUCCESS_CODE,
    UNREADABLE_BODY,
    ApiError,
    HttpError,
    MalformedResponse,
)

logger = logging.getLogger(__name__)


def _read_body(response: httpx.Response) -> str:
    try:
        return response.text
    except (httpx.ResponseNotRead, UnicodeDecodeError, LookupError):
        return UNREADABLE_BODY


def process_response(response: httpx.Response) -> Any:
    """
    Validate a KuCoin response and return its ``data`` field.

    Args:
        response: A received httpx response

    Returns:
        The envelope's data, which may be any JSON value

    Raises:
        HttpError: If the HTTP status is not 200
        MalformedResponse: If the body is not a JSON object with a ``code``
        ApiError: If ``code`` is not "200000"
    """
    try:
        url = str(response.request.url)
    except RuntimeError:
        url = None

    if response.status_code != 200:
        body = _read_body(response)
        logger.warning(f"HTTP {response.status_code} from {url}")
        raise HttpError(response.status_code, body, url)

    try:
        parsed = response.json()
    except ValueError as e:
        raise MalformedResponse(f"Response is not valid JSON: {e}") from e

    if not isinstance(parsed, dict) or "code" not in parsed:
        raise MalformedResponse("Invalid API response structure: missing 'code' field.")

    code = str(parsed["code"])
    if code != SUCCESS_CODE:
        message = parsed.get("msg")
        if message is None:
            message = NO_ERROR_MESSAGE
        logger.warning(f"KuCoin API error {code} from {url}: {message}")
        raise ApiError(code, message)

    return parsed.get("data")
