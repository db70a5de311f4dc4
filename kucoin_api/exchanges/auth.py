"""
KuCoin Request Authentication

Builds the signed header set required by private KuCoin endpoints.

The prehash string is ``timestamp + METHOD + endpoint + body`` where the
endpoint includes the query string exactly as sent and the body is the exact
serialized JSON (or an empty string). Both the signature and the passphrase
are HMAC-SHA256 digests keyed with the API secret, base64 encoded.
"""

import base64
import hashlib
import hmac
import logging

import httpx

from ..config import Credentials
from .base import ClockUnavailable, InvalidCredentials, KucoinError
from .response import process_response

logger = logging.getLogger(__name__)

SERVER_TIME_ENDPOINT = "/api/v1/timestamp"


def validate_credentials(credentials: Credentials) -> None:
    """Raise InvalidCredentials if any required field is empty."""
    missing = [
        name
        for name in ("api_key", "api_secret", "api_passphrase", "key_version")
        if not getattr(credentials, name, None)
    ]
    if missing:
        raise InvalidCredentials(f"Missing credential fields: {', '.join(missing)}")


def build_prehash(timestamp: int | str, method: str, endpoint: str, body: str = "") -> str:
    """Concatenate the string to sign."""
    return f"{timestamp}{method.upper()}{endpoint}{body or ''}"


def sign(secret: str, message: str) -> str:
    """Return base64(HMAC_SHA256(secret, message))."""
    digest = hmac.new(
        secret.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha256,
    ).digest()
    return base64.b64encode(digest).decode("utf-8")


def encrypt_passphrase(secret: str, passphrase: str) -> str:
    """Passphrase as required by API key version 2."""
    return sign(secret, passphrase)


def compose_headers(
    timestamp: int | str,
    method: str,
    endpoint: str,
    body: str,
    credentials: Credentials,
) -> dict[str, str]:
    """
    Assemble the authentication headers for a known timestamp.

    Args:
        timestamp: Server time in milliseconds
        method: HTTP verb, any case
        endpoint: Request path including the query string
        body: Serialized request body, or "" when there is none
        credentials: API key material

    Returns:
        The six KuCoin request headers
    """
    prehash = build_prehash(timestamp, method, endpoint, body)
    return {
        "KC-API-KEY": credentials.api_key,
        "KC-API-SIGN": sign(credentials.api_secret, prehash),
        "KC-API-TIMESTAMP": str(timestamp),
        "KC-API-PASSPHRASE": encrypt_passphrase(
            credentials.api_secret, credentials.api_passphrase
        ),
        "KC-API-KEY-VERSION": credentials.key_version,
        "Content-Type": "application/json",
    }


async def get_server_time(
    client: httpx.AsyncClient, base_url: str, timeout: float = 3.0
) -> int:
    """
    Fetch the KuCoin server time in milliseconds.

    Raises:
        ClockUnavailable: On network failure, non-200 status or error envelope
    """
    url = f"{base_url}{SERVER_TIME_ENDPOINT}"
    try:
        response = await client.get(url, timeout=timeout)
        data = process_response(response)
    except (httpx.HTTPError, KucoinError) as e:
        logger.warning(f"Server time request failed: {e}")
        raise ClockUnavailable(f"Error retrieving server time: {e}") from e

    if isinstance(data, bool) or not isinstance(data, (int, float)):
        raise ClockUnavailable(f"Unexpected server time payload: {data!r}")

    return int(data)


async def build_headers(
    method: str,
    endpoint: str,
    body: str,
    credentials: Credentials,
    *,
    client: httpx.AsyncClient,
    base_url: str,
    timeout: float = 3.0,
) -> dict[str, str]:
    """
    Build signed headers for one request.

    A fresh server timestamp is fetched on every call; headers must not be
    reused across requests.

    Raises:
        InvalidCredentials: If a credential field is empty
        ClockUnavailable: If the server time could not be fetched
    """
    validate_credentials(credentials)
    timestamp = await get_server_time(client, base_url, timeout)
    return compose_headers(timestamp, method, endpoint, body, credentials)
