"""
KuCoin HTTP Client

Owns the httpx connection pool and ties together query building, request
signing and response validation for the endpoint services.
"""

import json
import logging
from typing import Any

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..config import KucoinConfig
from ..utils import build_query
from .auth import build_headers, get_server_time
from .response import process_response

logger = logging.getLogger(__name__)


def serialize_body(body: dict[str, Any] | list[Any] | None) -> str:
    """Serialize a request body exactly as it is signed and sent."""
    if body is None:
        return ""
    return json.dumps(body, separators=(",", ":"))


class KucoinClient:
    """
    Async KuCoin REST client.

    Use as an async context manager::

        async with KucoinClient(config) as kucoin:
            data = await kucoin.request("GET", "/api/v1/accounts")

    Network errors during signed calls are retried only when
    ``config.retry_attempts > 1``; every attempt is signed afresh.
    """

    def __init__(
        self,
        config: KucoinConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        if config.retry_attempts > 1:
            self._call = retry(
                stop=stop_after_attempt(config.retry_attempts),
                wait=wait_exponential(multiplier=1, min=1, max=10),
                retry=retry_if_exception_type(httpx.TransportError),
                reraise=True,
            )(self._call)

    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            timeout=self.config.request_timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("KuCoin client not initialized. Use 'async with'.")
        return self._client

    async def server_time(self) -> int:
        """Current server time in milliseconds."""
        return await get_server_time(
            self.client, self.config.base_url, self.config.clock_timeout
        )

    async def _call(
        self, method: str, path: str, payload: str, signed: bool
    ) -> httpx.Response:
        headers = {"Content-Type": "application/json"}
        if signed:
            headers = await build_headers(
                method,
                path,
                payload,
                self.config.credentials,
                client=self.client,
                base_url=self.config.base_url,
                timeout=self.config.clock_timeout,
            )
        return await self.client.request(
            method.upper(),
            f"{self.config.base_url}{path}",
            headers=headers,
            content=payload.encode("utf-8") if payload else None,
        )

    async def request(
        self,
        method: str,
        endpoint: str,
        query: dict[str, Any] | None = None,
        body: dict[str, Any] | list[Any] | None = None,
        signed: bool = True,
    ) -> Any:
        """
        Send one request and return the validated ``data`` payload.

        Args:
            method: HTTP verb
            endpoint: API path without query string, e.g. "/api/v1/accounts"
            query: Query parameters; None values are dropped
            body: JSON body for POST/PUT requests
            signed: Attach authentication headers

        Raises:
            InvalidCredentials, ClockUnavailable: While signing
            HttpError, MalformedResponse, ApiError: From response validation
            httpx.HTTPError: On network failure
        """
        path = f"{endpoint}{build_query(query)}"
        payload = serialize_body(body)
        logger.debug(f"{method.upper()} {path}")
        response = await self._call(method, path, payload, signed)
        return process_response(response)
