"""
Pytest fixtures and configuration for the test suite.
"""

import os
from typing import Any, Callable

import httpx
import pytest
import pytest_asyncio

# Keep developer credentials out of the tests
for _name in ("KC_API_KEY", "KC_API_SECRET", "KC_API_PASSPHRASE", "KC_API_ENDPOINT"):
    os.environ.pop(_name, None)

from kucoin_api.config import Credentials, KucoinConfig
from kucoin_api.exchanges.client import KucoinClient

BASE_URL = "https://api.test.kucoin"
SERVER_TIME = 1700000000123


def envelope(data: Any = None, code: str = "200000", msg: str | None = None) -> dict:
    """Build a KuCoin response envelope."""
    body = {"code": code}
    if data is not None:
        body["data"] = data
    if msg is not None:
        body["msg"] = msg
    return body


class FakeKucoin:
    """
    In-process stand-in for the KuCoin REST API.

    Serves /api/v1/timestamp automatically and routes every other request by
    (method, path) to either a canned httpx.Response or a handler callable.
    """

    def __init__(self, server_time: int = SERVER_TIME):
        self.server_time = server_time
        self.routes: dict[tuple[str, str], httpx.Response | Callable] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, data: Any = None, status: int = 200, handler: Callable | None = None):
        if handler is None:
            handler = lambda request: httpx.Response(status, json=envelope(data))
        self.routes[(method.upper(), path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/api/v1/timestamp":
            return httpx.Response(200, json=envelope(self.server_time))
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, text="Not Found")
        return handler(request)

    @property
    def api_requests(self) -> list[httpx.Request]:
        """Requests other than server time lookups."""
        return [r for r in self.requests if r.url.path != "/api/v1/timestamp"]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def credentials():
    return Credentials(
        api_key="test_key",
        api_secret="test_secret",
        api_passphrase="test_passphrase",
        key_version="2",
    )


@pytest.fixture
def config(credentials):
    return KucoinConfig(credentials=credentials, base_url=BASE_URL)


@pytest.fixture
def fake_kucoin():
    return FakeKucoin()


@pytest_asyncio.fixture
async def kucoin(config, fake_kucoin):
    """KucoinClient wired to the fake exchange."""
    async with KucoinClient(config, transport=fake_kucoin.transport) as client:
        yield client


def paged_handler(pages: list[list[Any]], fail_on: int | None = None) -> Callable:
    """
    Handler serving ``pages`` as KuCoin paginated payloads by currentPage.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        page = int(request.url.params.get("currentPage", 1))
        if fail_on == page:
            return httpx.Response(500, text="Internal Server Error")
        return httpx.Response(
            200,
            json=envelope({
                "currentPage": page,
                "pageSize": int(request.url.params.get("pageSize", 50)),
                "totalNum": sum(len(p) for p in pages),
                "totalPage": len(pages),
                "items": pages[page - 1],
            }),
        )

    return handler


def cursor_handler(pages: list[list[dict]]) -> Callable:
    """
    Handler serving ``pages`` chained by a ``lastId`` cursor.

    The cursor is the id of the last item of the previous page; a request
    after the final page gets an empty page.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        last_id = request.url.params.get("lastId")
        index = 0
        if last_id is not None:
            index = next(i for i, page in enumerate(pages) if str(page[-1]["id"]) == last_id) + 1
        items = pages[index] if index < len(pages) else []
        return httpx.Response(
            200,
            json=envelope({"lastId": items[-1]["id"] if items else last_id, "items": items}),
        )

    return handler
