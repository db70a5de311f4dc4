"""
KuCoin Pagination

Sequentially drives a single-page fetch coroutine until the exchange reports
no further pages, then reduces the collected page batches.
"""

import logging
from itertools import chain
from typing import Any, Awaitable, Callable

import pandas as pd

from .base import PaginationFailed

logger = logging.getLogger(__name__)

DEFAULT_QUERY = {"currentPage": 1, "pageSize": 50}


def _field(response: Any, name: str) -> Any:
    if isinstance(response, dict):
        return response.get(name)
    return None


async def auto_paginate(
    fetch_page: Callable[[dict[str, Any]], Awaitable[Any]],
    query: dict[str, Any] | None = None,
    items_field: str = "items",
    page_field: str = "currentPage",
    total_page_field: str = "totalPage",
    reduce: Callable[[list[Any]], Any] | None = None,
    max_pages: int | None = None,
) -> Any:
    """
    Fetch every page of a paginated endpoint.

    Pages are fetched one after another; the query for page N+1 is derived
    from the ``currentPage`` reported by page N. Fetching stops when
    ``max_pages`` is reached, when either page counter is missing from the
    response, or when ``currentPage >= totalPage``.

    Args:
        fetch_page: Coroutine function taking a query dict, returning one page
        query: Initial query, defaults to ``{"currentPage": 1, "pageSize": 50}``
        items_field: Field holding the page's items; if absent, the whole
            response is used as the batch
        page_field: Field holding the current page number
        total_page_field: Field holding the total page count
        reduce: Called once with the list of page batches; identity if None
        max_pages: Maximum number of pages to fetch, unbounded if None; must be
            at least 1

    Returns:
        ``reduce(batches)``

    Raises:
        ValueError: If ``max_pages`` is below 1
        PaginationFailed: If any page fetch raises; no partial result is returned
    """
    if max_pages is not None and max_pages < 1:
        raise ValueError("max_pages must be at least 1")
    query = dict(DEFAULT_QUERY if query is None else query)
    batches: list[Any] = []

    while True:
        page = query.get("currentPage")
        logger.debug(f"Fetching page {page}")
        try:
            response = await fetch_page(dict(query))
        except Exception as e:
            logger.error(f"Pagination aborted on page {page}: {e}")
            raise PaginationFailed(page, e) from e

        items = _field(response, items_field)
        batches.append(items if items is not None else response)

        current_page = _field(response, page_field)
        total_page = _field(response, total_page_field)

        if current_page is not None and max_pages is not None and current_page >= max_pages:
            break
        # Stop when either counter is missing
        if current_page is None or total_page is None or current_page >= total_page:
            break

        query["currentPage"] = current_page + 1

    logger.debug(f"Fetched {len(batches)} page(s)")
    if reduce is None:
        return batches
    return reduce(batches)


async def cursor_paginate(
    fetch_page: Callable[[dict[str, Any]], Awaitable[Any]],
    query: dict[str, Any] | None = None,
    items_field: str = "items",
    cursor_field: str = "lastId",
    reduce: Callable[[list[Any]], Any] | None = None,
    max_pages: int | None = None,
) -> Any:
    """
    Fetch every page of an endpoint paginated by a ``lastId`` cursor.

    Each response carries the id of its last item; the next request passes it
    back as ``lastId``. Fetching stops on an empty page, a missing cursor or
    after ``max_pages`` pages. Failures are handled as in ``auto_paginate``,
    with the 1-based page number.
    """
    if max_pages is not None and max_pages < 1:
        raise ValueError("max_pages must be at least 1")
    query = dict(query or {})
    batches: list[Any] = []
    page = 1

    while True:
        logger.debug(f"Fetching page {page} after {cursor_field}={query.get(cursor_field)}")
        try:
            response = await fetch_page(dict(query))
        except Exception as e:
            logger.error(f"Pagination aborted on page {page}: {e}")
            raise PaginationFailed(page, e) from e

        items = _field(response, items_field)
        if not items:
            break
        batches.append(items)

        cursor = _field(response, cursor_field)
        if cursor is None or (max_pages is not None and page >= max_pages):
            break
        query[cursor_field] = cursor
        page += 1

    logger.debug(f"Fetched {len(batches)} page(s)")
    if reduce is None:
        return batches
    return reduce(batches)


def concat_pages(batches: list[Any]) -> list[Any]:
    """Flatten page batches into one list of items."""
    return list(chain.from_iterable(
        batch if isinstance(batch, list) else [batch]
        for batch in batches
        if batch is not None
    ))


def pages_to_frame(batches: list[Any]) -> pd.DataFrame:
    """Flatten page batches into a single DataFrame."""
    items = concat_pages(batches)
    if not items:
        return pd.DataFrame()
    return pd.DataFrame(items)
