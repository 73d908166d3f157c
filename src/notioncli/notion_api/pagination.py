"""Cursor-based pagination over Notion list endpoints.

Notion list endpoints (``/search``, ``/databases/{id}/query``,
``/blocks/{id}/children``) return at most 100 results per call together
with ``has_more`` and ``next_cursor``.  :func:`paginate` drives a
single-page fetch function until the caller's limit is reached or the
server runs out of pages.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from notioncli.models import PageResult
from notioncli.observability import get_logger

log = get_logger("notioncli.pagination")

MAX_PAGE_SIZE = 100

FetchPage = Callable[[str | None, int], PageResult]
"""``fetch_page(cursor, page_size)`` -- fetch one page starting at *cursor*."""


def paginate(fetch_page: FetchPage, limit: int | None) -> list[dict[str, Any]]:
    """Collect results across pages, in the order the API delivers them.

    Parameters
    ----------
    fetch_page:
        Fetches a single page.  Receives the cursor (``None`` for the first
        page) and a page-size hint of ``min(100, limit - collected)``.
        Endpoints that take no page size may ignore the hint.
    limit:
        Maximum number of results to return.  ``None`` means no limit.
        ``0`` returns an empty list without calling *fetch_page*.

    Returns
    -------
    list[dict]
        At most *limit* result objects.

    Raises
    ------
    ValueError
        If *limit* is negative.

    Any error raised by *fetch_page* propagates; results collected from
    earlier pages are discarded with it.
    """
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")
    if limit == 0:
        return []

    collected: list[dict[str, Any]] = []
    cursor: str | None = None

    while True:
        remaining = MAX_PAGE_SIZE if limit is None else limit - len(collected)
        page = fetch_page(cursor, min(MAX_PAGE_SIZE, remaining))
        collected.extend(page.results)

        if not page.has_more:
            break
        if limit is not None and len(collected) >= limit:
            break
        if not page.next_cursor:
            # has_more without a cursor: stop rather than refetch page one forever.
            log.debug(
                "Pagination stopped: has_more without next_cursor",
                extra={"extra_fields": {"collected": len(collected)}},
            )
            break
        cursor = page.next_cursor

    return collected if limit is None else collected[:limit]
