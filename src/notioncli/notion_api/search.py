"""Search wrapper for the Notion API."""

from __future__ import annotations

from typing import Any

from notioncli.models import PageResult

from .pagination import paginate
from .transport import NotionTransport


class SearchAPI:
    """Wrapper for ``POST /search``.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def search_page(self, query: str, page_size: int, cursor: str | None = None) -> PageResult:
        body: dict[str, Any] = {"query": query, "page_size": page_size}
        if cursor is not None:
            body["start_cursor"] = cursor
        return PageResult.from_response(
            self._transport.request("POST", "/search", json=body)
        )

    def search(self, query: str, limit: int) -> list[dict[str, Any]]:
        """Search pages and databases shared with the integration.

        Returns at most *limit* page/database objects, in the order Notion
        ranks them.
        """
        return paginate(
            lambda cursor, page_size: self.search_page(query, page_size, cursor),
            limit,
        )
