"""Database query wrapper for the Notion API."""

from __future__ import annotations

from typing import Any

from notioncli.models import PageResult

from .pagination import paginate
from .transport import NotionTransport


class DatabaseAPI:
    """Wrapper for ``POST /databases/{id}/query``.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def query_page(
        self,
        database_id: str,
        page_size: int,
        cursor: str | None = None,
        filter: dict[str, Any] | None = None,
        sorts: list[dict[str, Any]] | None = None,
    ) -> PageResult:
        """Fetch one page of database rows."""
        body: dict[str, Any] = {"page_size": page_size}
        if cursor is not None:
            body["start_cursor"] = cursor
        if filter is not None:
            body["filter"] = filter
        if sorts is not None:
            body["sorts"] = sorts
        data = self._transport.request(
            "POST", f"/databases/{database_id}/query", json=body
        )
        return PageResult.from_response(data)

    def query(
        self,
        database_id: str,
        limit: int,
        filter: dict[str, Any] | None = None,
        sorts: list[dict[str, Any]] | None = None,
    ) -> list[dict[str, Any]]:
        """Query a database, following cursors until *limit* rows are collected.

        Parameters
        ----------
        database_id:
            The UUID of the database.
        limit:
            Maximum number of rows.  ``0`` issues no request.
        filter:
            A Notion filter object (see :mod:`notioncli.converter.filters`).
        sorts:
            A list of Notion sort objects.

        Returns
        -------
        list[dict]
            Page objects for the matching rows, in server order.
        """
        return paginate(
            lambda cursor, page_size: self.query_page(
                database_id, page_size, cursor, filter=filter, sorts=sorts
            ),
            limit,
        )
