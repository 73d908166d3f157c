"""Block API wrappers for the Notion API.

:meth:`BlockAPI.get_children` follows ``next_cursor`` through
:func:`paginate` so callers get every child block in a single call.
"""

from __future__ import annotations

from typing import Any

from notioncli.models import PageResult

from .pagination import paginate
from .transport import NotionTransport


class BlockAPI:
    """Wrapper for the Notion Blocks API.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def delete(self, block_id: str) -> dict[str, Any]:
        """Delete (archive) a block.

        Returns
        -------
        dict
            The archived block object.
        """
        return self._transport.request("DELETE", f"/blocks/{block_id}")

    def list_children_page(self, block_id: str, cursor: str | None = None) -> PageResult:
        """Fetch one page of children of *block_id*, starting at *cursor*."""
        params = {"start_cursor": cursor} if cursor is not None else None
        data = self._transport.request(
            "GET", f"/blocks/{block_id}/children", params=params
        )
        return PageResult.from_response(data)

    def get_children(self, block_id: str, limit: int | None = None) -> list[dict[str, Any]]:
        """Retrieve the children of a block or page, auto-paginating.

        The endpoint is called without a page size, so the server default
        applies and the result is truncated to *limit* afterwards.

        Parameters
        ----------
        block_id:
            The UUID of the parent block (or page).
        limit:
            Maximum number of blocks to return; ``None`` fetches all.

        Returns
        -------
        list[dict]
            Child block objects in document order.
        """
        return paginate(
            lambda cursor, _page_size: self.list_children_page(block_id, cursor),
            limit,
        )

    def append_children(
        self,
        block_id: str,
        children: list[dict[str, Any]],
    ) -> dict[str, Any]:
        """Append child blocks to a parent block or page.

        Notion accepts at most 100 blocks per call; use
        :func:`notioncli.utils.chunk_children` for longer lists.

        Returns
        -------
        dict
            The API response listing the appended block objects.
        """
        return self._transport.request(
            "PATCH", f"/blocks/{block_id}/children", json={"children": children}
        )
