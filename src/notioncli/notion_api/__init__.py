"""notioncli.notion_api -- Notion API transport and endpoint wrappers.

This sub-package provides:

* :mod:`.retries` -- retry-on-429 decision logic.
* :mod:`.transport` -- HTTP transport with auth and retries.
* :mod:`.pagination` -- cursor pagination loop.
* :mod:`.pages`, :mod:`.blocks`, :mod:`.databases`, :mod:`.search` --
  endpoint wrappers.
"""

from __future__ import annotations

from .blocks import BlockAPI
from .databases import DatabaseAPI
from .pages import PageAPI
from .pagination import MAX_PAGE_SIZE, paginate
from .retries import compute_retry_delay, should_retry
from .search import SearchAPI
from .transport import NotionTransport, console_retry_notice

__all__ = [
    "BlockAPI",
    "DatabaseAPI",
    "MAX_PAGE_SIZE",
    "NotionTransport",
    "PageAPI",
    "SearchAPI",
    "compute_retry_delay",
    "console_retry_notice",
    "paginate",
    "should_retry",
]
