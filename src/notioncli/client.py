"""Notion API client used by every CLI command.

:class:`NotionClient` exposes one method per resource action.  Each method
normalizes the identifiers it is given, builds the request payload and
hands it to the endpoint wrappers, which share one
:class:`NotionTransport`.

Usage::

    from notioncli import NotionClient, resolve_config

    with NotionClient(resolve_config()) as client:
        for page in client.search("roadmap", limit=10):
            print(page["id"])
"""

from __future__ import annotations

from typing import Any

import httpx

from notioncli.config import CliConfig
from notioncli.converter.block_builder import (
    DEFAULT_CODE_LANGUAGE,
    bookmark_block,
    bulleted_list_blocks,
    code_block,
    copyable_block,
    divider_block,
    heading_block,
    paragraph_block,
    rich_paragraph_block,
)
from notioncli.converter.filters import build_sorts, filter_from_string
from notioncli.converter.rich_text import copy_rich_text, plain_rich_text
from notioncli.errors import ValidationError
from notioncli.models import MoveResult, RichTextSegment
from notioncli.notion_api.blocks import BlockAPI
from notioncli.notion_api.databases import DatabaseAPI
from notioncli.notion_api.pages import PageAPI
from notioncli.notion_api.search import SearchAPI
from notioncli.notion_api.transport import NotionTransport, RetryNotice
from notioncli.observability import MetricsHook, get_logger
from notioncli.utils.chunk import MAX_CHILDREN_PER_REQUEST, chunk_children
from notioncli.utils.ids import normalize_id

log = get_logger("notioncli.client")

DEFAULT_LIMIT = 100


def _title_property(title: str) -> dict[str, Any]:
    return {"title": {"title": plain_rich_text(title)}}


def _copied_title(page: dict[str, Any]) -> dict[str, Any]:
    """Title property for a copy of *page*: every segment of ``properties.title``
    (or ``properties.Name``), and an empty title when the page has none."""
    props = page.get("properties")
    segments: Any = None
    if isinstance(props, dict):
        title_prop = props.get("title")
        if title_prop is None:
            title_prop = props.get("Name")
        if isinstance(title_prop, dict):
            segments = title_prop.get("title")
    return {"title": {"title": copy_rich_text(segments)}}


class NotionClient:
    """Synchronous Notion API client.

    Parameters
    ----------
    config:
        Resolved :class:`CliConfig`.
    http_transport:
        Optional ``httpx`` transport forwarded to :class:`NotionTransport`.
    metrics:
        Optional :class:`MetricsHook`.
    retry_notice:
        Optional callback run before every rate-limit sleep.
    """

    def __init__(
        self,
        config: CliConfig,
        *,
        http_transport: httpx.BaseTransport | None = None,
        metrics: MetricsHook | None = None,
        retry_notice: RetryNotice | None = None,
    ) -> None:
        self._config = config
        self._transport = NotionTransport(
            config,
            http_transport=http_transport,
            metrics=metrics,
            retry_notice=retry_notice,
        )
        self._pages = PageAPI(self._transport)
        self._blocks = BlockAPI(self._transport)
        self._databases = DatabaseAPI(self._transport)
        self._search = SearchAPI(self._transport)

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def search(self, query: str, limit: int = DEFAULT_LIMIT) -> list[dict[str, Any]]:
        """Search pages and databases by title, returning at most *limit* objects."""
        return self._search.search(query, limit)

    def get_page(self, page_id: str) -> dict[str, Any]:
        return self._pages.retrieve(normalize_id(page_id))

    def get_blocks(self, page_id: str, limit: int | None = None) -> list[dict[str, Any]]:
        """Return the top-level content blocks of a page, in order."""
        return self._blocks.get_children(normalize_id(page_id), limit)

    def get_block_ids(self, page_id: str) -> list[tuple[str, str]]:
        """Return ``(block_id, block_type)`` for every top-level block of a page."""
        return [
            (block.get("id", ""), block.get("type", "unknown"))
            for block in self.get_blocks(page_id)
        ]

    def query_database(
        self,
        database_id: str,
        filter: str | None = None,
        sort: str | None = None,
        direction: str = "desc",
        limit: int = DEFAULT_LIMIT,
    ) -> list[dict[str, Any]]:
        """Query a database.

        Parameters
        ----------
        database_id:
            The database to query.
        filter:
            Filter string ``Property[:type]=value``; see
            :mod:`notioncli.converter.filters`.
        sort:
            Property to sort by.
        direction:
            ``"asc"`` for ascending, anything else for descending.
        limit:
            Maximum number of rows.  ``0`` returns ``[]`` without a request.
        """
        database_id = normalize_id(database_id)
        filter_obj = filter_from_string(filter) if filter is not None else None
        sorts = build_sorts(sort, direction) if sort is not None else None
        return self._databases.query(database_id, limit, filter=filter_obj, sorts=sorts)

    # ------------------------------------------------------------------
    # Creating and appending
    # ------------------------------------------------------------------

    def create_page(
        self,
        parent_id: str,
        title: str,
        content: str | None = None,
    ) -> dict[str, Any]:
        """Create a page under *parent_id*, optionally with one paragraph of content."""
        children = [paragraph_block(content)] if content is not None else []
        return self._pages.create(
            parent={"page_id": normalize_id(parent_id)},
            properties=_title_property(title),
            children=children,
        )

    def append_blocks(self, page_id: str, children: list[dict[str, Any]]) -> dict[str, Any]:
        """Append prebuilt block objects to a page or block."""
        return self._blocks.append_children(normalize_id(page_id), children)

    def append_paragraph(self, page_id: str, content: str) -> dict[str, Any]:
        return self.append_blocks(page_id, [paragraph_block(content)])

    def append_code(
        self,
        page_id: str,
        code: str,
        language: str = DEFAULT_CODE_LANGUAGE,
    ) -> dict[str, Any]:
        return self.append_blocks(page_id, [code_block(code, language)])

    def append_bookmark(
        self,
        page_id: str,
        url: str,
        caption: str | None = None,
    ) -> dict[str, Any]:
        return self.append_blocks(page_id, [bookmark_block(url, caption)])

    def append_heading(self, page_id: str, text: str, level: int = 2) -> dict[str, Any]:
        """Append a heading.  Raises :class:`InvalidHeadingLevelError` unless
        *level* is 1, 2 or 3.
        """
        block = heading_block(text, level)
        return self.append_blocks(page_id, [block])

    def append_divider(self, page_id: str) -> dict[str, Any]:
        return self.append_blocks(page_id, [divider_block()])

    def append_list(self, page_id: str, items: list[str]) -> dict[str, Any]:
        """Append one bulleted list item per entry of *items*."""
        if not items:
            raise ValidationError(
                "At least one list item is required",
                context={"field": "items", "value": items},
            )
        return self.append_blocks(page_id, bulleted_list_blocks(items))

    def append_rich_text(
        self,
        page_id: str,
        segments: list[RichTextSegment],
    ) -> dict[str, Any]:
        """Append a paragraph built from plain and linked segments."""
        return self.append_blocks(page_id, [rich_paragraph_block(segments)])

    def append_link(
        self,
        page_id: str,
        link_text: str,
        url: str,
        prefix: str | None = None,
        suffix: str | None = None,
    ) -> dict[str, Any]:
        """Append ``prefix`` + linked ``link_text`` + ``suffix`` as one paragraph."""
        segments: list[RichTextSegment] = []
        if prefix:
            segments.append(RichTextSegment.plain(prefix))
        segments.append(RichTextSegment.link(link_text, url))
        if suffix:
            segments.append(RichTextSegment.plain(suffix))
        return self.append_rich_text(page_id, segments)

    # ------------------------------------------------------------------
    # Updating and deleting
    # ------------------------------------------------------------------

    def update_page(
        self,
        page_id: str,
        title: str | None = None,
        icon: str | None = None,
    ) -> dict[str, Any]:
        """Change a page's title and/or emoji icon.

        Raises
        ------
        ValidationError
            If neither *title* nor *icon* is given.
        """
        if title is None and icon is None:
            raise ValidationError(
                "At least one of --title or --icon must be specified",
                context={"field": "title/icon"},
            )
        return self._pages.update(
            normalize_id(page_id),
            properties=_title_property(title) if title is not None else None,
            icon={"type": "emoji", "emoji": icon} if icon is not None else None,
        )

    def delete_page(self, page_id: str) -> dict[str, Any]:
        """Archive a page (Notion moves it to the trash)."""
        return self._pages.update(normalize_id(page_id), archived=True)

    def delete_block(self, block_id: str) -> dict[str, Any]:
        return self._blocks.delete(normalize_id(block_id))

    # ------------------------------------------------------------------
    # Moving
    # ------------------------------------------------------------------

    def move_page(
        self,
        page_id: str,
        new_parent_id: str,
        delete_original: bool = False,
    ) -> MoveResult:
        """Recreate a page under *new_parent_id*, optionally archiving the source.

        The title and the top-level blocks of a supported type are copied;
        nested children and unsupported block types are not.  This is not
        an atomic move: if archiving the source fails, the copy remains
        and the error propagates.
        """
        source_id = normalize_id(page_id)
        parent_id = normalize_id(new_parent_id)

        source = self._pages.retrieve(source_id)
        blocks = self._blocks.get_children(source_id)

        children: list[dict[str, Any]] = []
        skipped: list[str] = []
        for block in blocks:
            copy = copyable_block(block)
            if copy is None:
                skipped.append(block.get("type", "unknown"))
            else:
                children.append(copy)

        batches = chunk_children(children, MAX_CHILDREN_PER_REQUEST)
        new_page = self._pages.create(
            parent={"page_id": parent_id},
            properties=_copied_title(source),
            children=batches[0] if batches else [],
        )
        new_id = new_page.get("id", "")
        for batch in batches[1:]:
            self._blocks.append_children(new_id, batch)

        log.debug(
            "Page copied",
            extra={
                "extra_fields": {
                    "op": "move_page",
                    "source_id": source_id,
                    "new_page_id": new_id,
                    "blocks_copied": len(children),
                    "blocks_skipped": len(skipped),
                }
            },
        )

        result = MoveResult(
            page=new_page,
            source_id=source_id,
            blocks_copied=len(children),
            blocks_skipped=skipped,
        )
        if delete_original:
            self._pages.update(source_id, archived=True)
            result.archived_original = True
        return result

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the underlying HTTP transport."""
        self._transport.close()

    def __enter__(self) -> NotionClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
