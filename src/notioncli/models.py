"""Data types shared across notioncli.

Everything here is transient: built while a single command runs and
discarded when it finishes.  Nothing is persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RequestTemplate:
    """Everything needed to (re)build one HTTP request.

    The transport turns a template into a fresh ``httpx.Request`` on every
    attempt, so retries never share state with the attempt before them.
    Auth and version headers are not part of the template; the transport
    adds them.
    """

    method: str
    path: str
    json: dict[str, Any] | None = None
    params: dict[str, Any] | None = None


@dataclass
class RetryState:
    """Bookkeeping for one :meth:`NotionTransport.execute` call."""

    attempt: int = 0
    """Number of ``429`` responses seen so far."""

    last_delay: float | None = None
    """Seconds slept before the most recent retry."""


@dataclass
class PageResult:
    """One page of a paginated list endpoint."""

    results: list[dict[str, Any]]
    has_more: bool = False
    next_cursor: str | None = None

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> PageResult:
        """Build from a Notion list response (``results``/``has_more``/``next_cursor``)."""
        results = data.get("results")
        return cls(
            results=list(results) if isinstance(results, list) else [],
            has_more=bool(data.get("has_more", False)),
            next_cursor=data.get("next_cursor") or None,
        )


# ---------------------------------------------------------------------------
# Rich text
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RichTextSegment:
    """A run of text, optionally linked.

    Use :meth:`plain` and :meth:`link` rather than the constructor.
    """

    text: str
    url: str | None = None

    @classmethod
    def plain(cls, text: str) -> RichTextSegment:
        return cls(text=text)

    @classmethod
    def link(cls, text: str, url: str) -> RichTextSegment:
        return cls(text=text, url=url)

    @property
    def is_link(self) -> bool:
        return self.url is not None


# ---------------------------------------------------------------------------
# Closed type tags
# ---------------------------------------------------------------------------

class BlockKind(str, Enum):
    """Block types the renderer knows how to display."""

    PARAGRAPH = "paragraph"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    BULLETED_LIST_ITEM = "bulleted_list_item"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    CODE = "code"
    DIVIDER = "divider"
    UNKNOWN = "unknown"
    """Any block type not listed above.  Rendered as nothing."""

    @classmethod
    def from_tag(cls, tag: object) -> BlockKind:
        try:
            kind = cls(tag)
        except ValueError:
            return cls.UNKNOWN
        return kind


class PropertyKind(str, Enum):
    """Database property value types, in the order they are probed."""

    RICH_TEXT = "rich_text"
    SELECT = "select"
    MULTI_SELECT = "multi_select"
    NUMBER = "number"
    CHECKBOX = "checkbox"
    DATE = "date"
    URL = "url"


class FilterKind(str, Enum):
    """Property types accepted in a ``Prop:type=value`` filter string."""

    TITLE = "title"
    SELECT = "select"
    CHECKBOX = "checkbox"
    NUMBER = "number"
    RICH_TEXT = "rich_text"
    """Default for missing or unrecognised types."""

    @classmethod
    def from_tag(cls, tag: str | None) -> FilterKind:
        try:
            kind = cls(tag)
        except ValueError:
            return cls.RICH_TEXT
        return kind


class SortDirection(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"

    @classmethod
    def from_cli(cls, direction: str) -> SortDirection:
        """``"asc"`` means ascending; anything else is descending."""
        return cls.ASCENDING if direction == "asc" else cls.DESCENDING


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PropertyFilter:
    """A parsed ``Prop[:type]=value`` filter."""

    property: str
    kind: FilterKind
    value: str | bool | float


@dataclass
class MoveResult:
    """Outcome of :meth:`NotionClient.move_page`.

    The move is a copy followed by an optional archive of the source; the
    two steps are not atomic.
    """

    page: dict[str, Any]
    """The newly created page object."""

    source_id: str
    blocks_copied: int = 0
    blocks_skipped: list[str] = field(default_factory=list)
    """Block types that could not be recreated under the new parent."""

    archived_original: bool = False

    @property
    def page_id(self) -> str:
        return self.page.get("id", "")
