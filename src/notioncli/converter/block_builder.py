"""Builders for the block payloads the CLI appends to pages.

Each function returns one Notion block object ready to be placed in a
``children`` array.  :func:`copyable_block` does the reverse job for
``move``: it turns a block read from the API back into something that can
be sent to it.
"""

from __future__ import annotations

from typing import Any

from notioncli.errors import InvalidHeadingLevelError
from notioncli.models import RichTextSegment

from .rich_text import build_rich_text, plain_rich_text

DEFAULT_CODE_LANGUAGE = "plain text"

_HEADING_TYPES: dict[int, str] = {
    1: "heading_1",
    2: "heading_2",
    3: "heading_3",
}

# Block types whose content can be re-sent verbatim when copying a page.
_COPYABLE_TYPES: frozenset[str] = frozenset({
    "paragraph",
    "heading_1",
    "heading_2",
    "heading_3",
    "bulleted_list_item",
    "numbered_list_item",
    "to_do",
    "toggle",
    "quote",
    "callout",
    "code",
    "divider",
    "bookmark",
    "equation",
})

# Keys inside a block's type payload that the API returns but refuses on create.
_READ_ONLY_KEYS: frozenset[str] = frozenset({"children"})


def _block(block_type: str, payload: dict[str, Any]) -> dict[str, Any]:
    return {"object": "block", "type": block_type, block_type: payload}


def heading_type(level: int) -> str:
    """Map a heading level to its block type.

    Raises
    ------
    InvalidHeadingLevelError
        If *level* is not 1, 2 or 3.
    """
    # bool is an int subclass; True must not pass as level 1.
    if isinstance(level, bool) or level not in _HEADING_TYPES:
        raise InvalidHeadingLevelError(level)
    return _HEADING_TYPES[level]


def paragraph_block(content: str) -> dict[str, Any]:
    return _block("paragraph", {"rich_text": plain_rich_text(content)})


def rich_paragraph_block(segments: list[RichTextSegment]) -> dict[str, Any]:
    """A paragraph made of mixed plain and linked segments."""
    return _block("paragraph", {"rich_text": build_rich_text(segments)})


def code_block(code: str, language: str = DEFAULT_CODE_LANGUAGE) -> dict[str, Any]:
    return _block("code", {"rich_text": plain_rich_text(code), "language": language})


def bookmark_block(url: str, caption: str | None = None) -> dict[str, Any]:
    return _block(
        "bookmark",
        {"url": url, "caption": plain_rich_text(caption) if caption else []},
    )


def heading_block(text: str, level: int = 2) -> dict[str, Any]:
    return _block(heading_type(level), {"rich_text": plain_rich_text(text)})


def divider_block() -> dict[str, Any]:
    return _block("divider", {})


def bulleted_list_blocks(items: list[str]) -> list[dict[str, Any]]:
    """One ``bulleted_list_item`` block per entry of *items*."""
    return [
        _block("bulleted_list_item", {"rich_text": plain_rich_text(item)})
        for item in items
    ]


def split_list_items(raw: str, separator: str = ",") -> list[str]:
    """Split a ``"a, b, c"`` argument into trimmed, non-empty items."""
    return [item.strip() for item in raw.split(separator) if item.strip()]


def copyable_block(block: dict[str, Any]) -> dict[str, Any] | None:
    """Return a create-ready copy of an API block, or ``None`` if its type
    cannot be recreated (child pages, databases, synced blocks, files ...).

    Nested children are not copied.
    """
    block_type = block.get("type")
    if block_type not in _COPYABLE_TYPES:
        return None
    payload = block.get(block_type)
    if not isinstance(payload, dict):
        return None
    clean = {k: v for k, v in payload.items() if k not in _READ_ONLY_KEYS}
    return _block(block_type, clean)
