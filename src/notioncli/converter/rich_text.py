"""Build and read Notion rich_text arrays.

A rich_text segment sent to the API looks like::

    {"type": "text", "text": {"content": "hello"}}

and, when linked::

    {"type": "text", "text": {"content": "docs", "link": {"url": "https://..."}}}

Segments returned by the API additionally carry ``plain_text``, which is
what :func:`extract_plain_text` reads.
"""

from __future__ import annotations

from typing import Any

from notioncli.models import RichTextSegment


def text_segment(content: str, url: str | None = None) -> dict[str, Any]:
    """Return a single rich_text text segment."""
    text: dict[str, Any] = {"content": content}
    if url is not None:
        text["link"] = {"url": url}
    return {"type": "text", "text": text}


def build_rich_text(segments: list[RichTextSegment]) -> list[dict[str, Any]]:
    """Convert :class:`RichTextSegment` values into a rich_text array.

    Empty plain segments are dropped; link segments are always kept.
    """
    return [
        text_segment(seg.text, seg.url)
        for seg in segments
        if seg.text or seg.is_link
    ]


def plain_rich_text(content: str) -> list[dict[str, Any]]:
    """A rich_text array holding *content* as one unlinked segment."""
    return [text_segment(content)]


def extract_plain_text(rich_text: Any) -> str:
    """Concatenate the ``plain_text`` of every segment in *rich_text*.

    Anything that is not a list of segment dicts yields ``""``.
    """
    if not isinstance(rich_text, list):
        return ""
    return "".join(
        seg["plain_text"]
        for seg in rich_text
        if isinstance(seg, dict) and isinstance(seg.get("plain_text"), str)
    )


def copy_rich_text(rich_text: Any) -> list[dict[str, Any]]:
    """Rebuild an API rich_text array as text segments that can be sent back.

    Every segment keeps its ``plain_text`` and its link (``href``); mentions
    and equations come back as plain text.  Empty segments are dropped, so a
    blank source yields ``[]``.
    """
    if not isinstance(rich_text, list):
        return []
    return [
        text_segment(seg["plain_text"], seg.get("href") or None)
        for seg in rich_text
        if isinstance(seg, dict) and isinstance(seg.get("plain_text"), str) and seg["plain_text"]
    ]
