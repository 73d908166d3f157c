"""Render Notion API objects as terminal text.

Pure, read-only projections of JSON objects to display strings:

* :func:`extract_title` -- the title of a page, database or database row.
* :func:`extract_property_value` -- a database property value.
* :func:`render_block` -- one content block, with rich console markup.

Block and property types are dispatched through the closed
:class:`BlockKind` / :class:`PropertyKind` enums.  Block types the renderer
does not know map to ``BlockKind.UNKNOWN`` and render as nothing, so pages
containing newer block types still display.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from rich.markup import escape

from notioncli.models import BlockKind, PropertyKind

from .rich_text import extract_plain_text

UNTITLED = "(Untitled)"
CHECKBOX_TRUE = "✓"
CHECKBOX_FALSE = "✗"
DIVIDER = "---"


# ---------------------------------------------------------------------------
# Titles
# ---------------------------------------------------------------------------

def _first_plain_text(title: Any) -> str | None:
    if isinstance(title, list) and title:
        first = title[0]
        if isinstance(first, dict) and isinstance(first.get("plain_text"), str):
            return first["plain_text"]
    return None


def extract_title(item: dict[str, Any]) -> str:
    """Return the display title of a page, database row or database.

    Lookup order: ``properties.title``, then ``properties.Name`` (only
    when ``properties.title`` is absent), then the top-level ``title``
    array used by database objects.  The first segment's ``plain_text`` is
    used.  Returns ``"(Untitled)"`` when nothing matches.
    """
    props = item.get("properties")
    if isinstance(props, dict):
        title_prop = props.get("title")
        if title_prop is None:
            title_prop = props.get("Name")
        if isinstance(title_prop, dict):
            text = _first_plain_text(title_prop.get("title"))
            if text is not None:
                return text

    text = _first_plain_text(item.get("title"))
    if text is not None:
        return text

    return UNTITLED


# ---------------------------------------------------------------------------
# Property values
# ---------------------------------------------------------------------------

def _format_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _rich_text_value(raw: Any) -> str | None:
    return extract_plain_text(raw) or None


def _select_value(raw: Any) -> str | None:
    if isinstance(raw, dict) and isinstance(raw.get("name"), str):
        return raw["name"]
    return None


def _multi_select_value(raw: Any) -> str | None:
    if not isinstance(raw, list):
        return None
    names = [
        opt["name"]
        for opt in raw
        if isinstance(opt, dict) and isinstance(opt.get("name"), str)
    ]
    return ", ".join(names) or None


def _number_value(raw: Any) -> str | None:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    return _format_number(raw)


def _checkbox_value(raw: Any) -> str | None:
    if not isinstance(raw, bool):
        return None
    return CHECKBOX_TRUE if raw else CHECKBOX_FALSE


def _date_value(raw: Any) -> str | None:
    if isinstance(raw, dict) and isinstance(raw.get("start"), str):
        return raw["start"]
    return None


def _url_value(raw: Any) -> str | None:
    return raw if isinstance(raw, str) else None


_PROPERTY_FORMATTERS: dict[PropertyKind, Callable[[Any], str | None]] = {
    PropertyKind.RICH_TEXT: _rich_text_value,
    PropertyKind.SELECT: _select_value,
    PropertyKind.MULTI_SELECT: _multi_select_value,
    PropertyKind.NUMBER: _number_value,
    PropertyKind.CHECKBOX: _checkbox_value,
    PropertyKind.DATE: _date_value,
    PropertyKind.URL: _url_value,
}


def extract_property_value(prop: dict[str, Any]) -> str | None:
    """Render a database property value, or ``None`` if it has no
    displayable value.

    Property kinds are probed in :class:`PropertyKind` order; the first
    one present on *prop* with a usable value wins.  Property types not in
    :class:`PropertyKind` (people, relation, formula ...) yield ``None``.
    """
    for kind in PropertyKind:
        if kind.value not in prop:
            continue
        value = _PROPERTY_FORMATTERS[kind](prop[kind.value])
        if value is not None:
            return value
    return None


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------

def extract_rich_text(block: dict[str, Any], block_type: str) -> str | None:
    """Return the concatenated plain text of ``block[block_type].rich_text``,
    or ``None`` if it is missing or empty.
    """
    payload = block.get(block_type)
    if not isinstance(payload, dict):
        return None
    return extract_plain_text(payload.get("rich_text")) or None


def _heading(prefix: str) -> Callable[[str | None, bool], str | None]:
    def fmt(text: str | None, markup: bool) -> str | None:
        if text is None:
            return None
        if markup:
            return f"\n[bold]{prefix} {escape(text)}[/bold]"
        return f"\n{prefix} {text}"
    return fmt


def _paragraph(text: str | None, markup: bool) -> str | None:
    if text is None:
        return None
    return escape(text) if markup else text


def _bulleted(text: str | None, markup: bool) -> str | None:
    if text is None:
        return None
    return f"  • {escape(text) if markup else text}"


def _numbered(text: str | None, markup: bool) -> str | None:
    if text is None:
        return None
    return f"  1. {escape(text) if markup else text}"


def _code(text: str | None, markup: bool) -> str | None:
    if text is None:
        return None
    body = f"[dim]{escape(text)}[/dim]" if markup else text
    return f"```\n{body}\n```"


def _divider(_text: str | None, markup: bool) -> str | None:
    return f"[dim]{DIVIDER}[/dim]" if markup else DIVIDER


_BLOCK_FORMATTERS: dict[BlockKind, Callable[[str | None, bool], str | None]] = {
    BlockKind.PARAGRAPH: _paragraph,
    BlockKind.HEADING_1: _heading("#"),
    BlockKind.HEADING_2: _heading("##"),
    BlockKind.HEADING_3: _heading("###"),
    BlockKind.BULLETED_LIST_ITEM: _bulleted,
    BlockKind.NUMBERED_LIST_ITEM: _numbered,
    BlockKind.CODE: _code,
    BlockKind.DIVIDER: _divider,
}

_missing = set(BlockKind) - {BlockKind.UNKNOWN} - set(_BLOCK_FORMATTERS)
if _missing:
    raise RuntimeError(f"No block formatter for: {sorted(k.value for k in _missing)}")
_missing = set(PropertyKind) - set(_PROPERTY_FORMATTERS)
if _missing:
    raise RuntimeError(f"No property formatter for: {sorted(k.value for k in _missing)}")
del _missing


def render_block(block: dict[str, Any], markup: bool = True) -> str | None:
    """Render one content block, or return ``None`` if there is nothing to show.

    With *markup* the result contains rich console markup (bold headings,
    dimmed code and dividers) and user text is escaped; without it the
    result is plain text.  Blocks whose text is empty, and block types
    outside :class:`BlockKind`, render as ``None``.
    """
    kind = BlockKind.from_tag(block.get("type"))
    if kind is BlockKind.UNKNOWN:
        return None
    return _BLOCK_FORMATTERS[kind](extract_rich_text(block, kind.value), markup)


def render_block_plain(block: dict[str, Any]) -> str | None:
    return render_block(block, markup=False)
