"""Conversion between CLI arguments, Notion JSON payloads and terminal text."""

from .block_builder import (
    bookmark_block,
    bulleted_list_blocks,
    code_block,
    copyable_block,
    divider_block,
    heading_block,
    paragraph_block,
    rich_paragraph_block,
)
from .filters import build_sorts, filter_from_string, parse_filter
from .render import extract_property_value, extract_title, render_block, render_block_plain

__all__ = [
    "bookmark_block",
    "build_sorts",
    "bulleted_list_blocks",
    "code_block",
    "copyable_block",
    "divider_block",
    "extract_property_value",
    "extract_title",
    "filter_from_string",
    "heading_block",
    "paragraph_block",
    "parse_filter",
    "render_block",
    "render_block_plain",
    "rich_paragraph_block",
]
