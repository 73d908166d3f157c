"""Tests for rich_text building and reading."""

from __future__ import annotations

from notioncli.converter.rich_text import (
    build_rich_text,
    copy_rich_text,
    extract_plain_text,
    plain_rich_text,
    text_segment,
)
from notioncli.models import RichTextSegment


class TestTextSegment:
    def test_plain(self):
        assert text_segment("hi") == {"type": "text", "text": {"content": "hi"}}

    def test_linked(self):
        assert text_segment("hi", "https://x") == {
            "type": "text",
            "text": {"content": "hi", "link": {"url": "https://x"}},
        }


class TestBuildRichText:
    def test_prefix_link_suffix(self):
        segments = [
            RichTextSegment.plain("Read "),
            RichTextSegment.link("this", "https://x"),
            RichTextSegment.plain("."),
        ]
        result = build_rich_text(segments)
        assert [s["text"]["content"] for s in result] == ["Read ", "this", "."]
        assert "link" not in result[0]["text"]
        assert result[1]["text"]["link"] == {"url": "https://x"}

    def test_empty_plain_segments_dropped(self):
        result = build_rich_text([RichTextSegment.plain(""), RichTextSegment.link("", "https://x")])
        assert result == [text_segment("", "https://x")]

    def test_plain_rich_text(self):
        assert plain_rich_text("abc") == [text_segment("abc")]


class TestExtractPlainText:
    def test_concatenates(self):
        assert extract_plain_text([{"plain_text": "a"}, {"plain_text": "b"}]) == "ab"

    def test_skips_malformed_segments(self):
        assert extract_plain_text([{"plain_text": "a"}, {"text": {}}, "x", {"plain_text": 3}]) == "a"

    def test_non_list(self):
        assert extract_plain_text(None) == ""
        assert extract_plain_text("text") == ""


class TestCopyRichText:
    def test_keeps_every_segment(self):
        source = [
            {"type": "text", "plain_text": "Q3 ", "text": {"content": "Q3 "}},
            {"type": "text", "plain_text": "roadmap", "href": "https://x.test"},
        ]
        assert copy_rich_text(source) == [
            {"type": "text", "text": {"content": "Q3 "}},
            {"type": "text", "text": {"content": "roadmap", "link": {"url": "https://x.test"}}},
        ]

    def test_mention_becomes_text(self):
        mention = {"type": "mention", "plain_text": "@Ada", "href": None, "mention": {}}
        assert copy_rich_text([mention]) == [{"type": "text", "text": {"content": "@Ada"}}]

    def test_empty_and_malformed(self):
        assert copy_rich_text([]) == []
        assert copy_rich_text(None) == []
        assert copy_rich_text([{"plain_text": ""}, {"text": {}}, "x"]) == []
