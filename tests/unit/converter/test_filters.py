"""Tests for database filter and sort construction."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from notioncli.converter.filters import build_sorts, filter_from_string, parse_filter
from notioncli.errors import ValidationError
from notioncli.models import FilterKind, PropertyFilter


class TestParseFilter:
    def test_default_type_is_rich_text(self):
        assert parse_filter("Status=Done") == PropertyFilter("Status", FilterKind.RICH_TEXT, "Done")

    def test_checkbox_true(self):
        assert parse_filter("Done:checkbox=true").value is True

    @pytest.mark.parametrize("raw", ["TRUE", "True", " true "])
    def test_checkbox_case_insensitive(self, raw):
        assert parse_filter(f"Done:checkbox={raw}").value is True

    @pytest.mark.parametrize("raw", ["false", "yes", "1", ""])
    def test_checkbox_anything_else_is_false(self, raw):
        assert parse_filter(f"Done:checkbox={raw}").value is False

    def test_number(self):
        parsed = parse_filter("Price:number=42")
        assert parsed.kind is FilterKind.NUMBER
        assert parsed.value == 42.0
        assert isinstance(parsed.value, float)

    def test_unparseable_number_is_zero(self):
        assert parse_filter("Price:number=abc").value == 0.0

    @pytest.mark.parametrize("raw", ["nan", "inf", "-inf"])
    def test_non_finite_number_is_zero(self, raw):
        assert parse_filter(f"Price:number={raw}").value == 0.0

    def test_unknown_type_falls_back_to_rich_text(self):
        assert parse_filter("Notes:people=bob").kind is FilterKind.RICH_TEXT

    def test_splits_on_first_equals(self):
        parsed = parse_filter("Formula=a=b")
        assert parsed.property == "Formula"
        assert parsed.value == "a=b"

    def test_whitespace_trimmed(self):
        parsed = parse_filter(" Stage : select = Review ")
        assert parsed == PropertyFilter("Stage", FilterKind.SELECT, "Review")

    def test_missing_equals_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_filter("Status")
        assert exc_info.value.context == {"field": "filter", "value": "Status"}

    @given(st.text(), st.text())
    def test_property_name_never_contains_separator(self, left, right):
        parsed = parse_filter(f"{left}={right}")
        assert "=" not in parsed.property


class TestFilterFromString:
    def test_rich_text(self):
        assert filter_from_string("Status=Done") == {
            "property": "Status",
            "rich_text": {"contains": "Done"},
        }

    def test_title(self):
        assert filter_from_string("Name:title=Road") == {
            "property": "Name",
            "title": {"contains": "Road"},
        }

    def test_select(self):
        assert filter_from_string("Stage:select=Review") == {
            "property": "Stage",
            "select": {"equals": "Review"},
        }

    def test_checkbox(self):
        assert filter_from_string("Done:checkbox=true") == {
            "property": "Done",
            "checkbox": {"equals": True},
        }

    def test_number(self):
        assert filter_from_string("Price:number=42") == {
            "property": "Price",
            "number": {"equals": 42.0},
        }


class TestBuildSorts:
    def test_ascending(self):
        assert build_sorts("Date", "asc") == [{"property": "Date", "direction": "ascending"}]

    @pytest.mark.parametrize("direction", ["desc", "DESC", "up", ""])
    def test_anything_else_is_descending(self, direction):
        assert build_sorts("Date", direction)[0]["direction"] == "descending"
