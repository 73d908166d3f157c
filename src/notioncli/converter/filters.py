"""Database filter and sort construction.

The ``query`` command takes a compact filter string::

    Status=Done                 rich_text contains "Done"
    Name:title=Roadmap          title contains "Roadmap"
    Stage:select=Review         select equals "Review"
    Done:checkbox=true          checkbox equals true
    Price:number=42             number equals 42.0

Parsing is lenient on purpose: unknown types fall back to ``rich_text``
and a number that does not parse compares against ``0.0``.
"""

from __future__ import annotations

import math
from typing import Any

from notioncli.errors import ValidationError
from notioncli.models import FilterKind, PropertyFilter, SortDirection

# Condition operator used for each filter kind.
_OPERATORS: dict[FilterKind, str] = {
    FilterKind.TITLE: "contains",
    FilterKind.SELECT: "equals",
    FilterKind.CHECKBOX: "equals",
    FilterKind.NUMBER: "equals",
    FilterKind.RICH_TEXT: "contains",
}


def _parse_number(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        return 0.0
    # NaN and infinities are not valid JSON numbers.
    return value if math.isfinite(value) else 0.0


def parse_filter(expression: str) -> PropertyFilter:
    """Parse ``Prop[:type]=value`` into a :class:`PropertyFilter`.

    Raises
    ------
    ValidationError
        If *expression* contains no ``=``.
    """
    prop_part, sep, raw_value = expression.partition("=")
    if not sep:
        raise ValidationError(
            f"Invalid filter '{expression}': expected 'Property=value' "
            "or 'Property:type=value'",
            context={"field": "filter", "value": expression},
        )

    name, colon, type_tag = prop_part.partition(":")
    kind = FilterKind.from_tag(type_tag.strip()) if colon else FilterKind.RICH_TEXT
    raw_value = raw_value.strip()

    value: str | bool | float
    if kind is FilterKind.CHECKBOX:
        value = raw_value.lower() == "true"
    elif kind is FilterKind.NUMBER:
        value = _parse_number(raw_value)
    else:
        value = raw_value

    return PropertyFilter(property=name.strip(), kind=kind, value=value)


def build_filter(parsed: PropertyFilter) -> dict[str, Any]:
    """Render a :class:`PropertyFilter` as a Notion filter object."""
    return {
        "property": parsed.property,
        parsed.kind.value: {_OPERATORS[parsed.kind]: parsed.value},
    }


def filter_from_string(expression: str) -> dict[str, Any]:
    return build_filter(parse_filter(expression))


def build_sorts(prop: str, direction: str) -> list[dict[str, Any]]:
    """Single-property sort list; ``direction`` is ``"asc"`` or ``"desc"``."""
    return [{"property": prop, "direction": SortDirection.from_cli(direction).value}]
