"""Normalization of Notion resource identifiers.

Notion accepts page, block and database IDs as 32 hexadecimal digits,
canonically written in UUID grouping (``8-4-4-4-12``).  Users paste IDs in
every shape imaginable: bare hex, dashed, or the tail of a share URL.  The
only rule applied here is that the string must strip down to exactly 32 hex
digits.
"""

from __future__ import annotations

import string

from notioncli.errors import InvalidIdentifierError

ID_HEX_LENGTH = 32

# Group boundaries of the canonical 8-4-4-4-12 rendering.
_GROUPS: tuple[tuple[int, int], ...] = ((0, 8), (8, 12), (12, 16), (16, 20), (20, 32))

_HEX_DIGITS = frozenset(string.hexdigits)


def normalize_id(value: str) -> str:
    """Return *value* as a dashed 32-hex-digit identifier.

    Every character that is not an ASCII hex digit is dropped; letter case
    is preserved.

    Raises
    ------
    InvalidIdentifierError
        If the stripped string is not exactly 32 characters long.

    Examples
    --------
    >>> normalize_id("2fb74f324ab980f583dfc93c885072e7")
    '2fb74f32-4ab9-80f5-83df-c93c885072e7'
    """
    clean = "".join(ch for ch in value if ch in _HEX_DIGITS)
    if len(clean) != ID_HEX_LENGTH:
        raise InvalidIdentifierError(value, len(clean))
    return "-".join(clean[start:end] for start, end in _GROUPS)
