"""Split block lists into batches the Notion API will accept.

``POST /pages`` and ``PATCH /blocks/{id}/children`` both reject requests
carrying more than 100 children.
"""

from __future__ import annotations

from typing import Any

MAX_CHILDREN_PER_REQUEST = 100


def chunk_children(
    blocks: list[dict[str, Any]],
    size: int = MAX_CHILDREN_PER_REQUEST,
) -> list[list[dict[str, Any]]]:
    """Split *blocks* into consecutive batches of at most *size* items.

    An empty input returns an empty list (not ``[[]]``).

    Raises
    ------
    ValueError
        If *size* is less than 1.
    """
    if size < 1:
        raise ValueError(f"size must be >= 1, got {size}")

    return [blocks[i : i + size] for i in range(0, len(blocks), size)]
