from .chunk import chunk_children
from .ids import normalize_id
from .redact import redact

__all__ = [
    "chunk_children",
    "normalize_id",
    "redact",
]
