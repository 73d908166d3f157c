"""notioncli: a command-line client for the Notion API.

Public re-exports
-----------------

* **Client:** :class:`NotionClient`
* **Configuration:** :class:`CliConfig`, :func:`resolve_config`
* **Errors:** every :class:`NotionCliError` subclass and :class:`ErrorCode`
* **Models:** request/response helper types

Usage::

    from notioncli import NotionClient, resolve_config

    with NotionClient(resolve_config()) as client:
        page = client.get_page("2fb74f324ab980f583dfc93c885072e7")
"""

from __future__ import annotations

# ── Client ─────────────────────────────────────────────────────────────
from notioncli.client import NotionClient

# ── Configuration ───────────────────────────────────────────────────────
from notioncli.config import CliConfig, FileConfig, resolve_config

# ── Errors ──────────────────────────────────────────────────────────────
from notioncli.errors import (
    ApiAuthError,
    ApiError,
    ApiNotFoundError,
    ApiPermissionError,
    ApiValidationError,
    ConfigError,
    ErrorCode,
    InvalidHeadingLevelError,
    InvalidIdentifierError,
    MissingCredentialError,
    NetworkError,
    NotionCliError,
    RateLimitExhaustedError,
    ValidationError,
)

# ── Models ──────────────────────────────────────────────────────────────
from notioncli.models import (
    BlockKind,
    FilterKind,
    MoveResult,
    PageResult,
    PropertyFilter,
    PropertyKind,
    RequestTemplate,
    RichTextSegment,
)
from notioncli.utils.ids import normalize_id

__version__ = "0.3.0"

__all__ = [
    "ApiAuthError",
    "ApiError",
    "ApiNotFoundError",
    "ApiPermissionError",
    "ApiValidationError",
    "BlockKind",
    "CliConfig",
    "ConfigError",
    "ErrorCode",
    "FileConfig",
    "FilterKind",
    "InvalidHeadingLevelError",
    "InvalidIdentifierError",
    "MissingCredentialError",
    "MoveResult",
    "NetworkError",
    "NotionCliError",
    "NotionClient",
    "PageResult",
    "PropertyFilter",
    "PropertyKind",
    "RateLimitExhaustedError",
    "RequestTemplate",
    "RichTextSegment",
    "ValidationError",
    "normalize_id",
    "resolve_config",
]
