"""Error hierarchy for notioncli.

Every error the client raises inherits from :class:`NotionCliError`. Each
carries a machine-readable ``code`` (from :class:`ErrorCode`), a
human-readable ``message``, an optional structured ``context`` dict, and an
optional ``cause`` (chained exception).

The command boundary catches :class:`NotionCliError`, prints ``message`` to
stderr and exits with status 1. Nothing below that boundary recovers from
these errors; the only automatic retry lives in the transport's 429 loop.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error the client can raise."""

    INVALID_IDENTIFIER = "INVALID_IDENTIFIER"
    API_ERROR = "API_ERROR"
    API_VALIDATION_ERROR = "API_VALIDATION_ERROR"
    API_AUTH_ERROR = "API_AUTH_ERROR"
    API_PERMISSION_ERROR = "API_PERMISSION_ERROR"
    API_NOT_FOUND = "API_NOT_FOUND"
    RATE_LIMIT_EXHAUSTED = "RATE_LIMIT_EXHAUSTED"
    NETWORK_ERROR = "NETWORK_ERROR"
    MISSING_CREDENTIAL = "MISSING_CREDENTIAL"
    INVALID_HEADING_LEVEL = "INVALID_HEADING_LEVEL"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIG_ERROR = "CONFIG_ERROR"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class NotionCliError(Exception):
    """Base exception for all notioncli errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        An operator-facing description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
        Keys are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Input errors
# ---------------------------------------------------------------------------

class InvalidIdentifierError(NotionCliError):
    """A page, block or database ID does not contain exactly 32 hex digits.

    Context keys: ``value`` (the original input), ``hex_length``.
    """

    def __init__(self, value: str, hex_length: int) -> None:
        super().__init__(
            code=ErrorCode.INVALID_IDENTIFIER,
            message=(
                f"Invalid page ID '{value}': expected 32 hex characters, "
                f"got {hex_length}"
            ),
            context={"value": value, "hex_length": hex_length},
        )


class InvalidHeadingLevelError(NotionCliError):
    """A heading level outside ``1..3`` was requested.

    Context keys: ``level``.
    """

    def __init__(self, level: object) -> None:
        super().__init__(
            code=ErrorCode.INVALID_HEADING_LEVEL,
            message=f"Invalid heading level {level!r}: must be 1, 2 or 3",
            context={"level": level},
        )


class ValidationError(NotionCliError):
    """Caller-supplied arguments are incomplete or malformed.

    Context keys: ``field``, ``value``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class MissingCredentialError(NotionCliError):
    """No API key was found through any configured source.

    Context keys: ``config_path``.
    """

    def __init__(self, config_path: str) -> None:
        super().__init__(
            code=ErrorCode.MISSING_CREDENTIAL,
            message=(
                "Notion API key not found.\n\n"
                "Set it using one of these methods:\n"
                "1. Run: notion-cli init\n"
                "2. Set env: export NOTION_API_KEY=secret_xxx\n"
                f'3. Add to {config_path}: api_key = "secret_xxx"\n'
                "4. Use --api-key option"
            ),
            context={"config_path": config_path},
        )


class ConfigError(NotionCliError):
    """The config file could not be written.

    Context keys: ``path``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.CONFIG_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# API / transport errors
# ---------------------------------------------------------------------------

class ApiError(NotionCliError):
    """Notion API answered with a non-2xx, non-429 status.

    Context keys: ``status_code``, ``body``, ``method``, ``path``,
    ``notion_code``.
    """

    default_code: str = ErrorCode.API_ERROR

    def __init__(
        self,
        message: str,
        status_code: int,
        body: Any = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        ctx = {"status_code": status_code, "body": body}
        ctx.update(context or {})
        super().__init__(
            code=self.default_code,
            message=message,
            context=ctx,
            cause=cause,
        )


class ApiValidationError(ApiError):
    """Notion API returned 400 -- the request payload was rejected."""

    default_code = ErrorCode.API_VALIDATION_ERROR


class ApiAuthError(ApiError):
    """Notion API returned 401 -- the integration token is invalid."""

    default_code = ErrorCode.API_AUTH_ERROR


class ApiPermissionError(ApiError):
    """Notion API returned 403 -- the integration lacks access."""

    default_code = ErrorCode.API_PERMISSION_ERROR


class ApiNotFoundError(ApiError):
    """Notion API returned 404 -- the resource does not exist or is not shared."""

    default_code = ErrorCode.API_NOT_FOUND


class RateLimitExhaustedError(NotionCliError):
    """The API kept answering 429 after every retry was spent.

    Context keys: ``attempts``, ``max_retries``, ``last_retry_after``,
    ``method``, ``path``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.RATE_LIMIT_EXHAUSTED,
            message=message,
            context=context,
            cause=cause,
        )


class NetworkError(NotionCliError):
    """A transport-level failure occurred (timeout, DNS, connection reset).

    Context keys: ``method``, ``path``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.NETWORK_ERROR,
            message=message,
            context=context,
            cause=cause,
        )
