"""Synchronous HTTP transport for the Notion API.

Each call to :meth:`NotionTransport.execute` runs the full request
lifecycle:

1. Build a fresh ``httpx.Request`` from the :class:`RequestTemplate`, with
   the ``Authorization``, ``Notion-Version`` and ``Content-Type`` headers.
2. Send it.
3. On ``2xx`` -- return the parsed JSON object; any other body raises
   :class:`ApiError`.
4. On ``429`` -- read ``Retry-After``, notify the operator, sleep, retry.
5. On any other status -- raise the matching :class:`ApiError` subclass.
6. On a network failure -- raise :class:`NetworkError` (no retry).
7. On a ``429`` once the retry budget is spent -- raise
   :class:`RateLimitExhaustedError`.
"""

from __future__ import annotations

import json as _json
import sys
import time
from collections.abc import Callable
from typing import Any

import httpx
from rich.console import Console

from notioncli.config import CliConfig
from notioncli.errors import (
    ApiAuthError,
    ApiError,
    ApiNotFoundError,
    ApiPermissionError,
    ApiValidationError,
    NetworkError,
    RateLimitExhaustedError,
)
from notioncli.models import RequestTemplate, RetryState
from notioncli.observability import MetricsHook, NoopMetricsHook, get_logger

from .retries import compute_retry_delay, should_retry

log = get_logger("notioncli.transport")

RetryNotice = Callable[[int, int, float], None]
"""Called before each rate-limit sleep with ``(retry_number, max_retries, delay)``."""

_STATUS_ERRORS: dict[int, type[ApiError]] = {
    400: ApiValidationError,
    401: ApiAuthError,
    403: ApiPermissionError,
    404: ApiNotFoundError,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_retry_after(response: httpx.Response) -> float | None:
    """Extract the ``Retry-After`` header value as a float, or ``None``."""
    raw = response.headers.get("retry-after")
    if raw is None:
        return None
    try:
        return float(raw)
    except (ValueError, TypeError):
        return None


def _response_body(response: httpx.Response) -> Any:
    """Return the decoded JSON body, or the raw text if it is not JSON."""
    try:
        return response.json()
    except ValueError:
        return response.text


def _raise_for_status(response: httpx.Response, method: str, path: str) -> None:
    """Raise the :class:`ApiError` subclass matching a non-2xx response."""
    status = response.status_code
    body = _response_body(response)

    if isinstance(body, dict):
        notion_message = body.get("message") or response.reason_phrase
        notion_code = body.get("code", "")
    else:
        notion_message = (body or response.reason_phrase)[:500]
        notion_code = ""

    error_cls = _STATUS_ERRORS.get(status, ApiError)
    raise error_cls(
        message=f"Notion API returned {status} on {method} {path}: {notion_message}",
        status_code=status,
        body=body,
        context={"method": method, "path": path, "notion_code": notion_code},
    )


def _json_object(response: httpx.Response, method: str, path: str) -> dict[str, Any]:
    """Decode a 2xx body, which must be a JSON object."""
    try:
        data = response.json()
    except ValueError as exc:
        raise _malformed_error(response, method, path, "a non-JSON body", exc) from exc
    if not isinstance(data, dict):
        raise _malformed_error(response, method, path, f"a JSON {type(data).__name__}")
    return data


def _malformed_error(
    response: httpx.Response,
    method: str,
    path: str,
    what: str,
    cause: Exception | None = None,
) -> ApiError:
    status = response.status_code
    return ApiError(
        message=f"Notion API returned {status} with {what} on {method} {path}",
        status_code=status,
        body=response.text[:500],
        context={"method": method, "path": path, "notion_code": ""},
        cause=cause,
    )


def _format_seconds(seconds: float) -> str:
    return str(int(seconds)) if float(seconds).is_integer() else f"{seconds:g}"


def console_retry_notice(console: Console | None = None) -> RetryNotice:
    """Build a :data:`RetryNotice` that prints a yellow warning line to stderr."""
    console = console or Console(stderr=True, highlight=False, soft_wrap=True)

    def notice(retry_number: int, max_retries: int, delay: float) -> None:
        console.print(
            f"[yellow]⚠[/yellow] Rate limited. Waiting {_format_seconds(delay)} "
            f"seconds before retry ({retry_number}/{max_retries})..."
        )

    return notice


def _dump_payload(
    template: RequestTemplate,
    url: str,
    response: httpx.Response,
    token: str,
) -> None:
    """Write a redacted debug dump of the request/response to stderr."""
    from notioncli.utils.redact import redact

    dump: dict[str, Any] = {
        "method": template.method,
        "url": url,
        "response_status": response.status_code,
        "response_body": _response_body(response),
    }
    if template.json is not None:
        dump["request_body"] = template.json
    print(
        _json.dumps(redact(dump, token), indent=2, default=str, ensure_ascii=False),
        file=sys.stderr,
    )


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------

class NotionTransport:
    """Synchronous HTTP transport with auth and retry-on-429.

    Parameters
    ----------
    config:
        Resolved configuration (key, version, timeout, retry budget).
    http_transport:
        Optional ``httpx`` transport, e.g. ``httpx.MockTransport`` in tests.
    metrics:
        Optional :class:`MetricsHook`; defaults to a no-op.
    retry_notice:
        Called before every rate-limit sleep.  Defaults to a rich warning
        line on stderr.
    """

    def __init__(
        self,
        config: CliConfig,
        *,
        http_transport: httpx.BaseTransport | None = None,
        metrics: MetricsHook | None = None,
        retry_notice: RetryNotice | None = None,
    ) -> None:
        self._config = config
        self._metrics = metrics if metrics is not None else NoopMetricsHook()
        self._retry_notice = retry_notice or console_retry_notice()
        self._headers = {
            "Authorization": f"Bearer {config.api_key}",
            "Notion-Version": config.api_version,
            "Content-Type": "application/json",
        }
        self._client = httpx.Client(
            base_url=config.base_url,
            timeout=httpx.Timeout(config.timeout_seconds),
            transport=http_transport,
        )

    # -- public API --------------------------------------------------------

    def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Shorthand for :meth:`execute` with a freshly built template."""
        return self.execute(RequestTemplate(method, path, json=json, params=params))

    def execute(self, template: RequestTemplate) -> dict[str, Any]:
        """Send the request described by *template* and return its JSON body.

        Raises
        ------
        ApiError
            On any non-2xx response other than ``429`` (status-specific
            subclasses for 400, 401, 403 and 404).
        RateLimitExhaustedError
            When ``429`` persists after ``config.max_retries`` retries.
        NetworkError
            On transport-level failures (timeouts, DNS, refused connections).
        """
        method, path = template.method, template.path
        max_retries = self._config.max_retries
        state = RetryState()

        while True:
            request = self._build_request(template)

            t0 = time.monotonic()
            try:
                response = self._client.send(request)
            except httpx.TransportError as exc:
                self._metrics.increment(
                    "notioncli.requests_total",
                    tags={"method": method, "path": path, "status": "error"},
                )
                raise NetworkError(
                    message=f"Failed to send request {method} {path}: {exc}",
                    context={"method": method, "path": path},
                    cause=exc,
                ) from exc
            elapsed_ms = (time.monotonic() - t0) * 1000

            status = response.status_code
            tags = {"method": method, "path": path, "status": str(status)}
            self._metrics.increment("notioncli.requests_total", tags=tags)
            self._metrics.timing("notioncli.request_duration_ms", elapsed_ms, tags=tags)
            log.debug(
                "Request complete",
                extra={
                    "extra_fields": {
                        "method": method,
                        "path": path,
                        "status": status,
                        "duration_ms": round(elapsed_ms, 1),
                    }
                },
            )

            if self._config.debug_dump_payload:
                _dump_payload(template, str(request.url), response, self._config.api_key)

            if 200 <= status < 300:
                if status == 204 or not response.content:
                    return {}
                return _json_object(response, method, path)

            if status != 429:
                _raise_for_status(response, method, path)

            self._metrics.increment(
                "notioncli.rate_limited_total",
                tags={"method": method, "path": path},
            )
            if not should_retry(status, state.attempt, max_retries):
                raise _exhausted_error(method, path, state, max_retries)

            state.attempt += 1
            state.last_delay = compute_retry_delay(
                _parse_retry_after(response),
                self._config.default_retry_delay,
            )
            log.debug(
                "Rate limited by Notion API",
                extra={
                    "extra_fields": {
                        "method": method,
                        "path": path,
                        "retry": state.attempt,
                        "delay_seconds": state.last_delay,
                    }
                },
            )
            self._metrics.increment(
                "notioncli.retries_total",
                tags={"method": method, "path": path, "reason": "rate_limited"},
            )
            self._retry_notice(state.attempt, max_retries, state.last_delay)
            time.sleep(state.last_delay)

    def close(self) -> None:
        """Close the underlying HTTP client and release resources."""
        self._client.close()

    def __enter__(self) -> NotionTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # -- internals ---------------------------------------------------------

    def _build_request(self, template: RequestTemplate) -> httpx.Request:
        return self._client.build_request(
            template.method,
            template.path,
            json=template.json,
            params=template.params,
            headers=self._headers,
        )


def _exhausted_error(
    method: str,
    path: str,
    state: RetryState,
    max_retries: int,
) -> RateLimitExhaustedError:
    return RateLimitExhaustedError(
        message=f"Rate limit exceeded after {max_retries} retries on {method} {path}",
        context={
            "method": method,
            "path": path,
            "attempts": state.attempt + 1,
            "max_retries": max_retries,
            "last_retry_after": state.last_delay,
        },
    )
