"""Metrics hook protocol and no-op default implementation.

The transport reports counters and timings through a :class:`MetricsHook`.
By default a :class:`NoopMetricsHook` is used.  Anything implementing
``increment`` and ``timing`` can be supplied instead, e.g. to count API
calls in a test or to forward them to StatsD.

Emitted metric names:

* ``notioncli.requests_total``        -- counter, tagged with method/path/status
* ``notioncli.rate_limited_total``    -- counter
* ``notioncli.retries_total``         -- counter
* ``notioncli.request_duration_ms``   -- timing
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy."""

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...


class NoopMetricsHook:
    """Metrics backend that discards every data point."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
