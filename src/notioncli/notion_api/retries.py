"""Retry decision logic for rate-limited requests.

``429 Too Many Requests`` is the only response the client retries.  Server
errors, other 4xx responses and network failures are surfaced immediately.

* :func:`should_retry` -- decide whether another attempt is allowed.
* :func:`compute_retry_delay` -- how long to wait before it.
"""

from __future__ import annotations

import math

# HTTP status codes that are safe to retry.
_RETRYABLE_STATUSES: frozenset[int] = frozenset({429})


def should_retry(status_code: int, retries_done: int, max_retries: int) -> bool:
    """Return ``True`` if a response with *status_code* may be retried.

    Parameters
    ----------
    status_code:
        HTTP status of the response just received.
    retries_done:
        How many retries have already been issued for this request.
    max_retries:
        Retry budget, not counting the initial attempt.
    """
    if status_code not in _RETRYABLE_STATUSES:
        return False
    return retries_done < max_retries


def compute_retry_delay(retry_after: float | None, default: float) -> float:
    """Return the seconds to sleep before the next attempt.

    The server's ``Retry-After`` value wins when it is a finite,
    non-negative number; otherwise *default* is used.
    """
    if retry_after is None or not math.isfinite(retry_after) or retry_after < 0:
        return default
    return retry_after
