"""Structured JSON logger for notioncli.

Every log record is emitted to stderr as a single-line JSON object, so that
``notion-cli -v ... 2> trace.log`` produces something a log pipeline can
ingest as-is::

    {"ts": "2026-01-05T09:12:00.123456+00:00", "level": "DEBUG",
     "logger": "notioncli.transport", "message": "Request complete",
     "method": "POST", "path": "/search", "status": 200}

Usage::

    from notioncli.observability import get_logger

    log = get_logger("notioncli.client")
    log.debug("page created", extra={"extra_fields": {"page_id": "abc"}})
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

ROOT_LOGGER_NAME = "notioncli"


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Guaranteed keys are ``ts``, ``level``, ``logger`` and ``message``.
    Structured fields passed via ``extra={"extra_fields": {...}}`` are merged
    into the top-level object.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(
            record, "extra_fields", None
        )
        if extra_fields is not None:
            log_entry.update(extra_fields)

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


_configured = False


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Get a logger under the ``notioncli`` hierarchy.

    The first call attaches a :class:`StructuredFormatter` stderr handler to
    the ``notioncli`` root logger (level WARNING, no propagation).  Child
    loggers such as ``"notioncli.transport"`` propagate to it.  Repeated
    calls never add duplicate handlers.
    """
    global _configured
    if not _configured:
        root = logging.getLogger(ROOT_LOGGER_NAME)
        root.setLevel(logging.WARNING)
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(StructuredFormatter())
        root.addHandler(handler)
        root.propagate = False
        _configured = True

    return logging.getLogger(name)


def set_log_level(level: int | str) -> None:
    """Set the minimum level of the ``notioncli`` root logger.

    Accepts an ``int`` (``logging.DEBUG``) or a case-insensitive name.
    """
    resolved = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    get_logger().setLevel(resolved)
