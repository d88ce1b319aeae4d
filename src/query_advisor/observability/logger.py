"""Observability logger utilities.

Provides:
- ``get_logger``: standard human-readable logger.
- ``JSONFormatter``: custom :class:`logging.Formatter` that emits JSON,
  including the structured context advisory events attach via ``extra=``.
- ``get_event_logger``: returns a logger backed by a JSON Lines file
  handler, for shipping advisory events to a log pipeline.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from query_advisor.core.settings import resolve_path

DEFAULT_EVENTS_PATH = "logs/session_query_events.jsonl"

# Advisory events are emitted by loggers under this namespace
ADVISOR_LOGGER_NAME = "query_advisor"


# ── Human-readable logger ───────────────────────────────────────────


def get_logger(name: str = ADVISOR_LOGGER_NAME, log_level: Optional[str] = None) -> logging.Logger:
    """Get a configured logger.

    Args:
        name: Logger name.
        log_level: Optional log level string (e.g., "INFO").

    Returns:
        Configured logger instance.
    """

    if log_level:
        level = getattr(logging, log_level.upper(), logging.INFO)
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )

    return logging.getLogger(name)


# ── JSON Lines formatter ────────────────────────────────────────────


class JSONFormatter(logging.Formatter):
    """Logging formatter that outputs one JSON object per line.

    Each log record is serialised to a dict containing at least:
    ``timestamp``, ``level``, ``logger``, ``message``.  If the record
    carries an ``exc_info`` tuple the traceback is included as
    ``exception``.

    Extra attributes attached via *extra=* on the logger call (for
    example ``sessionId`` or ``cappedLimit``) are merged into the
    top-level dict.
    """

    _INTERNAL_ATTRS = frozenset({
        "args", "created", "exc_info", "exc_text", "filename",
        "funcName", "levelname", "levelno", "lineno", "module",
        "msecs", "message", "msg", "name", "pathname", "process",
        "processName", "relativeCreated", "stack_info", "thread",
        "threadName", "taskName",
    })

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        """Return the log record as a single-line JSON string."""
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, val in record.__dict__.items():
            if key not in self._INTERNAL_ATTRS and key not in payload:
                try:
                    json.dumps(val)
                    payload[key] = val
                except (TypeError, ValueError):
                    payload[key] = str(val)

        if record.exc_info and record.exc_info[0] is not None:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False)


# ── Event logger ────────────────────────────────────────────────────


def get_event_logger(
    events_path: str | Path = DEFAULT_EVENTS_PATH,
    *,
    name: str = ADVISOR_LOGGER_NAME,
) -> logging.Logger:
    """Attach a JSON Lines file handler to the logger *name* and return it.

    With the default *name* every advisory event (optimizer warnings,
    limit caps) is written to *events_path* as well as to any handler
    already configured upstream.  Repeated calls for the same file return
    the same logger without stacking handlers.

    Args:
        events_path: File path for the JSONL output, resolved against the
            working directory when relative.  Parent directories are
            created automatically.
        name: Logger name.

    Returns:
        A :class:`logging.Logger` with JSON Lines output.
    """
    path = resolve_path(events_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)

    target = os.path.abspath(path)
    if not any(
        isinstance(h, logging.FileHandler) and h.baseFilename == target
        for h in logger.handlers
    ):
        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)

    return logger
