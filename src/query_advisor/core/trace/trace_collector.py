"""Persistence of finished advisory traces as JSON Lines.

One line per advised query. Writing is best effort: a trace that cannot be
written is reported through logging and the advisory report is returned
to the caller regardless.
"""

import json
import logging
from pathlib import Path

from query_advisor.core.settings import resolve_path
from query_advisor.core.trace.advisory_trace import AdvisoryTrace

logger = logging.getLogger(__name__)

DEFAULT_TRACES_PATH = "logs/session_query_traces.jsonl"


class TraceCollector:
    """Appends finished advisory traces to a JSON Lines file.

    Args:
        traces_path: Output file. Relative paths are resolved against the
            working directory when the collector is created; parent
            directories are created on first write.
    """

    def __init__(self, traces_path: str | Path = DEFAULT_TRACES_PATH) -> None:
        self._path = resolve_path(traces_path)

    def collect(self, trace: AdvisoryTrace) -> bool:
        """Append *trace* as one JSON line, finishing it first if needed.

        Returns:
            True if the line was written, False if the write failed.
        """
        trace.finish()
        line = json.dumps(trace.to_dict(), ensure_ascii=False, default=str)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")
        except OSError as exc:
            logger.warning(
                "Failed to persist session query trace: %s",
                exc,
                extra={
                    "traceId": trace.trace_id,
                    "sessionId": trace.session_id,
                    "projectId": trace.project_id,
                },
            )
            return False
        return True

    @property
    def path(self) -> Path:
        """Resolved path of the traces file."""
        return self._path
