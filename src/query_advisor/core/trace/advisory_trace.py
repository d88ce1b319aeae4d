"""Advisory trace: one record per advised session query.

A trace belongs to a single ``(session_id, project_id)`` request and holds
one timed entry per advisory step, in the order the advisor ran them.
Steps the advisor deliberately did not run (validation with warnings
disabled) are listed as skipped so a reader of the traces file can tell
"not run" from "passed".
"""

from __future__ import annotations

import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Literal, Optional, Tuple

AdvisoryStep = Literal["optimize", "validate", "estimate"]

ADVISORY_STEPS: Tuple[str, ...] = ("optimize", "validate", "estimate")


def _utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class StageRecord:
    """Outcome of one advisory step.

    Attributes:
        step: Which advisory operation ran.
        elapsed_ms: Wall time spent in the step.
        data: Step summary, e.g. applied optimizations or the score.
    """

    step: AdvisoryStep
    elapsed_ms: float
    data: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "step": self.step,
            "elapsedMs": round(self.elapsed_ms, 2),
            "data": dict(self.data),
        }


@dataclass
class AdvisoryTrace:
    """Timed record of the advisory steps run for one session query.

    Attributes:
        session_id: Session the advised query targets.
        project_id: Project the session belongs to.
        trace_id: Unique identifier, echoed in the advisory report.
        started_at: ISO-8601 creation time.
        finished_at: ISO-8601 time of ``finish()``, or None while running.
        stages: Completed steps in run order.
        skipped: Steps intentionally not run.
    """

    session_id: str
    project_id: str
    trace_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    started_at: str = field(default_factory=_utc_iso)
    finished_at: Optional[str] = None
    stages: List[StageRecord] = field(default_factory=list)
    skipped: List[AdvisoryStep] = field(default_factory=list)

    _start_mono: float = field(default_factory=time.monotonic, repr=False)
    _finish_mono: Optional[float] = field(default=None, repr=False)

    def _check_new_step(self, step: str) -> None:
        if step not in ADVISORY_STEPS:
            raise ValueError(f"Unknown advisory step: {step!r}")
        if self.finished_at is not None:
            raise ValueError(f"Trace {self.trace_id} is finished; cannot record {step!r}")
        if step in self.skipped or any(record.step == step for record in self.stages):
            raise ValueError(f"Advisory step {step!r} already recorded")

    @contextmanager
    def stage(self, step: AdvisoryStep) -> Iterator[Dict[str, Any]]:
        """Time one advisory step.

        Yields a dict the block fills with the step summary. The step is
        recorded when the block exits, even if it raised.

        Raises:
            ValueError: If *step* is unknown, already recorded, or the
                trace is finished.

        Example:
            >>> with trace.stage("estimate") as data:
            ...     data["score"] = 85
        """
        self._check_new_step(step)
        data: Dict[str, Any] = {}
        start = time.monotonic()
        try:
            yield data
        finally:
            elapsed = (time.monotonic() - start) * 1000.0
            self.stages.append(StageRecord(step=step, elapsed_ms=elapsed, data=data))

    def skip(self, step: AdvisoryStep) -> None:
        """Record that *step* was intentionally not run."""
        self._check_new_step(step)
        self.skipped.append(step)

    def finish(self) -> None:
        """Close the trace. Later calls keep the first finish time."""
        if self.finished_at is not None:
            return
        self._finish_mono = time.monotonic()
        self.finished_at = _utc_iso()

    def elapsed_ms(self, step: Optional[AdvisoryStep] = None) -> float:
        """Elapsed milliseconds for *step*, or for the whole trace.

        The whole-trace figure runs to ``finish()``, or to now while the
        trace is still open.

        Raises:
            KeyError: If *step* has not been recorded.
        """
        if step is not None:
            record = self.get_stage(step)
            if record is None:
                raise KeyError(f"Advisory step '{step}' has not been recorded")
            return record.elapsed_ms

        end = self._finish_mono if self._finish_mono is not None else time.monotonic()
        return (end - self._start_mono) * 1000.0

    def get_stage(self, step: AdvisoryStep) -> Optional[StageRecord]:
        for record in self.stages:
            if record.step == step:
                return record
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to the JSON Lines record form (camelCase keys)."""
        return {
            "traceId": self.trace_id,
            "sessionId": self.session_id,
            "projectId": self.project_id,
            "startedAt": self.started_at,
            "finishedAt": self.finished_at,
            "totalElapsedMs": round(self.elapsed_ms(), 2),
            "stages": [record.to_dict() for record in self.stages],
            "skipped": list(self.skipped),
        }
