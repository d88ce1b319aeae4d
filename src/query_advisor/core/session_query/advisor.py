"""Session query advisor.

Caller-side composition of the three advisory operations for an API route:

1. ``optimize``: safe parameters to execute with
2. ``validate``: client-facing warnings (skipped when
   ``session_query.warnings_enabled`` is false)
3. ``estimate``: score of the query as the client sent it

Every step is recorded on an AdvisoryTrace which, when
``session_query.trace_enabled`` is set, is persisted through a
TraceCollector. The advisor adds no decision logic of its own, and the
configured ``timeout_ms`` is only handed back to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from query_advisor.core.settings import Settings
from query_advisor.core.session_query.estimator import estimate
from query_advisor.core.session_query.optimizer import optimize
from query_advisor.core.session_query.validator import validate
from query_advisor.core.trace import AdvisoryTrace, TraceCollector
from query_advisor.core.types import (
    OptimizedSessionQuery,
    PerformanceEstimate,
    SessionQueryOptions,
    ValidationResult,
)

logger = logging.getLogger(__name__)


@dataclass
class AdvisorConfig:
    """Configuration for SessionQueryAdvisor.

    Attributes:
        warnings_enabled: Whether to run best-practice validation
        trace_enabled: Whether finished traces are handed to the collector
        timeout_ms: Timeout override passed through to the caller
    """
    warnings_enabled: bool = True
    trace_enabled: bool = True
    timeout_ms: Optional[int] = None

    @classmethod
    def from_settings(cls, settings: Optional[Settings]) -> "AdvisorConfig":
        if settings is None:
            return cls()
        section = settings.session_query or {}
        # An unset (null) toggle keeps its default
        return cls(
            warnings_enabled=section.get("warnings_enabled") is not False,
            trace_enabled=section.get("trace_enabled") is not False,
            timeout_ms=section.get("timeout_ms"),
        )


@dataclass(frozen=True)
class AdvisoryReport:
    """Everything the advisor learned about one session query.

    Attributes:
        optimized: Parameters the caller should execute with
        validation: Best-practice report, or None when warnings are disabled
        estimate: Cost estimate of the options as supplied
        timeout_ms: Configured timeout override, if any
        trace: Finished trace of the advisory steps for this call
    """
    optimized: OptimizedSessionQuery
    validation: Optional[ValidationResult]
    estimate: PerformanceEstimate
    timeout_ms: Optional[int] = None
    trace: Optional[AdvisoryTrace] = None

    @property
    def trace_id(self) -> Optional[str]:
        return self.trace.trace_id if self.trace is not None else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "optimized": self.optimized.to_dict(),
            "validation": self.validation.to_dict() if self.validation is not None else None,
            "estimate": self.estimate.to_dict(),
            "timeoutMs": self.timeout_ms,
            "traceId": self.trace_id,
        }


class SessionQueryAdvisor:
    """Runs optimizer, validator and estimator for one session query.

    Example:
        >>> advisor = SessionQueryAdvisor()
        >>> report = advisor.advise(SessionQueryOptions("sess-1", "proj-1"))
        >>> report.optimized.limit
        50
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        collector: Optional[TraceCollector] = None,
        config: Optional[AdvisorConfig] = None,
    ) -> None:
        self.config = config or AdvisorConfig.from_settings(settings)
        self.collector = collector

    def advise(
        self,
        options: SessionQueryOptions,
        *,
        now: Optional[datetime] = None,
    ) -> AdvisoryReport:
        """Advise on *options*.

        Args:
            options: Raw caller-supplied options.
            now: Reference time shared by all three operations.

        Returns:
            AdvisoryReport for the caller, carrying the finished trace.
        """
        trace = AdvisoryTrace(session_id=options.session_id, project_id=options.project_id)

        with trace.stage("optimize") as data:
            optimized = optimize(options, now=now)
            data["optimizations"] = list(optimized.optimizations)
            data["limit"] = optimized.limit
            data["fields"] = list(optimized.fields)

        validation: Optional[ValidationResult] = None
        if self.config.warnings_enabled:
            with trace.stage("validate") as data:
                validation = validate(options, now=now)
                data["isOptimal"] = validation.is_optimal
                data["warnings"] = list(validation.warnings)
        else:
            trace.skip("validate")

        with trace.stage("estimate") as data:
            performance = estimate(options, now=now)
            data["score"] = performance.score
            data["estimatedDuration"] = performance.estimated_duration
            data["factors"] = list(performance.factors)

        trace.finish()
        if self.config.trace_enabled and self.collector is not None:
            self.collector.collect(trace)

        logger.debug(
            "Session query advised: score=%s optimizations=%s",
            performance.score,
            list(optimized.optimizations),
        )

        return AdvisoryReport(
            optimized=optimized,
            validation=validation,
            estimate=performance,
            timeout_ms=self.config.timeout_ms,
            trace=trace,
        )


def create_session_query_advisor(
    settings: Optional[Settings] = None,
    collector: Optional[TraceCollector] = None,
) -> SessionQueryAdvisor:
    """Factory function to create a SessionQueryAdvisor.

    When tracing is enabled and no collector is given, one is created for
    ``observability.traces_path`` (or the default traces file).

    Args:
        settings: Application settings.
        collector: TraceCollector instance.

    Returns:
        Configured SessionQueryAdvisor instance.
    """
    config = AdvisorConfig.from_settings(settings)
    if collector is None and config.trace_enabled:
        traces_path = None
        if settings is not None:
            traces_path = (settings.observability or {}).get("traces_path")
        if traces_path:
            collector = TraceCollector(traces_path)
        else:
            collector = TraceCollector()
    return SessionQueryAdvisor(collector=collector, config=config)
