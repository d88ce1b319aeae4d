"""
Trace Module.

This package contains advisory tracing components:
- Advisory trace (per-request step timings)
- Trace collector (JSON Lines persistence)
"""

from query_advisor.core.trace.advisory_trace import ADVISORY_STEPS, AdvisoryTrace, StageRecord
from query_advisor.core.trace.trace_collector import TraceCollector

__all__ = ['ADVISORY_STEPS', 'AdvisoryTrace', 'StageRecord', 'TraceCollector']
