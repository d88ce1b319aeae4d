"""Session query performance estimator.

Scores raw session query options from 100 downwards. Each dimension is
assessed by one function that returns at most one ``(factor, penalty)``
deduction; the first matching tier of a dimension wins.

The score is not clamped. With the current penalties the lowest reachable
score is 100 - 50 - 20 - 15 = 15.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional, Tuple

from query_advisor.core.session_query import rules
from query_advisor.core.types import (
    EstimatedDuration,
    PerformanceEstimate,
    SessionQueryOptions,
)


BASE_SCORE = 100

# (minimum score, duration class), checked top to bottom
DURATION_THRESHOLDS: Tuple[Tuple[int, EstimatedDuration], ...] = (
    (80, "fast"),
    (60, "medium"),
    (40, "slow"),
)
SLOWEST_DURATION: EstimatedDuration = "very_slow"

Deduction = Tuple[str, int]
Assessment = Callable[[SessionQueryOptions, datetime], Optional[Deduction]]


def assess_time_bounds(options: SessionQueryOptions, now: datetime) -> Optional[Deduction]:
    days = rules.time_range_days(options, now)
    if days is None:
        return ("no_time_bounds", 50)
    if days > rules.MAX_TIME_RANGE_DAYS:
        return ("large_time_range", 20)
    if days > rules.MEDIUM_TIME_RANGE_DAYS:
        return ("medium_time_range", 10)
    return None


def assess_fields(options: SessionQueryOptions, now: datetime) -> Optional[Deduction]:
    if rules.requests_all_fields(options):
        return ("all_fields", 20)
    if rules.requests_complex_fields(options):
        return ("complex_fields", 10)
    return None


def assess_limit(options: SessionQueryOptions, now: datetime) -> Optional[Deduction]:
    if rules.has_unsafe_limit(options):
        return ("large_limit", 15)
    return None


ASSESSMENTS: Tuple[Assessment, ...] = (
    assess_time_bounds,
    assess_fields,
    assess_limit,
)


def classify_duration(score: int) -> EstimatedDuration:
    """Map a score onto the ``fast | medium | slow | very_slow`` scale."""
    for minimum, duration in DURATION_THRESHOLDS:
        if score >= minimum:
            return duration
    return SLOWEST_DURATION


def estimate(
    options: SessionQueryOptions,
    *,
    now: Optional[datetime] = None,
) -> PerformanceEstimate:
    """Estimate how expensive *options* are likely to be.

    Args:
        options: Raw caller-supplied options.
        now: Reference time for the time-range assessment.

    Returns:
        PerformanceEstimate with the final score, the deductions as
        ``"<factor> (-<penalty>)"`` records, and the duration class.
    """
    now = now or rules.utc_now()

    score = BASE_SCORE
    factors: List[str] = []
    for assess in ASSESSMENTS:
        deduction = assess(options, now)
        if deduction is None:
            continue
        factor, penalty = deduction
        score -= penalty
        factors.append(f"{factor} (-{penalty})")

    return PerformanceEstimate(
        score=score,
        factors=tuple(factors),
        estimated_duration=classify_duration(score),
    )
