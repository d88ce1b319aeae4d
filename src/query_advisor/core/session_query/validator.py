"""Session query validator.

Reports whether raw session query options already follow best practice.
Nothing is rewritten; each violated check contributes one warning and one
matching recommendation, in check order (time, fields, limit).

Only ranges wider than 30 days are flagged. The estimator additionally
penalises the 7-30 day band; the validator does not warn about it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from query_advisor.core.session_query import rules
from query_advisor.core.types import SessionQueryOptions, ValidationResult


@dataclass(frozen=True)
class Check:
    """A best-practice check and the advice it produces when violated."""

    name: str
    violated: Callable[[SessionQueryOptions, datetime], bool]
    warning: str
    recommendation: str


def _wide_time_range(options: SessionQueryOptions, now: datetime) -> bool:
    days = rules.time_range_days(options, now)
    return days is not None and days > rules.MAX_TIME_RANGE_DAYS


VALIDATION_CHECKS: Tuple[Check, ...] = (
    Check(
        name="time_bounds",
        violated=lambda options, now: rules.lacks_time_bound(options),
        warning="No time bounds specified",
        recommendation="Add fromTimestamp parameter to improve query performance by 50-70%",
    ),
    Check(
        name="time_range",
        violated=_wide_time_range,
        warning="Time range exceeds 30 days",
        recommendation="Consider reducing time range to improve performance",
    ),
    Check(
        name="fields",
        violated=lambda options, now: rules.requests_all_fields(options),
        warning="Requesting all fields",
        recommendation="Specify only needed fields (e.g., ['core']) to reduce data transfer",
    ),
    Check(
        name="limit",
        violated=lambda options, now: rules.has_unsafe_limit(options),
        warning="Large or unlimited result set",
        recommendation="Use pagination with limit <= 100 for better performance",
    ),
)


def validate(
    options: SessionQueryOptions,
    *,
    now: Optional[datetime] = None,
) -> ValidationResult:
    """Check *options* against the session query best practices.

    Args:
        options: Raw caller-supplied options.
        now: Reference time for the time-range check.

    Returns:
        ValidationResult; ``is_optimal`` is True iff no check was violated.
    """
    now = now or rules.utc_now()

    warnings: List[str] = []
    recommendations: List[str] = []
    for check in VALIDATION_CHECKS:
        if check.violated(options, now):
            warnings.append(check.warning)
            recommendations.append(check.recommendation)

    return ValidationResult(
        is_optimal=not warnings,
        warnings=tuple(warnings),
        recommendations=tuple(recommendations),
    )
