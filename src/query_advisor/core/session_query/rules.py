"""Shared performance rules for session-scoped trace queries.

``session_id`` is not part of the trace table's sort key, so a session
lookup is only cheap when it is also time-bounded, narrow in the columns
it reads, and small in the rows it returns. The optimizer, validator and
estimator all judge those same three dimensions through the predicates
below.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import FrozenSet, Optional, Tuple

from query_advisor.core.types import SessionQueryOptions


DEFAULT_LOOKBACK = timedelta(days=7)
MEDIUM_TIME_RANGE_DAYS = 7
MAX_TIME_RANGE_DAYS = 30

MAX_LIMIT = 100
DEFAULT_LIMIT = 50

DEFAULT_FIELDS: Tuple[str, ...] = ("core",)
ALL_FIELDS = "all"
COMPLEX_FIELD_GROUPS: FrozenSet[str] = frozenset({"observations", "scores"})

_SECONDS_PER_DAY = 24 * 60 * 60


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are read as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def lacks_time_bound(options: SessionQueryOptions) -> bool:
    return options.from_timestamp is None


def time_range_days(options: SessionQueryOptions, now: datetime) -> Optional[float]:
    """Return how many days back ``from_timestamp`` reaches, or None if unbounded."""
    if options.from_timestamp is None:
        return None
    delta = _as_utc(now) - _as_utc(options.from_timestamp)
    return delta.total_seconds() / _SECONDS_PER_DAY


def lacks_fields(options: SessionQueryOptions) -> bool:
    return not options.fields


def requests_all_fields(options: SessionQueryOptions) -> bool:
    """True when no field groups are named or the ``"all"`` sentinel is present."""
    return lacks_fields(options) or ALL_FIELDS in options.fields


def requests_complex_fields(options: SessionQueryOptions) -> bool:
    return bool(options.fields) and not COMPLEX_FIELD_GROUPS.isdisjoint(options.fields)


def has_unsafe_limit(options: SessionQueryOptions) -> bool:
    """True for a missing, non-positive, or over-ceiling limit."""
    return options.limit is None or options.limit <= 0 or options.limit > MAX_LIMIT
