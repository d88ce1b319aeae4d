"""Session query optimizer.

Rewrites raw session query options into a form that is safe to execute:
always time-bounded, restricted to named field groups, and capped in size.

Corrections are an ordered pipeline. Each entry names the option it owns,
when it fires, what it substitutes and the tag it records; entries are
independent, so a new rule (e.g. one for ``to_timestamp``) is appended
without touching the others.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from query_advisor.core.session_query import rules
from query_advisor.core.types import OptimizedSessionQuery, SessionQueryOptions

logger = logging.getLogger(__name__)

TAG_DEFAULT_TIME_BOUND = "added_default_time_bound_7d"
TAG_FIELDS_TO_CORE = "reduced_fields_to_core"
TAG_CAPPED_LIMIT = "capped_limit_100"


# Event context keys match the request route's camelCase naming
def _context(options: SessionQueryOptions, **extra: Any) -> Dict[str, Any]:
    return {"sessionId": options.session_id, "projectId": options.project_id, **extra}


@dataclass(frozen=True)
class Correction:
    """One step of the optimization pipeline.

    Attributes:
        field_name: Option attribute this step may override.
        tag: Recorded in ``optimizations`` when the step fires.
        applies: Predicate deciding whether the current value is unsafe.
        corrected: Produces the safe replacement value.
        on_applied: Optional observer called with the replacement value.
        on_skipped: Optional observer called when the value is kept.
    """

    field_name: str
    tag: str
    applies: Callable[[SessionQueryOptions], bool]
    corrected: Callable[[SessionQueryOptions, datetime], Any]
    on_applied: Optional[Callable[[SessionQueryOptions, Any], None]] = None
    on_skipped: Optional[Callable[[SessionQueryOptions], None]] = None


# ---- time bound ------------------------------------------------------


def _default_time_bound(options: SessionQueryOptions, now: datetime) -> datetime:
    return now - rules.DEFAULT_LOOKBACK


def _log_default_time_bound(options: SessionQueryOptions, value: Any) -> None:
    logger.warning(
        "Session query without time bounds - adding default 7-day window",
        extra=_context(options, optimization=TAG_DEFAULT_TIME_BOUND),
    )


# ---- field selection -------------------------------------------------


def _core_fields(options: SessionQueryOptions, now: datetime) -> Tuple[str, ...]:
    return rules.DEFAULT_FIELDS


def _log_all_fields(options: SessionQueryOptions) -> None:
    # "all" is an explicit choice: respected, but flagged
    if rules.ALL_FIELDS in options.fields:
        logger.warning(
            "Session query requesting all fields - consider reducing field selection",
            extra=_context(options, performance_impact="high"),
        )


# ---- limit -----------------------------------------------------------


def _capped_limit(options: SessionQueryOptions, now: datetime) -> int:
    requested = options.limit if options.limit is not None and options.limit > 0 else rules.DEFAULT_LIMIT
    return min(requested, rules.MAX_LIMIT)


def _log_capped_limit(options: SessionQueryOptions, value: Any) -> None:
    if options.limit is not None and options.limit > rules.MAX_LIMIT:
        logger.info(
            "Session query limit capped for performance",
            extra=_context(options, originalLimit=options.limit, cappedLimit=value),
        )


def _notify(observer: Optional[Callable[..., None]], *args: Any) -> None:
    if observer is None:
        return
    try:
        observer(*args)
    except Exception:
        # Event delivery never changes the optimized query; the event is dropped
        pass


OPTIMIZATION_PIPELINE: Tuple[Correction, ...] = (
    Correction(
        field_name="from_timestamp",
        tag=TAG_DEFAULT_TIME_BOUND,
        applies=rules.lacks_time_bound,
        corrected=_default_time_bound,
        on_applied=_log_default_time_bound,
    ),
    Correction(
        field_name="fields",
        tag=TAG_FIELDS_TO_CORE,
        applies=rules.lacks_fields,
        corrected=_core_fields,
        on_skipped=_log_all_fields,
    ),
    Correction(
        field_name="limit",
        tag=TAG_CAPPED_LIMIT,
        applies=rules.has_unsafe_limit,
        corrected=_capped_limit,
        on_applied=_log_capped_limit,
    ),
)


def optimize(
    options: SessionQueryOptions,
    *,
    now: Optional[datetime] = None,
) -> OptimizedSessionQuery:
    """Return a performance-safe version of *options*.

    Never raises. Identifiers are passed through unchecked; every option no
    rule touches is copied verbatim.

    Args:
        options: Raw caller-supplied options. Not modified.
        now: Reference time for the default time bound. Defaults to the
            current UTC time.

    Returns:
        OptimizedSessionQuery with ``from_timestamp``, ``limit`` and
        ``fields`` bound, and the applied correction tags in rule order.
    """
    now = now or rules.utc_now()

    values: Dict[str, Any] = {
        f.name: getattr(options, f.name) for f in dataclasses.fields(options)
    }
    optimizations: List[str] = []

    for correction in OPTIMIZATION_PIPELINE:
        if correction.applies(options):
            value = correction.corrected(options, now)
            values[correction.field_name] = value
            optimizations.append(correction.tag)
            _notify(correction.on_applied, options, value)
        else:
            _notify(correction.on_skipped, options)

    return OptimizedSessionQuery(optimizations=tuple(optimizations), **values)
