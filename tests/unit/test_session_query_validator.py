"""Unit tests for the session query validator."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from query_advisor.core.session_query.validator import VALIDATION_CHECKS, validate
from query_advisor.core.types import SessionQueryOptions, ValidationResult

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _options(**kwargs) -> SessionQueryOptions:
    return SessionQueryOptions(session_id="sess-1", project_id="proj-1", **kwargs)


class TestOptimalQuery:
    """A well-formed query produces no warnings."""

    def test_bounded_narrow_paginated_is_optimal(self) -> None:
        result = validate(
            _options(from_timestamp=NOW - timedelta(days=1), fields=("core",), limit=20), now=NOW
        )
        assert isinstance(result, ValidationResult)
        assert result.is_optimal is True
        assert result.warnings == ()
        assert result.recommendations == ()

    def test_range_between_7_and_30_days_not_flagged(self) -> None:
        result = validate(
            _options(from_timestamp=NOW - timedelta(days=20), fields=("core",), limit=20), now=NOW
        )
        assert result.is_optimal is True


class TestTimeBounds:
    """Verify time-bound and time-range warnings."""

    def test_missing_time_bound(self) -> None:
        result = validate(_options(fields=("core",), limit=20), now=NOW)
        assert result.warnings == ("No time bounds specified",)
        assert "50-70%" in result.recommendations[0]
        assert "fromTimestamp" in result.recommendations[0]

    def test_range_over_30_days(self) -> None:
        result = validate(
            _options(from_timestamp=NOW - timedelta(days=45), fields=("core",), limit=10), now=NOW
        )
        assert result.warnings == ("Time range exceeds 30 days",)
        assert result.recommendations == ("Consider reducing time range to improve performance",)
        assert result.is_optimal is False

    def test_exactly_30_days_not_flagged(self) -> None:
        result = validate(
            _options(from_timestamp=NOW - timedelta(days=30), fields=("core",), limit=10), now=NOW
        )
        assert result.is_optimal is True

    def test_naive_timestamp_read_as_utc(self) -> None:
        naive = (NOW - timedelta(days=45)).replace(tzinfo=None)
        result = validate(_options(from_timestamp=naive, fields=("core",), limit=10), now=NOW)
        assert result.warnings == ("Time range exceeds 30 days",)


class TestFieldsAndLimit:
    """Verify field and limit warnings."""

    @pytest.mark.parametrize("fields", [None, (), ("all",), ("core", "all")])
    def test_broad_field_selection(self, fields) -> None:
        result = validate(_options(from_timestamp=NOW, fields=fields, limit=10), now=NOW)
        assert result.warnings == ("Requesting all fields",)
        assert "['core']" in result.recommendations[0]

    @pytest.mark.parametrize("limit", [None, 0, -3, 101, 1000])
    def test_unsafe_limit(self, limit) -> None:
        result = validate(_options(from_timestamp=NOW, fields=("core",), limit=limit), now=NOW)
        assert result.warnings == ("Large or unlimited result set",)
        assert result.recommendations == ("Use pagination with limit <= 100 for better performance",)

    def test_limit_of_100_is_fine(self) -> None:
        result = validate(_options(from_timestamp=NOW, fields=("core",), limit=100), now=NOW)
        assert result.is_optimal is True


class TestOrdering:
    """Test warning order and parallel recommendations."""

    def test_all_warnings_in_rule_order(self) -> None:
        result = validate(_options(), now=NOW)
        assert result.warnings == (
            "No time bounds specified",
            "Requesting all fields",
            "Large or unlimited result set",
        )
        assert len(result.recommendations) == len(result.warnings)
        assert result.is_optimal is False

    def test_recommendations_parallel_to_warnings(self) -> None:
        result = validate(
            _options(from_timestamp=NOW - timedelta(days=60), fields=("all",), limit=500), now=NOW
        )
        by_warning = {c.warning: c.recommendation for c in VALIDATION_CHECKS}
        assert list(result.recommendations) == [by_warning[w] for w in result.warnings]

    def test_to_dict_wire_form(self) -> None:
        data = validate(_options(), now=NOW).to_dict()
        assert data["isOptimal"] is False
        assert len(data["warnings"]) == 3
        assert len(data["recommendations"]) == 3
