"""Unit tests for the session query performance estimator.

Tests cover:
- Penalty tiers for time range, field selection and limit
- Factor record format and order
- Duration classification boundaries
- Agreement with the validator on what counts as optimal
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from query_advisor.core.session_query.estimator import classify_duration, estimate
from query_advisor.core.session_query.validator import validate
from query_advisor.core.types import PerformanceEstimate, SessionQueryOptions

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _options(**kwargs) -> SessionQueryOptions:
    return SessionQueryOptions(session_id="sess-1", project_id="proj-1", **kwargs)


class TestScenarios:
    """End-to-end scoring scenarios."""

    def test_recent_narrow_query_is_fast(self) -> None:
        result = estimate(
            _options(from_timestamp=NOW - timedelta(days=1), fields=("core",), limit=50), now=NOW
        )
        assert isinstance(result, PerformanceEstimate)
        assert result.score == 100
        assert result.factors == ()
        assert result.estimated_duration == "fast"

    def test_unbounded_query_is_very_slow(self) -> None:
        result = estimate(_options(), now=NOW)
        assert result.score == 15
        assert result.factors == (
            "no_time_bounds (-50)",
            "all_fields (-20)",
            "large_limit (-15)",
        )
        assert result.estimated_duration == "very_slow"


class TestTimeRange:
    """Verify time-bound and time-range penalties."""

    @pytest.mark.parametrize(
        "days, expected_factors, expected_score",
        [
            (0, (), 100),
            (7, (), 100),
            (8, ("medium_time_range (-10)",), 90),
            (30, ("medium_time_range (-10)",), 90),
            (31, ("large_time_range (-20)",), 80),
        ],
    )
    def test_time_range_tiers(self, days, expected_factors, expected_score) -> None:
        result = estimate(
            _options(from_timestamp=NOW - timedelta(days=days), fields=("core",), limit=10), now=NOW
        )
        assert result.factors == expected_factors
        assert result.score == expected_score


class TestFields:
    """Verify field-selection penalties."""

    @pytest.mark.parametrize("fields", [None, (), ("all",), ("all", "observations")])
    def test_broad_fields_penalised(self, fields) -> None:
        result = estimate(_options(from_timestamp=NOW, fields=fields, limit=10), now=NOW)
        assert result.factors == ("all_fields (-20)",)
        assert result.score == 80

    @pytest.mark.parametrize("fields", [("observations",), ("core", "scores")])
    def test_complex_fields_penalised(self, fields) -> None:
        result = estimate(_options(from_timestamp=NOW, fields=fields, limit=10), now=NOW)
        assert result.factors == ("complex_fields (-10)",)
        assert result.score == 90


class TestLimit:
    """Verify limit penalties."""

    @pytest.mark.parametrize("limit", [None, 0, 101])
    def test_unsafe_limit_penalised(self, limit) -> None:
        result = estimate(_options(from_timestamp=NOW, fields=("core",), limit=limit), now=NOW)
        assert result.factors == ("large_limit (-15)",)
        assert result.score == 85


class TestDurationClassification:
    """Test score to duration thresholds."""

    @pytest.mark.parametrize(
        "score, expected",
        [
            (100, "fast"),
            (80, "fast"),
            (79, "medium"),
            (60, "medium"),
            (59, "slow"),
            (40, "slow"),
            (39, "very_slow"),
            (15, "very_slow"),
            (-5, "very_slow"),
        ],
    )
    def test_thresholds(self, score: int, expected: str) -> None:
        assert classify_duration(score) == expected

    def test_combined_penalties(self) -> None:
        # -20 large range, -10 complex fields, -15 large limit
        result = estimate(
            _options(from_timestamp=NOW - timedelta(days=45), fields=("scores",), limit=500),
            now=NOW,
        )
        assert result.score == 55
        assert result.estimated_duration == "slow"

    def test_to_dict_wire_form(self) -> None:
        data = estimate(_options(), now=NOW).to_dict()
        assert data == {
            "score": 15,
            "factors": ["no_time_bounds (-50)", "all_fields (-20)", "large_limit (-15)"],
            "estimatedDuration": "very_slow",
        }


class TestValidatorAgreement:
    """An optimal query never carries an all_fields factor."""

    @pytest.mark.parametrize("days", [None, 1, 20, 45])
    @pytest.mark.parametrize("fields", [None, (), ("all",), ("core",), ("observations",)])
    @pytest.mark.parametrize("limit", [None, 0, 10, 100, 101])
    def test_optimal_implies_no_major_factors(self, days, fields, limit) -> None:
        from_timestamp = None if days is None else NOW - timedelta(days=days)
        options = _options(from_timestamp=from_timestamp, fields=fields, limit=limit)

        if validate(options, now=NOW).is_optimal:
            factors = estimate(options, now=NOW).factors
            for major in ("no_time_bounds", "all_fields", "large_limit"):
                assert not any(f.startswith(major) for f in factors)
