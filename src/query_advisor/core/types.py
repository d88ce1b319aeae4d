"""Core data types for session query advice.

The request shape mirrors the HTTP route that accepts session trace
queries, so the wire form (``to_dict`` / ``from_dict``) keeps its camelCase
keys while Python attributes stay snake_case.

All types are frozen dataclasses: the advisory functions build new values
and never touch the caller's input.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Literal, Mapping, Optional, Tuple


EstimatedDuration = Literal["fast", "medium", "slow", "very_slow"]

# wire key -> attribute name
_WIRE_KEYS: Dict[str, str] = {
    "sessionId": "session_id",
    "projectId": "project_id",
    "fromTimestamp": "from_timestamp",
    "toTimestamp": "to_timestamp",
    "limit": "limit",
    "fields": "fields",
}


def _parse_timestamp(value: Any, key: str) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError(f"Invalid {key}: expected ISO-8601 timestamp, got {value!r}") from exc
    raise ValueError(f"Invalid {key}: expected ISO-8601 timestamp, got {type(value).__name__}")


def _parse_limit(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"Invalid limit: expected integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as exc:
            raise ValueError(f"Invalid limit: expected integer, got {value!r}") from exc
    raise ValueError(f"Invalid limit: expected integer, got {type(value).__name__}")


def _parse_fields(value: Any) -> Optional[Tuple[str, ...]]:
    if value is None:
        return None
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    return tuple(str(item) for item in value)


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class SessionQueryOptions:
    """Raw, caller-supplied options for a session-scoped trace query.

    Attributes:
        session_id: Opaque session identifier.
        project_id: Opaque project identifier (observability context only).
        from_timestamp: Lower time bound; None means unbounded lookback.
        to_timestamp: Upper time bound; carried through, not evaluated.
        limit: Maximum number of rows requested.
        fields: Requested field groups, e.g. ``("core", "observations")``.
    """

    session_id: str
    project_id: str
    from_timestamp: Optional[datetime] = None
    to_timestamp: Optional[datetime] = None
    limit: Optional[int] = None
    fields: Optional[Tuple[str, ...]] = None

    def __post_init__(self) -> None:
        # A string names groups ("core" or "core,scores"), it is not a sequence of characters
        if isinstance(self.fields, str):
            object.__setattr__(self, "fields", _parse_fields(self.fields))
        # Lists are accepted for convenience but stored as tuples
        elif self.fields is not None and not isinstance(self.fields, tuple):
            object.__setattr__(self, "fields", tuple(self.fields))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SessionQueryOptions":
        """Build options from a request mapping.

        Accepts camelCase wire keys or snake_case attribute names. Timestamps
        may be ``datetime`` objects or ISO-8601 strings; ``fields`` may be a
        sequence or a comma-separated string.

        Raises:
            ValueError: If a timestamp or the limit cannot be parsed.
        """
        values: Dict[str, Any] = {}
        for key, value in data.items():
            attr = _WIRE_KEYS.get(key, key)
            if attr in _WIRE_KEYS.values():
                values[attr] = value

        return cls(
            session_id=str(values.get("session_id") or ""),
            project_id=str(values.get("project_id") or ""),
            from_timestamp=_parse_timestamp(values.get("from_timestamp"), "fromTimestamp"),
            to_timestamp=_parse_timestamp(values.get("to_timestamp"), "toTimestamp"),
            limit=_parse_limit(values.get("limit")),
            fields=_parse_fields(values.get("fields")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to the camelCase wire form."""
        return {
            "sessionId": self.session_id,
            "projectId": self.project_id,
            "fromTimestamp": _format_timestamp(self.from_timestamp),
            "toTimestamp": _format_timestamp(self.to_timestamp),
            "limit": self.limit,
            "fields": list(self.fields) if self.fields is not None else None,
        }


@dataclass(frozen=True)
class OptimizedSessionQuery:
    """Safe-to-execute session query plus the corrections applied to it.

    ``from_timestamp``, ``limit`` and ``fields`` are always bound.
    ``optimizations`` lists correction tags in rule order.
    """

    session_id: str
    project_id: str
    from_timestamp: datetime
    limit: int
    fields: Tuple[str, ...]
    to_timestamp: Optional[datetime] = None
    optimizations: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sessionId": self.session_id,
            "projectId": self.project_id,
            "fromTimestamp": _format_timestamp(self.from_timestamp),
            "toTimestamp": _format_timestamp(self.to_timestamp),
            "limit": self.limit,
            "fields": list(self.fields),
            "optimizations": list(self.optimizations),
        }


@dataclass(frozen=True)
class ValidationResult:
    """Best-practice report for a session query.

    Attributes:
        is_optimal: True iff no warnings were produced.
        warnings: One entry per violated rule.
        recommendations: Remediation text, parallel to ``warnings``.
    """

    is_optimal: bool
    warnings: Tuple[str, ...] = ()
    recommendations: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isOptimal": self.is_optimal,
            "warnings": list(self.warnings),
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class PerformanceEstimate:
    """Predicted cost of a session query.

    Attributes:
        score: 100 minus all penalties; higher is better.
        factors: Deduction records such as ``"large_limit (-15)"``.
        estimated_duration: Coarse duration class derived from ``score``.
    """

    score: int
    factors: Tuple[str, ...]
    estimated_duration: EstimatedDuration

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "factors": list(self.factors),
            "estimatedDuration": self.estimated_duration,
        }

