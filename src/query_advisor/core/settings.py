"""Settings loading and validation utilities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml


def resolve_path(relative: str | Path) -> Path:
    """Resolve *relative* against the current working directory.

    Paths in settings (traces, event logs) are relative to where the
    service or script is started, which also holds for an installed
    (non-editable) package. Absolute paths are returned unchanged.

    Args:
        relative: Relative or absolute path.

    Returns:
        Absolute path.
    """
    path = Path(relative)
    if path.is_absolute():
        return path
    return Path.cwd() / path


@dataclass(slots=True)
class Settings:
    """Application settings structure.

    Attributes:
        session_query: Session query advisory toggles (timeout override,
            warning emission, trace persistence).
        observability: Observability configuration dictionary.
        raw: Original full settings dictionary.
    """

    session_query: dict[str, Any]
    observability: dict[str, Any]
    raw: dict[str, Any]


def _require_path(data: dict[str, Any], dotted_path: str) -> None:
    current: Any = data
    for key in dotted_path.split("."):
        if not isinstance(current, dict) or key not in current:
            raise ValueError(f"Missing required settings field: {dotted_path}")
        current = current[key]


def _check_toggles(session_query: dict[str, Any]) -> None:
    timeout_ms = session_query.get("timeout_ms")
    if timeout_ms is not None:
        # bool is an int subclass, reject it explicitly
        if isinstance(timeout_ms, bool) or not isinstance(timeout_ms, int) or timeout_ms <= 0:
            raise ValueError(
                f"Invalid settings field: session_query.timeout_ms must be a positive integer, "
                f"got {timeout_ms!r}"
            )

    for key in ("warnings_enabled", "trace_enabled"):
        value = session_query.get(key)
        if value is not None and not isinstance(value, bool):
            raise ValueError(
                f"Invalid settings field: session_query.{key} must be a boolean, got {value!r}"
            )


def validate_settings(settings: Settings) -> None:
    """Validate required settings fields.

    Args:
        settings: Parsed settings object.

    Raises:
        ValueError: If any required field is missing or a toggle has the
            wrong type.
    """

    required_paths = [
        "session_query",
        "observability",
    ]

    for path in required_paths:
        _require_path(settings.raw, path)

    _check_toggles(settings.session_query)


def load_settings(path: str) -> Settings:
    """Load YAML settings from a file and validate required fields.

    Args:
        path: Path to the YAML settings file.

    Returns:
        Parsed and validated settings object.

    Raises:
        FileNotFoundError: If the path does not exist.
        ValueError: If YAML is invalid or required fields are missing.
    """

    settings_path = Path(path)
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as fp:
        parsed = yaml.safe_load(fp)

    if not isinstance(parsed, dict):
        raise ValueError("Settings file must contain a YAML mapping at top level")

    settings = Settings(
        session_query=parsed.get("session_query") or {},
        observability=parsed.get("observability") or {},
        raw=parsed,
    )
    validate_settings(settings)
    return settings
