#!/usr/bin/env python
"""Advise on a session-scoped trace query from the command line.

Prints the optimized query parameters, best-practice warnings and the
performance estimate for a session query, exactly as an API route would
receive them from the advisor.

Usage:
    # Unbounded query: see what the optimizer adds
    python scripts/advise.py --session-id sess-42 --project-id proj-1

    # Explicit options
    python scripts/advise.py --session-id sess-42 --project-id proj-1 \
        --from 2024-05-01T00:00:00Z --limit 500 --fields core,observations

    # Machine-readable output
    python scripts/advise.py --session-id sess-42 --project-id proj-1 --json

Exit codes:
    0 - Success
    2 - Configuration or argument error
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Ensure src/ is on sys.path when run from a checkout
_SCRIPT_DIR = Path(__file__).resolve().parent
_REPO_ROOT = _SCRIPT_DIR.parent
sys.path.insert(0, str(_REPO_ROOT / "src"))

from query_advisor.core.session_query import AdvisoryReport, create_session_query_advisor
from query_advisor.core.settings import load_settings
from query_advisor.core.types import SessionQueryOptions
from query_advisor.observability.logger import get_event_logger, get_logger


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Advise on a session-scoped trace query.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument("--session-id", required=True, help="Session identifier.")
    parser.add_argument("--project-id", required=True, help="Project identifier.")
    parser.add_argument(
        "--from",
        dest="from_timestamp",
        default=None,
        help="Lower time bound, ISO-8601 (default: unbounded)",
    )
    parser.add_argument(
        "--to",
        dest="to_timestamp",
        default=None,
        help="Upper time bound, ISO-8601 (default: none)",
    )
    parser.add_argument("--limit", default=None, help="Maximum number of rows requested.")
    parser.add_argument(
        "--fields",
        default=None,
        help="Comma-separated field groups, e.g. 'core,observations'",
    )
    parser.add_argument(
        "--config",
        default=str(_REPO_ROOT / "config" / "settings.yaml"),
        help="Path to configuration file (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the advisory report as JSON",
    )

    return parser.parse_args(argv)


def _print_report(report: AdvisoryReport) -> None:
    optimized = report.optimized
    print("=" * 60)
    print("OPTIMIZED QUERY")
    print("=" * 60)
    print(f"session_id     = {optimized.session_id}")
    print(f"project_id     = {optimized.project_id}")
    print(f"from_timestamp = {optimized.from_timestamp.isoformat()}")
    if optimized.to_timestamp is not None:
        print(f"to_timestamp   = {optimized.to_timestamp.isoformat()}")
    print(f"limit          = {optimized.limit}")
    print(f"fields         = {', '.join(optimized.fields)}")
    print(f"optimizations  = {', '.join(optimized.optimizations) or '(none)'}")
    if report.timeout_ms is not None:
        print(f"timeout_ms     = {report.timeout_ms}")

    if report.validation is not None:
        print("\n" + "=" * 60)
        print(f"VALIDATION (optimal={report.validation.is_optimal})")
        print("=" * 60)
        for warning, recommendation in zip(
            report.validation.warnings, report.validation.recommendations
        ):
            print(f"[WARN] {warning}")
            print(f"       -> {recommendation}")

    print("\n" + "=" * 60)
    print(
        f"ESTIMATE score={report.estimate.score} "
        f"duration={report.estimate.estimated_duration}"
    )
    print("=" * 60)
    for factor in report.estimate.factors:
        print(f"  {factor}")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"[FAIL] Configuration file not found: {config_path}", file=sys.stderr)
            return 2
        settings = load_settings(str(config_path))
    except (FileNotFoundError, ValueError) as e:
        print(f"[FAIL] Failed to load configuration: {e}", file=sys.stderr)
        return 2

    logger = get_logger(__name__, settings.observability.get("log_level"))
    logger.info("Configuration loaded from %s", config_path)

    events_path = settings.observability.get("events_path")
    if events_path:
        get_event_logger(events_path)

    request: Dict[str, Any] = {
        "sessionId": args.session_id,
        "projectId": args.project_id,
        "fromTimestamp": args.from_timestamp,
        "toTimestamp": args.to_timestamp,
        "limit": args.limit,
        "fields": args.fields,
    }
    try:
        options = SessionQueryOptions.from_dict(request)
    except ValueError as e:
        print(f"[FAIL] Invalid query options: {e}", file=sys.stderr)
        return 2

    advisor = create_session_query_advisor(settings)
    report = advisor.advise(options)

    if args.json:
        print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    else:
        _print_report(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
