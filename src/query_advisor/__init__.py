"""
Session Query Advisor.

Advises on session-scoped trace queries before they reach the trace store:
- core: settings, types, tracing and the session query rules
- observability: logging setup
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
