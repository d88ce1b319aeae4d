"""
Observability Layer - Logging.

This package contains observability components:
- Human-readable and JSON Lines loggers
"""

__all__ = []
