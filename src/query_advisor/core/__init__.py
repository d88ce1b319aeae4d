"""
Core Layer - Core business logic.

This package contains the core business logic including:
- Configuration management (settings.py)
- Request and result types (types.py)
- Session query optimizer, validator and estimator
- Trace collection
"""

__all__ = []
