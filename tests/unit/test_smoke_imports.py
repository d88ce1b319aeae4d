"""Smoke tests for basic package imports."""


def test_imports_smoke() -> None:
    import query_advisor  # noqa: F401
    import query_advisor.core.session_query  # noqa: F401
    import query_advisor.core.trace  # noqa: F401
    import query_advisor.observability.logger  # noqa: F401
