"""
Session Query Module.

This package contains the session query advisory engine:
- Shared performance rules
- Optimizer (rewrites options into a safe form)
- Validator (best-practice warnings)
- Estimator (performance score and duration class)
- Advisor (composition used by API routes)
"""

from query_advisor.core.session_query.optimizer import (
    OPTIMIZATION_PIPELINE,
    Correction,
    optimize,
)
from query_advisor.core.session_query.validator import (
    VALIDATION_CHECKS,
    Check,
    validate,
)
from query_advisor.core.session_query.estimator import (
    ASSESSMENTS,
    classify_duration,
    estimate,
)
from query_advisor.core.session_query.advisor import (
    AdvisorConfig,
    AdvisoryReport,
    SessionQueryAdvisor,
    create_session_query_advisor,
)

__all__ = [
    "OPTIMIZATION_PIPELINE",
    "Correction",
    "optimize",
    "VALIDATION_CHECKS",
    "Check",
    "validate",
    "ASSESSMENTS",
    "classify_duration",
    "estimate",
    "AdvisorConfig",
    "AdvisoryReport",
    "SessionQueryAdvisor",
    "create_session_query_advisor",
]
