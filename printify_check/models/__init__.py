# printify_check/models/__init__.py
"""
Data models for printify-check.

Provides the canonical issue model, job tracking and result models.
"""

from printify_check.models.issues import (
    Category,
    Issue,
    IssueLocation,
    Severity,
    count_by_severity,
)
from printify_check.models.jobs import (
    InMemoryJobStore,
    Job,
    JobKind,
    JobStatus,
    TERMINAL_STATUSES,
)
from printify_check.models.results import (
    ComplianceResult,
    MultiStandardResult,
    ValidationResult,
)
from printify_check.models.store import JobStore

__all__ = [
    # Issue model
    "Category",
    "Severity",
    "Issue",
    "IssueLocation",
    "count_by_severity",
    # Job tracking
    "Job",
    "JobKind",
    "JobStatus",
    "JobStore",
    "InMemoryJobStore",
    "TERMINAL_STATUSES",
    # Results
    "ValidationResult",
    "ComplianceResult",
    "MultiStandardResult",
]
