# printify_check/models/results.py
"""
Pydantic models for validation and compliance results.

Results are created once from a completed job's payload and never mutated.
All models use extra="ignore" so new server fields do not break parsing.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from printify_check.models.issues import Category, Issue


class ValidationResult(BaseModel):
    """Result of a preflight validation run."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    file_name: str = Field(description="Name of the validated file")
    file_size: int = Field(default=0, ge=0, description="File size in bytes")
    quality_score: float = Field(
        default=0.0, ge=0.0, le=100.0, description="Opaque score computed by the Processing API"
    )
    issues_by_category: dict[Category, list[Issue]] = Field(default_factory=dict)
    total_issues: int = Field(default=0, ge=0)
    supported_fixes: dict[str, bool] = Field(default_factory=dict)
    check_id: str | None = Field(default=None)
    metadata: dict[str, Any] = Field(default_factory=dict)

    def issues(self) -> list[Issue]:
        """All issues, in the server's category order then original order."""
        return [issue for items in self.issues_by_category.values() for issue in items]


class ComplianceResult(BaseModel):
    """Verdict of one compliance standard (PDF/A-1b, PDF/UA-1, WCAG 2.1 AA, ...)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    standard: str
    is_compliant: bool
    issues: list[Issue] = Field(default_factory=list)


class MultiStandardResult(BaseModel):
    """Compliance verdicts for several standards validated independently."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    results: dict[str, ComplianceResult] = Field(default_factory=dict)
    file_name: str | None = Field(default=None)

    @property
    def is_compliant(self) -> bool:
        """AND over every standard's verdict."""
        return all(result.is_compliant for result in self.results.values())
