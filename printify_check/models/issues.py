# printify_check/models/issues.py
"""
Canonical issue model shared by every validation engine.

The preflight engine, the veraPDF validators (PDF/A, PDF/UA, WCAG) and the
multi-level endpoint all report problems with slightly different vocabularies.
Everything is normalized into Issue before aggregation.
"""

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class Severity(Enum):
    """Issue severity, most severe first."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"

    @classmethod
    def parse(cls, raw: str | None) -> "Severity":
        """
        Classify a raw severity string.

        Matching is case-insensitive. Aliases used by the validators
        (critical, error, warning) are folded into the four levels; anything
        unrecognized counts as INFO.
        """
        if not raw:
            return cls.INFO
        key = str(raw).strip().lower()
        if key in _SEVERITY_ALIASES:
            return _SEVERITY_ALIASES[key]
        try:
            return cls(key)
        except ValueError:
            logger.debug(f"Unknown severity '{raw}', counting as info")
            return cls.INFO


_SEVERITY_ALIASES = {
    "critical": Severity.HIGH,
    "error": Severity.HIGH,
    "warning": Severity.MEDIUM,
}


class Category(Enum):
    """Issue categories in display order."""

    STRUCTURAL = "structural"
    FONTS = "fonts"
    COLOR = "color"
    IMAGE = "image"
    COMPLIANCE = "compliance"
    SECURITY = "security"
    PRINT_PRODUCTION = "print_production"

    @classmethod
    def parse(cls, raw: str) -> "Category | None":
        """Map a wire category key (e.g. 'PRINT_PRODUCTION', 'fonts') to a Category."""
        key = str(raw).strip().lower().replace("-", "_").replace(" ", "_")
        if key in _CATEGORY_ALIASES:
            return _CATEGORY_ALIASES[key]
        try:
            return cls(key)
        except ValueError:
            return None


_CATEGORY_ALIASES = {
    "verapdf": Category.COMPLIANCE,
    "font": Category.FONTS,
    "images": Category.IMAGE,
    "print": Category.PRINT_PRODUCTION,
}


class IssueLocation(BaseModel):
    """Issue rectangle on a page, normalized to 0-1 page coordinates."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    x: float = Field(ge=0.0, le=1.0)
    y: float = Field(ge=0.0, le=1.0)
    width: float = Field(ge=0.0, le=1.0)
    height: float = Field(ge=0.0, le=1.0)
    page: int | None = Field(default=None, description="Page number when reported with the rectangle")


class Issue(BaseModel):
    """
    A single detected problem.

    Frozen once received. Identity is `id`: validators may report the same
    `type` under different ids, so `type` is never assumed unique.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    id: str = Field(description="Issue identifier, unique within one response")
    type: str = Field(description="Issue type as reported by the engine")
    category: Category = Field(default=Category.STRUCTURAL)
    severity: str = Field(default="info", description="Raw severity string as received")
    message: str = Field(default="")
    page: int | None = Field(default=None)
    location: IssueLocation | None = Field(default=None)
    context: str | None = Field(
        default=None, description="Textual location reported instead of a rectangle"
    )
    auto_fixable: bool = Field(default=False, alias="autoFixable")
    fix_description: str | None = Field(default=None, alias="fixDescription")
    fix_type: str | None = Field(default=None, alias="fixType")
    rule_id: str | None = Field(default=None, alias="ruleId")
    clause: str | None = Field(default=None)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return str(value)

    @field_validator("category", mode="before")
    @classmethod
    def _parse_category(cls, value: Any) -> Any:
        if isinstance(value, Category):
            return value
        parsed = Category.parse(value) if value is not None else None
        if parsed is None:
            raise ValueError(f"unknown issue category '{value}'")
        return parsed

    @field_validator("severity", mode="before")
    @classmethod
    def _coerce_severity(cls, value: Any) -> str:
        if value is None:
            return "info"
        if isinstance(value, Severity):
            return value.value
        return str(value)

    @field_validator("location", mode="before")
    @classmethod
    def _drop_textual_location(cls, value: Any) -> Any:
        # veraPDF reports locations as strings; those go to `context`
        if isinstance(value, str):
            return None
        return value

    @property
    def severity_level(self) -> Severity:
        """Classified severity (unknown values count as INFO)."""
        return Severity.parse(self.severity)

    @property
    def page_number(self) -> int | None:
        """Page from the issue itself, falling back to the location's page."""
        if self.page is not None:
            return self.page
        if self.location is not None:
            return self.location.page
        return None

    @classmethod
    def from_payload(cls, payload: dict[str, Any], category: Category | None = None) -> "Issue":
        """
        Build an Issue from a wire payload.

        Args:
            payload: Issue dict as returned by any validation engine
            category: Category to apply when the payload does not carry one

        Returns:
            Validated Issue
        """
        data = dict(payload)
        if isinstance(data.get("location"), str) and not data.get("context"):
            data["context"] = data["location"]
        if category is not None and not data.get("category"):
            data["category"] = category
        elif (
            data.get("category")
            and not isinstance(data["category"], Category)
            and Category.parse(data["category"]) is None
        ):
            # Engine-specific categories (e.g. veraPDF rule groups) fall back
            data["category"] = category or Category.COMPLIANCE
        return cls.model_validate(data)


def is_high_severity(issue: Issue) -> bool:
    """True when the issue classifies as HIGH."""
    return issue.severity_level is Severity.HIGH


def count_by_severity(issues: list[Issue]) -> dict[Severity, int]:
    """Count issues per severity level; every level is present in the result."""
    counts = {level: 0 for level in Severity}
    for issue in issues:
        counts[issue.severity_level] += 1
    return counts
