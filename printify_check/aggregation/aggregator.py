# printify_check/aggregation/aggregator.py
"""
Result aggregation.

Parses the validation engines' wire payloads into ValidationResult /
ComplianceResult / MultiStandardResult and summarizes them for display:
issues per category, counts per severity, fixable issues, and the fix
operation names to send for a user's selection.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from printify_check.errors import InvalidResponseError
from printify_check.fixes.catalog import FixBundle, bundle_for_issue_type, primary_fix
from printify_check.models.issues import Category, Issue, Severity, count_by_severity
from printify_check.models.results import (
    ComplianceResult,
    MultiStandardResult,
    ValidationResult,
)

logger = logging.getLogger(__name__)

_BUNDLE_CATEGORIES = {
    FixBundle.STRUCTURAL_BUNDLE: Category.STRUCTURAL,
    FixBundle.FONT_BUNDLE: Category.FONTS,
    FixBundle.COLOR_BUNDLE: Category.COLOR,
    FixBundle.IMAGE_BUNDLE: Category.IMAGE,
    FixBundle.COMPLIANCE_BUNDLE: Category.COMPLIANCE,
    FixBundle.SECURITY_BUNDLE: Category.SECURITY,
    FixBundle.PRINT_PRODUCTION_BUNDLE: Category.PRINT_PRODUCTION,
}


@dataclass(frozen=True)
class SingleAggregate:
    """Summary of one ValidationResult."""

    by_category: dict[Category, list[Issue]]
    by_severity: dict[Severity, int]
    fixable_issues: list[Issue]

    @property
    def total(self) -> int:
        return sum(self.by_severity.values())


@dataclass(frozen=True)
class MultiStandardAggregate:
    """Summary of a multi-standard compliance run."""

    per_standard: dict[str, ComplianceResult]
    overall_compliant: bool
    failing_standards: list[str] = field(default_factory=list)


def _first(payload: dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return default


def _require_dict(payload: Any, what: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise InvalidResponseError(f"Expected a JSON object for {what}, got {type(payload).__name__}")
    return payload


def _require_list(value: Any, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise InvalidResponseError(f"Expected a list of issues for {what}, got {type(value).__name__}")
    return value


def _issue(payload: Any, category: Category | None, what: str) -> Issue:
    data = dict(_require_dict(payload, what))
    # The preflight engine reports a title instead of a type
    if not data.get("type"):
        data["type"] = data.get("title") or data.get("ruleId") or "unknown"
    if category is None and not data.get("category"):
        bundle = bundle_for_issue_type(data["type"])
        category = _BUNDLE_CATEGORIES.get(bundle, Category.STRUCTURAL) if bundle else Category.STRUCTURAL
    try:
        return Issue.from_payload(data, category=category)
    except ValidationError as e:
        raise InvalidResponseError(f"Malformed issue in {what}: {e}") from e


def _issues_by_category(raw: Any) -> dict[Category, list[Issue]]:
    grouped: dict[Category, list[Issue]] = {}
    for key, items in _require_dict(raw, "issuesByCategory").items():
        category = Category.parse(key)
        if category is None:
            raise InvalidResponseError(f"Unknown issue category '{key}'")
        for item in _require_list(items, f"category {key}"):
            issue = _issue(item, category, f"category {key}")
            grouped.setdefault(issue.category, []).append(issue)
    return grouped


def parse_validation_result(payload: Any) -> ValidationResult:
    """
    Parse a preflight/validation result payload.

    Accepts the categorized form (`issuesByCategory`) and the flat form
    (`issues`) where each issue's category comes from the issue itself or
    from the fix catalog.

    Raises:
        InvalidResponseError: If the payload cannot be interpreted
    """
    payload = _require_dict(payload, "validation result")

    if payload.get("issuesByCategory") is not None:
        grouped = _issues_by_category(payload["issuesByCategory"])
    else:
        grouped = {}
        for item in _require_list(payload.get("issues"), "validation result"):
            issue = _issue(item, None, "validation result")
            grouped.setdefault(issue.category, []).append(issue)

    issue_count = sum(len(items) for items in grouped.values())
    total = _first(payload, "totalIssues", "total_issues", "issuesCount", default=issue_count)
    if total != issue_count:
        logger.warning(f"Result reports {total} issues but carries {issue_count}")

    try:
        return ValidationResult(
            file_name=_first(payload, "fileName", "file_name", default=""),
            file_size=_first(payload, "fileSize", "file_size", default=0),
            quality_score=_first(payload, "qualityScore", "quality_score", default=0.0),
            issues_by_category=grouped,
            total_issues=total,
            supported_fixes=payload.get("supportedFixes") or {},
            check_id=_first(payload, "checkId", "id"),
            metadata=payload.get("metadata") or {},
        )
    except ValidationError as e:
        raise InvalidResponseError(f"Malformed validation result: {e}") from e


def parse_compliance_result(standard: str, payload: Any) -> ComplianceResult:
    """
    Parse a single-standard compliance verdict.

    An `error` entry (validator crashed for this standard) is a
    non-compliant result with no issues.
    """
    payload = _require_dict(payload, f"{standard} result")
    issues = [
        _issue(item, Category.COMPLIANCE, f"{standard} result")
        for item in _require_list(payload.get("issues"), f"{standard} result")
    ]
    if "isCompliant" in payload:
        is_compliant = bool(payload["isCompliant"])
    elif payload.get("error"):
        is_compliant = False
    else:
        is_compliant = not issues

    if payload.get("error"):
        logger.warning(f"Validator error for {standard}: {payload['error']}")

    return ComplianceResult(standard=standard, is_compliant=is_compliant, issues=issues)


def parse_multi_standard(payload: Any) -> MultiStandardResult:
    """
    Parse the multi-level validation response.

    Expected shape: {"results": {STANDARD: {...}}, "isCompliant": bool,
    "fileName": str}. The overall verdict is recomputed from the entries.
    """
    payload = _require_dict(payload, "multi-standard result")
    raw_results = _require_dict(payload.get("results"), "multi-standard results")

    results = {
        standard: parse_compliance_result(standard, entry)
        for standard, entry in raw_results.items()
    }
    parsed = MultiStandardResult(results=results, file_name=payload.get("fileName"))

    reported = payload.get("isCompliant")
    if reported is not None and bool(reported) != parsed.is_compliant:
        logger.warning(
            f"Server verdict isCompliant={reported} disagrees with per-standard results"
        )
    return parsed


def map_issue_to_fix_type(issue: Issue) -> str | None:
    """
    Fix operation name for an issue, or None when there is none.

    An explicit `fix_type` on the issue wins over the catalog.
    """
    return issue.fix_type or primary_fix(issue.type)


def derive_fix_types(issues: Iterable[Issue], selection: Iterable[str]) -> list[str]:
    """
    Fix operation names for the selected issue ids.

    Deduplicated and ordered by first appearance in `issues`; selection
    order does not matter. Selected issues without a fix are skipped.
    """
    selected = set(selection)
    fix_types: list[str] = []
    for issue in issues:
        if issue.id not in selected:
            continue
        fix_type = map_issue_to_fix_type(issue)
        if fix_type is None:
            logger.debug(f"No fix for selected issue {issue.id} ({issue.type})")
        elif fix_type not in fix_types:
            fix_types.append(fix_type)
    return fix_types


class ResultAggregator:
    """Summaries over parsed results. Stateless."""

    def aggregate_single(self, result: ValidationResult) -> SingleAggregate:
        """
        Group, count and pick fixable issues.

        Categories keep the order the server listed them in; categories it
        left out follow as empty lists.
        """
        by_category = {category: list(items) for category, items in result.issues_by_category.items()}
        for category in Category:
            by_category.setdefault(category, [])
        issues = [issue for items in by_category.values() for issue in items]
        return SingleAggregate(
            by_category=by_category,
            by_severity=count_by_severity(issues),
            fixable_issues=[issue for issue in issues if issue.auto_fixable],
        )

    def aggregate_multi_standard(self, multi: MultiStandardResult) -> MultiStandardAggregate:
        return MultiStandardAggregate(
            per_standard=dict(multi.results),
            overall_compliant=multi.is_compliant,
            failing_standards=[
                standard for standard, result in multi.results.items() if not result.is_compliant
            ],
        )

    def map_issue_to_fix_type(self, issue: Issue) -> str | None:
        return map_issue_to_fix_type(issue)

    def derive_fix_types(self, issues: Iterable[Issue], selection: Iterable[str]) -> list[str]:
        return derive_fix_types(issues, selection)
