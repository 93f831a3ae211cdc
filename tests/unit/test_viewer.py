# tests/unit/test_viewer.py
"""Tests for viewer overlay construction."""

from printify_check.models.issues import Issue, Severity
from printify_check.viewer import build_overlays, severity_color


def _located(issue_id: str, severity: str, page: int | None = 1, **location) -> Issue:
    rect = {"x": 0.1, "y": 0.2, "width": 0.3, "height": 0.4, **location}
    return Issue(id=issue_id, type="Bleed", severity=severity, page=page, location=rect)


def test_overlays_grouped_by_page():
    issues = [
        _located("a", "high", page=1),
        _located("b", "medium", page=2),
        _located("c", "low", page=1),
        Issue(id="d", type="Linearization", severity="high", page=1),
    ]

    pages = build_overlays(issues)

    assert sorted(pages) == [1, 2]
    assert [o.issue_id for o in pages[1]] == ["a", "c"]
    assert pages[2][0].severity is Severity.MEDIUM


def test_page_from_location():
    issue = Issue(
        id="a",
        type="Bleed",
        location={"x": 0, "y": 0, "width": 1, "height": 1, "page": 4},
    )
    assert list(build_overlays([issue])) == [4]


def test_issue_without_page_is_not_drawn():
    assert build_overlays([_located("a", "high", page=None)]) == {}


def test_colors():
    assert severity_color("critical") == "rgba(239, 68, 68, 1)"
    assert severity_color(Severity.HIGH, 0.2) == "rgba(239, 68, 68, 0.2)"
    assert severity_color("warning") == "rgba(249, 115, 22, 1)"
    assert severity_color("low") == severity_color("info") == "rgba(59, 130, 246, 1)"
    assert severity_color("unheard-of") == "rgba(59, 130, 246, 1)"


def test_overlay_colors_and_scaling():
    overlay = build_overlays([_located("a", "medium")])[1][0]

    assert overlay.border_color == "rgba(249, 115, 22, 1)"
    assert overlay.fill_color == "rgba(249, 115, 22, 0.2)"
    assert overlay.scaled(2.0) == (0.2, 0.4, 0.6, 0.8)
