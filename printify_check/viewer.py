# printify_check/viewer.py
"""
Viewer overlays.

Document rendering belongs to the Viewer collaborator. This module only
computes what it draws on top of each page: one rectangle per located
issue, colored by severity.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from printify_check.api.base import DocumentFile
from printify_check.models.issues import Issue, Severity

_RED = (239, 68, 68)
_ORANGE = (249, 115, 22)
_BLUE = (59, 130, 246)

SEVERITY_RGB = {
    Severity.HIGH: _RED,
    Severity.MEDIUM: _ORANGE,
    Severity.LOW: _BLUE,
    Severity.INFO: _BLUE,
}

FILL_OPACITY = 0.2


def severity_color(severity: Severity | str, opacity: float = 1.0) -> str:
    """CSS rgba() color for a severity (raw strings are classified first)."""
    if not isinstance(severity, Severity):
        severity = Severity.parse(severity)
    r, g, b = SEVERITY_RGB[severity]
    return f"rgba({r}, {g}, {b}, {opacity:g})"


@dataclass(frozen=True)
class Overlay:
    """Rectangle drawn over an issue, in 0-1 page coordinates."""

    issue_id: str
    page: int
    x: float
    y: float
    width: float
    height: float
    severity: Severity
    title: str

    @property
    def border_color(self) -> str:
        return severity_color(self.severity)

    @property
    def fill_color(self) -> str:
        return severity_color(self.severity, FILL_OPACITY)

    def scaled(self, scale: float) -> tuple[float, float, float, float]:
        return (self.x * scale, self.y * scale, self.width * scale, self.height * scale)


def build_overlays(issues: Iterable[Issue]) -> dict[int, list[Overlay]]:
    """
    Group located issues into per-page overlays.

    Issues without a rectangle or without a page are not drawn. Pages keep
    the issues' original order.
    """
    pages: dict[int, list[Overlay]] = {}
    for issue in issues:
        page = issue.page_number
        if issue.location is None or page is None:
            continue
        pages.setdefault(page, []).append(
            Overlay(
                issue_id=issue.id,
                page=page,
                x=issue.location.x,
                y=issue.location.y,
                width=issue.location.width,
                height=issue.location.height,
                severity=issue.severity_level,
                title=issue.type or "Issue",
            )
        )
    return pages


class Viewer(Protocol):
    """Renders a document with issue overlays."""

    def render(self, file: DocumentFile, issues: list[Issue]) -> None: ...
