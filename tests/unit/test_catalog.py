# tests/unit/test_catalog.py
"""Tests for the fix catalog."""

from printify_check.fixes import (
    COLOR_BUNDLE,
    FONT_BUNDLE,
    PRINT_PRODUCTION_BUNDLE,
    SECURITY_BUNDLE,
    STRUCTURAL_BUNDLE,
    bundle_for_fix,
    bundle_for_issue_type,
    fixes_for_type,
    fixes_in_bundle,
    is_bundle_fully_fixable,
    issue_types_for_fix,
    primary_fix,
)
from printify_check.models.issues import Issue


def _issue(issue_id: str, issue_type: str, fixable: bool) -> Issue:
    return Issue(id=issue_id, type=issue_type, autoFixable=fixable)


class TestLookups:
    def test_display_names(self):
        assert primary_fix("Linearization") == "linearization"
        assert primary_fix("Non-Embedded Font") == "embedFonts"
        assert primary_fix("RGB in CMYK") == "convertRgbToCmyk"
        assert primary_fix("Bleed") == "addBleed"

    def test_preflight_types_share_the_table(self):
        assert primary_fix("missing_font") == primary_fix("Font Embedding") == "embedFonts"
        assert primary_fix("rgb_color") == "convertRgbToCmyk"

    def test_unknown_type_never_raises(self):
        assert primary_fix("Die Line") is None
        assert fixes_for_type("Die Line") == ()
        assert bundle_for_issue_type("Die Line") is None

    def test_multiple_fixes_primary_first(self):
        assert fixes_for_type("Metadata Sensitivity") == ("sanitizeMetadata", "redactSensitiveContent")

    def test_reverse_lookup(self):
        types = issue_types_for_fix("embedFonts")
        assert "Font Embedding" in types
        assert "Non-Embedded Font" in types
        assert "missing_font" in types

    def test_bundles(self):
        assert bundle_for_fix("addBleed") is PRINT_PRODUCTION_BUNDLE
        assert bundle_for_issue_type("RGB in CMYK") is COLOR_BUNDLE
        assert bundle_for_issue_type("JavaScript") is SECURITY_BUNDLE
        assert "embedFonts" in fixes_in_bundle(FONT_BUNDLE)


class TestBundleFullyFixable:
    def test_all_fixable(self):
        issues = [
            _issue("1", "Font Embedding", True),
            _issue("2", "Glyph Widths", True),
            _issue("3", "Low Resolution", False),
        ]
        assert is_bundle_fully_fixable(issues, FONT_BUNDLE)

    def test_one_not_fixable(self):
        issues = [
            _issue("1", "Font Embedding", True),
            _issue("2", "missing_font", False),
        ]
        assert not is_bundle_fully_fixable(issues, FONT_BUNDLE)

    def test_vacuously_true(self):
        issues = [_issue("1", "Bleed", False)]
        assert is_bundle_fully_fixable(issues, STRUCTURAL_BUNDLE)
        assert is_bundle_fully_fixable([], COLOR_BUNDLE)

    def test_secondary_fix_counts_towards_bundle(self):
        # Syntax Error maps to repairDamagedObjects and repairXref, both structural
        issues = [_issue("1", "Syntax Error", False)]
        assert not is_bundle_fully_fixable(issues, STRUCTURAL_BUNDLE)
