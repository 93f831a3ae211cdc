# printify_check/fixes/catalog.py
"""
Static catalog of automatic fixes.

Single table mapping issue types to the fix operation names the Processing
API accepts on POST /fix, and fix operations to the bundle they belong to.
Issue types come in two vocabularies: the validation engine's display names
("Font Embedding", "RGB in CMYK") and the preflight engine's snake_case
types ("missing_font", "rgb_color"). Both are listed here.
"""

import logging
from collections.abc import Iterable
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from printify_check.models.issues import Issue

logger = logging.getLogger(__name__)


class FixBundle(Enum):
    """Named groups of related fix operations."""

    STRUCTURAL_BUNDLE = "structural"
    FONT_BUNDLE = "font"
    COLOR_BUNDLE = "color"
    IMAGE_BUNDLE = "image"
    COMPLIANCE_BUNDLE = "compliance"
    SECURITY_BUNDLE = "security"
    PRINT_PRODUCTION_BUNDLE = "print_production"


STRUCTURAL_BUNDLE = FixBundle.STRUCTURAL_BUNDLE
FONT_BUNDLE = FixBundle.FONT_BUNDLE
COLOR_BUNDLE = FixBundle.COLOR_BUNDLE
IMAGE_BUNDLE = FixBundle.IMAGE_BUNDLE
COMPLIANCE_BUNDLE = FixBundle.COMPLIANCE_BUNDLE
SECURITY_BUNDLE = FixBundle.SECURITY_BUNDLE
PRINT_PRODUCTION_BUNDLE = FixBundle.PRINT_PRODUCTION_BUNDLE


# Fix operation -> bundle
FIX_BUNDLES: dict[str, FixBundle] = {
    # Structural
    "linearization": STRUCTURAL_BUNDLE,
    "objectStreams": STRUCTURAL_BUNDLE,
    "repairXref": STRUCTURAL_BUNDLE,
    "convertToXrefStream": STRUCTURAL_BUNDLE,
    "repairDamagedObjects": STRUCTURAL_BUNDLE,
    "updatePdfVersion": STRUCTURAL_BUNDLE,
    "removeEmbeddedFiles": STRUCTURAL_BUNDLE,
    "flattenAnnotations": STRUCTURAL_BUNDLE,
    "flattenForms": STRUCTURAL_BUNDLE,
    # Fonts
    "embedFonts": FONT_BUNDLE,
    "generateCmaps": FONT_BUNDLE,
    "fixGlyphWidths": FONT_BUNDLE,
    "convertType3Fonts": FONT_BUNDLE,
    "applyFontSubsetting": FONT_BUNDLE,
    "convertTextEncoding": FONT_BUNDLE,
    # Color
    "convertRgbToCmyk": COLOR_BUNDLE,
    "convertSpotColors": COLOR_BUNDLE,
    "embedIccProfile": COLOR_BUNDLE,
    "fixOverprintSettings": COLOR_BUNDLE,
    "reduceInkDensity": COLOR_BUNDLE,
    "normalizeColorSpaces": COLOR_BUNDLE,
    "flattenTransparency": COLOR_BUNDLE,
    "flattenLayers": COLOR_BUNDLE,
    # Images
    "optimizeResolution": IMAGE_BUNDLE,
    "fixImageCompression": IMAGE_BUNDLE,
    "reconcileResolutions": IMAGE_BUNDLE,
    "convertCcittGroup4": IMAGE_BUNDLE,
    "resizeImages": IMAGE_BUNDLE,
    "adjustColorDepth": IMAGE_BUNDLE,
    # Compliance
    "convertToPdfA": COMPLIANCE_BUNDLE,
    "convertToPdfX": COMPLIANCE_BUNDLE,
    "enhancePdfUa": COMPLIANCE_BUNDLE,
    "fixWcagIssues": COMPLIANCE_BUNDLE,
    # Security
    "removeJavaScript": SECURITY_BUNDLE,
    "enhanceEncryption": SECURITY_BUNDLE,
    "sanitizeMetadata": SECURITY_BUNDLE,
    "redactSensitiveContent": SECURITY_BUNDLE,
    # Print production
    "addBleed": PRINT_PRODUCTION_BUNDLE,
    "addTrimMarks": PRINT_PRODUCTION_BUNDLE,
    "fixPageGeometry": PRINT_PRODUCTION_BUNDLE,
    "addRegistrationMarks": PRINT_PRODUCTION_BUNDLE,
    "enhanceBarcodes": PRINT_PRODUCTION_BUNDLE,
    "addFoldMarks": PRINT_PRODUCTION_BUNDLE,
}


# Issue type -> fix operations, primary first
ISSUE_FIXES: dict[str, tuple[str, ...]] = {
    # Structural checks
    "Linearization": ("linearization",),
    "Object Streams": ("objectStreams",),
    "XREF Table": ("repairXref",),
    "XREF Stream": ("convertToXrefStream",),
    "Damaged Objects": ("repairDamagedObjects",),
    "Syntax Error": ("repairDamagedObjects", "repairXref"),
    "PDF Version": ("updatePdfVersion",),
    "Embedded Files": ("removeEmbeddedFiles",),
    "Annotations": ("flattenAnnotations",),
    "Forms": ("flattenForms",),
    # Font checks
    "Font Embedding": ("embedFonts",),
    "Non-Embedded Font": ("embedFonts",),
    "CMap Validation": ("generateCmaps",),
    "Glyph Widths": ("fixGlyphWidths",),
    "Type3 Fonts": ("convertType3Fonts",),
    "Font Subsetting": ("applyFontSubsetting",),
    "Text Encoding": ("convertTextEncoding",),
    # Color checks
    "RGB in CMYK": ("convertRgbToCmyk",),
    "Spot Colors": ("convertSpotColors",),
    "ICC Profiles": ("embedIccProfile",),
    "Overprint Settings": ("fixOverprintSettings",),
    "Ink Density": ("reduceInkDensity",),
    "Color Space Mismatches": ("normalizeColorSpaces",),
    "Transparency": ("flattenTransparency",),
    "Layer Misuse": ("flattenLayers",),
    # Image checks
    "Low Resolution": ("optimizeResolution",),
    "Compression": ("fixImageCompression",),
    "JPEG2000/PNG Artifacts": ("fixImageCompression",),
    "Resolution Mismatches": ("reconcileResolutions",),
    "Image Transparency": ("flattenTransparency",),
    "CCITT Group 4": ("convertCcittGroup4",),
    "Image Size": ("resizeImages",),
    "Color Depth": ("adjustColorDepth",),
    # Compliance checks
    "PDF/A Compliance": ("convertToPdfA",),
    "PDF/X Compliance": ("convertToPdfX",),
    "PDF/UA Compliance": ("enhancePdfUa",),
    "WCAG 2.1 Compliance": ("fixWcagIssues", "enhancePdfUa"),
    "Section 508 Compliance": ("fixWcagIssues",),
    # Security checks
    "JavaScript": ("removeJavaScript",),
    "Encryption Strength": ("enhanceEncryption",),
    "Metadata Sensitivity": ("sanitizeMetadata", "redactSensitiveContent"),
    "Embedded Attachments": ("removeEmbeddedFiles",),
    # Print production checks
    "Bleed": ("addBleed",),
    "Trim/Safe Zones": ("addTrimMarks",),
    "Page Geometry": ("fixPageGeometry",),
    "Registration Marks": ("addRegistrationMarks",),
    "Barcode Readability": ("enhanceBarcodes",),
    "Fold Marks": ("addFoldMarks",),
    # Preflight engine types
    "missing_font": ("embedFonts",),
    "rgb_color": ("convertRgbToCmyk",),
    "high_resolution": ("optimizeResolution",),
    "transparency": ("flattenTransparency",),
    "annotations": ("flattenAnnotations",),
    "metadata": ("sanitizeMetadata",),
    "embedded_file": ("removeEmbeddedFiles",),
    "syntax_error": ("repairDamagedObjects",),
}


def _build_reverse_index() -> dict[str, tuple[str, ...]]:
    reverse: dict[str, list[str]] = {}
    for issue_type, fixes in ISSUE_FIXES.items():
        for fix in fixes:
            reverse.setdefault(fix, []).append(issue_type)
    return {fix: tuple(types) for fix, types in reverse.items()}


_FIX_ISSUE_TYPES = _build_reverse_index()


def fixes_for_type(issue_type: str) -> tuple[str, ...]:
    """All fix operations that remediate an issue type (empty if none)."""
    return ISSUE_FIXES.get(issue_type, ())


def primary_fix(issue_type: str) -> str | None:
    """
    The fix operation used when a single issue of this type is selected.

    Unknown types return None; this never raises.
    """
    fixes = ISSUE_FIXES.get(issue_type)
    return fixes[0] if fixes else None


def issue_types_for_fix(fix_name: str) -> tuple[str, ...]:
    """Issue types a fix operation remediates."""
    return _FIX_ISSUE_TYPES.get(fix_name, ())


def bundle_for_fix(fix_name: str) -> FixBundle | None:
    return FIX_BUNDLES.get(fix_name)


def bundle_for_issue_type(issue_type: str) -> FixBundle | None:
    """Bundle of the issue type's primary fix."""
    fix = primary_fix(issue_type)
    return FIX_BUNDLES.get(fix) if fix else None


def fixes_in_bundle(bundle: FixBundle) -> tuple[str, ...]:
    return tuple(fix for fix, owner in FIX_BUNDLES.items() if owner is bundle)


def maps_into_bundle(issue_type: str, bundle: FixBundle) -> bool:
    """True if any fix for the issue type belongs to the bundle."""
    return any(FIX_BUNDLES.get(fix) is bundle for fix in fixes_for_type(issue_type))


def is_bundle_fully_fixable(issues: Iterable["Issue"], bundle: FixBundle) -> bool:
    """
    Whether "fix all" is available for a bundle.

    True iff every issue whose type maps into the bundle is auto-fixable.
    Vacuously true when no issue maps into it.
    """
    return all(
        issue.auto_fixable
        for issue in issues
        if maps_into_bundle(issue.type, bundle)
    )


def _check_catalog() -> None:
    unbundled = [fix for fix in _FIX_ISSUE_TYPES if fix not in FIX_BUNDLES]
    if unbundled:
        raise RuntimeError(f"Fix operations without a bundle: {unbundled}")


_check_catalog()
