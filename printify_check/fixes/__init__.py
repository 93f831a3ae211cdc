# printify_check/fixes/__init__.py
"""Automatic fix catalog: issue type to fix operation mapping and bundles."""

from .catalog import (
    COLOR_BUNDLE,
    COMPLIANCE_BUNDLE,
    FONT_BUNDLE,
    IMAGE_BUNDLE,
    PRINT_PRODUCTION_BUNDLE,
    SECURITY_BUNDLE,
    STRUCTURAL_BUNDLE,
    FixBundle,
    bundle_for_fix,
    bundle_for_issue_type,
    fixes_for_type,
    fixes_in_bundle,
    is_bundle_fully_fixable,
    issue_types_for_fix,
    primary_fix,
)

__all__ = [
    "FixBundle",
    "STRUCTURAL_BUNDLE",
    "FONT_BUNDLE",
    "COLOR_BUNDLE",
    "IMAGE_BUNDLE",
    "COMPLIANCE_BUNDLE",
    "SECURITY_BUNDLE",
    "PRINT_PRODUCTION_BUNDLE",
    "fixes_for_type",
    "primary_fix",
    "issue_types_for_fix",
    "bundle_for_fix",
    "bundle_for_issue_type",
    "fixes_in_bundle",
    "is_bundle_fully_fixable",
]
