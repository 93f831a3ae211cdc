# printify_check/wizard/steps.py
"""Wizard step definitions."""

from dataclasses import dataclass

UPLOAD = "upload"
OCR = "ocr"
REDACTION = "redaction"
PREFLIGHT = "preflight"
FIXES = "fixes"
SUCCESS = "success"


@dataclass(frozen=True)
class WizardStep:
    """One step of the wizard."""

    id: str
    title: str
    description: str = ""
    is_optional: bool = False
    is_pro_only: bool = False


DEFAULT_STEPS: tuple[WizardStep, ...] = (
    WizardStep(UPLOAD, "Upload PDF", "Upload a PDF or image file to begin the preflight process."),
    WizardStep(
        OCR,
        "OCR (Optional)",
        "Make scanned PDFs searchable and extract text for better preflight checks.",
        is_optional=True,
        is_pro_only=True,
    ),
    WizardStep(
        REDACTION,
        "Redaction (Optional)",
        "Remove sensitive data and metadata from your PDF.",
        is_optional=True,
        is_pro_only=True,
    ),
    WizardStep(PREFLIGHT, "Preflight Check", "Identify issues that could affect print quality."),
    WizardStep(FIXES, "Apply Fixes", "Correct issues and export your print-ready PDF."),
)
