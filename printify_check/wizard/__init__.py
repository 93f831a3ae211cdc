# printify_check/wizard/__init__.py
"""Wizard: step definitions, state machine and session."""

from .machine import FixesMode, WizardState, WizardStateMachine
from .session import WizardSession
from .steps import (
    DEFAULT_STEPS,
    FIXES,
    OCR,
    PREFLIGHT,
    REDACTION,
    SUCCESS,
    UPLOAD,
    WizardStep,
)

__all__ = [
    "WizardStep",
    "WizardState",
    "WizardStateMachine",
    "WizardSession",
    "FixesMode",
    "DEFAULT_STEPS",
    "UPLOAD",
    "OCR",
    "REDACTION",
    "PREFLIGHT",
    "FIXES",
    "SUCCESS",
]
