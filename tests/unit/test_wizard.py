# tests/unit/test_wizard.py
"""Tests for the wizard state machine."""

import pytest

from printify_check.errors import InvalidTransitionError
from printify_check.models.issues import Category, Issue
from printify_check.models.results import ValidationResult
from printify_check.wizard import (
    DEFAULT_STEPS,
    FIXES,
    OCR,
    PREFLIGHT,
    REDACTION,
    SUCCESS,
    UPLOAD,
    FixesMode,
    WizardStateMachine,
    WizardStep,
)


def _result(issue_count: int) -> ValidationResult:
    issues = [Issue(id=str(i), type="Bleed", category=Category.PRINT_PRODUCTION) for i in range(issue_count)]
    return ValidationResult(
        file_name="a.pdf",
        issues_by_category={Category.PRINT_PRODUCTION: issues} if issues else {},
        total_issues=issue_count,
    )


class TestVisibility:
    def test_pro_only_steps_hidden_without_entitlement(self):
        steps = [
            WizardStep(UPLOAD, "Upload"),
            WizardStep(OCR, "OCR", is_pro_only=True),
            WizardStep(REDACTION, "Redaction", is_pro_only=True),
            WizardStep(PREFLIGHT, "Preflight"),
            WizardStep(FIXES, "Fixes"),
        ]
        machine = WizardStateMachine(steps, is_pro_or_team=False)
        assert machine.visible_step_ids == [UPLOAD, PREFLIGHT, FIXES]

    def test_all_steps_visible_with_entitlement(self):
        machine = WizardStateMachine(DEFAULT_STEPS, is_pro_or_team=True)
        assert machine.visible_step_ids == [UPLOAD, OCR, REDACTION, PREFLIGHT, FIXES]

    def test_hidden_step_cannot_be_entered(self):
        machine = WizardStateMachine(is_pro_or_team=False)
        machine.complete_step(UPLOAD, "file")
        with pytest.raises(InvalidTransitionError, match="Pro or Team"):
            machine.go_to(OCR)

    @pytest.mark.parametrize(
        "steps",
        [
            [],
            [WizardStep("a", "A"), WizardStep("a", "A again")],
            [WizardStep(SUCCESS, "Done")],
        ],
    )
    def test_invalid_step_lists(self, steps):
        with pytest.raises(ValueError):
            WizardStateMachine(steps)


class TestTransitions:
    def test_happy_path_without_pro(self):
        machine = WizardStateMachine()
        assert machine.current_step_id == UPLOAD

        state = machine.complete_step(UPLOAD, "document.pdf")
        assert state.current_step_id == PREFLIGHT
        assert state.file_ref == "document.pdf"

        state = machine.complete_step(PREFLIGHT, _result(2))
        assert state.current_step_id == FIXES
        assert state.fixes_mode is FixesMode.REMEDIATE

        state = machine.complete_step(FIXES, {"fixed": True})
        assert state.current_step_id == SUCCESS
        assert machine.is_complete
        assert machine.step_index == 3
        assert machine.current_step is None

    def test_zero_issues_routes_to_noop_fixes(self):
        machine = WizardStateMachine()
        machine.complete_step(UPLOAD, "document.pdf")
        state = machine.complete_step(PREFLIGHT, _result(0))

        assert state.current_step_id == FIXES
        assert state.fixes_mode is FixesMode.NOOP

    def test_cannot_skip_required_output(self):
        machine = WizardStateMachine()
        with pytest.raises(InvalidTransitionError, match="missing output of upload"):
            machine.go_to(PREFLIGHT)

    def test_optional_steps_skippable_without_output(self):
        machine = WizardStateMachine(is_pro_or_team=True)
        machine.complete_step(UPLOAD, "document.pdf")

        assert machine.can_enter(PREFLIGHT)
        machine.skip()
        assert machine.current_step_id == REDACTION
        machine.skip()
        assert machine.current_step_id == PREFLIGHT
        assert OCR not in machine.state.step_outputs

    def test_required_step_cannot_be_skipped(self):
        machine = WizardStateMachine()
        with pytest.raises(InvalidTransitionError, match="required"):
            machine.skip()

    def test_complete_wrong_step(self):
        machine = WizardStateMachine()
        with pytest.raises(InvalidTransitionError):
            machine.complete_step(PREFLIGHT, _result(0))

    def test_success_is_terminal_until_reset(self):
        machine = WizardStateMachine()
        machine.complete_step(UPLOAD, "document.pdf")
        machine.complete_step(PREFLIGHT, _result(0))
        machine.complete_step(FIXES)

        with pytest.raises(InvalidTransitionError):
            machine.complete_step(FIXES)
        with pytest.raises(InvalidTransitionError):
            machine.back()
        with pytest.raises(InvalidTransitionError):
            machine.go_to(UPLOAD)

        state = machine.reset()
        assert state.current_step_id == UPLOAD
        assert state.step_outputs == {}
        assert state.file_ref is None
        assert state.error is None
        assert state.fixes_mode is None

    def test_file_ref_replaced_by_processed_file(self):
        machine = WizardStateMachine(is_pro_or_team=True)
        machine.complete_step(UPLOAD, "document.pdf")
        state = machine.complete_step(OCR, {"job": "o-1"}, file_ref="ocr_document.pdf")

        assert state.file_ref == "ocr_document.pdf"
        assert state.step_outputs[UPLOAD] == "document.pdf"


class TestFailAndBack:
    def test_fail_step_stays_and_exposes_error(self):
        machine = WizardStateMachine()
        machine.complete_step(UPLOAD, "document.pdf")

        state = machine.fail_step(PREFLIGHT, RuntimeError("Validation service unavailable"))

        assert state.current_step_id == PREFLIGHT
        assert state.error == "Validation service unavailable"
        assert PREFLIGHT not in state.step_outputs

    def test_completing_clears_error(self):
        machine = WizardStateMachine()
        machine.complete_step(UPLOAD, "document.pdf")
        machine.fail_step(PREFLIGHT, "boom")
        state = machine.complete_step(PREFLIGHT, _result(1))
        assert state.error is None

    def test_fail_step_must_be_current(self):
        machine = WizardStateMachine()
        with pytest.raises(InvalidTransitionError):
            machine.fail_step(FIXES, "boom")

    def test_back(self):
        machine = WizardStateMachine()
        machine.complete_step(UPLOAD, "document.pdf")
        state = machine.back()
        assert state.current_step_id == UPLOAD
        assert state.step_outputs[UPLOAD] == "document.pdf"

        with pytest.raises(InvalidTransitionError, match="first step"):
            machine.back()


def test_state_is_a_copy():
    machine = WizardStateMachine()
    state = machine.state
    state.step_outputs[UPLOAD] = "tampered"
    assert machine.output(UPLOAD) is None
