# printify_check/wizard/machine.py
"""
Wizard state machine.

Gated step sequence: upload -> [ocr] -> [redaction] -> preflight -> fixes ->
success. Pro-only steps are hidden without entitlement; entering a step
requires the outputs of every earlier required step. `success` is terminal
until reset().
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from printify_check.errors import InvalidTransitionError
from printify_check.models.results import ValidationResult
from printify_check.wizard.steps import DEFAULT_STEPS, PREFLIGHT, SUCCESS, UPLOAD, WizardStep

logger = logging.getLogger(__name__)


class FixesMode(Enum):
    """How the fixes step behaves after preflight."""

    NOOP = "noop"  # nothing to fix
    REMEDIATE = "remediate"


@dataclass
class WizardState:
    current_step_id: str
    file_ref: Any = None
    step_outputs: dict[str, Any] = field(default_factory=dict)
    error: str | None = None
    fixes_mode: FixesMode | None = None


def _count_issues(payload: Any) -> int:
    if payload is None:
        return 0
    if isinstance(payload, ValidationResult):
        return len(payload.issues())
    if isinstance(payload, dict):
        return int(payload.get("totalIssues", 0))
    return len(payload)


class WizardStateMachine:
    """
    Step sequencing for one document.

    Entitlement is passed in explicitly; it is not read from anywhere else.
    """

    def __init__(self, steps: Sequence[WizardStep] = DEFAULT_STEPS, is_pro_or_team: bool = False):
        """
        Initialize the machine.

        Args:
            steps: Ordered step definitions
            is_pro_or_team: Whether pro-only steps are available

        Raises:
            ValueError: If steps are empty, repeat an id, or use the reserved success id
        """
        ids = [step.id for step in steps]
        if not ids:
            raise ValueError("Wizard needs at least one step")
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate step ids: {ids}")
        if SUCCESS in ids:
            raise ValueError(f"'{SUCCESS}' is reserved for the terminal state")

        self._steps = tuple(steps)
        self.is_pro_or_team = is_pro_or_team
        self._visible = [step for step in self._steps if is_pro_or_team or not step.is_pro_only]
        if not self._visible:
            raise ValueError("No steps visible without pro entitlement")
        self._state = WizardState(current_step_id=self._visible[0].id)

    @property
    def state(self) -> WizardState:
        """Copy of the current state."""
        return replace(self._state, step_outputs=dict(self._state.step_outputs))

    @property
    def visible_steps(self) -> list[WizardStep]:
        return list(self._visible)

    @property
    def visible_step_ids(self) -> list[str]:
        return [step.id for step in self._visible]

    @property
    def current_step_id(self) -> str:
        return self._state.current_step_id

    @property
    def current_step(self) -> WizardStep | None:
        """Current step definition; None once complete."""
        if self.is_complete:
            return None
        return self._visible[self.step_index]

    @property
    def step_index(self) -> int:
        """Position in the visible sequence (len(visible_steps) when complete)."""
        if self.is_complete:
            return len(self._visible)
        return self.visible_step_ids.index(self._state.current_step_id)

    @property
    def is_complete(self) -> bool:
        return self._state.current_step_id == SUCCESS

    def output(self, step_id: str) -> Any:
        return self._state.step_outputs.get(step_id)

    def _visible_index(self, step_id: str) -> int:
        try:
            return self.visible_step_ids.index(step_id)
        except ValueError:
            if any(step.id == step_id for step in self._steps):
                raise InvalidTransitionError(
                    f"Step '{step_id}' requires a Pro or Team plan"
                ) from None
            raise InvalidTransitionError(f"Unknown step '{step_id}'") from None

    def _ensure_active(self) -> None:
        if self.is_complete:
            raise InvalidTransitionError("Wizard is complete; reset() to start over")

    def _ensure_current(self, step_id: str) -> None:
        self._ensure_active()
        if step_id != self._state.current_step_id:
            raise InvalidTransitionError(
                f"Cannot act on '{step_id}' while on '{self._state.current_step_id}'"
            )

    def missing_prerequisites(self, step_id: str) -> list[str]:
        """Earlier required steps without an output."""
        index = self._visible_index(step_id)
        return [
            step.id
            for step in self._visible[:index]
            if not step.is_optional and step.id not in self._state.step_outputs
        ]

    def can_enter(self, step_id: str) -> bool:
        if self.is_complete:
            return False
        return not self.missing_prerequisites(step_id)

    def go_to(self, step_id: str) -> WizardState:
        """
        Jump to a visible step.

        Raises:
            InvalidTransitionError: If the wizard is complete, the step is hidden
                or unknown, or an earlier required step has no output
        """
        self._ensure_active()
        missing = self.missing_prerequisites(step_id)
        if missing:
            raise InvalidTransitionError(
                f"Cannot enter '{step_id}': missing output of {', '.join(missing)}"
            )
        self._state.current_step_id = step_id
        self._state.error = None
        return self.state

    def _advance(self) -> None:
        index = self.step_index + 1
        if index >= len(self._visible):
            self._state.current_step_id = SUCCESS
            logger.info("Wizard complete")
        else:
            self._state.current_step_id = self._visible[index].id
            logger.debug(f"Wizard entered step '{self._state.current_step_id}'")

    def complete_step(self, step_id: str, payload: Any = None, file_ref: Any = None) -> WizardState:
        """
        Store a step's output and advance.

        Args:
            step_id: Must be the current step
            payload: Step output (the uploaded file, a job, a ValidationResult, ...)
            file_ref: Document to use from now on. Completing upload uses the
                payload when not given.

        Raises:
            InvalidTransitionError: If step_id is not the current step or the wizard is complete
        """
        self._ensure_current(step_id)
        self._state.step_outputs[step_id] = payload
        self._state.error = None

        if file_ref is not None:
            self._state.file_ref = file_ref
        elif step_id == UPLOAD:
            self._state.file_ref = payload

        if step_id == PREFLIGHT:
            count = _count_issues(payload)
            self._state.fixes_mode = FixesMode.NOOP if count == 0 else FixesMode.REMEDIATE
            logger.info(f"Preflight found {count} issues, fixes mode: {self._state.fixes_mode.value}")

        self._advance()
        return self.state

    def skip(self) -> WizardState:
        """
        Skip the current optional step without an output.

        Raises:
            InvalidTransitionError: If the current step is required
        """
        self._ensure_active()
        step = self.current_step
        if not step.is_optional:
            raise InvalidTransitionError(f"Step '{step.id}' is required and cannot be skipped")
        self._state.step_outputs.pop(step.id, None)
        self._state.error = None
        logger.info(f"Skipped step '{step.id}'")
        self._advance()
        return self.state

    def fail_step(self, step_id: str, error: Exception | str) -> WizardState:
        """Record an error on the current step. Never retries or advances."""
        self._ensure_current(step_id)
        self._state.error = str(error)
        logger.warning(f"Step '{step_id}' failed: {error}", extra={"step": step_id})
        return self.state

    def back(self) -> WizardState:
        """
        Return to the previous visible step.

        Raises:
            InvalidTransitionError: On the first step, or once complete
        """
        self._ensure_active()
        index = self.step_index
        if index == 0:
            raise InvalidTransitionError("Already on the first step")
        self._state.current_step_id = self._visible[index - 1].id
        self._state.error = None
        return self.state

    def reset(self) -> WizardState:
        """Start over: clears outputs, file reference, errors and fixes mode."""
        self._state = WizardState(current_step_id=self._visible[0].id)
        logger.info("Wizard reset")
        return self.state
