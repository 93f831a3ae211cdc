# printify_check/wizard/session.py
"""
Wizard session.

Binds the state machine to the orchestrator: each step submits its backing
job, waits for it, and records the outcome on the machine. Failures are
recorded with fail_step and re-raised with their type intact.
"""

import logging
from collections.abc import Iterable
from typing import Any

from printify_check.aggregation.aggregator import ResultAggregator, SingleAggregate
from printify_check.api.base import DocumentFile
from printify_check.config.schema import PollingConfig
from printify_check.errors import InvalidTransitionError, JobFailedError, PrintifyCheckError
from printify_check.fixes.catalog import FIX_BUNDLES
from printify_check.models.jobs import Job, JobKind, JobStatus
from printify_check.models.results import ValidationResult
from printify_check.orchestrator.jobs import JobOrchestrator
from printify_check.wizard.machine import FixesMode, WizardState, WizardStateMachine
from printify_check.wizard.steps import FIXES, OCR, PREFLIGHT, REDACTION, UPLOAD

logger = logging.getLogger(__name__)


class WizardSession:
    """One document's trip through the wizard."""

    def __init__(
        self,
        orchestrator: JobOrchestrator,
        machine: WizardStateMachine | None = None,
        aggregator: ResultAggregator | None = None,
        polling: PollingConfig | None = None,
    ):
        self.orchestrator = orchestrator
        self.machine = machine or WizardStateMachine()
        self.aggregator = aggregator or ResultAggregator()
        self.polling = polling or PollingConfig()

    @property
    def state(self) -> WizardState:
        return self.machine.state

    @property
    def file(self) -> DocumentFile | None:
        return self.machine.state.file_ref

    @property
    def preflight_result(self) -> ValidationResult | None:
        return self.machine.output(PREFLIGHT)

    def summary(self) -> SingleAggregate | None:
        """Aggregate of the preflight result, once available."""
        result = self.preflight_result
        return self.aggregator.aggregate_single(result) if result is not None else None

    async def upload(self, file: DocumentFile) -> WizardState:
        logger.info(f"Uploaded {file.name} ({file.size} bytes)")
        return self.machine.complete_step(UPLOAD, file)

    async def _run_job(self, step_id: str, kind: JobKind, params: dict[str, Any] | None) -> Job:
        if step_id != self.machine.current_step_id or self.machine.is_complete:
            raise InvalidTransitionError(
                f"Cannot run '{step_id}' while on '{self.machine.current_step_id}'"
            )
        file = self.file
        if file is None:
            raise InvalidTransitionError(f"No document uploaded for '{step_id}'")

        try:
            job = await self.orchestrator.submit(kind, file, params)
            if not job.is_terminal:
                job = await self.orchestrator.await_completion(
                    job.id, self.polling.interval, timeout=self.polling.timeout
                )
        except PrintifyCheckError as e:
            self.machine.fail_step(step_id, e)
            raise

        if job.status is JobStatus.FAILED:
            error = JobFailedError(job)
            self.machine.fail_step(step_id, error)
            raise error
        if job.status is JobStatus.CANCELLED:
            self.machine.fail_step(step_id, f"{kind.value} job {job.id} was cancelled")
        return job

    async def _processed_file(self, job: Job, step_id: str, prefix: str) -> DocumentFile:
        original = self.file
        try:
            content = await self.orchestrator.download(job)
        except PrintifyCheckError as e:
            self.machine.fail_step(step_id, e)
            raise
        return DocumentFile(
            name=f"{prefix}_{original.name}",
            content=content,
            content_type=original.content_type,
        )

    async def _run_processing_step(
        self, step_id: str, kind: JobKind, params: dict[str, Any] | None, prefix: str
    ) -> WizardState:
        job = await self._run_job(step_id, kind, params)
        if job.status is JobStatus.CANCELLED:
            return self.state
        processed = await self._processed_file(job, step_id, prefix)
        return self.machine.complete_step(step_id, job, file_ref=processed)

    async def run_ocr(self, params: dict[str, Any] | None = None) -> WizardState:
        """Run OCR and continue with the searchable document."""
        return await self._run_processing_step(OCR, JobKind.OCR, params, "ocr")

    async def run_redaction(self, params: dict[str, Any] | None = None) -> WizardState:
        """Run redaction and continue with the redacted document."""
        return await self._run_processing_step(REDACTION, JobKind.REDACT, params, "redacted")

    async def run_preflight(self, params: dict[str, Any] | None = None) -> ValidationResult | None:
        """
        Validate the current document.

        Returns:
            The ValidationResult, or None if the job was cancelled
        """
        job = await self._run_job(PREFLIGHT, JobKind.VALIDATE, params)
        if job.status is JobStatus.CANCELLED:
            return None
        try:
            result = await self.orchestrator.fetch_validation_result(job)
        except PrintifyCheckError as e:
            self.machine.fail_step(PREFLIGHT, e)
            raise
        self.machine.complete_step(PREFLIGHT, result)
        return result

    async def apply_fixes(
        self,
        selection: Iterable[str],
        options: dict[str, Any] | None = None,
        optimizations: Iterable[str] = (),
    ) -> Job | None:
        """
        Submit the fixes for the selected issue ids plus any named optimizations.

        Optimizations are fix operations requested by name (e.g.
        linearization, optimizeResolution) rather than through an issue. They are
        the only fixes available when preflight found nothing; with neither
        optimizations nor fixable selection in that case, the step completes
        without a job.

        Returns:
            The completed fix Job, or None when nothing was submitted

        Raises:
            InvalidTransitionError: If an optimization name is unknown, or if
                preflight found issues and nothing selected maps to a fix
        """
        extra = list(dict.fromkeys(optimizations))
        unknown = [name for name in extra if name not in FIX_BUNDLES]
        if unknown:
            raise InvalidTransitionError(f"Unknown fix operation: {', '.join(unknown)}")

        result = self.preflight_result
        if self.machine.current_step_id != FIXES or result is None:
            raise InvalidTransitionError(
                f"Cannot apply fixes while on '{self.machine.current_step_id}'"
            )

        fix_types = self.aggregator.derive_fix_types(result.issues(), selection)
        fix_types += [name for name in extra if name not in fix_types]
        if not fix_types:
            if self.machine.state.fixes_mode is FixesMode.NOOP:
                self.machine.complete_step(FIXES, None)
                return None
            raise InvalidTransitionError("None of the selected issues has an automatic fix")

        logger.info(f"Applying fixes: {', '.join(fix_types)}")
        params: dict[str, Any] = {"fixTypes": fix_types}
        if options:
            params["options"] = options

        job = await self._run_job(FIXES, JobKind.FIX, params)
        if job.status is JobStatus.CANCELLED:
            return job
        self.machine.complete_step(FIXES, job)
        return job

    async def skip_fixes(self) -> WizardState:
        """Finish the wizard without applying any fix, whatever preflight found."""
        if self.machine.current_step_id != FIXES:
            raise InvalidTransitionError(
                f"Cannot skip fixes while on '{self.machine.current_step_id}'"
            )
        logger.info("Fixes skipped")
        return self.machine.complete_step(FIXES, None)

    async def skip_step(self) -> WizardState:
        return self.machine.skip()

    async def reset(self) -> WizardState:
        return self.machine.reset()
