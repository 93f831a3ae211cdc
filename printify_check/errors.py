# printify_check/errors.py
"""
Error taxonomy for printify-check.

Orchestrator and aggregator raise these typed errors for the wizard layer
to render. Nothing here is retried automatically.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from printify_check.models.jobs import Job


class PrintifyCheckError(Exception):
    """Base class for all printify-check errors."""


class NetworkError(PrintifyCheckError):
    """Transport or HTTP failure reaching the Processing API."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidResponseError(PrintifyCheckError):
    """Processing API returned a payload that could not be interpreted."""


class JobFailedError(PrintifyCheckError):
    """Remote operation reported status=failed. Message is the server text verbatim."""

    def __init__(self, job: "Job"):
        super().__init__(job.error or "")
        self.job = job


class JobTimeoutError(PrintifyCheckError):
    """Polling exceeded the caller-supplied timeout."""

    def __init__(self, job: "Job", timeout: float):
        super().__init__(
            f"Job {job.id} did not finish within {timeout:g}s "
            f"(last status: {job.status.value}, progress: {job.progress}%)"
        )
        self.job = job
        self.timeout = timeout


class JobStateError(PrintifyCheckError):
    """Operation is not valid for the job's current state, or the job is unknown."""


class InvalidTransitionError(PrintifyCheckError):
    """Wizard asked to enter a step whose prerequisites are unmet."""
