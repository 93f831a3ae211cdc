# printify_check/orchestrator/polling.py
"""
Cancellation token and poll handle.

Polling is cooperative: cancelling a token wakes the poll loop out of its
interval sleep, and the loop marks the job cancelled on its next turn.
"""

import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from printify_check.models.jobs import Job

logger = logging.getLogger(__name__)


class CancellationToken:
    """Explicit cancellation signal for one polling loop."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def sleep(self, seconds: float) -> None:
        """Sleep for `seconds`, returning early if the token is cancelled."""
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass


class PollHandle:
    """
    Handle for a background polling task.

    Returned by JobOrchestrator.start_polling. `wait()` returns the terminal
    Job or raises the same errors as await_completion.
    """

    def __init__(self, job_id: str, task: "asyncio.Task[Job]", token: CancellationToken):
        self.job_id = job_id
        self._task = task
        self._token = token

    def cancel(self) -> None:
        """Stop polling; the job is reported as cancelled."""
        logger.info(f"Poll handle cancel requested for job {self.job_id}")
        self._token.cancel()

    @property
    def cancelled(self) -> bool:
        return self._token.cancelled

    def done(self) -> bool:
        return self._task.done()

    async def wait(self) -> "Job":
        return await self._task
