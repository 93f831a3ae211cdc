# printify_check/orchestrator/jobs.py
"""
Job orchestrator.

Submits operations to the Processing API, polls them at a fixed interval
until a terminal state, and exposes progress, cancellation and result
retrieval. Every operation kind shares one code path; the latest job per
kind is the single source for UI flags.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from tenacity import (
    AsyncRetrying,
    retry_if_result,
    stop_after_delay,
    stop_never,
    wait_fixed,
)

from printify_check.aggregation.aggregator import (
    parse_compliance_result,
    parse_multi_standard,
    parse_validation_result,
)
from printify_check.api.base import DocumentFile, ProcessingApi
from printify_check.errors import (
    InvalidResponseError,
    JobFailedError,
    JobStateError,
    JobTimeoutError,
    PrintifyCheckError,
)
from printify_check.models.jobs import (
    InMemoryJobStore,
    Job,
    JobKind,
    JobStatus,
    generate_job_id,
)
from printify_check.models.results import MultiStandardResult, ValidationResult
from printify_check.models.store import JobStore
from printify_check.orchestrator.polling import CancellationToken, PollHandle

logger = logging.getLogger(__name__)

TerminalCallback = Callable[[Job, Exception | None], Awaitable[Any] | Any]


def _context(job: Job) -> dict[str, str]:
    return {"job_id": job.id, "kind": job.kind.value}


class JobOrchestrator:
    """
    Tracks remote jobs from submission to a terminal state.

    Features:
        - Fixed-interval polling (no backoff), latest progress wins
        - Local, immediate cancellation; remote cancel is best-effort
        - Exactly one terminal notification per job; a first timeout adds one more
        - Keyed kind -> latest Job map for deriving UI state
    """

    def __init__(
        self,
        api: ProcessingApi,
        store: JobStore | None = None,
        on_terminal: TerminalCallback | None = None,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            api: Processing API implementation
            store: Job store (default: a fresh InMemoryJobStore)
            on_terminal: Optional callback(job, error) invoked once per job when
                it completes, fails or is cancelled, and once more if a wait
                for it times out first
        """
        self._api = api
        self._store = store or InMemoryJobStore()
        self._on_terminal = on_terminal
        self._notified: set[str] = set()
        self._tokens: dict[str, CancellationToken] = {}

    @property
    def api(self) -> ProcessingApi:
        return self._api

    async def submit(
        self, kind: JobKind, file: DocumentFile, params: dict[str, Any] | None = None
    ) -> Job:
        """
        Submit an operation.

        Args:
            kind: Operation kind
            file: Single binary document
            params: Operation-specific parameters, passed through untouched

        Returns:
            The new Job (pending/processing, or already completed or failed when
            the endpoint answered synchronously; a failed Job carries the server error)

        Raises:
            NetworkError: If the submission could not reach the API
            InvalidResponseError: If the response carries neither a job id nor a result
        """
        response = await self._api.submit(kind, file, params)

        rejected = response.status is JobStatus.FAILED
        if response.job_id is None and response.inline_result is None and not rejected:
            raise InvalidResponseError(f"{kind.value} submission returned no job id")

        job = Job(
            id=response.job_id or generate_job_id(),
            kind=kind,
            status=response.status,
            progress=100 if response.status is JobStatus.COMPLETED else 0,
            result_id=response.result_id,
            file_name=response.file_name or file.name,
            inline_result=response.inline_result,
            error=response.error if rejected else None,
        )
        await self._store.add(job)
        logger.info(
            f"Submitted {kind.value} job {job.id} for {job.file_name} ({job.status.value})",
            extra=_context(job),
        )

        if job.status is JobStatus.FAILED:
            logger.error(f"Job {job.id} rejected: {job.error}", extra=_context(job))
            await self._notify(job, JobFailedError(job.snapshot()))
        elif job.is_terminal:
            await self._notify(job)
        return job.snapshot()

    async def _require(self, job_id: str) -> Job:
        record = await self._store.get(job_id)
        if record is None:
            raise JobStateError(f"Unknown job '{job_id}'")
        return record

    async def get(self, job_id: str) -> Job:
        """Current local view of a job, without a network call."""
        return (await self._require(job_id)).snapshot()

    async def poll(self, job_id: str) -> Job:
        """
        Single status check.

        Terminal jobs are returned as-is without a network call. A response
        that arrives after the job was cancelled locally is ignored.

        Raises:
            JobStateError: If the job id is unknown
            NetworkError: If the status request fails
        """
        record = await self._require(job_id)
        if record.is_terminal:
            return record.snapshot()

        status = await self._api.get_status(record.kind, job_id)

        record = await self._require(job_id)
        if record.is_terminal:
            logger.debug(f"Ignoring status for job {job_id}: already {record.status.value}")
            return record.snapshot()

        updates: dict[str, Any] = {"status": status.status, "progress": status.progress}
        if status.result_id is not None:
            updates["result_id"] = status.result_id
        if status.download_url is not None:
            updates["download_url"] = status.download_url
        if status.inline_result is not None:
            updates["inline_result"] = status.inline_result
        if status.status is JobStatus.FAILED:
            updates["error"] = status.error

        record = await self._store.update(job_id, **updates)
        logger.debug(f"Job {job_id}: {record.status.value} {record.progress}%")

        if record.status is JobStatus.FAILED:
            logger.error(f"Job {job_id} failed: {record.error}", extra=_context(record))
            await self._notify(record, JobFailedError(record.snapshot()))
        elif record.is_terminal:
            logger.info(f"Job {job_id} {record.status.value}", extra=_context(record))
            await self._notify(record)
        return record.snapshot()

    async def cancel(self, job_id: str) -> Job:
        """
        Cancel a job.

        Marks it cancelled locally and stops its polling loop at once, then
        asks the API to stop it. A failed remote cancel is logged only: the
        remote operation is not guaranteed to halt either way.
        """
        record = await self._require(job_id)
        if record.is_terminal:
            return record.snapshot()

        token = self._tokens.get(job_id)
        if token is not None:
            token.cancel()

        record = await self._store.update(job_id, status=JobStatus.CANCELLED)
        logger.info(f"Cancelled job {job_id}", extra=_context(record))
        await self._notify(record)

        try:
            await self._api.cancel(record.kind, job_id)
        except PrintifyCheckError as e:
            logger.warning(f"Remote cancel of job {job_id} failed: {e}", extra=_context(record))

        return record.snapshot()

    async def _poll_or_cancel(self, job_id: str, token: CancellationToken) -> Job:
        if token.cancelled:
            return await self.cancel(job_id)
        return await self.poll(job_id)

    async def await_completion(
        self,
        job_id: str,
        interval: float,
        timeout: float | None = None,
        token: CancellationToken | None = None,
    ) -> Job:
        """
        Poll until the job reaches a terminal state.

        Args:
            job_id: Job to wait for
            interval: Seconds between polls
            timeout: Give up after this many seconds (None = no limit)
            token: Optional cancellation token

        Returns:
            The completed or cancelled Job

        Raises:
            JobFailedError: If the job failed (message is the server error verbatim)
            JobTimeoutError: If timeout elapsed first
            NetworkError: If a status request failed (not retried)
        """
        token = token or CancellationToken()
        self._tokens[job_id] = token

        retrying = AsyncRetrying(
            wait=wait_fixed(interval),
            stop=stop_after_delay(timeout) if timeout is not None else stop_never,
            retry=retry_if_result(lambda job: not job.is_terminal),
            retry_error_callback=lambda state: state.outcome.result(),
            sleep=token.sleep,
            reraise=True,
        )

        try:
            job = await retrying(self._poll_or_cancel, job_id, token)
        finally:
            self._tokens.pop(job_id, None)

        if job.status is JobStatus.FAILED:
            raise JobFailedError(job)
        if not job.is_terminal:
            error = JobTimeoutError(job, timeout or 0.0)
            logger.error(str(error), extra=_context(error.job))
            await self._notify(await self._require(job_id), error)
            raise error
        return job

    def start_polling(
        self, job_id: str, interval: float, timeout: float | None = None
    ) -> PollHandle:
        """
        Poll in a background task.

        Returns:
            PollHandle with cancel() and wait()
        """
        token = CancellationToken()
        task = asyncio.create_task(
            self.await_completion(job_id, interval, timeout=timeout, token=token)
        )
        return PollHandle(job_id, task, token)

    async def fetch_result(self, job: Job) -> dict[str, Any]:
        """
        Result payload of a completed job.

        Uses the result embedded in the job when the endpoint answered
        synchronously, otherwise fetches it by result id.

        Raises:
            JobStateError: If the job has not completed
        """
        record = await self._require(job.id)
        if record.status is not JobStatus.COMPLETED:
            raise JobStateError(
                f"Job {record.id} is {record.status.value}; results are only available once completed"
            )
        if record.inline_result is not None:
            return record.inline_result
        return await self._api.get_result(record.kind, record.result_id or record.id)

    async def fetch_validation_result(self, job: Job) -> ValidationResult:
        """Parsed preflight result of a completed validate job."""
        return parse_validation_result(await self.fetch_result(job))

    async def fetch_compliance_result(
        self, job: Job, standard: str | None = None
    ) -> MultiStandardResult:
        """
        Parsed compliance verdicts of a completed compliance job.

        Single-standard responses are returned as a one-entry
        MultiStandardResult keyed by `standard` (or the level the server
        echoes back).
        """
        payload = await self.fetch_result(job)
        if "results" in payload:
            return parse_multi_standard(payload)
        key = standard or payload.get("level") or payload.get("flavour") or job.kind.value
        return MultiStandardResult(
            results={key: parse_compliance_result(key, payload)},
            file_name=payload.get("fileName") or job.file_name,
        )

    async def download(self, job: Job) -> bytes:
        """
        Processed file of a completed job.

        Raises:
            JobStateError: If the job has not completed
        """
        record = await self._require(job.id)
        if record.status is not JobStatus.COMPLETED:
            raise JobStateError(
                f"Job {record.id} is {record.status.value}; nothing to download yet"
            )
        return await self._api.download(record.kind, record.id)

    async def latest(self, kind: JobKind) -> Job | None:
        record = await self._store.latest_by_kind(kind)
        return record.snapshot() if record else None

    async def jobs_by_kind(self) -> dict[JobKind, Job]:
        """Latest job per operation kind."""
        jobs = {}
        for kind in JobKind:
            record = await self._store.latest_by_kind(kind)
            if record is not None:
                jobs[kind] = record.snapshot()
        return jobs

    async def is_running(self, kind: JobKind) -> bool:
        record = await self._store.latest_by_kind(kind)
        return record is not None and not record.is_terminal

    async def error_for(self, kind: JobKind) -> str | None:
        """Error text of the latest job of a kind, if it failed."""
        record = await self._store.latest_by_kind(kind)
        if record is None or record.status is not JobStatus.FAILED:
            return None
        return record.error

    async def _notify(self, job: Job, error: Exception | None = None) -> None:
        # A timeout leaves the job running; its real outcome is notified separately
        key = f"{job.id}:timeout" if isinstance(error, JobTimeoutError) else job.id
        if key in self._notified:
            return
        self._notified.add(key)
        if self._on_terminal is None:
            return
        result_or_coro = self._on_terminal(job.snapshot(), error)
        if hasattr(result_or_coro, "__await__"):
            await result_or_coro
