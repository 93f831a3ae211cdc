# printify_check/models/jobs.py
"""
Job tracking models and in-memory storage.

A Job is one asynchronous remote operation tracked by id, status and
progress until it reaches a terminal state.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

from printify_check.models.store import JobStore

logger = logging.getLogger(__name__)


class JobKind(Enum):
    """Operation kinds the Processing API accepts."""

    VALIDATE = "validate"
    FIX = "fix"
    OCR = "ocr"
    REDACT = "redact"
    CONVERT = "convert"
    COMPLIANCE = "compliance"


class JobStatus(Enum):
    """Job lifecycle states."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    @classmethod
    def parse(cls, raw: str) -> "JobStatus":
        """
        Map a wire status string to a JobStatus.

        The backend services spell states differently (queued, running,
        complete, error, ...). Matching is case-insensitive.

        Raises:
            ValueError: If the status is not recognized
        """
        key = str(raw).strip().lower()
        if key in _STATUS_ALIASES:
            return _STATUS_ALIASES[key]
        return cls(key)


TERMINAL_STATUSES = frozenset({JobStatus.COMPLETED, JobStatus.FAILED, JobStatus.CANCELLED})

_STATUS_ALIASES = {
    "queued": JobStatus.PENDING,
    "accepted": JobStatus.PENDING,
    "submitted": JobStatus.PENDING,
    "running": JobStatus.PROCESSING,
    "in_progress": JobStatus.PROCESSING,
    "complete": JobStatus.COMPLETED,
    "done": JobStatus.COMPLETED,
    "success": JobStatus.COMPLETED,
    "error": JobStatus.FAILED,
    "canceled": JobStatus.CANCELLED,
}


@dataclass
class Job:
    """
    Job record owned by the orchestrator.

    Mutated only from poll responses and local cancellation. Callers outside
    the orchestrator receive snapshots.
    """

    id: str
    kind: JobKind
    status: JobStatus
    progress: int = 0
    result_id: str | None = None
    error: str | None = None
    download_url: str | None = None
    file_name: str | None = None
    inline_result: dict[str, Any] | None = None  # Result embedded in a synchronous response
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def snapshot(self) -> "Job":
        """Copy of this record, safe to hand to other components."""
        return replace(self)


def generate_job_id() -> str:
    """
    Generate a local job ID.

    Used for synchronous endpoints that return a result without a job id.

    Returns:
        12-character hex string (UUID4 truncated)
    """
    return uuid4().hex[:12]


def clamp_progress(value: Any) -> int:
    """Coerce a reported progress value into 0-100."""
    try:
        progress = int(round(float(value)))
    except (TypeError, ValueError):
        return 0
    return max(0, min(100, progress))


class InMemoryJobStore(JobStore):
    """
    Simple in-memory job storage.

    Single event loop only; no locking because there is no true concurrency.
    """

    def __init__(self) -> None:
        """Initialize empty job store."""
        self._jobs: dict[str, Job] = {}
        logger.debug("Initialized InMemoryJobStore")

    async def add(self, record: Job) -> None:
        if record.id in self._jobs:
            raise ValueError(f"Job {record.id} already exists")

        self._jobs[record.id] = record
        logger.info(f"Added {record.kind.value} job {record.id} to store")

    async def get(self, job_id: str) -> Job | None:
        return self._jobs.get(job_id)

    async def update(self, job_id: str, **kwargs) -> Job:
        record = self._jobs.get(job_id)
        if not record:
            raise ValueError(f"Job {job_id} not found")

        for key, value in kwargs.items():
            if hasattr(record, key):
                setattr(record, key, value)
            else:
                logger.warning(f"Ignored unknown field '{key}' in update")

        record.updated_at = datetime.now(timezone.utc)
        logger.debug(f"Updated job {job_id}: {kwargs}")
        return record

    async def latest_by_kind(self, kind: JobKind) -> Job | None:
        # Insertion order is submission order
        for record in reversed(list(self._jobs.values())):
            if record.kind == kind:
                return record
        return None
