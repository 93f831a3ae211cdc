# printify_check/models/store.py
"""
Job store interface.

The orchestrator keeps every Job it submitted in a JobStore. A store belongs
to one orchestrator and lives only as long as it does.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from printify_check.models.jobs import Job, JobKind


class JobStore(ABC):
    """Jobs keyed by id, with a lookup of the newest job per operation kind."""

    @abstractmethod
    async def add(self, record: "Job") -> None:
        """
        Store a newly submitted job.

        Raises:
            ValueError: If a job with the same id is already stored
        """

    @abstractmethod
    async def get(self, job_id: str) -> "Job | None":
        """The stored job, or None for an unknown id."""

    @abstractmethod
    async def update(self, job_id: str, **kwargs) -> "Job":
        """
        Apply field changes (status, progress, result_id, ...) to a stored job.

        Returns:
            The updated record

        Raises:
            ValueError: If the job id is unknown
        """

    @abstractmethod
    async def latest_by_kind(self, kind: "JobKind") -> "Job | None":
        """Most recently submitted job of `kind`; earlier ones stay retrievable by id."""
