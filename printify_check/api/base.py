# printify_check/api/base.py
"""
Processing API contract.

The orchestrator depends only on this interface; HttpProcessingApi is the
httpx-backed implementation.
"""

import mimetypes
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from printify_check.api.responses import StatusResponse, SubmitResponse
from printify_check.models.jobs import JobKind


@dataclass(frozen=True)
class DocumentFile:
    """A single binary document handle."""

    name: str
    content: bytes
    content_type: str = "application/pdf"

    @classmethod
    def from_path(cls, path: str | Path) -> "DocumentFile":
        path = Path(path)
        content_type = mimetypes.guess_type(path.name)[0] or "application/pdf"
        return cls(name=path.name, content=path.read_bytes(), content_type=content_type)

    @property
    def size(self) -> int:
        return len(self.content)


class ProcessingApi(ABC):
    """Remote service that runs document operations as jobs."""

    @abstractmethod
    async def submit(
        self, kind: JobKind, file: DocumentFile, params: dict[str, Any] | None = None
    ) -> SubmitResponse:
        """
        Submit an operation on a file.

        Raises:
            NetworkError: On transport or HTTP failure
            InvalidResponseError: If the response cannot be interpreted
        """

    @abstractmethod
    async def get_status(self, kind: JobKind, job_id: str) -> StatusResponse:
        """Fetch the current status of a job."""

    @abstractmethod
    async def get_result(self, kind: JobKind, result_id: str) -> dict[str, Any]:
        """Fetch the result payload of a completed job."""

    @abstractmethod
    async def download(self, kind: JobKind, job_id: str) -> bytes:
        """Download the processed file of a completed job."""

    @abstractmethod
    async def cancel(self, kind: JobKind, job_id: str) -> None:
        """Ask the service to stop a job. Best-effort."""

    async def close(self) -> None:
        """Release transport resources."""
