# printify_check/api/responses.py
"""
Normalized Processing API responses.

Each backend service names its fields a little differently (processId,
fixJobId, jobId; error, errorMessage). These models accept all spellings
and expose one shape to the orchestrator.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from printify_check.models.jobs import JobStatus, clamp_progress

_ID_KEYS = ("processId", "fixJobId", "jobId", "id")
_ERROR_KEYS = ("error", "errorMessage", "message")


def _first(payload: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = payload.get(key)
        if value not in (None, ""):
            return value
    return None


def _looks_like_result(payload: dict[str, Any]) -> bool:
    return any(key in payload for key in ("issuesByCategory", "isCompliant", "results"))


class SubmitResponse(BaseModel):
    """Response to a job submission."""

    model_config = ConfigDict(extra="ignore")

    job_id: str | None = Field(default=None, description="Remote job id, None for synchronous results")
    status: JobStatus = Field(default=JobStatus.PENDING)
    file_name: str | None = Field(default=None)
    result_id: str | None = Field(default=None)
    error: str | None = Field(default=None, description="Server error text when the submission was rejected")
    inline_result: dict[str, Any] | None = Field(
        default=None, description="Result embedded in the response by synchronous endpoints"
    )

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            raise ValueError("submit response must be a JSON object")
        inline = data if _looks_like_result(data) else None
        status = data.get("status")
        if status is None:
            status = JobStatus.COMPLETED if inline is not None else JobStatus.PENDING
        job_id = _first(data, _ID_KEYS)
        return {
            "job_id": str(job_id) if job_id is not None else None,
            "status": status,
            "file_name": data.get("fileName"),
            "result_id": data.get("resultId"),
            "error": _first(data, _ERROR_KEYS),
            "inline_result": inline,
        }

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: Any) -> JobStatus:
        if isinstance(value, JobStatus):
            return value
        return JobStatus.parse(value)


class StatusResponse(BaseModel):
    """Response to a status poll."""

    model_config = ConfigDict(extra="ignore")

    status: JobStatus
    progress: int = Field(default=0, ge=0, le=100)
    result_id: str | None = Field(default=None)
    error: str | None = Field(default=None)
    download_url: str | None = Field(default=None)
    inline_result: dict[str, Any] | None = Field(default=None)

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            raise ValueError("status response must be a JSON object")
        if "status" not in data:
            raise ValueError("status response has no 'status' field")
        status = data["status"]
        progress = data.get("progress")
        if progress is None:
            progress = 100 if str(status).lower() in ("completed", "complete", "done") else 0
        result_id = data.get("resultId")
        return {
            "status": status,
            "progress": clamp_progress(progress),
            "result_id": str(result_id) if result_id is not None else None,
            "error": _first(data, _ERROR_KEYS),
            "download_url": data.get("downloadUrl") or data.get("outputFile"),
            "inline_result": data.get("result") if isinstance(data.get("result"), dict) else None,
        }

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: Any) -> JobStatus:
        if isinstance(value, JobStatus):
            return value
        return JobStatus.parse(value)
