# printify_check/api/client.py
"""
httpx client for the Processing API.

Maps each operation kind to its submit/status/result/download routes and
turns transport failures into NetworkError. No automatic retries: the
caller decides whether to resubmit.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import ValidationError

from printify_check.api.base import DocumentFile, ProcessingApi
from printify_check.api.responses import StatusResponse, SubmitResponse
from printify_check.errors import InvalidResponseError, NetworkError
from printify_check.models.jobs import JobKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Route:
    """URL templates for one operation kind. `{id}` is the job or result id."""

    submit: str
    status: str
    result: str
    download: str


ROUTES: dict[JobKind, Route] = {
    JobKind.VALIDATE: Route("/validate", "/status/{id}", "/results/{id}", "/preflight/report/{id}"),
    JobKind.FIX: Route("/fix", "/fix/status/{id}", "/results/{id}", "/fix/download/{id}"),
    JobKind.OCR: Route("/ocr/process", "/ocr/status/{id}", "/ocr/results/{id}", "/ocr/download/{id}"),
    JobKind.REDACT: Route(
        "/redaction/redact", "/redaction/status/{id}", "/results/{id}", "/redaction/download/{id}"
    ),
    JobKind.CONVERT: Route(
        "/compliance/fix/convert-to-pdfa", "/status/{id}", "/results/{id}", "/fix/download/{id}"
    ),
    JobKind.COMPLIANCE: Route(
        "/compliance/validate/{standard}", "/status/{id}", "/results/{id}", "/fix/download/{id}"
    ),
}

MULTI_LEVEL_ROUTE = "/compliance/extended/validate/multi-level"
CANCEL_ROUTE = "/cancel/{id}"


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_form(params: dict[str, Any]) -> dict[str, Any]:
    """
    Flatten operation params into multipart form fields.

    Lists become repeated fields, nested dicts become `key.sub` fields
    (e.g. options.bleedMargin), booleans become "true"/"false".
    """
    form: dict[str, Any] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, dict):
            for sub_key, sub_value in value.items():
                if sub_value is not None:
                    form[f"{key}.{sub_key}"] = _form_value(sub_value)
        elif isinstance(value, (list, tuple, set, frozenset)):
            form[key] = [_form_value(v) for v in value]
        else:
            form[key] = _form_value(value)
    return form


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)


class HttpProcessingApi(ProcessingApi):
    """Async Processing API client backed by httpx."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 60.0,
        upload_timeout: float = 300.0,
        user_id: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Processing API base URL (e.g., "http://localhost:8080/api")
            timeout: Timeout in seconds for status/result requests
            upload_timeout: Timeout in seconds for requests carrying a file
            user_id: Optional user id sent with every submission
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._upload_timeout = upload_timeout
        self._user_id = user_id
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-created httpx client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
            )
        return self._client

    async def _request(self, method: str, path: str, timeout: float, **kwargs) -> httpx.Response:
        try:
            response = await self.client.request(method, path, timeout=timeout, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = _error_message(e.response)
            logger.warning(f"{method} {path} returned {e.response.status_code}: {message}")
            raise NetworkError(
                f"{method} {path} failed ({e.response.status_code}): {message}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"{method} {path} failed: {e}")
            raise NetworkError(f"{method} {path} failed: {e}") from e
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise InvalidResponseError(
                f"Expected JSON from {response.request.url}, got: {response.text[:200]}"
            ) from e

    def _submit_path(self, kind: JobKind, params: dict[str, Any]) -> str:
        if kind is not JobKind.COMPLIANCE:
            return ROUTES[kind].submit
        standard = params.pop("standard", None)
        if standard is None:
            return MULTI_LEVEL_ROUTE
        return ROUTES[kind].submit.format(standard=str(standard).lower())

    async def submit(
        self, kind: JobKind, file: DocumentFile, params: dict[str, Any] | None = None
    ) -> SubmitResponse:
        params = dict(params or {})
        path = self._submit_path(kind, params)
        if self._user_id is not None:
            params.setdefault("userId", self._user_id)

        logger.info(f"Submitting {kind.value} for {file.name} ({file.size} bytes) to {path}")
        response = await self._request(
            "POST",
            path,
            timeout=self._upload_timeout,
            data=encode_form(params),
            files={"file": (file.name, file.content, file.content_type)},
        )
        try:
            return SubmitResponse.model_validate(self._json(response))
        except ValidationError as e:
            raise InvalidResponseError(f"Unexpected submit response from {path}: {e}") from e

    async def get_status(self, kind: JobKind, job_id: str) -> StatusResponse:
        path = ROUTES[kind].status.format(id=job_id)
        response = await self._request("GET", path, timeout=self._timeout)
        try:
            return StatusResponse.model_validate(self._json(response))
        except ValidationError as e:
            raise InvalidResponseError(f"Unexpected status response from {path}: {e}") from e

    async def get_result(self, kind: JobKind, result_id: str) -> dict[str, Any]:
        path = ROUTES[kind].result.format(id=result_id)
        response = await self._request("GET", path, timeout=self._timeout)
        payload = self._json(response)
        if not isinstance(payload, dict):
            raise InvalidResponseError(f"Expected a JSON object from {path}")
        return payload

    async def download(self, kind: JobKind, job_id: str) -> bytes:
        path = ROUTES[kind].download.format(id=job_id)
        response = await self._request("GET", path, timeout=self._upload_timeout)
        logger.info(f"Downloaded {len(response.content)} bytes for {kind.value} job {job_id}")
        return response.content

    async def cancel(self, kind: JobKind, job_id: str) -> None:
        await self._request("POST", CANCEL_ROUTE.format(id=job_id), timeout=self._timeout)

    async def close(self) -> None:
        """Close the httpx client if initialized."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
