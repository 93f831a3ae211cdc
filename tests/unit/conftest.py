# tests/unit/conftest.py
"""Shared fixtures: sample payloads and a fake Processing API."""

import copy
from unittest.mock import AsyncMock

import pytest

from printify_check.api.base import DocumentFile, ProcessingApi
from printify_check.api.responses import StatusResponse, SubmitResponse

# Preflight result as served by GET /results/{id}; five issues, one per category
SAMPLE_VALIDATION_PAYLOAD = {
    "id": "r1",
    "fileName": "document.pdf",
    "fileSize": 2 * 1024 * 1024,
    "qualityScore": 82,
    "status": "completed",
    "issuesByCategory": {
        "STRUCTURAL": [
            {
                "id": "struct-1",
                "type": "Linearization",
                "severity": "MEDIUM",
                "message": "PDF is not linearized for web optimization",
                "autoFixable": True,
                "fixDescription": "Apply linearization to optimize file for web viewing",
            }
        ],
        "FONTS": [
            {
                "id": "font-1",
                "type": "Non-Embedded Font",
                "severity": "HIGH",
                "message": "Font 'Arial' on page 1 is not embedded",
                "page": 1,
                "autoFixable": True,
                "fixDescription": "Embed all fonts",
            }
        ],
        "COLOR": [
            {
                "id": "color-1",
                "type": "RGB in CMYK",
                "severity": "HIGH",
                "message": "RGB color space found on page 2 but document has CMYK output intent",
                "page": 2,
                "autoFixable": True,
                "fixDescription": "Convert RGB to CMYK",
            }
        ],
        "IMAGE": [
            {
                "id": "image-1",
                "type": "Low Resolution",
                "severity": "HIGH",
                "message": "Image on page 1 has low resolution (approximately 150 DPI)",
                "page": 1,
                "autoFixable": False,
                "fixDescription": "Replace with higher resolution image",
            }
        ],
        "PRINT_PRODUCTION": [
            {
                "id": "print-1",
                "type": "Bleed",
                "severity": "HIGH",
                "message": "Insufficient bleed on page 1. Minimum 3mm bleed required.",
                "page": 1,
                "autoFixable": True,
                "fixDescription": "Add 3mm bleed to all sides",
            }
        ],
    },
    "totalIssues": 5,
    "supportedFixes": {
        "linearization": True,
        "embedFonts": True,
        "convertRgbToCmyk": True,
        "addBleed": True,
    },
}


@pytest.fixture
def validation_payload() -> dict:
    """Fresh copy of the sample preflight result."""
    return copy.deepcopy(SAMPLE_VALIDATION_PAYLOAD)


@pytest.fixture
def document() -> DocumentFile:
    return DocumentFile(name="document.pdf", content=b"%PDF-1.7\n" + b"0" * 64)


def _submitted(job_id: str, status: str = "processing", **extra) -> SubmitResponse:
    return SubmitResponse.model_validate({"processId": job_id, "status": status, **extra})


def _status(state: str, progress: int | None = None, **extra) -> StatusResponse:
    data = {"status": state, **extra}
    if progress is not None:
        data["progress"] = progress
    return StatusResponse.model_validate(data)


@pytest.fixture
def submitted():
    """Factory for SubmitResponse objects keyed by processId."""
    return _submitted


@pytest.fixture
def status():
    """Factory for StatusResponse objects."""
    return _status


@pytest.fixture
def api() -> AsyncMock:
    """ProcessingApi double; every method is an AsyncMock."""
    fake = AsyncMock(spec=ProcessingApi)
    fake.cancel.return_value = None
    return fake
