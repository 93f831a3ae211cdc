# printify_check/api/__init__.py
"""
Processing API boundary.

Provides:
- ProcessingApi contract consumed by the orchestrator
- HttpProcessingApi, the httpx implementation
- Normalized submit/status responses
"""

from .base import DocumentFile, ProcessingApi
from .client import ROUTES, HttpProcessingApi, encode_form
from .factory import create_api_client
from .responses import StatusResponse, SubmitResponse

__all__ = [
    "DocumentFile",
    "ProcessingApi",
    "HttpProcessingApi",
    "ROUTES",
    "encode_form",
    "create_api_client",
    "StatusResponse",
    "SubmitResponse",
]
