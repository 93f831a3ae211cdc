# printify_check/orchestrator/__init__.py
"""Job orchestration: submit, poll, cancel and fetch results."""

from .jobs import JobOrchestrator
from .polling import CancellationToken, PollHandle

__all__ = ["JobOrchestrator", "CancellationToken", "PollHandle"]
