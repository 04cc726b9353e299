"""
Client side of the checklist API: REST client, view state, step coordinator
"""
from runbook_checklist.client.api_client import RunbookApiClient
from runbook_checklist.client.errors import (
    NetworkFailure,
    NotFoundError,
    RunbookClientError,
    UploadFailure,
    ValidationFailure,
)
from runbook_checklist.client.step_coordinator import StepUpdateCoordinator
from runbook_checklist.client.view_state import ExecutionViewStore

__all__ = [
    "RunbookApiClient",
    "StepUpdateCoordinator",
    "ExecutionViewStore",
    "RunbookClientError",
    "NotFoundError",
    "ValidationFailure",
    "UploadFailure",
    "NetworkFailure",
]
