"""
Client-side error taxonomy
"""
from typing import Optional


class RunbookClientError(Exception):
    """Base class for every failure surfaced by the API client"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotFoundError(RunbookClientError):
    """Unknown runbook or execution id"""


class ValidationFailure(RunbookClientError):
    """Runbook draft rejected before it was sent"""


class UploadFailure(RunbookClientError):
    """Upload rejected by the server"""


class NetworkFailure(RunbookClientError):
    """Request could not be completed or was rejected"""
