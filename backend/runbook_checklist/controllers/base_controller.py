"""
Base controller with common utilities
"""
from typing import Optional
from fastapi import HTTPException, status
from runbook_checklist.core.logging import get_logger

logger = get_logger(__name__)


class BaseController:
    """Base controller with common request/response utilities"""

    @staticmethod
    def not_found(resource: str, id: Optional[int] = None) -> HTTPException:
        """Return 404 Not Found error"""
        message = f"{resource} not found"
        if id is not None:
            message += f" (ID: {id})"
        logger.info(message)
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=message
        )

    @staticmethod
    def bad_request(message: str) -> HTTPException:
        """Return 400 Bad Request error"""
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=message
        )
