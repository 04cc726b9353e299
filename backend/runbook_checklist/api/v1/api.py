"""
API router configuration
"""
from fastapi import APIRouter
from runbook_checklist.api.v1.endpoints import executions, runbooks, upload

api_router = APIRouter()

api_router.include_router(runbooks.router, prefix="/runbooks", tags=["runbooks"])
api_router.include_router(executions.router, prefix="/executions", tags=["executions"])
api_router.include_router(upload.router, prefix="/upload", tags=["upload"])
