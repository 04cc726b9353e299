"""
Execution tracking API endpoints
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from runbook_checklist.controllers.execution_controller import ExecutionController
from runbook_checklist.core.database import get_db
from runbook_checklist.schemas.base import DeleteResponse
from runbook_checklist.schemas.execution import (
    BatchStepPatchRequest,
    ExecutionCreate,
    ExecutionResponse,
    ExecutionUpdate,
    StepPatch,
)

router = APIRouter()


@router.post("", response_model=ExecutionResponse)
def create_execution(data: ExecutionCreate, db: Session = Depends(get_db)):
    """Start an execution from the referenced runbook's current steps"""
    return ExecutionController(db).create_execution(data)


@router.get("", response_model=List[ExecutionResponse])
def list_executions(
    runbook_id: Optional[int] = Query(None, alias="runbookId", description="Only executions of this runbook"),
    db: Session = Depends(get_db),
):
    """List executions, most recently started first"""
    return ExecutionController(db).list_executions(runbook_id=runbook_id)


@router.get("/{execution_id}", response_model=ExecutionResponse)
def get_execution(execution_id: int, db: Session = Depends(get_db)):
    return ExecutionController(db).get_execution(execution_id)


@router.put("/{execution_id}", response_model=ExecutionResponse)
def update_execution(execution_id: int, data: ExecutionUpdate, db: Session = Depends(get_db)):
    return ExecutionController(db).update_execution(execution_id, data)


@router.delete("/{execution_id}", response_model=DeleteResponse)
def delete_execution(execution_id: int, db: Session = Depends(get_db)):
    return ExecutionController(db).delete_execution(execution_id)


@router.patch("/{execution_id}/step/{step_idx}", response_model=ExecutionResponse)
def patch_step(execution_id: int, step_idx: int, patch: StepPatch, db: Session = Depends(get_db)):
    """Check/uncheck a step or set its remark text/image"""
    return ExecutionController(db).patch_step(execution_id, step_idx, patch)


@router.patch("/{execution_id}/steps/batch", response_model=ExecutionResponse)
def patch_steps_batch(execution_id: int, request: BatchStepPatchRequest, db: Session = Depends(get_db)):
    """Apply queued step edits in order and save once"""
    return ExecutionController(db).patch_steps_batch(execution_id, request)
