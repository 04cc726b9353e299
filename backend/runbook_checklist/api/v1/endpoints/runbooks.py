"""
Runbook API endpoints
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from runbook_checklist.controllers.runbook_controller import RunbookController
from runbook_checklist.core.database import get_db
from runbook_checklist.schemas.base import DeleteResponse
from runbook_checklist.schemas.runbook import RunbookCreate, RunbookResponse, RunbookUpdate

router = APIRouter()


@router.get("", response_model=List[RunbookResponse])
def list_runbooks(db: Session = Depends(get_db)):
    """List runbooks, newest first"""
    return RunbookController(db).list_runbooks()


@router.post("", response_model=RunbookResponse)
def create_runbook(data: RunbookCreate, db: Session = Depends(get_db)):
    return RunbookController(db).create_runbook(data)


@router.get("/{runbook_id}", response_model=RunbookResponse)
def get_runbook(runbook_id: int, db: Session = Depends(get_db)):
    return RunbookController(db).get_runbook(runbook_id)


@router.put("/{runbook_id}", response_model=RunbookResponse)
def update_runbook(runbook_id: int, data: RunbookUpdate, db: Session = Depends(get_db)):
    """Partial update; a ``steps`` list replaces the stored sequence"""
    return RunbookController(db).update_runbook(runbook_id, data)


@router.delete("/{runbook_id}", response_model=DeleteResponse)
def delete_runbook(runbook_id: int, db: Session = Depends(get_db)):
    return RunbookController(db).delete_runbook(runbook_id)
