"""
Repository for execution data access
"""
from typing import Optional, List
from sqlalchemy.orm import Session
from runbook_checklist.models.execution import Execution
from runbook_checklist.repositories.base_repository import BaseRepository


class ExecutionRepository(BaseRepository[Execution]):
    """Repository for execution CRUD operations"""

    def __init__(self, db: Session):
        super().__init__(Execution, db)

    def list_all(self, runbook_id: Optional[int] = None) -> List[Execution]:
        """Executions ordered by start time, newest first, optionally for one runbook"""
        if runbook_id is None:
            return self.list_newest_first(Execution.started_at)
        return self.list_newest_first(Execution.started_at, Execution.runbook_id == runbook_id)
