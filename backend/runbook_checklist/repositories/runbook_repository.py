"""
Repository for runbook data access
"""
from typing import List
from sqlalchemy.orm import Session
from runbook_checklist.models.runbook import Runbook
from runbook_checklist.repositories.base_repository import BaseRepository


class RunbookRepository(BaseRepository[Runbook]):
    """Repository for runbook CRUD operations"""

    def __init__(self, db: Session):
        super().__init__(Runbook, db)

    def list_all(self) -> List[Runbook]:
        """All runbooks, newest first"""
        return self.list_newest_first(Runbook.created_at)
