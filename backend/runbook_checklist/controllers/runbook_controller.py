"""
Controller for runbook endpoints - handles request/response logic
"""
from typing import Dict, List

from sqlalchemy.orm import Session

from runbook_checklist.controllers.base_controller import BaseController
from runbook_checklist.core.logging import get_logger
from runbook_checklist.core.metrics import record_runbook_write
from runbook_checklist.repositories.runbook_repository import RunbookRepository
from runbook_checklist.schemas.runbook import RunbookCreate, RunbookResponse, RunbookUpdate

logger = get_logger(__name__)


class RunbookController(BaseController):
    """Controller for runbook operations"""

    def __init__(self, db: Session):
        self.db = db
        self.runbook_repo = RunbookRepository(db)

    def list_runbooks(self) -> List[RunbookResponse]:
        return [RunbookResponse.model_validate(rb) for rb in self.runbook_repo.list_all()]

    def get_runbook(self, runbook_id: int) -> RunbookResponse:
        runbook = self.runbook_repo.get(runbook_id)
        if not runbook:
            raise self.not_found("Runbook", runbook_id)
        return RunbookResponse.model_validate(runbook)

    def create_runbook(self, data: RunbookCreate) -> RunbookResponse:
        runbook = self.runbook_repo.create(
            title=data.title,
            description=data.description,
            steps=[step.model_dump() for step in data.steps],
        )
        record_runbook_write("create")
        logger.info(f"Created runbook {runbook.id} with {len(runbook.steps)} steps")
        return RunbookResponse.model_validate(runbook)

    def update_runbook(self, runbook_id: int, data: RunbookUpdate) -> RunbookResponse:
        changes = data.model_dump(exclude_unset=True)
        for key in ("title", "steps"):
            if changes.get(key, "") is None:
                del changes[key]
        if "steps" in changes:
            # Full replace, which is also how steps are reordered
            changes["steps"] = [step.model_dump() for step in (data.steps or [])]
        runbook = self.runbook_repo.update(runbook_id, **changes)
        if not runbook:
            raise self.not_found("Runbook", runbook_id)
        record_runbook_write("update")
        logger.info(f"Updated runbook {runbook_id}: {sorted(changes)}")
        return RunbookResponse.model_validate(runbook)

    def delete_runbook(self, runbook_id: int) -> Dict[str, bool]:
        # Executions keep their snapshot; nothing cascades
        if self.runbook_repo.delete(runbook_id):
            record_runbook_write("delete")
            logger.info(f"Deleted runbook {runbook_id}")
        return {"success": True}
