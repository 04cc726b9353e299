"""
Controller for execution endpoints - handles request/response logic
"""
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from runbook_checklist.controllers.base_controller import BaseController
from runbook_checklist.core.logging import get_logger
from runbook_checklist.core.metrics import record_execution_created
from runbook_checklist.repositories.execution_repository import ExecutionRepository
from runbook_checklist.repositories.runbook_repository import RunbookRepository
from runbook_checklist.schemas.execution import (
    BatchStepPatchRequest,
    ExecutionCreate,
    ExecutionResponse,
    ExecutionStatus,
    ExecutionUpdate,
    StepPatch,
)
from runbook_checklist.services.step_records import StepRecordStore, snapshot_steps

logger = get_logger(__name__)


class ExecutionController(BaseController):
    """Controller for execution operations"""

    def __init__(self, db: Session):
        self.db = db
        self.execution_repo = ExecutionRepository(db)
        self.runbook_repo = RunbookRepository(db)
        self.step_store = StepRecordStore(db)

    def create_execution(self, data: ExecutionCreate) -> ExecutionResponse:
        """Spawn an execution from a snapshot of the runbook's steps"""
        runbook = self.runbook_repo.get(data.runbook_id)
        if not runbook:
            raise self.not_found("Runbook", data.runbook_id)

        execution = self.execution_repo.create(
            runbook_id=runbook.id,
            runbook_title=runbook.title,
            incident_id=data.incident_id,
            operator=data.operator,
            priority=data.priority.value,
            status=ExecutionStatus.IN_PROGRESS.value,
            steps=snapshot_steps(runbook.steps),
        )
        record_execution_created()
        logger.info(
            f"Created execution {execution.id} for runbook {runbook.id} "
            f"(incident={data.incident_id}, operator={data.operator})",
            extra={"execution_id": execution.id, "runbook_id": runbook.id},
        )
        return ExecutionResponse.model_validate(execution)

    def list_executions(self, runbook_id: Optional[int] = None) -> List[ExecutionResponse]:
        return [
            ExecutionResponse.model_validate(execution)
            for execution in self.execution_repo.list_all(runbook_id=runbook_id)
        ]

    def get_execution(self, execution_id: int) -> ExecutionResponse:
        execution = self.step_store.get_execution(execution_id)
        if not execution:
            raise self.not_found("Execution", execution_id)
        return ExecutionResponse.model_validate(execution)

    def update_execution(self, execution_id: int, data: ExecutionUpdate) -> ExecutionResponse:
        """Generic partial replace of top-level fields"""
        changes = data.model_dump(exclude_unset=True)
        # Columns that cannot be cleared
        for key in ("status", "started_at", "steps"):
            if changes.get(key, "") is None:
                del changes[key]
        if changes.get("priority") is not None:
            changes["priority"] = data.priority.value
        if "steps" in changes:
            changes["steps"] = [step.model_dump(mode="json") for step in (data.steps or [])]

        execution = self.execution_repo.update(execution_id, **changes)
        if not execution:
            raise self.not_found("Execution", execution_id)
        logger.info(f"Updated execution {execution_id}: {sorted(changes)}")
        return ExecutionResponse.model_validate(execution)

    def delete_execution(self, execution_id: int) -> Dict[str, bool]:
        if self.execution_repo.delete(execution_id):
            logger.info(f"Deleted execution {execution_id}")
        return {"success": True}

    def patch_step(self, execution_id: int, step_idx: int, patch: StepPatch) -> ExecutionResponse:
        execution = self.step_store.apply_step_patch(execution_id, step_idx, patch)
        if not execution:
            raise self.not_found("Execution", execution_id)
        return ExecutionResponse.model_validate(execution)

    def patch_steps_batch(self, execution_id: int, request: BatchStepPatchRequest) -> ExecutionResponse:
        execution = self.step_store.apply_batch_step_patch(
            execution_id,
            [(update.step_idx, update.patch) for update in request.updates],
        )
        if not execution:
            raise self.not_found("Execution", execution_id)
        return ExecutionResponse.model_validate(execution)
