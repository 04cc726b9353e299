"""
Step record store: authoritative per-execution step state

Steps are addressed by position only. Every write copies the step list,
applies the patches and persists the execution document in one commit.
"""
import copy
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from runbook_checklist.core.logging import get_logger
from runbook_checklist.core.metrics import record_step_patch
from runbook_checklist.models.execution import Execution
from runbook_checklist.repositories.execution_repository import ExecutionRepository
from runbook_checklist.schemas.execution import StepPatch

logger = get_logger(__name__)


def snapshot_steps(template_steps: Optional[Iterable[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """Copy a runbook's step templates into fresh, unchecked execution steps."""
    return [
        {
            "text": template.get("text") or "",
            "link": template.get("link"),
            "checked": False,
            "executed_at": None,
            "remark_text": None,
            "remark_image": None,
        }
        for template in (template_steps or [])
    ]


def apply_patch(step: Dict[str, Any], patch: StepPatch, now: datetime) -> None:
    """Apply the present fields of ``patch`` to one stored step in place."""
    changes = patch.changes()
    if "checked" in changes:
        checked = changes["checked"]
        step["checked"] = checked
        step["executed_at"] = now.isoformat() if checked else None
    if "remark_text" in changes:
        step["remark_text"] = changes["remark_text"]
    if "remark_image" in changes:
        step["remark_image"] = changes["remark_image"]


class StepRecordStore:
    """Reads and patches execution steps"""

    def __init__(self, db: Session):
        self.repo = ExecutionRepository(db)

    def get_execution(self, execution_id: int) -> Optional[Execution]:
        return self.repo.get(execution_id)

    def apply_step_patch(self, execution_id: int, step_idx: int, patch: StepPatch) -> Optional[Execution]:
        """Patch one step. Returns None when the execution does not exist.

        An out-of-range index leaves every step as it was.
        """
        return self._apply(execution_id, [(step_idx, patch)], path="single")

    def apply_batch_step_patch(
        self,
        execution_id: int,
        updates: Iterable[Tuple[int, StepPatch]],
    ) -> Optional[Execution]:
        """Patch several steps in order, then persist once.

        Entries with an out-of-range index are skipped; later entries for
        the same index overwrite fields set by earlier ones.
        """
        return self._apply(execution_id, list(updates), path="batch")

    def _apply(
        self,
        execution_id: int,
        updates: List[Tuple[int, StepPatch]],
        path: str,
    ) -> Optional[Execution]:
        execution = self.repo.get(execution_id)
        if execution is None:
            return None

        steps = copy.deepcopy(execution.steps or [])
        now = datetime.now(timezone.utc)
        applied = skipped = 0
        for step_idx, patch in updates:
            if not 0 <= step_idx < len(steps):
                skipped += 1
                logger.warning(
                    f"Skipping patch for step {step_idx} of execution {execution_id} "
                    f"({len(steps)} steps)",
                    extra={"execution_id": execution_id, "step_idx": step_idx, "path": path},
                )
                continue
            apply_patch(steps[step_idx], patch, now)
            applied += 1

        execution.steps = steps
        execution = self.repo.save(execution)
        record_step_patch(path, applied, skipped)
        logger.info(
            f"Applied {applied} {path} step patch(es) to execution {execution_id}",
            extra={"execution_id": execution_id, "path": path, "applied": applied, "skipped": skipped},
        )
        return execution
