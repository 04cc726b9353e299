"""
Execution and step patch schemas
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field, field_validator, model_validator

from runbook_checklist.schemas.base import CamelModel, as_utc


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ExecutionStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


# Field name and camelCase alias -> the only accepted JSON type
_PATCH_TYPES = {
    "checked": bool,
    "remark_text": str,
    "remarkText": str,
    "remark_image": str,
    "remarkImage": str,
}


class StepPatch(CamelModel):
    """Partial update for one execution step.

    A field takes effect only if it was present in the payload and is not
    null, so ``checked=False`` and ``remarkText=""`` are real updates while
    an omitted field leaves the step untouched.

    A value of the wrong JSON type (``"yes"`` or ``1`` for ``checked``, a
    number for a remark) is dropped rather than coerced, so it counts as
    absent and the rest of the patch still applies.
    """

    checked: Optional[bool] = None
    remark_text: Optional[str] = None
    remark_image: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _drop_mistyped(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        kept = {}
        for key, value in data.items():
            expected = _PATCH_TYPES.get(key)
            if expected is not None and value is not None and type(value) is not expected:
                continue
            kept[key] = value
        return kept

    def changes(self) -> Dict[str, Any]:
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None
        }

    def to_payload(self) -> Dict[str, Any]:
        """Wire form, omitting absent fields."""
        return self.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)


class ExecutionStep(CamelModel):
    text: str = ""
    link: Optional[str] = None
    checked: bool = False
    executed_at: Optional[datetime] = None
    remark_text: Optional[str] = None
    remark_image: Optional[str] = None

    @field_validator("executed_at")
    @classmethod
    def _utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class ExecutionCreate(CamelModel):
    runbook_id: int
    incident_id: Optional[str] = None
    operator: Optional[str] = None
    priority: Priority = Priority.MEDIUM


class ExecutionUpdate(CamelModel):
    """Generic partial replace. ``finishedAt`` is not guarded here.

    ``status`` is free-form; ``ExecutionStatus`` names the values this
    system writes itself.
    """

    runbook_title: Optional[str] = None
    incident_id: Optional[str] = None
    operator: Optional[str] = None
    priority: Optional[Priority] = None
    status: Optional[str] = None
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    steps: Optional[List[ExecutionStep]] = None

    @field_validator("started_at", "finished_at")
    @classmethod
    def _utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class ExecutionResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    runbook_id: Optional[int] = None
    runbook_title: Optional[str] = None
    incident_id: Optional[str] = None
    operator: Optional[str] = None
    priority: Optional[Priority] = None
    status: str = ExecutionStatus.IN_PROGRESS.value
    started_at: datetime
    finished_at: Optional[datetime] = None
    steps: List[ExecutionStep] = Field(default_factory=list)

    @field_validator("started_at", "finished_at")
    @classmethod
    def _utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)

    def all_steps_checked(self) -> bool:
        """True only for a non-empty checklist with every step checked."""
        return bool(self.steps) and all(step.checked for step in self.steps)


class BatchStepUpdate(CamelModel):
    step_idx: int
    patch: StepPatch


class BatchStepPatchRequest(CamelModel):
    updates: List[BatchStepUpdate] = Field(default_factory=list)
