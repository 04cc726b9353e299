"""
Runbook schemas
"""
from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict, Field, field_validator

from runbook_checklist.schemas.base import CamelModel, as_utc


class StepTemplate(CamelModel):
    text: str = ""
    link: Optional[str] = None
    image: Optional[str] = None


class RunbookCreate(CamelModel):
    title: str = ""
    description: Optional[str] = None
    steps: List[StepTemplate] = Field(default_factory=list)


class RunbookUpdate(CamelModel):
    """Partial update; ``steps`` replaces the whole sequence when given."""

    title: Optional[str] = None
    description: Optional[str] = None
    steps: Optional[List[StepTemplate]] = None


class RunbookResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    steps: List[StepTemplate] = Field(default_factory=list)
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return as_utc(value)
