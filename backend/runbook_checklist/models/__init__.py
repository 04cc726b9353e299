# Database models
from runbook_checklist.models.runbook import Runbook
from runbook_checklist.models.execution import Execution

__all__ = [
    "Runbook",
    "Execution",
]
