"""
Client view state: last known executions and the open detail view
"""
from typing import Callable, Dict, List, Optional

from runbook_checklist.client.api_client import RunbookApiClient
from runbook_checklist.client.step_coordinator import StepUpdateCoordinator
from runbook_checklist.core.logging import get_logger
from runbook_checklist.schemas.execution import ExecutionResponse

logger = get_logger(__name__)


class ExecutionViewStore:
    """Keeps executions by id and owns at most one step coordinator.

    Responses are stored under the id they carry, so a flush that lands
    after the user switched to another execution updates the right entry.
    """

    def __init__(
        self,
        client: RunbookApiClient,
        flush_delay: Optional[float] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ):
        self.client = client
        self.flush_delay = flush_delay
        self.on_error = on_error
        self.executions: Dict[int, ExecutionResponse] = {}
        self.coordinator: Optional[StepUpdateCoordinator] = None

    def apply(self, execution: ExecutionResponse) -> None:
        self.executions[execution.id] = execution

    @property
    def current(self) -> Optional[ExecutionResponse]:
        if self.coordinator is None:
            return None
        return self.coordinator.execution

    async def refresh(self, runbook_id: Optional[int] = None) -> List[ExecutionResponse]:
        executions = await self.client.list_executions(runbook_id=runbook_id)
        for execution in executions:
            self.apply(execution)
        return executions

    def open_detail(self, execution: ExecutionResponse) -> StepUpdateCoordinator:
        """Open a detail view, abandoning the previous one's queue and timer."""
        self.close_detail()
        self.apply(execution)
        self.coordinator = StepUpdateCoordinator(
            self.client,
            execution,
            flush_delay=self.flush_delay,
            on_update=self.apply,
            on_error=self.on_error,
        )
        logger.debug(f"Opened execution {execution.id}")
        return self.coordinator

    def close_detail(self) -> None:
        if self.coordinator is not None:
            self.coordinator.close()
            self.coordinator = None
