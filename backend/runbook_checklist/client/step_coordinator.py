"""
Step update coordinator for one open execution view

Checkbox toggles go out immediately as single-step patches and the caller
awaits the response. Remark text/image edits are queued per step index
(newest patch wins) and sent together as one batch once no edit has
arrived for ``flush_delay`` seconds. After a checkbox response that shows
every step checked, the execution is closed out with ``finishedAt``.

Batch flushes never carry ``checked``, so they cannot complete a
checklist and are not followed by a completion check.
"""
import asyncio
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Set, Tuple

from runbook_checklist.client.api_client import RunbookApiClient
from runbook_checklist.client.errors import RunbookClientError
from runbook_checklist.core.config import settings
from runbook_checklist.core.logging import get_logger
from runbook_checklist.schemas.execution import (
    ExecutionResponse,
    ExecutionStatus,
    ExecutionUpdate,
    StepPatch,
)

logger = get_logger(__name__)


class StepUpdateCoordinator:
    """Routes step edits for one execution and reconciles server responses"""

    def __init__(
        self,
        client: RunbookApiClient,
        execution: ExecutionResponse,
        flush_delay: Optional[float] = None,
        on_update: Optional[Callable[[ExecutionResponse], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ):
        self.client = client
        self.execution_id = execution.id
        self.execution = execution
        self.flush_delay = settings.STEP_FLUSH_DELAY_SECONDS if flush_delay is None else flush_delay
        self.on_update = on_update
        self.on_error = on_error
        self.closed = False

        self._pending: Dict[int, StepPatch] = {}
        self._composing: Dict[int, str] = {}
        self._timer: Optional[asyncio.TimerHandle] = None
        self._flushes: Set[asyncio.Task] = set()

    @property
    def pending(self) -> Dict[int, StepPatch]:
        return dict(self._pending)

    @property
    def timer_armed(self) -> bool:
        return self._timer is not None

    # Immediate path

    async def toggle_checked(self, step_idx: int, checked: bool) -> ExecutionResponse:
        """Send a checkbox change and wait for it.

        Local state changes only from the response, so a failure leaves
        the view as it was and the error propagates to the caller.
        """
        updated = await self.client.patch_step(self.execution_id, step_idx, StepPatch(checked=checked))
        self._apply(updated)
        if updated.all_steps_checked() and updated.finished_at is None:
            updated = await self._complete(updated)
        return updated

    async def _complete(self, execution: ExecutionResponse) -> ExecutionResponse:
        changes = ExecutionUpdate(
            finished_at=datetime.now(timezone.utc),
            status=ExecutionStatus.COMPLETED.value,
        )
        finished = await self.client.update_execution(execution.id, changes)
        logger.info(
            f"Execution {execution.id} completed at {finished.finished_at}",
            extra={"execution_id": execution.id, "status": finished.status},
        )
        self._apply(finished)
        return finished

    # Debounced path

    def edit_remark_text(self, step_idx: int, text: str, composing: bool = False) -> None:
        """Record a remark keystroke.

        While an input method composition is in progress only the local
        copy changes; the value is queued once composition ends.
        """
        if composing:
            self._composing[step_idx] = text
            self._set_local(step_idx, remark_text=text)
            return
        self._composing.pop(step_idx, None)
        self._set_local(step_idx, remark_text=text)
        self._enqueue(step_idx, StepPatch(remark_text=text))

    def edit_remark_image(self, step_idx: int, url: str) -> None:
        self._set_local(step_idx, remark_image=url)
        self._enqueue(step_idx, StepPatch(remark_image=url))

    def _enqueue(self, step_idx: int, patch: StepPatch) -> None:
        if self.closed:
            raise RuntimeError(f"Coordinator for execution {self.execution_id} is closed")
        # Replace, never merge, an entry already queued for this index
        self._pending[step_idx] = patch
        self._arm()

    def _arm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.flush_delay, self._on_timer)

    def _on_timer(self) -> None:
        self._timer = None
        if not self._pending:
            return
        batch = list(self._pending.items())
        self._pending = {}
        task = asyncio.ensure_future(self._flush(batch))
        self._flushes.add(task)
        task.add_done_callback(self._flushes.discard)

    async def _flush(self, batch: List[Tuple[int, StepPatch]]) -> Optional[ExecutionResponse]:
        """Send one batch; on failure report it and drop the entries."""
        try:
            updated = await self.client.patch_steps_batch(self.execution_id, batch)
        except RunbookClientError as e:
            logger.error(
                f"Batch flush of {len(batch)} step edit(s) for execution {self.execution_id} failed: {e}"
            )
            if self.on_error:
                self.on_error(e)
            return None
        self._apply(updated)
        return updated

    async def drain(self) -> None:
        """Flush anything queued now and wait for every outstanding flush."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._pending:
            self._on_timer()
        if self._flushes:
            await asyncio.gather(*list(self._flushes))

    def close(self) -> None:
        """Cancel the timer and drop queued edits. In-flight flushes still finish."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._pending:
            logger.info(f"Dropping {len(self._pending)} queued edit(s) for execution {self.execution_id}")
        self._pending = {}
        self._composing = {}
        self.closed = True

    # Local state

    def _set_local(self, step_idx: int, **fields) -> None:
        if not 0 <= step_idx < len(self.execution.steps):
            return
        steps = list(self.execution.steps)
        steps[step_idx] = steps[step_idx].model_copy(update=fields)
        self.execution = self.execution.model_copy(update={"steps": steps})

    def _apply(self, updated: ExecutionResponse) -> None:
        """Take a server response, keeping edits that have not reached it yet."""
        if self.on_update:
            self.on_update(updated)
        if updated.id != self.execution_id:
            return
        self.execution = updated
        if self.closed:
            return
        for step_idx, patch in self._pending.items():
            self._set_local(step_idx, **patch.changes())
        for step_idx, text in self._composing.items():
            self._set_local(step_idx, remark_text=text)
