"""
Async REST client for the runbook checklist API
"""
import mimetypes
import os
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import httpx

from runbook_checklist.client.errors import (
    NetworkFailure,
    NotFoundError,
    UploadFailure,
    ValidationFailure,
)
from runbook_checklist.core.config import settings
from runbook_checklist.core.logging import get_logger
from runbook_checklist.schemas.execution import (
    ExecutionCreate,
    ExecutionResponse,
    ExecutionUpdate,
    Priority,
    StepPatch,
)
from runbook_checklist.schemas.runbook import RunbookCreate, RunbookResponse, RunbookUpdate, StepTemplate

logger = get_logger(__name__)


def validate_runbook_draft(title: Optional[str], steps: Optional[Iterable[StepTemplate]]) -> None:
    """Client-side checks; the server stores whatever it is given."""
    if title is not None and not title.strip():
        raise ValidationFailure("Title is required")
    for idx, step in enumerate(steps or []):
        if not (step.text or "").strip():
            raise ValidationFailure(f"Step {idx + 1} text is required")


def _detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        return str(body.get("detail") or body.get("error") or body)
    return str(body)


class RunbookApiClient:
    """One coroutine per REST route; responses come back as schema models"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_prefix: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_prefix = (settings.API_PREFIX if api_prefix is None else api_prefix).rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            timeout=timeout or settings.CLIENT_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def close(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "RunbookApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.api_prefix}{path}"
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise NetworkFailure(f"{method} {url} failed: {e}") from e

        if response.status_code == 404:
            raise NotFoundError(_detail(response), status_code=404)
        if response.is_error:
            raise NetworkFailure(
                f"{method} {url} returned {response.status_code}: {_detail(response)}",
                status_code=response.status_code,
            )
        return response.json()

    # Runbooks

    async def list_runbooks(self) -> List[RunbookResponse]:
        data = await self._request("GET", "/runbooks")
        return [RunbookResponse.model_validate(item) for item in data]

    async def get_runbook(self, runbook_id: int) -> RunbookResponse:
        return RunbookResponse.model_validate(await self._request("GET", f"/runbooks/{runbook_id}"))

    async def create_runbook(self, draft: RunbookCreate) -> RunbookResponse:
        validate_runbook_draft(draft.title, draft.steps)
        data = await self._request("POST", "/runbooks", json=draft.model_dump(by_alias=True, mode="json"))
        return RunbookResponse.model_validate(data)

    async def update_runbook(self, runbook_id: int, changes: RunbookUpdate) -> RunbookResponse:
        validate_runbook_draft(changes.title, changes.steps)
        data = await self._request(
            "PUT",
            f"/runbooks/{runbook_id}",
            json=changes.model_dump(by_alias=True, exclude_unset=True, mode="json"),
        )
        return RunbookResponse.model_validate(data)

    async def delete_runbook(self, runbook_id: int) -> bool:
        data = await self._request("DELETE", f"/runbooks/{runbook_id}")
        return bool(data.get("success"))

    # Executions

    async def create_execution(
        self,
        runbook_id: int,
        incident_id: Optional[str] = None,
        operator: Optional[str] = None,
        priority: Priority = Priority.MEDIUM,
    ) -> ExecutionResponse:
        body = ExecutionCreate(
            runbook_id=runbook_id,
            incident_id=incident_id,
            operator=operator,
            priority=priority,
        )
        data = await self._request("POST", "/executions", json=body.model_dump(by_alias=True, mode="json"))
        return ExecutionResponse.model_validate(data)

    async def list_executions(self, runbook_id: Optional[int] = None) -> List[ExecutionResponse]:
        params = {"runbookId": runbook_id} if runbook_id is not None else None
        data = await self._request("GET", "/executions", params=params)
        return [ExecutionResponse.model_validate(item) for item in data]

    async def get_execution(self, execution_id: int) -> ExecutionResponse:
        return ExecutionResponse.model_validate(await self._request("GET", f"/executions/{execution_id}"))

    async def update_execution(self, execution_id: int, changes: ExecutionUpdate) -> ExecutionResponse:
        data = await self._request(
            "PUT",
            f"/executions/{execution_id}",
            json=changes.model_dump(by_alias=True, exclude_unset=True, mode="json"),
        )
        return ExecutionResponse.model_validate(data)

    async def delete_execution(self, execution_id: int) -> bool:
        data = await self._request("DELETE", f"/executions/{execution_id}")
        return bool(data.get("success"))

    async def patch_step(self, execution_id: int, step_idx: int, patch: StepPatch) -> ExecutionResponse:
        data = await self._request(
            "PATCH",
            f"/executions/{execution_id}/step/{step_idx}",
            json=patch.to_payload(),
        )
        return ExecutionResponse.model_validate(data)

    async def patch_steps_batch(
        self,
        execution_id: int,
        updates: Sequence[Tuple[int, StepPatch]],
    ) -> ExecutionResponse:
        body = {
            "updates": [
                {"stepIdx": step_idx, "patch": patch.to_payload()}
                for step_idx, patch in updates
            ]
        }
        data = await self._request("PATCH", f"/executions/{execution_id}/steps/batch", json=body)
        return ExecutionResponse.model_validate(data)

    # Uploads

    async def upload_file(self, filename: str, content: bytes, content_type: Optional[str] = None) -> str:
        """Upload bytes as ``file`` and return the served URL"""
        content_type = content_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"
        try:
            data = await self._request("POST", "/upload", files={"file": (filename, content, content_type)})
        except NetworkFailure as e:
            if e.status_code is not None and 400 <= e.status_code < 500:
                raise UploadFailure(e.message, status_code=e.status_code) from e
            raise
        return data["url"]

    async def upload_path(self, path: str) -> str:
        with open(path, "rb") as f:
            content = f.read()
        return await self.upload_file(os.path.basename(path), content)
