"""End-to-end tests for the async API client against the in-process app."""

import httpx
import pytest

from runbook_checklist.client.api_client import RunbookApiClient, validate_runbook_draft
from runbook_checklist.client.errors import NetworkFailure, NotFoundError, UploadFailure, ValidationFailure
from runbook_checklist.client.step_coordinator import StepUpdateCoordinator
from runbook_checklist.core.config import settings
from runbook_checklist.schemas.execution import ExecutionUpdate, Priority, StepPatch
from runbook_checklist.schemas.runbook import RunbookCreate, RunbookUpdate, StepTemplate

pytestmark = pytest.mark.asyncio


def deploy_draft():
    return RunbookCreate(
        title="Deploy",
        description="Production deploy checklist",
        steps=[StepTemplate(text="Check CI", link="https://ci.example.com/main"), StepTemplate(text="Notify")],
    )


async def test_runbook_round_trip(api_client):
    created = await api_client.create_runbook(deploy_draft())
    assert created.title == "Deploy"
    assert [step.text for step in created.steps] == ["Check CI", "Notify"]

    updated = await api_client.update_runbook(created.id, RunbookUpdate(title="Deploy v2"))
    assert updated.title == "Deploy v2"
    assert updated.steps == created.steps

    listed = await api_client.list_runbooks()
    assert [rb.id for rb in listed] == [created.id]

    assert await api_client.delete_runbook(created.id) is True
    with pytest.raises(NotFoundError):
        await api_client.get_runbook(created.id)


async def test_missing_execution_raises_not_found(api_client):
    with pytest.raises(NotFoundError) as excinfo:
        await api_client.get_execution(9999)
    assert excinfo.value.status_code == 404
    assert "Execution not found" in str(excinfo.value)


@pytest.mark.parametrize(
    "draft, message",
    [
        (RunbookCreate(title="   ", steps=[StepTemplate(text="a")]), "Title is required"),
        (RunbookCreate(title="Deploy", steps=[StepTemplate(text="a"), StepTemplate(text="")]), "Step 2 text is required"),
    ],
)
async def test_invalid_drafts_are_rejected_before_sending(api_client, draft, message):
    with pytest.raises(ValidationFailure, match=message):
        await api_client.create_runbook(draft)
    assert await api_client.list_runbooks() == []


async def test_partial_update_without_title_is_valid():
    validate_runbook_draft(None, None)
    with pytest.raises(ValidationFailure):
        validate_runbook_draft(None, [StepTemplate(text=" ")])


async def test_executions_filtered_by_runbook(api_client):
    deploy = await api_client.create_runbook(deploy_draft())
    rollback = await api_client.create_runbook(RunbookCreate(title="Rollback", steps=[StepTemplate(text="Revert")]))
    await api_client.create_execution(deploy.id, incident_id="INC1")
    second = await api_client.create_execution(rollback.id, incident_id="INC2", priority=Priority.LOW)

    executions = await api_client.list_executions(runbook_id=rollback.id)
    assert [e.id for e in executions] == [second.id]
    assert executions[0].priority == Priority.LOW
    assert len(await api_client.list_executions()) == 2


async def test_batch_patch_and_generic_update(api_client):
    runbook = await api_client.create_runbook(deploy_draft())
    execution = await api_client.create_execution(runbook.id, operator="alice")

    patched = await api_client.patch_steps_batch(
        execution.id,
        [(0, StepPatch(remark_text="green")), (1, StepPatch(remark_image="/uploads/slack-1.png"))],
    )
    assert patched.steps[0].remark_text == "green"
    assert patched.steps[1].remark_image == "/uploads/slack-1.png"

    updated = await api_client.update_execution(execution.id, ExecutionUpdate(operator="bob"))
    assert updated.operator == "bob"
    assert updated.steps == patched.steps

    assert await api_client.delete_execution(execution.id) is True


async def test_checklist_completes_end_to_end(api_client):
    runbook = await api_client.create_runbook(deploy_draft())
    execution = await api_client.create_execution(runbook.id, incident_id="INC1", operator="alice", priority=Priority.HIGH)
    coordinator = StepUpdateCoordinator(api_client, execution, flush_delay=60.0)

    coordinator.edit_remark_text(1, "paged on-call")
    first = await coordinator.toggle_checked(0, True)
    assert first.finished_at is None

    finished = await coordinator.toggle_checked(1, True)
    assert finished.finished_at is not None
    assert finished.finished_at >= finished.started_at
    assert finished.status == "completed"
    # The queued remark survives the completion response locally
    assert coordinator.execution.steps[1].remark_text == "paged on-call"

    await coordinator.drain()
    stored = await api_client.get_execution(execution.id)
    assert stored.finished_at == finished.finished_at
    assert stored.steps[1].remark_text == "paged on-call"
    assert all(step.executed_at is not None for step in stored.steps)
    coordinator.close()


async def test_upload_returns_served_url(api_client):
    url = await api_client.upload_file("graph.png", b"\x89PNG\r\n\x1a\nimage")
    assert url.startswith("/uploads/graph-")
    assert url.endswith(".png")


async def test_upload_over_limit_raises_upload_failure(api_client, monkeypatch):
    monkeypatch.setattr(settings, "MAX_FILE_SIZE", 4)
    with pytest.raises(UploadFailure) as excinfo:
        await api_client.upload_file("big.png", b"0123456789")
    assert excinfo.value.status_code == 413


async def test_transport_errors_become_network_failures():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with RunbookApiClient(base_url="http://testserver", transport=httpx.MockTransport(refuse)) as client:
        with pytest.raises(NetworkFailure):
            await client.list_runbooks()


async def test_server_errors_become_network_failures():
    def broken(request):
        return httpx.Response(500, json={"detail": "boom"})

    async with RunbookApiClient(base_url="http://testserver", transport=httpx.MockTransport(broken)) as client:
        with pytest.raises(NetworkFailure) as excinfo:
            await client.list_executions()
    assert excinfo.value.status_code == 500
    assert "boom" in str(excinfo.value)
