from datetime import datetime, timedelta, timezone

import pytest

from runbook_checklist import cli
from runbook_checklist.client import ExecutionViewStore
from runbook_checklist.schemas.execution import ExecutionResponse, ExecutionStep, Priority
from runbook_checklist.schemas.runbook import RunbookCreate, StepTemplate


def scripted(monkeypatch, answers):
    remaining = list(answers)

    async def fake_ask(prompt):
        return remaining.pop(0)

    monkeypatch.setattr(cli, "ask", fake_ask)
    return remaining


@pytest.mark.parametrize(
    "seconds, expected",
    [(0, "0s"), (42.4, "42s"), (60, "1m0s"), (125, "2m5s"), (-3, "0s")],
)
def test_format_duration(seconds, expected):
    assert cli.format_duration(seconds) == expected


def test_execution_summary_reports_progress_and_duration():
    started = datetime(2030, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
    execution = ExecutionResponse(
        id=7,
        runbook_title="Deploy",
        incident_id="INC1",
        operator="alice",
        priority=Priority.HIGH,
        started_at=started,
        finished_at=started + timedelta(minutes=3, seconds=4),
        steps=[ExecutionStep(text="a", checked=True), ExecutionStep(text="b")],
    )

    line = cli.execution_summary(execution)
    assert line.startswith("[7] Deploy (INC1)")
    assert "priority: high" in line
    assert "1/2 done" in line
    assert line.endswith("took 3m4s")


def test_unfinished_execution_has_no_duration():
    execution = ExecutionResponse(id=1, started_at=datetime.now(timezone.utc))
    assert "took" not in cli.execution_summary(execution)


@pytest.mark.asyncio
async def test_checklist_session_completes_execution(api_client, monkeypatch, capsys):
    runbook = await api_client.create_runbook(
        RunbookCreate(title="Deploy", steps=[StepTemplate(text="Check CI"), StepTemplate(text="Notify")])
    )
    execution = await api_client.create_execution(runbook.id, operator="alice")
    remaining = scripted(monkeypatch, ["r 1 paged on-call", "c 0", "c 9", "x 0", "c 1", "q"])
    store = ExecutionViewStore(api_client, flush_delay=60.0)

    await cli.checklist_cli(api_client, store, execution)

    assert remaining == []
    assert store.coordinator is None
    stored = await api_client.get_execution(execution.id)
    assert all(step.checked for step in stored.steps)
    assert stored.steps[1].remark_text == "paged on-call"
    assert stored.finished_at is not None
    out = capsys.readouterr().out
    assert "All steps done" in out
    assert "Unknown command: x" in out


@pytest.mark.asyncio
async def test_start_execution_rejects_unknown_priority(api_client, monkeypatch, capsys):
    runbook = await api_client.create_runbook(RunbookCreate(title="Deploy", steps=[StepTemplate(text="a")]))
    scripted(monkeypatch, [str(runbook.id), "INC9", "bob", "urgent"])

    await cli.start_execution_cli(api_client, ExecutionViewStore(api_client))

    assert "Unknown priority: urgent" in capsys.readouterr().out
    assert await api_client.list_executions() == []
