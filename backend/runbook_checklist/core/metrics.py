"""Prometheus metrics helpers for runbook and checklist instrumentation."""

from __future__ import annotations

from prometheus_client import Counter


runbook_writes_total = Counter(
    "runbook_writes_total",
    "Runbook create/update/delete operations",
    labelnames=("action",),
)

executions_created_total = Counter(
    "executions_created_total",
    "Executions spawned from a runbook snapshot",
)

step_patches_total = Counter(
    "step_patches_total",
    "Execution step patches by outcome",
    labelnames=("path", "outcome"),
)

uploads_total = Counter(
    "uploads_total",
    "File uploads by status",
    labelnames=("status",),
)


def record_runbook_write(action: str) -> None:
    runbook_writes_total.labels(action=action).inc()


def record_execution_created() -> None:
    executions_created_total.inc()


def record_step_patch(path: str, applied: int, skipped: int = 0) -> None:
    if applied:
        step_patches_total.labels(path=path, outcome="applied").inc(applied)
    if skipped:
        step_patches_total.labels(path=path, outcome="skipped").inc(skipped)


def record_upload(status: str) -> None:
    uploads_total.labels(status=status).inc()
