#!/usr/bin/env python3
"""
Command Line Interface for the Runbook Checklist API
"""

import asyncio
import sys
from typing import List, Optional

from runbook_checklist.client import (
    ExecutionViewStore,
    RunbookApiClient,
    RunbookClientError,
    StepUpdateCoordinator,
)
from runbook_checklist.core.config import settings
from runbook_checklist.core.logging import setup_logging
from runbook_checklist.schemas.execution import ExecutionResponse, Priority
from runbook_checklist.schemas.runbook import RunbookCreate, RunbookResponse, RunbookUpdate, StepTemplate


async def ask(prompt: str) -> str:
    """Read a line without blocking the event loop, so debounce timers keep running"""
    return (await asyncio.to_thread(input, prompt)).strip()


def format_duration(seconds: float) -> str:
    seconds = max(int(round(seconds)), 0)
    if seconds < 60:
        return f"{seconds}s"
    return f"{seconds // 60}m{seconds % 60}s"


def execution_summary(execution: ExecutionResponse) -> str:
    done = sum(1 for step in execution.steps if step.checked)
    line = (
        f"[{execution.id}] {execution.runbook_title or '-'}"
        f"{f' ({execution.incident_id})' if execution.incident_id else ''}"
        f" | operator: {execution.operator or '-'}"
        f" | priority: {execution.priority.value if execution.priority else '-'}"
        f" | started: {execution.started_at:%Y-%m-%d %H:%M:%S}"
        f" | {done}/{len(execution.steps)} done"
    )
    if execution.finished_at:
        elapsed = (execution.finished_at - execution.started_at).total_seconds()
        line += f" | took {format_duration(elapsed)}"
    return line


def print_banner():
    """Print application banner"""
    print("=" * 60)
    print("    RUNBOOK CHECKLIST - COMMAND LINE")
    print("=" * 60)
    print()


def print_menu():
    """Print main menu"""
    print("MAIN MENU:")
    print("1. List runbooks")
    print("2. Create runbook")
    print("3. Edit runbook")
    print("4. Delete runbook")
    print("5. Start execution")
    print("6. Work on an execution")
    print("7. Execution history")
    print("8. Exit")
    print()


def print_execution(execution: ExecutionResponse):
    print(execution_summary(execution))
    for idx, step in enumerate(execution.steps):
        mark = "x" if step.checked else " "
        print(f"  {idx}. [{mark}] {step.text}{f'  <{step.link}>' if step.link else ''}")
        if step.executed_at:
            print(f"       done at {step.executed_at:%Y-%m-%d %H:%M:%S}")
        if step.remark_text:
            print(f"       remark: {step.remark_text}")
        if step.remark_image:
            print(f"       image: {step.remark_image}")


async def read_steps(client: RunbookApiClient) -> List[StepTemplate]:
    """Prompt for steps until an empty line"""
    print("Enter steps, one per line. Leave the text empty to finish.")
    steps = []
    while True:
        text = await ask(f"Step {len(steps) + 1} text: ")
        if not text:
            return steps
        link = await ask("  Link (optional): ") or None
        image_path = await ask("  Image file to upload (optional): ")
        image = await client.upload_path(image_path) if image_path else None
        steps.append(StepTemplate(text=text, link=link, image=image))


async def pick_id(prompt: str) -> Optional[int]:
    raw = await ask(prompt)
    try:
        return int(raw)
    except ValueError:
        print(f"✗ Not a valid id: {raw!r}")
        return None


async def list_runbooks_cli(client: RunbookApiClient) -> List[RunbookResponse]:
    runbooks = await client.list_runbooks()
    if not runbooks:
        print("No runbooks yet. Try option 2.")
    for runbook in runbooks:
        print(f"[{runbook.id}] {runbook.title} ({len(runbook.steps)} steps)")
        if runbook.description:
            print(f"    {runbook.description}")
    return runbooks


async def create_runbook_cli(client: RunbookApiClient):
    title = await ask("Title: ")
    description = await ask("Description: ") or None
    steps = await read_steps(client)
    runbook = await client.create_runbook(RunbookCreate(title=title, description=description, steps=steps))
    print(f"✓ Runbook {runbook.id} created")


async def edit_runbook_cli(client: RunbookApiClient):
    runbook_id = await pick_id("Runbook id: ")
    if runbook_id is None:
        return
    runbook = await client.get_runbook(runbook_id)
    for idx, step in enumerate(runbook.steps):
        print(f"  {idx}. {step.text}")

    changes = RunbookUpdate()
    title = await ask(f"Title [{runbook.title}]: ")
    if title:
        changes.title = title
    description = await ask(f"Description [{runbook.description or ''}]: ")
    if description:
        changes.description = description

    order = await ask("New step order as indexes (e.g. 2,0,1), 'n' to enter new steps, empty to keep: ")
    if order.lower() == "n":
        changes.steps = await read_steps(client)
    elif order:
        try:
            changes.steps = [runbook.steps[int(part)] for part in order.split(",")]
        except (ValueError, IndexError):
            print("✗ Invalid step order")
            return

    updated = await client.update_runbook(runbook_id, changes)
    print(f"✓ Runbook {updated.id} updated")


async def delete_runbook_cli(client: RunbookApiClient):
    runbook_id = await pick_id("Runbook id: ")
    if runbook_id is None:
        return
    confirm = (await ask("Delete this runbook? Existing executions are kept. (yes/no): ")).lower()
    if confirm == "yes":
        await client.delete_runbook(runbook_id)
        print("✓ Runbook deleted")
    else:
        print("Operation cancelled")


async def start_execution_cli(client: RunbookApiClient, store: ExecutionViewStore):
    runbook_id = await pick_id("Runbook id: ")
    if runbook_id is None:
        return
    incident_id = await ask("Incident id: ") or None
    operator = await ask("Operator: ") or None
    raw_priority = (await ask("Priority (high/medium/low) [medium]: ")).lower() or Priority.MEDIUM.value
    try:
        priority = Priority(raw_priority)
    except ValueError:
        print(f"✗ Unknown priority: {raw_priority}")
        return
    execution = await client.create_execution(runbook_id, incident_id, operator, priority)
    print(f"✓ Execution {execution.id} started")
    await checklist_cli(client, store, execution)


async def checklist_cli(client: RunbookApiClient, store: ExecutionViewStore, execution: ExecutionResponse):
    """Work an execution's checklist until the user leaves"""
    coordinator: StepUpdateCoordinator = store.open_detail(execution)
    print("Commands: c <n> toggle step | r <n> <text> remark | i <n> <file> image | s show | q back")
    try:
        print_execution(coordinator.execution)
        while True:
            command = await ask("> ")
            verb, _, rest = command.partition(" ")
            idx_raw, _, arg = rest.strip().partition(" ")
            if verb == "q":
                break
            if verb == "s":
                print_execution(coordinator.execution)
                continue
            try:
                idx = int(idx_raw)
            except ValueError:
                print("✗ Expected a step number")
                continue
            try:
                if verb == "c":
                    current = coordinator.execution.steps[idx].checked if 0 <= idx < len(coordinator.execution.steps) else False
                    updated = await coordinator.toggle_checked(idx, not current)
                    if updated.finished_at:
                        print(f"✓ All steps done. {execution_summary(updated)}")
                elif verb == "r":
                    coordinator.edit_remark_text(idx, arg)
                elif verb == "i":
                    coordinator.edit_remark_image(idx, await client.upload_path(arg))
                else:
                    print(f"✗ Unknown command: {verb}")
            except RunbookClientError as e:
                print(f"✗ {e}")
            except OSError as e:
                print(f"✗ Could not read file: {e}")
    finally:
        await coordinator.drain()
        store.close_detail()


async def work_execution_cli(client: RunbookApiClient, store: ExecutionViewStore):
    execution_id = await pick_id("Execution id: ")
    if execution_id is None:
        return
    execution = await client.get_execution(execution_id)
    await checklist_cli(client, store, execution)


async def history_cli(store: ExecutionViewStore):
    runbook_id_raw = await ask("Runbook id to filter by (empty for all): ")
    runbook_id = int(runbook_id_raw) if runbook_id_raw.isdigit() else None
    executions = await store.refresh(runbook_id=runbook_id)
    if not executions:
        print("No executions recorded")
    for execution in executions:
        print(execution_summary(execution))


async def run_cli() -> int:
    def report(error: Exception):
        print(f"\n✗ Remark update failed: {error}")

    async with RunbookApiClient() as client:
        store = ExecutionViewStore(client, on_error=report)
        print(f"Connected to {settings.API_BASE_URL}")
        print()
        while True:
            print_menu()
            choice = await ask("Enter your choice (1-8): ")
            try:
                if choice == '1':
                    await list_runbooks_cli(client)
                elif choice == '2':
                    await create_runbook_cli(client)
                elif choice == '3':
                    await edit_runbook_cli(client)
                elif choice == '4':
                    await delete_runbook_cli(client)
                elif choice == '5':
                    await start_execution_cli(client, store)
                elif choice == '6':
                    await work_execution_cli(client, store)
                elif choice == '7':
                    await history_cli(store)
                elif choice == '8':
                    print("Goodbye!")
                    return 0
                else:
                    print("✗ Invalid choice. Please enter 1-8.")
            except RunbookClientError as e:
                print(f"✗ {e}")
            print("\n" + "=" * 60 + "\n")


def main() -> int:
    """Main CLI application"""
    print_banner()
    setup_logging("WARNING")
    try:
        return asyncio.run(run_cli())
    except (EOFError, KeyboardInterrupt):
        print("\nGoodbye!")
        return 0


if __name__ == "__main__":
    sys.exit(main())
