"""
Command line interface for taskclaim.

Exit codes: 0 success, 1 task already claimed, 2 claim store unusable.
"""

import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from ..config import ConfigManager
from ..coordinator import ClaimCoordinator
from ..errors import ClaimConflictError, StoreError
from ..models import ClaimState, ClaimView, StaleReason, format_timestamp
from ..utils import configure_logging

app = typer.Typer(name="taskclaim", help="Lease-based task claims for cooperating agents")
console = Console(soft_wrap=True, highlight=False)
err_console = Console(stderr=True, soft_wrap=True, highlight=False)

REASON_LABELS = {StaleReason.DEAD: "dead process", StaleReason.EXPIRED: "expired"}


@app.callback()
def main(
    ctx: typer.Context,
    store: Optional[Path] = typer.Option(None, "--store", "-s", help="Claim store file"),
    registry: Optional[Path] = typer.Option(
        None, "--registry", "-r", help="JSON task registry with effort estimates"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log to stderr"),
):
    """Claim, release and inspect task leases."""
    try:
        manager = ConfigManager()
        settings = manager.load_config()
    except ValidationError as e:
        err_console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(2)

    if store is not None:
        settings.store_path = store
    if registry is not None:
        settings.registry_path = registry

    configure_logging(settings.logging, verbose=verbose)
    try:
        ctx.obj = manager.build_coordinator()
    except ValueError as e:
        err_console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(2)


def _coordinator(ctx: typer.Context) -> ClaimCoordinator:
    return ctx.obj


def _describe_view(view: ClaimView) -> str:
    claim = view.claim
    line = (
        f"{view.task_id}: {claim.agent_id} (pid {claim.pid}) "
        f"claimed {format_timestamp(claim.claimed_at)}, expires {format_timestamp(claim.expires_at)}"
    )
    if view.stale:
        line += " - stale: " + ", ".join(r.value for r in view.reasons)
    return line


def _store_failure(e: StoreError) -> None:
    err_console.print(f"[red]Error:[/red] {e}")
    raise typer.Exit(2)


@app.command()
def claim(
    ctx: typer.Context,
    task_id: str = typer.Argument(..., help="Task ID to claim"),
    agent_id: Optional[str] = typer.Argument(None, help="Agent ID (generated if omitted)"),
):
    """Claim a task, taking over a stale claim."""
    try:
        result = _coordinator(ctx).claim(task_id, agent_id)
    except ClaimConflictError as e:
        holder = e.holder
        err_console.print(
            f"[red]✗ Task {task_id} is already claimed[/red] by {holder.agent_id} "
            f"(pid {holder.pid}) until {format_timestamp(holder.expires_at)}"
        )
        raise typer.Exit(1)
    except StoreError as e:
        _store_failure(e)
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    if result.warning:
        err_console.print(f"[yellow]Warning:[/yellow] {result.warning}")
    elif result.took_over:
        console.print(
            f"Took over stale claim from {result.previous.agent_id} (pid {result.previous.pid})"
        )

    c = result.claim
    console.print(f"[green]✓ Claimed {task_id}[/green] as {c.agent_id}")
    console.print(f"   Lease: {format_timestamp(c.claimed_at)} -> {format_timestamp(c.expires_at)}")
    console.print(f"   PID: {c.pid}")


@app.command()
def release(
    ctx: typer.Context,
    task_id: str = typer.Argument(..., help="Task ID to release"),
):
    """Release a task's claim. Releasing an unclaimed task is not an error."""
    try:
        result = _coordinator(ctx).release(task_id)
    except StoreError as e:
        _store_failure(e)

    if result.released:
        console.print(f"[green]✓ Released {task_id}[/green] (was held by {result.previous.agent_id})")
    else:
        console.print(f"{task_id} was not claimed")


@app.command()
def status(
    ctx: typer.Context,
    task_id: str = typer.Argument(..., help="Task ID to inspect"),
    output_json: bool = typer.Option(False, "--json", help="Output status as JSON"),
):
    """Show whether a task is available, actively claimed or stale."""
    try:
        report = _coordinator(ctx).status(task_id)
    except StoreError as e:
        _store_failure(e)

    if output_json:
        console.print_json(report.model_dump_json(by_alias=True))
        return

    if report.state == ClaimState.AVAILABLE:
        console.print(f"{task_id}: available")
    elif report.state == ClaimState.ACTIVE:
        c = report.claim
        console.print(
            f"{task_id}: actively claimed by {c.agent_id} (pid {c.pid}) "
            f"until {format_timestamp(c.expires_at)}"
        )
    else:
        c = report.claim
        reasons = ", ".join(REASON_LABELS[r] for r in report.reasons)
        console.print(
            f"{task_id}: [yellow]stale ({reasons})[/yellow] - "
            f"held by {c.agent_id} (pid {c.pid}), lease ended {format_timestamp(c.expires_at)}"
        )


@app.command("list")
def list_claims(
    ctx: typer.Context,
    output_json: bool = typer.Option(False, "--json", help="Output claims as JSON"),
):
    """List every claim with its stale annotations."""
    try:
        views = _coordinator(ctx).list_claims()
    except StoreError as e:
        _store_failure(e)

    if output_json:
        payload = [
            {**view.model_dump(mode="json", by_alias=True), "stale": view.stale}
            for view in views
        ]
        console.print_json(json.dumps(payload))
        return

    if not views:
        console.print("No claims.")
        return
    for view in views:
        console.print(_describe_view(view))


@app.command()
def clean(ctx: typer.Context):
    """Remove every claim whose process is dead or whose lease expired."""
    try:
        result = _coordinator(ctx).clean()
    except StoreError as e:
        _store_failure(e)

    for task_id in result.removed:
        console.print(f"  removed {task_id}")
    console.print(f"Removed {result.removed_count} stale claims, {result.remaining} remaining")


if __name__ == "__main__":
    app()
