"""Workflow status CLI commands."""

from typing import Optional

import typer
from rich.table import Table

from orcheplan.domain.status.models import Reassign, Reject, StatusFlags, StatusPatch
from orcheplan.interfaces.cli.common import (
    console,
    get_actor,
    get_workspace,
    print_error,
    print_success,
    unwrap_or_exit,
    user_option,
)

app = typer.Typer(help="Workflow status commands")


@app.command("add")
def add(
    project_id: str = typer.Argument(..., help="Project ID"),
    label: str = typer.Argument(..., help="Status label"),
    order: Optional[int] = typer.Option(None, "--order", "-o", help="Position (default: last)"),
    color: Optional[str] = typer.Option(None, "--color", help="Hex colour (default: derived from label)"),
    strike: bool = typer.Option(False, "--strike", help="Show tasks struck through"),
    hidden: bool = typer.Option(False, "--hidden", help="Hide tasks in this status"),
    requires_comment: bool = typer.Option(False, "--requires-comment", help="Moving here needs a comment"),
    no_comments: bool = typer.Option(False, "--no-comments", help="Refuse comments when moving here"),
    user: Optional[str] = user_option,
) -> None:
    """Add a status to a project's workflow."""
    actor = get_actor(user)
    flags = StatusFlags(
        show_strike_through=strike,
        hidden=hidden,
        requires_comment=requires_comment,
        allows_comment=not no_comments,
    )
    workspace = get_workspace()
    status = unwrap_or_exit(
        workspace.create_status(actor, project_id, label, order=order, color=color, flags=flags)
    )
    print_success(f"Created status {status.label} ({status.color})")
    typer.echo(status.id)


@app.command("list")
def list_statuses(
    project_id: str = typer.Argument(..., help="Project ID"),
    user: Optional[str] = user_option,
) -> None:
    """Show a project's workflow in order."""
    actor = get_actor(user)
    workspace = get_workspace()
    statuses = unwrap_or_exit(workspace.list_statuses(actor, project_id))

    table = Table("Order", "Label", "Color", "Flags", "ID")
    for status in statuses:
        flags = [
            name
            for name, on in (
                ("strike", status.show_strike_through),
                ("hidden", status.hidden),
                ("requires-comment", status.requires_comment),
                ("no-comments", not status.allows_comment),
            )
            if on
        ]
        color = status.color or ""
        table.add_row(
            str(status.order),
            status.label,
            f"[{color}]{color}[/]" if color else "",
            ", ".join(flags),
            status.id,
        )
    console.print(table)


@app.command("update")
def update(
    status_id: str = typer.Argument(..., help="Status ID"),
    label: Optional[str] = typer.Option(None, "--label", "-l", help="New label"),
    order: Optional[int] = typer.Option(None, "--order", "-o", help="New position"),
    color: Optional[str] = typer.Option(None, "--color", help="New hex colour"),
    derive_color: bool = typer.Option(False, "--derive-color", help="Re-derive the colour from the label"),
    requires_comment: bool = typer.Option(False, "--requires-comment", help="Moving here needs a comment"),
    no_requires_comment: bool = typer.Option(False, "--no-requires-comment", help="Moving here needs no comment"),
    user: Optional[str] = user_option,
) -> None:
    """Change a status."""
    actor = get_actor(user)
    if color is not None and derive_color:
        print_error("--color and --derive-color are mutually exclusive")
        raise typer.Exit(1)

    changes: dict[str, object] = {}
    if label is not None:
        changes["label"] = label
    if order is not None:
        changes["order"] = order
    if color is not None or derive_color:
        changes["color"] = color
    if requires_comment or no_requires_comment:
        changes["requires_comment"] = requires_comment

    workspace = get_workspace()
    status = unwrap_or_exit(workspace.update_status(actor, status_id, StatusPatch(**changes)))
    print_success(f"Updated status {status.label} ({status.color})")


@app.command("delete")
def delete(
    status_id: str = typer.Argument(..., help="Status ID"),
    reassign: Optional[str] = typer.Option(
        None, "--reassign", help="Move tasks still in this status to this status ID"
    ),
    user: Optional[str] = user_option,
) -> None:
    """Delete a status (project owner only)."""
    actor = get_actor(user)
    on_in_use = Reassign(fallback_status_id=reassign) if reassign else Reject()
    workspace = get_workspace()
    moved = unwrap_or_exit(workspace.delete_status(actor, status_id, on_in_use))
    print_success(f"Deleted status; {len(moved)} task(s) reassigned")


@app.command("reorder")
def reorder(
    project_id: str = typer.Argument(..., help="Project ID"),
    moves: list[str] = typer.Argument(..., help="STATUS_ID=ORDER pairs"),
    user: Optional[str] = user_option,
) -> None:
    """Set the order of several statuses at once.

    Example:
        orcheplan status reorder <project> <done-id>=0 <todo-id>=2
    """
    actor = get_actor(user)
    parsed: list[tuple[str, int]] = []
    for move in moves:
        status_id, sep, order = move.partition("=")
        if not sep or not order.lstrip("-").isdigit():
            print_error(f"Expected STATUS_ID=ORDER, got '{move}'")
            raise typer.Exit(1)
        parsed.append((status_id, int(order)))

    workspace = get_workspace()
    statuses = unwrap_or_exit(workspace.reorder_statuses(actor, project_id, parsed))
    print_success("Workflow: " + " -> ".join(s.label for s in statuses))


@app.command("backfill-colors")
def backfill_colors() -> None:
    """Give every status without a colour one derived from its label."""
    workspace = get_workspace()
    events = workspace.backfill_status_colors()
    print_success(f"Backfilled {len(events)} status colour(s)")
