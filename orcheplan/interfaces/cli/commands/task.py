"""Task CLI commands.

Commands for building and walking a project's sub-task forest.
"""

from typing import Optional

import typer

from orcheplan.domain.task.models import CascadePolicy, TaskPatch
from orcheplan.interfaces.cli.common import (
    get_actor,
    get_workspace,
    print_info,
    print_success,
    unwrap_or_exit,
    user_option,
)

app = typer.Typer(help="Task management commands")


@app.command("add")
def add(
    project_id: str = typer.Argument(..., help="Project ID"),
    title: str = typer.Argument(..., help="Task title"),
    parent: Optional[str] = typer.Option(None, "--parent", help="Parent task ID"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="Initial status ID"),
    description: str = typer.Option("", "--description", "-d", help="Task description"),
    priority: Optional[str] = typer.Option(None, "--priority", help="Priority label"),
    user: Optional[str] = user_option,
) -> None:
    """Create a task, optionally as a sub-task.

    Example:
        orcheplan task add <project> "Write docs" --parent <task>
    """
    actor = get_actor(user)
    workspace = get_workspace()
    task = unwrap_or_exit(
        workspace.create_task(
            actor,
            project_id,
            title,
            description=description,
            priority=priority,
            parent_task_id=parent,
            status_id=status,
        )
    )
    print_success(f"Created task {task.title}")
    typer.echo(task.id)


@app.command("list")
def list_tasks(
    project_id: str = typer.Argument(..., help="Project ID"),
    user: Optional[str] = user_option,
) -> None:
    """Show the project's tasks as an indented tree."""
    actor = get_actor(user)
    workspace = get_workspace()
    rows = unwrap_or_exit(workspace.flatten_tasks(actor, project_id))
    if not rows:
        print_info("No tasks.")
        return

    statuses = unwrap_or_exit(workspace.list_statuses(actor, project_id))
    labels = {s.id: s.label for s in statuses}
    for row in rows:
        label = labels.get(row.task.status_id or "", "-")
        typer.echo(f"{'  ' * row.depth}- {row.task.title} [{label}] ({row.task.id})")


@app.command("show")
def show(
    task_id: str = typer.Argument(..., help="Task ID"),
    user: Optional[str] = user_option,
) -> None:
    """Show a task's details."""
    actor = get_actor(user)
    workspace = get_workspace()
    task = unwrap_or_exit(workspace.get_task(actor, task_id))
    typer.echo(f"Title:       {task.title}")
    typer.echo(f"ID:          {task.id}")
    typer.echo(f"Project:     {task.project_id}")
    typer.echo(f"Parent:      {task.parent_task_id or '-'}")
    typer.echo(f"Status:      {task.status_id or '-'}")
    typer.echo(f"Priority:    {task.priority}")
    if task.description:
        typer.echo(f"\n{task.description}")


@app.command("update")
def update(
    task_id: str = typer.Argument(..., help="Task ID"),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description"),
    priority: Optional[str] = typer.Option(None, "--priority", help="New priority"),
    user: Optional[str] = user_option,
) -> None:
    """Edit a task's title, description or priority."""
    actor = get_actor(user)
    changes = {
        name: value
        for name, value in (("title", title), ("description", description), ("priority", priority))
        if value is not None
    }
    workspace = get_workspace()
    task = unwrap_or_exit(workspace.update_task(actor, task_id, TaskPatch(**changes)))
    print_success(f"Updated task {task.title}")


@app.command("reparent")
def reparent(
    task_id: str = typer.Argument(..., help="Task ID"),
    parent: Optional[str] = typer.Option(None, "--parent", help="New parent task ID (omit for a root task)"),
    user: Optional[str] = user_option,
) -> None:
    """Move a task under another task of the same project."""
    actor = get_actor(user)
    workspace = get_workspace()
    unwrap_or_exit(workspace.reparent_task(actor, task_id, parent))
    print_success(f"Moved task {task_id} {'under ' + parent if parent else 'to the top level'}")


@app.command("move")
def move(
    task_id: str = typer.Argument(..., help="Task ID"),
    status: str = typer.Argument(..., help="Target status ID"),
    comment: Optional[str] = typer.Option(None, "--comment", "-c", help="Comment to record with the move"),
    user: Optional[str] = user_option,
) -> None:
    """Move a task to another status."""
    actor = get_actor(user)
    workspace = get_workspace()
    task = unwrap_or_exit(workspace.move_task(actor, task_id, status, comment))
    print_success(f"Moved task {task.title}")


@app.command("delete")
def delete(
    task_id: str = typer.Argument(..., help="Task ID"),
    policy: Optional[CascadePolicy] = typer.Option(
        None,
        "--policy",
        help="cascade or reject-if-children (default from settings)",
    ),
    cascade: bool = typer.Option(False, "--cascade", help="Shorthand for --policy cascade"),
    user: Optional[str] = user_option,
) -> None:
    """Delete a task."""
    actor = get_actor(user)
    if cascade:
        policy = CascadePolicy.CASCADE
    workspace = get_workspace()
    removed = unwrap_or_exit(workspace.delete_task(actor, task_id, policy))
    print_success(f"Deleted {len(removed)} task(s)")
