"""Project management CLI commands.

Commands for creating, arranging and removing projects.
"""

from typing import Optional

import typer
from rich.table import Table

from orcheplan.interfaces.cli.common import (
    console,
    get_actor,
    get_workspace,
    print_info,
    print_success,
    unwrap_or_exit,
    user_option,
)

app = typer.Typer(help="Project management commands")


# =============================================================================
# Commands
# =============================================================================


@app.command("create")
def create(
    name: str = typer.Argument(..., help="Project name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Project description"),
    parent: Optional[str] = typer.Option(None, "--parent", help="Parent project ID"),
    user: Optional[str] = user_option,
) -> None:
    """Create a project owned by the acting user.

    The new project starts with the default workflow
    (To-Do, In Progress, Done, Remove).

    Example:
        orcheplan project create "Launch" -u alice
    """
    actor = get_actor(user)
    workspace = get_workspace()
    project = unwrap_or_exit(
        workspace.create_project(actor, name, description=description, parent_project_id=parent)
    )
    print_success(f"Created project {project.name}")
    typer.echo(project.id)


@app.command("list")
def list_projects(user: Optional[str] = user_option) -> None:
    """List projects visible to the acting user."""
    actor = get_actor(user)
    workspace = get_workspace()
    projects = unwrap_or_exit(workspace.list_projects(actor))
    if not projects:
        print_info("No projects.")
        return

    table = Table("ID", "Name", "Owner", "Parent")
    for project in projects:
        table.add_row(project.id, project.name, project.owner_id, project.parent_project_id or "")
    console.print(table)


@app.command("show")
def show(
    project_id: str = typer.Argument(..., help="Project ID"),
    user: Optional[str] = user_option,
) -> None:
    """Show a project and the acting user's role on it."""
    actor = get_actor(user)
    workspace = get_workspace()
    project = unwrap_or_exit(workspace.get_project(actor, project_id))
    role = unwrap_or_exit(workspace.effective_role(actor, project_id))

    typer.echo(f"Name:        {project.name}")
    typer.echo(f"ID:          {project.id}")
    typer.echo(f"Owner:       {project.owner_id}")
    typer.echo(f"Parent:      {project.parent_project_id or '-'}")
    typer.echo(f"Your role:   {role.value}")
    if project.description:
        typer.echo(f"\n{project.description}")


@app.command("update")
def update(
    project_id: str = typer.Argument(..., help="Project ID"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description"),
    user: Optional[str] = user_option,
) -> None:
    """Rename a project or change its description."""
    actor = get_actor(user)
    workspace = get_workspace()
    project = unwrap_or_exit(
        workspace.update_project(actor, project_id, name=name, description=description)
    )
    print_success(f"Updated project {project.name}")


@app.command("move")
def move(
    project_id: str = typer.Argument(..., help="Project ID"),
    parent: Optional[str] = typer.Option(None, "--parent", help="New parent project ID (omit for a root project)"),
    user: Optional[str] = user_option,
) -> None:
    """Move a project under another project, or to the top level."""
    actor = get_actor(user)
    workspace = get_workspace()
    project = unwrap_or_exit(workspace.move_project(actor, project_id, parent))
    where = f"under {parent}" if parent else "to the top level"
    print_success(f"Moved project {project.name} {where}")


@app.command("delete")
def delete(
    project_id: str = typer.Argument(..., help="Project ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    user: Optional[str] = user_option,
) -> None:
    """Delete a project with its sub-projects, tasks and statuses."""
    actor = get_actor(user)
    if not yes:
        typer.confirm(f"Delete project {project_id} and everything in it?", abort=True)
    workspace = get_workspace()
    removed = unwrap_or_exit(workspace.delete_project(actor, project_id))
    print_success(f"Deleted {removed} project(s)")
