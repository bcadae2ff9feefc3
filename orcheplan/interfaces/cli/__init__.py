"""CLI interface for orcheplan using Typer.

Usage:
    orcheplan user add alice                     # Register a user
    orcheplan project create "Launch" -u alice   # Create a project
    orcheplan task add <project> "Write docs"    # Add a task
    orcheplan tree <project>                     # Show the task forest

The CLI is structured as:
- app: Main Typer application
- commands/: Individual command groups (project, task, status, etc.)
- common.py: Shared utilities for CLI commands
- main.py: Entry point that runs the app
"""

from typing import Optional

import typer

from orcheplan import __version__
from orcheplan.interfaces.cli.commands import comment, config, member, project, status, task, user
from orcheplan.interfaces.cli.common import user_option

app = typer.Typer(
    name="orcheplan",
    help="Multi-tenant project and task workspace",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"orcheplan version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """orcheplan - projects, sub-task trees and workflows with per-project roles."""
    pass


# =============================================================================
# Register Command Groups
# =============================================================================

app.add_typer(user.app, name="user")
app.add_typer(project.app, name="project")
app.add_typer(member.app, name="member")
app.add_typer(task.app, name="task")
app.add_typer(status.app, name="status")
app.add_typer(comment.app, name="comment")
app.add_typer(config.app, name="config")


# =============================================================================
# Top-Level Shortcuts for Common Commands
# =============================================================================


@app.command("tree")
def tree(
    project_id: str = typer.Argument(..., help="Project ID"),
    user: Optional[str] = user_option,
) -> None:
    """Show a project's tasks (shortcut for 'task list')."""
    task.list_tasks(project_id, user)


@app.command("projects")
def projects(user: Optional[str] = user_option) -> None:
    """List visible projects (shortcut for 'project list')."""
    project.list_projects(user)


__all__ = ["app"]
