"""Project membership CLI commands."""

from typing import Optional

import typer
from rich.table import Table

from orcheplan.domain.access.models import MEMBER_ROLES, Role
from orcheplan.interfaces.cli.common import (
    console,
    get_actor,
    get_workspace,
    print_error,
    print_success,
    unwrap_or_exit,
    user_option,
)

app = typer.Typer(help="Project membership commands")


def _parse_role(value: str) -> Role:
    try:
        role = Role(value.lower())
    except ValueError:
        role = Role.NONE
    if role not in MEMBER_ROLES:
        print_error(f"Invalid role '{value}'. Choose from: {', '.join(r.value for r in MEMBER_ROLES)}")
        raise typer.Exit(1)
    return role


@app.command("add")
def add(
    project_id: str = typer.Argument(..., help="Project ID"),
    member: str = typer.Argument(..., help="User ID to add"),
    role: str = typer.Option("viewer", "--role", "-r", help="viewer, editor or owner"),
    user: Optional[str] = user_option,
) -> None:
    """Add a user to a project (project owner only)."""
    actor = get_actor(user)
    parsed = _parse_role(role)
    workspace = get_workspace()
    added = unwrap_or_exit(workspace.add_member(actor, project_id, member, parsed))
    print_success(f"Added {added.user_id} as {added.role.value}")


@app.command("role")
def set_role(
    project_id: str = typer.Argument(..., help="Project ID"),
    member: str = typer.Argument(..., help="Member user ID"),
    role: str = typer.Argument(..., help="viewer, editor or owner"),
    user: Optional[str] = user_option,
) -> None:
    """Change a member's role (project owner only)."""
    actor = get_actor(user)
    parsed = _parse_role(role)
    workspace = get_workspace()
    updated = unwrap_or_exit(workspace.update_member_role(actor, project_id, member, parsed))
    print_success(f"{updated.user_id} is now {updated.role.value}")


@app.command("remove")
def remove(
    project_id: str = typer.Argument(..., help="Project ID"),
    member: str = typer.Argument(..., help="Member user ID"),
    user: Optional[str] = user_option,
) -> None:
    """Remove a member from a project (project owner only)."""
    actor = get_actor(user)
    workspace = get_workspace()
    unwrap_or_exit(workspace.remove_member(actor, project_id, member))
    print_success(f"Removed {member}")


@app.command("list")
def list_members(
    project_id: str = typer.Argument(..., help="Project ID"),
    user: Optional[str] = user_option,
) -> None:
    """List a project's members."""
    actor = get_actor(user)
    workspace = get_workspace()
    members = unwrap_or_exit(workspace.list_members(actor, project_id))
    table = Table("User", "Role")
    for entry in members:
        table.add_row(entry.user_id, entry.role.value)
    console.print(table)
