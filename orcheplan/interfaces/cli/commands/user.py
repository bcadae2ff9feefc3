"""User CLI commands."""

from typing import Optional

import typer
from rich.table import Table

from orcheplan.interfaces.cli.common import (
    console,
    get_workspace,
    print_success,
    unwrap_or_exit,
)

app = typer.Typer(help="User registration commands")


@app.command("add")
def add(
    user_id: str = typer.Argument(..., help="User ID"),
    name: str = typer.Option("", "--name", "-n", help="Display name"),
    email: Optional[str] = typer.Option(None, "--email", "-e", help="Email address"),
) -> None:
    """Register a user.

    Example:
        orcheplan user add alice --name "Alice Liddell"
    """
    workspace = get_workspace()
    user = unwrap_or_exit(workspace.register_user(user_id, name=name, email=email))
    print_success(f"Registered user {user.id}")


@app.command("list")
def list_users() -> None:
    """List registered users."""
    workspace = get_workspace()
    table = Table("ID", "Name", "Email")
    for user in workspace.list_users():
        table.add_row(user.id, user.name, user.email or "")
    console.print(table)
