"""Shared utilities for orcheplan CLI commands.

This module provides common utilities used across CLI commands:
- Workspace and acting-user resolution
- Formatted output helpers (error, success, info)
- Mapping of domain errors to exit codes
- Logging setup
"""

import logging
import os
from typing import Optional, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler

from orcheplan.application.workspace import Workspace
from orcheplan.config import load_settings
from orcheplan.domain.shared.errors import DomainError, ErrorKind
from orcheplan.domain.shared.result import Err, Ok
from orcheplan.infrastructure.storage.memory import SnapshotError

T = TypeVar("T")

console = Console()

# Exit status when the store is busy or unwritable; the command may be retried
EXIT_TRANSIENT = 75

_EXIT_CODES = {
    ErrorKind.NOT_FOUND: 4,
    ErrorKind.FORBIDDEN: 3,
    ErrorKind.CONFLICT: 5,
    ErrorKind.GRAPH_CORRUPTION: 70,
}

# Reusable acting-user option for CLI commands
# Usage: def my_command(user: str = user_option) -> None:
user_option = typer.Option(
    None,
    "--user", "-u",
    help="Acting user ID (or set ORCHEPLAN_USER env var)",
    envvar="ORCHEPLAN_USER",
)


def get_actor(explicit_user: str | None = None) -> str:
    """Get the acting user ID, raising an error if none is set.

    Resolution order:
    1. Explicit user parameter (from -u/--user CLI option)
    2. ORCHEPLAN_USER environment variable

    Raises:
        typer.Exit: If no user can be determined.
    """
    if explicit_user:
        return explicit_user

    env_user = os.environ.get("ORCHEPLAN_USER")
    if env_user:
        return env_user

    print_error("No acting user specified.")
    typer.echo("")
    typer.echo("Specify a user using one of:")
    typer.echo("  1. Use -u/--user option: orcheplan project list -u alice")
    typer.echo("  2. Set ORCHEPLAN_USER env var: export ORCHEPLAN_USER=alice")
    raise typer.Exit(2)


def get_workspace() -> Workspace:
    """Open the workspace configured by settings and environment.

    Raises:
        typer.Exit: If the state file cannot be read.
    """
    settings = load_settings()
    configure_logging(settings.log_level)
    try:
        return Workspace.from_settings(settings)
    except SnapshotError as e:
        print_error(f"Cannot read workspace state: {e}")
        raise typer.Exit(EXIT_TRANSIENT)


def configure_logging(level: str) -> None:
    """Route library logging through rich on stderr."""
    root = logging.getLogger("orcheplan")
    if any(isinstance(h, RichHandler) for h in root.handlers):
        root.setLevel(level.upper())
        return
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(level.upper())


def exit_code_for(error: DomainError) -> int:
    """Process exit status for a domain error (1 for validation-type errors)."""
    return _EXIT_CODES.get(error.kind, 1)


def unwrap_or_exit(result: Ok[T] | Err[DomainError]) -> T:
    """Return the value of a successful result, or report the error and exit.

    Raises:
        typer.Exit: With the status matching the error kind.
    """
    if isinstance(result, Err):
        print_error(f"{result.error.kind.value}: {result.error.message}")
        raise typer.Exit(exit_code_for(result.error))
    return result.value


def print_error(msg: str) -> None:
    """Print a formatted error message.

    Args:
        msg: Error message to display
    """
    typer.echo(typer.style(f"Error: {msg}", fg=typer.colors.RED), err=True)


def print_success(msg: str) -> None:
    """Print a formatted success message.

    Args:
        msg: Success message to display
    """
    typer.echo(typer.style(msg, fg=typer.colors.GREEN))


def print_info(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.BLUE))


__all__ = [
    "EXIT_TRANSIENT",
    "console",
    "user_option",
    "get_actor",
    "get_workspace",
    "configure_logging",
    "exit_code_for",
    "unwrap_or_exit",
    "print_error",
    "print_success",
    "print_info",
]
