"""Task comment CLI commands."""

from typing import Optional

import typer

from orcheplan.interfaces.cli.common import (
    get_actor,
    get_workspace,
    print_info,
    print_success,
    unwrap_or_exit,
    user_option,
)

app = typer.Typer(help="Task comment commands")


@app.command("add")
def add(
    task_id: str = typer.Argument(..., help="Task ID"),
    content: str = typer.Argument(..., help="Comment text"),
    user: Optional[str] = user_option,
) -> None:
    """Comment on a task."""
    actor = get_actor(user)
    workspace = get_workspace()
    comment = unwrap_or_exit(workspace.add_comment(actor, task_id, content))
    print_success("Comment added")
    typer.echo(comment.id)


@app.command("list")
def list_comments(
    task_id: str = typer.Argument(..., help="Task ID"),
    user: Optional[str] = user_option,
) -> None:
    """Show a task's comments, oldest first."""
    actor = get_actor(user)
    workspace = get_workspace()
    comments = unwrap_or_exit(workspace.list_comments(actor, task_id))
    if not comments:
        print_info("No comments.")
        return
    for comment in comments:
        edited = " (edited)" if comment.updated_at else ""
        typer.echo(f"[{comment.created_at:%Y-%m-%d %H:%M}] {comment.author_id}{edited}: {comment.content}")


@app.command("edit")
def edit(
    comment_id: str = typer.Argument(..., help="Comment ID"),
    content: str = typer.Argument(..., help="New text"),
    user: Optional[str] = user_option,
) -> None:
    """Edit one of your comments."""
    actor = get_actor(user)
    workspace = get_workspace()
    unwrap_or_exit(workspace.edit_comment(actor, comment_id, content))
    print_success("Comment updated")


@app.command("delete")
def delete(
    comment_id: str = typer.Argument(..., help="Comment ID"),
    user: Optional[str] = user_option,
) -> None:
    """Delete one of your comments."""
    actor = get_actor(user)
    workspace = get_workspace()
    unwrap_or_exit(workspace.delete_comment(actor, comment_id))
    print_success("Comment deleted")
