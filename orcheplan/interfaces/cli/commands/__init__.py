"""CLI command groups for orcheplan.

This package contains individual command groups that are registered
with the main Typer app. Each module provides a set of related commands.

Command groups:
- user: User registration
- project: Project lifecycle and hierarchy
- member: Project membership and roles
- task: Sub-task forest management
- status: Workflow statuses
- comment: Task comments
- config: Workspace settings

Each command group is a Typer app that gets registered
with the main app using app.add_typer().
"""

from orcheplan.interfaces.cli.commands import comment, config, member, project, status, task, user

__all__ = ["user", "project", "member", "task", "status", "comment", "config"]
