"""Task domain events.

Immutable records of committed task changes. A cascading delete emits one
``TaskDeleted`` per removed node so consumers (comment cleanup, audit)
see every task that disappeared.
"""

from orcheplan.domain.shared.events import DomainEvent


class TaskCreated(DomainEvent):
    """A task was created."""

    task_id: str
    title: str
    parent_task_id: str | None = None


class TaskAttached(DomainEvent):
    """A task was placed under a parent (or made a root)."""

    task_id: str
    parent_task_id: str | None = None


class TaskReparented(DomainEvent):
    """A task moved to a new parent within its project."""

    task_id: str
    old_parent_task_id: str | None = None
    new_parent_task_id: str | None = None


class TaskUpdated(DomainEvent):
    """A task's fields changed."""

    task_id: str
    fields: list[str]


class TaskStatusChanged(DomainEvent):
    """A task moved to another workflow status."""

    task_id: str
    old_status_id: str | None = None
    new_status_id: str | None = None
    comment_id: str | None = None


class TaskDeleted(DomainEvent):
    """A task was removed."""

    task_id: str
    parent_task_id: str | None = None
    comment_count: int = 0


class CommentAdded(DomainEvent):
    """A comment was written on a task."""

    task_id: str
    comment_id: str
    status_id: str | None = None


class CommentEdited(DomainEvent):
    """A comment's text changed."""

    task_id: str
    comment_id: str


class CommentDeleted(DomainEvent):
    """A comment was removed."""

    task_id: str
    comment_id: str
