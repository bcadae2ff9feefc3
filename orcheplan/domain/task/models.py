"""Task domain models.

Tasks live in an id-keyed arena. The sub-task hierarchy is expressed only
through ``parent_task_id``; navigation happens by id lookup, never through
embedded child lists.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field


class CascadePolicy(str, Enum):
    """What deleting a task with sub-tasks does."""

    CASCADE = "cascade"
    REJECT_IF_CHILDREN = "reject-if-children"


class Task(BaseModel):
    """A unit of work owned by exactly one project.

    ``project_id`` never changes after creation. ``parent_task_id`` and
    ``status_id`` must reference rows of the same project.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    project_id: str
    title: str
    description: str = ""
    priority: str = "normal"
    parent_task_id: str | None = None
    status_id: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    seq: int = 0

    model_config = {"frozen": True}


class TaskPatch(BaseModel):
    """Fields a task update may change. Unset fields are left alone."""

    title: str | None = None
    description: str | None = None
    priority: str | None = None
    status_id: str | None = None


class Comment(BaseModel):
    """A note on a task.

    ``status_id`` records the workflow state the comment was written for,
    when it annotates a status transition. The id is kept as history even
    after that status is deleted without a fallback.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    task_id: str
    author_id: str
    content: str
    status_id: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime | None = None
    seq: int = 0

    model_config = {"frozen": True}


class FlatTask(BaseModel):
    """A task with its depth in the project forest (roots are depth 0)."""

    task: Task
    depth: int

    model_config = {"frozen": True}
