"""Task domain - sub-task forest management.

All exports are pure (no I/O, no side effects).

Key Types:
    Task - A unit of work owned by one project
    TaskPatch - Field changes for a task update
    Comment - A note on a task
    FlatTask - A task tagged with its depth
    CascadePolicy - Delete behaviour for tasks with sub-tasks

Traversal Functions:
    children_index - Group tasks by parent
    children_of - Direct sub-tasks
    find_cycle - Acyclicity check for a proposed parent link
    ancestors - Upward walk
    descendants_depth_first - Cascade-delete order
    flatten_forest - Display-order materialization

Domain Events:
    TaskCreated, TaskAttached, TaskReparented, TaskUpdated,
    TaskStatusChanged, TaskDeleted, CommentAdded, CommentEdited,
    CommentDeleted
"""

from .events import (
    CommentAdded,
    CommentDeleted,
    CommentEdited,
    TaskAttached,
    TaskCreated,
    TaskDeleted,
    TaskReparented,
    TaskStatusChanged,
    TaskUpdated,
)
from .models import CascadePolicy, Comment, FlatTask, Task, TaskPatch
from .traversal import (
    ancestors,
    children_index,
    children_of,
    descendants_depth_first,
    find_cycle,
    flatten_forest,
)

__all__ = [
    # Models
    "CascadePolicy",
    "Task",
    "TaskPatch",
    "Comment",
    "FlatTask",
    # Traversal
    "children_index",
    "children_of",
    "find_cycle",
    "ancestors",
    "descendants_depth_first",
    "flatten_forest",
    # Events
    "TaskCreated",
    "TaskAttached",
    "TaskReparented",
    "TaskUpdated",
    "TaskStatusChanged",
    "TaskDeleted",
    "CommentAdded",
    "CommentEdited",
    "CommentDeleted",
]
