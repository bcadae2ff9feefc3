"""Task comments and status moves.

Moving a task to another status is where the workflow flags bite: a
status may demand a comment on entry, or refuse one.
"""

import logging
from datetime import UTC, datetime

from orcheplan.domain.shared.errors import DomainError, ErrorKind, fail
from orcheplan.domain.shared.result import Err, Ok
from orcheplan.domain.task import (
    Comment,
    CommentAdded,
    CommentDeleted,
    CommentEdited,
    Task,
    TaskStatusChanged,
)
from orcheplan.infrastructure.storage.base import WorkspaceStore

logger = logging.getLogger(__name__)


class CommentService:
    """Comments on tasks, and status moves that may carry one."""

    def __init__(self, store: WorkspaceStore) -> None:
        self._store = store

    def move_task(
        self,
        task_id: str,
        status_id: str,
        author_id: str,
        comment: str | None = None,
    ) -> Ok[tuple[Task, TaskStatusChanged, CommentAdded | None]] | Err[DomainError]:
        """Move a task to ``status_id``, optionally recording a comment.

        Args:
            task_id: Task to move.
            status_id: Target status, which must belong to the task's project.
            author_id: User making the move; authors the comment.
            comment: Comment text. Mandatory for statuses that require one,
                refused by statuses that do not allow one.

        Returns:
            Ok((task, status event, comment event or None)) or
            Err(NotFound | InvalidReference | CommentRequired | CommentNotAllowed).
        """
        task = self._store.get_task(task_id)
        if task is None:
            return fail(ErrorKind.NOT_FOUND, f"task {task_id} not found")

        status = self._store.get_status(status_id)
        if status is None or status.project_id != task.project_id:
            return fail(
                ErrorKind.INVALID_REFERENCE,
                f"status {status_id} does not belong to project {task.project_id}",
            )

        content = (comment or "").strip()
        if status.requires_comment and not content:
            return fail(ErrorKind.COMMENT_REQUIRED, f"moving to '{status.label}' requires a comment")
        if content and not status.allows_comment and not status.requires_comment:
            return fail(ErrorKind.COMMENT_NOT_ALLOWED, f"status '{status.label}' does not accept comments")

        old_status_id = task.status_id
        moved = self._store.put_task(task.model_copy(update={"status_id": status_id}))

        added: CommentAdded | None = None
        if content:
            stored = self._store.put_comment(
                Comment(task_id=task_id, author_id=author_id, content=content, status_id=status_id)
            )
            added = CommentAdded(
                project_id=task.project_id,
                actor_id=author_id,
                task_id=task_id,
                comment_id=stored.id,
                status_id=status_id,
            )

        logger.info(f"Moved task {task_id}: {old_status_id} -> {status_id}")
        return Ok(
            (
                moved,
                TaskStatusChanged(
                    project_id=task.project_id,
                    actor_id=author_id,
                    task_id=task_id,
                    old_status_id=old_status_id,
                    new_status_id=status_id,
                    comment_id=added.comment_id if added else None,
                ),
                added,
            )
        )

    def add(
        self,
        task_id: str,
        author_id: str,
        content: str,
    ) -> Ok[tuple[Comment, CommentAdded]] | Err[DomainError]:
        """Comment on a task; the comment records the task's current status."""
        task = self._store.get_task(task_id)
        if task is None:
            return fail(ErrorKind.NOT_FOUND, f"task {task_id} not found")

        content = content.strip()
        if not content:
            return fail(ErrorKind.VALIDATION, "comment must not be empty")

        stored = self._store.put_comment(
            Comment(task_id=task_id, author_id=author_id, content=content, status_id=task.status_id)
        )
        return Ok(
            (
                stored,
                CommentAdded(
                    project_id=task.project_id,
                    actor_id=author_id,
                    task_id=task_id,
                    comment_id=stored.id,
                    status_id=task.status_id,
                ),
            )
        )

    def list_comments(self, task_id: str) -> list[Comment]:
        return self._store.list_comments_by_task(task_id)

    def edit(
        self,
        comment_id: str,
        author_id: str,
        content: str,
        project_id: str,
    ) -> Ok[tuple[Comment, CommentEdited]] | Err[DomainError]:
        """Replace a comment's text. Only its author may do this."""
        comment = self._store.get_comment(comment_id)
        if comment is None:
            return fail(ErrorKind.NOT_FOUND, f"comment {comment_id} not found")
        if comment.author_id != author_id:
            return fail(ErrorKind.FORBIDDEN, "forbidden")

        content = content.strip()
        if not content:
            return fail(ErrorKind.VALIDATION, "comment must not be empty")

        updated = self._store.put_comment(
            comment.model_copy(update={"content": content, "updated_at": datetime.now(UTC)})
        )
        return Ok(
            (
                updated,
                CommentEdited(
                    project_id=project_id,
                    actor_id=author_id,
                    task_id=comment.task_id,
                    comment_id=comment_id,
                ),
            )
        )

    def delete(
        self,
        comment_id: str,
        author_id: str,
        project_id: str,
    ) -> Ok[CommentDeleted] | Err[DomainError]:
        """Delete a comment. Only its author may do this."""
        comment = self._store.get_comment(comment_id)
        if comment is None:
            return fail(ErrorKind.NOT_FOUND, f"comment {comment_id} not found")
        if comment.author_id != author_id:
            return fail(ErrorKind.FORBIDDEN, "forbidden")

        self._store.delete_comment(comment_id)
        return Ok(
            CommentDeleted(
                project_id=project_id,
                actor_id=author_id,
                task_id=comment.task_id,
                comment_id=comment_id,
            )
        )
