"""Task Graph Manager.

Maintains the sub-task forest of each project. Every operation reads the
project's tasks fresh, validates the structural invariants (same-project
parent, no cycle, delete policy) and only then writes, so a refused call
changes nothing. Callers run these methods inside a store transaction.
"""

import logging
import threading

from orcheplan.domain.shared.errors import DomainError, ErrorKind, fail
from orcheplan.domain.shared.result import Err, Ok
from orcheplan.domain.status.ordering import first_status
from orcheplan.domain.task import (
    CascadePolicy,
    FlatTask,
    Task,
    TaskAttached,
    TaskCreated,
    TaskDeleted,
    TaskPatch,
    TaskReparented,
    TaskUpdated,
    children_of,
    descendants_depth_first,
    find_cycle,
    flatten_forest,
)
from orcheplan.infrastructure.storage.base import WorkspaceStore

logger = logging.getLogger(__name__)


class SubtreeCache:
    """Flattened task forests per project.

    Entries are dropped whenever the forest of their project changes.
    """

    def __init__(self) -> None:
        self._rows: dict[str, tuple[FlatTask, ...]] = {}
        self._lock = threading.Lock()

    def get(self, project_id: str) -> list[FlatTask] | None:
        with self._lock:
            rows = self._rows.get(project_id)
        return list(rows) if rows is not None else None

    def put(self, project_id: str, rows: list[FlatTask]) -> None:
        with self._lock:
            self._rows[project_id] = tuple(rows)

    def invalidate(self, project_id: str) -> None:
        with self._lock:
            self._rows.pop(project_id, None)

    def __contains__(self, project_id: object) -> bool:
        with self._lock:
            return project_id in self._rows


class TaskGraphManager:
    """Parent/child integrity for the tasks of each project."""

    def __init__(self, store: WorkspaceStore, cache: SubtreeCache | None = None) -> None:
        self._store = store
        self._cache = cache or SubtreeCache()

    @property
    def cache(self) -> SubtreeCache:
        return self._cache

    # =========================================================================
    # Creation and placement
    # =========================================================================

    def create(
        self,
        project_id: str,
        title: str,
        *,
        description: str = "",
        priority: str | None = None,
        parent_task_id: str | None = None,
        status_id: str | None = None,
        actor_id: str | None = None,
    ) -> Ok[tuple[Task, TaskCreated]] | Err[DomainError]:
        """Create a task, optionally under a parent.

        Without an explicit status the task enters the project's workflow at
        its lowest-order status (or none if the project has no statuses).
        """
        if self._store.get_project(project_id) is None:
            return fail(ErrorKind.NOT_FOUND, f"project {project_id} not found")

        title = title.strip()
        if not title:
            return fail(ErrorKind.VALIDATION, "task title must not be empty")

        if status_id is not None:
            status = self._store.get_status(status_id)
            if status is None or status.project_id != project_id:
                return fail(
                    ErrorKind.INVALID_REFERENCE,
                    f"status {status_id} does not belong to project {project_id}",
                )
        else:
            entry = first_status(self._store.list_statuses_by_project(project_id))
            status_id = entry.id if entry is not None else None

        task = Task(
            project_id=project_id,
            title=title,
            description=description,
            priority=priority or "normal",
            status_id=status_id,
        )
        checked = self._check_parent(task.id, project_id, parent_task_id)
        if isinstance(checked, Err):
            return checked

        stored = self._store.put_task(task.model_copy(update={"parent_task_id": parent_task_id}))
        self._cache.invalidate(project_id)
        logger.info(f"Created task {stored.id} in project {project_id}")
        return Ok(
            (
                stored,
                TaskCreated(
                    project_id=project_id,
                    actor_id=actor_id,
                    task_id=stored.id,
                    title=stored.title,
                    parent_task_id=parent_task_id,
                ),
            )
        )

    def attach(
        self,
        task_id: str,
        parent_task_id: str | None,
        project_id: str,
        actor_id: str | None = None,
    ) -> Ok[TaskAttached] | Err[DomainError]:
        """Place an existing task of ``project_id`` under a parent (or at the root)."""
        task = self._store.get_task(task_id)
        if task is None:
            return fail(ErrorKind.NOT_FOUND, f"task {task_id} not found")
        if task.project_id != project_id:
            return fail(
                ErrorKind.INVALID_REFERENCE,
                f"task {task_id} belongs to project {task.project_id}, not {project_id}",
            )

        checked = self._check_parent(task_id, project_id, parent_task_id)
        if isinstance(checked, Err):
            return checked

        self._store.put_task(task.model_copy(update={"parent_task_id": parent_task_id}))
        self._cache.invalidate(project_id)
        return Ok(
            TaskAttached(
                project_id=project_id,
                actor_id=actor_id,
                task_id=task_id,
                parent_task_id=parent_task_id,
            )
        )

    def reparent(
        self,
        task_id: str,
        new_parent_task_id: str | None,
        actor_id: str | None = None,
    ) -> Ok[TaskReparented] | Err[DomainError]:
        """Move a task under a new parent within its own project.

        The cycle check runs on every move, not just on creation.
        """
        task = self._store.get_task(task_id)
        if task is None:
            return fail(ErrorKind.NOT_FOUND, f"task {task_id} not found")

        checked = self._check_parent(task_id, task.project_id, new_parent_task_id)
        if isinstance(checked, Err):
            return checked

        old_parent = task.parent_task_id
        self._store.put_task(task.model_copy(update={"parent_task_id": new_parent_task_id}))
        self._cache.invalidate(task.project_id)
        logger.info(f"Reparented task {task_id}: {old_parent} -> {new_parent_task_id}")
        return Ok(
            TaskReparented(
                project_id=task.project_id,
                actor_id=actor_id,
                task_id=task_id,
                old_parent_task_id=old_parent,
                new_parent_task_id=new_parent_task_id,
            )
        )

    def _check_parent(
        self,
        task_id: str,
        project_id: str,
        parent_id: str | None,
    ) -> Ok[None] | Err[DomainError]:
        if parent_id is None:
            return Ok(None)

        parent = self._store.get_task(parent_id)
        if parent is None:
            return fail(ErrorKind.INVALID_REFERENCE, f"parent task {parent_id} not found")
        if parent.project_id != project_id:
            return fail(
                ErrorKind.INVALID_REFERENCE,
                f"parent task {parent_id} does not belong to project {project_id}",
            )

        tasks = {t.id: t for t in self._store.list_tasks_by_project(project_id)}
        result = find_cycle(tasks, task_id, parent_id)
        if isinstance(result, Err) and result.error.kind is ErrorKind.GRAPH_CORRUPTION:
            logger.error(f"Task graph of project {project_id} is corrupted: {result.error.message}")
        return result

    # =========================================================================
    # Updates
    # =========================================================================

    def update(
        self,
        task_id: str,
        patch: TaskPatch,
        actor_id: str | None = None,
    ) -> Ok[tuple[Task, TaskUpdated]] | Err[DomainError]:
        """Change a task's title, description, priority or status.

        A status that requires a comment cannot be entered through a plain
        update; the move operation carries the comment.
        """
        task = self._store.get_task(task_id)
        if task is None:
            return fail(ErrorKind.NOT_FOUND, f"task {task_id} not found")

        changes = patch.model_dump(include=patch.model_fields_set)
        if "title" in changes:
            title = (changes["title"] or "").strip()
            if not title:
                return fail(ErrorKind.VALIDATION, "task title must not be empty")
            changes["title"] = title
        if changes.get("description") is None:
            changes.pop("description", None)
        if changes.get("priority") is None:
            changes.pop("priority", None)
        if changes.get("status_id") is not None:
            status = self._store.get_status(changes["status_id"])
            if status is None or status.project_id != task.project_id:
                return fail(
                    ErrorKind.INVALID_REFERENCE,
                    f"status {changes['status_id']} does not belong to project {task.project_id}",
                )
            if status.requires_comment and status.id != task.status_id:
                return fail(
                    ErrorKind.COMMENT_REQUIRED,
                    f"status '{status.label}' requires a comment; move the task with one",
                )

        updated = self._store.put_task(task.model_copy(update=changes))
        self._cache.invalidate(task.project_id)
        return Ok(
            (
                updated,
                TaskUpdated(
                    project_id=task.project_id,
                    actor_id=actor_id,
                    task_id=task_id,
                    fields=sorted(changes),
                ),
            )
        )

    # =========================================================================
    # Deletion
    # =========================================================================

    def delete(
        self,
        task_id: str,
        policy: CascadePolicy,
        actor_id: str | None = None,
    ) -> Ok[list[TaskDeleted]] | Err[DomainError]:
        """Delete a task according to ``policy``.

        ``cascade`` removes the whole subtree depth-first, children before
        parents, with one event per removed task. ``reject-if-children``
        refuses unless the task is a leaf. Comments go with their task.
        """
        task = self._store.get_task(task_id)
        if task is None:
            return fail(ErrorKind.NOT_FOUND, f"task {task_id} not found")

        tasks = {t.id: t for t in self._store.list_tasks_by_project(task.project_id)}
        children = children_of(tasks, task_id)
        if policy is CascadePolicy.REJECT_IF_CHILDREN and children:
            return fail(
                ErrorKind.HAS_CHILDREN,
                f"task {task_id} has {len(children)} sub-task(s); reparent or delete them first",
            )

        order = descendants_depth_first(tasks, task_id)
        if isinstance(order, Err):
            logger.error(f"Task graph of project {task.project_id} is corrupted: {order.error.message}")
            return order

        events: list[TaskDeleted] = []
        for doomed_id in order.value:
            doomed = tasks[doomed_id]
            comments = self._store.list_comments_by_task(doomed_id)
            for comment in comments:
                self._store.delete_comment(comment.id)
            self._store.delete_task(doomed_id)
            events.append(
                TaskDeleted(
                    project_id=task.project_id,
                    actor_id=actor_id,
                    task_id=doomed_id,
                    parent_task_id=doomed.parent_task_id,
                    comment_count=len(comments),
                )
            )

        self._cache.invalidate(task.project_id)
        logger.info(f"Deleted {len(events)} task(s) rooted at {task_id} ({policy.value})")
        return Ok(events)

    # =========================================================================
    # Reads
    # =========================================================================

    def flatten(self, project_id: str) -> Ok[list[FlatTask]] | Err[DomainError]:
        """The project's tasks in display order, served from the cache when fresh."""
        cached = self._cache.get(project_id)
        if cached is not None:
            return Ok(cached)

        tasks = {t.id: t for t in self._store.list_tasks_by_project(project_id)}
        rows = flatten_forest(tasks)
        if isinstance(rows, Err):
            logger.error(f"Task graph of project {project_id} is corrupted: {rows.error.message}")
            return rows
        self._cache.put(project_id, rows.value)
        return rows
