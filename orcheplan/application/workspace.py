"""Workspace facade.

The in-process API a front end embeds. Every call is one unit of work:
it opens a store transaction, authorizes the actor inside it, performs
the change through the managers (which re-check their invariants right
before writing) and commits. Domain events are handed to subscribers
only after the transaction has committed.

Example:
    workspace = Workspace(InMemoryStore())
    workspace.register_user("alice")
    project = unwrap(workspace.create_project("alice", "Launch"))
    task = unwrap(workspace.create_task("alice", project.id, "Write docs"))
"""

import logging
from collections.abc import Callable, Sequence
from contextlib import AbstractContextManager

from orcheplan.application.comment_service import CommentService
from orcheplan.application.gateway import AuthorizationGateway
from orcheplan.application.project_service import ProjectService
from orcheplan.application.role_resolver import RoleResolver
from orcheplan.application.status_service import StatusWorkflowRegistry
from orcheplan.application.task_service import SubtreeCache, TaskGraphManager
from orcheplan.config import Settings
from orcheplan.domain.access.models import Denial, Grant, Operation, Role
from orcheplan.domain.project.models import Project, ProjectMember, User
from orcheplan.domain.shared.errors import DomainError, ErrorKind, fail
from orcheplan.domain.shared.events import DomainEvent
from orcheplan.domain.shared.result import Err, Ok, map_result
from orcheplan.domain.status.events import StatusColorBackfilled
from orcheplan.domain.status.models import OnInUse, StatusFlags, StatusPatch, TaskStatus
from orcheplan.domain.task.models import CascadePolicy, Comment, FlatTask, Task, TaskPatch
from orcheplan.infrastructure.storage.base import WorkspaceStore
from orcheplan.infrastructure.storage.memory import InMemoryStore

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


def _forbidden() -> Err[DomainError]:
    return fail(ErrorKind.FORBIDDEN, "forbidden")


class Workspace:
    """Authorized, transactional access to one workspace store."""

    def __init__(self, store: WorkspaceStore, settings: Settings | None = None) -> None:
        self._store = store
        self._settings = settings or Settings()
        self._handlers: list[EventHandler] = []

        self.cache = SubtreeCache()
        self.resolver = RoleResolver(store)
        self.gateway = AuthorizationGateway(self.resolver)
        self.tasks = TaskGraphManager(store, self.cache)
        self.statuses = StatusWorkflowRegistry(store)
        self.projects = ProjectService(store, self.statuses, self.cache)
        self.comments = CommentService(store)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Workspace":
        """Open the workspace persisted at ``settings.state_file``."""
        return cls(InMemoryStore(state_file=settings.state_file), settings)

    @property
    def settings(self) -> Settings:
        return self._settings

    # =========================================================================
    # Events
    # =========================================================================

    def subscribe(self, handler: EventHandler) -> None:
        """Receive every event of every committed operation."""
        self._handlers.append(handler)

    def _publish(self, events: Sequence[DomainEvent | None]) -> None:
        for event in events:
            if event is None:
                continue
            logger.debug(f"{type(event).__name__} on project {event.project_id}")
            for handler in self._handlers:
                handler(event)

    def _transaction(self) -> AbstractContextManager[WorkspaceStore]:
        return self._store.transaction(timeout=self._settings.store_timeout)

    # =========================================================================
    # Users and authorization
    # =========================================================================

    def register_user(self, user_id: str, name: str = "", email: str | None = None) -> Ok[User] | Err[DomainError]:
        user_id = user_id.strip()
        if not user_id:
            return fail(ErrorKind.VALIDATION, "user id must not be empty")
        with self._transaction():
            if self._store.get_user(user_id) is not None:
                return fail(ErrorKind.CONFLICT, f"user {user_id} already exists")
            user = self._store.put_user(User(id=user_id, name=name or user_id, email=email))
        logger.info(f"Registered user {user_id}")
        return Ok(user)

    def list_users(self) -> list[User]:
        with self._transaction():
            return self._store.list_users()

    def authorize(self, actor_id: str, project_id: str, required: Role) -> Ok[Grant] | Err[Denial]:
        """Decide a request directly, with the precise denial reason."""
        with self._transaction():
            return self.gateway.authorize(actor_id, project_id, required)

    def effective_role(self, actor_id: str, project_id: str) -> Ok[Role] | Err[DomainError]:
        """The actor's role on a project; Forbidden when they have none."""
        with self._transaction():
            granted = self.gateway.require(actor_id, project_id, Operation.VIEW_PROJECT)
            return map_result(granted, lambda grant: grant.role)

    def _task_project(self, task_id: str) -> str | None:
        task = self._store.get_task(task_id)
        return task.project_id if task is not None else None

    def _status_project(self, status_id: str) -> str | None:
        status = self._store.get_status(status_id)
        return status.project_id if status is not None else None

    def _comment_project(self, comment_id: str) -> str | None:
        comment = self._store.get_comment(comment_id)
        if comment is None:
            return None
        return self._task_project(comment.task_id)

    # =========================================================================
    # Projects
    # =========================================================================

    def create_project(
        self,
        actor_id: str,
        name: str,
        *,
        description: str | None = None,
        parent_project_id: str | None = None,
    ) -> Ok[Project] | Err[DomainError]:
        """Create a project owned by the actor.

        Any registered user may create a root project; a sub-project needs
        editor rights on its parent.
        """
        with self._transaction():
            if self._store.get_user(actor_id) is None:
                return _forbidden()
            if parent_project_id is not None:
                granted = self.gateway.require(actor_id, parent_project_id, Operation.CREATE_SUBPROJECT)
                if isinstance(granted, Err):
                    return granted
            result = self.projects.create(
                actor_id,
                name,
                description=description,
                parent_project_id=parent_project_id,
            )
            if isinstance(result, Err):
                return result
        project, event = result.value
        self._publish([event])
        return Ok(project)

    def get_project(self, actor_id: str, project_id: str) -> Ok[Project] | Err[DomainError]:
        with self._transaction():
            granted = self.gateway.require(actor_id, project_id, Operation.VIEW_PROJECT)
            if isinstance(granted, Err):
                return granted
            project = self._store.get_project(project_id)
        return Ok(project)

    def list_projects(self, actor_id: str) -> Ok[list[Project]] | Err[DomainError]:
        """Projects the actor owns or belongs to, plus their ancestors."""
        with self._transaction():
            return self.resolver.visible_projects(actor_id)

    def update_project(
        self,
        actor_id: str,
        project_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
    ) -> Ok[Project] | Err[DomainError]:
        with self._transaction():
            granted = self.gateway.require(actor_id, project_id, Operation.UPDATE_PROJECT)
            if isinstance(granted, Err):
                return granted
            result = self.projects.update(project_id, name=name, description=description, actor_id=actor_id)
            if isinstance(result, Err):
                return result
        project, event = result.value
        self._publish([event])
        return Ok(project)

    def move_project(
        self,
        actor_id: str,
        project_id: str,
        new_parent_id: str | None,
    ) -> Ok[Project] | Err[DomainError]:
        """Re-home a project; needs owner on it and editor on the new parent."""
        with self._transaction():
            granted = self.gateway.require(actor_id, project_id, Operation.MOVE_PROJECT)
            if isinstance(granted, Err):
                return granted
            if new_parent_id is not None:
                parent_granted = self.gateway.require(actor_id, new_parent_id, Operation.CREATE_SUBPROJECT)
                if isinstance(parent_granted, Err):
                    return parent_granted
            result = self.projects.move(project_id, new_parent_id, actor_id=actor_id)
            if isinstance(result, Err):
                return result
        project, event = result.value
        self._publish([event])
        return Ok(project)

    def delete_project(self, actor_id: str, project_id: str) -> Ok[int] | Err[DomainError]:
        """Delete a project and everything below it.

        Returns:
            Ok(number of projects removed) or Err.
        """
        with self._transaction():
            granted = self.gateway.require(actor_id, project_id, Operation.DELETE_PROJECT)
            if isinstance(granted, Err):
                return granted
            result = self.projects.delete(project_id, actor_id=actor_id)
            if isinstance(result, Err):
                return result
        self._publish(result.value)
        return Ok(len(result.value))

    # =========================================================================
    # Members
    # =========================================================================

    def add_member(
        self,
        actor_id: str,
        project_id: str,
        user_id: str,
        role: Role,
    ) -> Ok[ProjectMember] | Err[DomainError]:
        with self._transaction():
            granted = self.gateway.require(actor_id, project_id, Operation.ADD_MEMBER)
            if isinstance(granted, Err):
                return granted
            result = self.projects.add_member(project_id, user_id, role, actor_id=actor_id)
            if isinstance(result, Err):
                return result
        member, event = result.value
        self._publish([event])
        return Ok(member)

    def update_member_role(
        self,
        actor_id: str,
        project_id: str,
        user_id: str,
        role: Role,
    ) -> Ok[ProjectMember] | Err[DomainError]:
        with self._transaction():
            granted = self.gateway.require(actor_id, project_id, Operation.UPDATE_MEMBER)
            if isinstance(granted, Err):
                return granted
            result = self.projects.update_member_role(project_id, user_id, role, actor_id=actor_id)
            if isinstance(result, Err):
                return result
        member, event = result.value
        self._publish([event])
        return Ok(member)

    def remove_member(self, actor_id: str, project_id: str, user_id: str) -> Ok[None] | Err[DomainError]:
        with self._transaction():
            granted = self.gateway.require(actor_id, project_id, Operation.REMOVE_MEMBER)
            if isinstance(granted, Err):
                return granted
            result = self.projects.remove_member(project_id, user_id, actor_id=actor_id)
            if isinstance(result, Err):
                return result
        self._publish([result.value])
        return Ok(None)

    def list_members(self, actor_id: str, project_id: str) -> Ok[list[ProjectMember]] | Err[DomainError]:
        with self._transaction():
            granted = self.gateway.require(actor_id, project_id, Operation.LIST_MEMBERS)
            if isinstance(granted, Err):
                return granted
            return Ok(self.projects.list_members(project_id))

    # =========================================================================
    # Tasks
    # =========================================================================

    def create_task(
        self,
        actor_id: str,
        project_id: str,
        title: str,
        *,
        description: str = "",
        priority: str | None = None,
        parent_task_id: str | None = None,
        status_id: str | None = None,
    ) -> Ok[Task] | Err[DomainError]:
        with self._transaction():
            granted = self.gateway.require(actor_id, project_id, Operation.CREATE_TASK)
            if isinstance(granted, Err):
                return granted
            result = self.tasks.create(
                project_id,
                title,
                description=description,
                priority=priority,
                parent_task_id=parent_task_id,
                status_id=status_id,
                actor_id=actor_id,
            )
            if isinstance(result, Err):
                return result
        task, event = result.value
        self._publish([event])
        return Ok(task)

    def get_task(self, actor_id: str, task_id: str) -> Ok[Task] | Err[DomainError]:
        with self._transaction():
            project_id = self._task_project(task_id)
            if project_id is None:
                return _forbidden()
            granted = self.gateway.require(actor_id, project_id, Operation.LIST_TASKS)
            if isinstance(granted, Err):
                return granted
            task = self._store.get_task(task_id)
        return Ok(task)

    def update_task(self, actor_id: str, task_id: str, patch: TaskPatch) -> Ok[Task] | Err[DomainError]:
        with self._transaction():
            project_id = self._task_project(task_id)
            if project_id is None:
                return _forbidden()
            granted = self.gateway.require(actor_id, project_id, Operation.UPDATE_TASK)
            if isinstance(granted, Err):
                return granted
            result = self.tasks.update(task_id, patch, actor_id=actor_id)
            if isinstance(result, Err):
                return result
        task, event = result.value
        self._publish([event])
        return Ok(task)

    def attach_task(
        self,
        actor_id: str,
        task_id: str,
        parent_task_id: str | None,
        project_id: str,
    ) -> Ok[None] | Err[DomainError]:
        """Place a task of ``project_id`` under a parent, or at the root."""
        with self._transaction():
            granted = self.gateway.require(actor_id, project_id, Operation.UPDATE_TASK)
            if isinstance(granted, Err):
                return granted
            result = self.tasks.attach(task_id, parent_task_id, project_id, actor_id=actor_id)
            if isinstance(result, Err):
                return result
        self._publish([result.value])
        return Ok(None)

    def reparent_task(
        self,
        actor_id: str,
        task_id: str,
        new_parent_task_id: str | None,
    ) -> Ok[None] | Err[DomainError]:
        with self._transaction():
            project_id = self._task_project(task_id)
            if project_id is None:
                return _forbidden()
            granted = self.gateway.require(actor_id, project_id, Operation.UPDATE_TASK)
            if isinstance(granted, Err):
                return granted
            result = self.tasks.reparent(task_id, new_parent_task_id, actor_id=actor_id)
            if isinstance(result, Err):
                return result
        self._publish([result.value])
        return Ok(None)

    def delete_task(
        self,
        actor_id: str,
        task_id: str,
        policy: CascadePolicy | None = None,
    ) -> Ok[list[str]] | Err[DomainError]:
        """Delete a task, falling back to the configured policy.

        Returns:
            Ok(ids of the removed tasks, children first) or Err.
        """
        policy = policy or self._settings.task_delete_policy
        with self._transaction():
            project_id = self._task_project(task_id)
            if project_id is None:
                return _forbidden()
            granted = self.gateway.require(actor_id, project_id, Operation.DELETE_TASK)
            if isinstance(granted, Err):
                return granted
            result = self.tasks.delete(task_id, policy, actor_id=actor_id)
            if isinstance(result, Err):
                return result
        self._publish(result.value)
        return Ok([event.task_id for event in result.value])

    def flatten_tasks(self, actor_id: str, project_id: str) -> Ok[list[FlatTask]] | Err[DomainError]:
        """The project's task forest as display rows (pre-order with depth)."""
        with self._transaction():
            granted = self.gateway.require(actor_id, project_id, Operation.LIST_TASKS)
            if isinstance(granted, Err):
                return granted
            return self.tasks.flatten(project_id)

    def move_task(
        self,
        actor_id: str,
        task_id: str,
        status_id: str,
        comment: str | None = None,
    ) -> Ok[Task] | Err[DomainError]:
        """Change a task's status, with the comment the status may demand."""
        with self._transaction():
            project_id = self._task_project(task_id)
            if project_id is None:
                return _forbidden()
            granted = self.gateway.require(actor_id, project_id, Operation.MOVE_TASK)
            if isinstance(granted, Err):
                return granted
            result = self.comments.move_task(task_id, status_id, actor_id, comment)
            if isinstance(result, Err):
                return result
            self.cache.invalidate(project_id)
        task, moved, added = result.value
        self._publish([moved, added])
        return Ok(task)

    # =========================================================================
    # Comments
    # =========================================================================

    def add_comment(self, actor_id: str, task_id: str, content: str) -> Ok[Comment] | Err[DomainError]:
        with self._transaction():
            project_id = self._task_project(task_id)
            if project_id is None:
                return _forbidden()
            granted = self.gateway.require(actor_id, project_id, Operation.ADD_COMMENT)
            if isinstance(granted, Err):
                return granted
            result = self.comments.add(task_id, actor_id, content)
            if isinstance(result, Err):
                return result
        comment, event = result.value
        self._publish([event])
        return Ok(comment)

    def list_comments(self, actor_id: str, task_id: str) -> Ok[list[Comment]] | Err[DomainError]:
        with self._transaction():
            project_id = self._task_project(task_id)
            if project_id is None:
                return _forbidden()
            granted = self.gateway.require(actor_id, project_id, Operation.LIST_COMMENTS)
            if isinstance(granted, Err):
                return granted
            return Ok(self.comments.list_comments(task_id))

    def edit_comment(self, actor_id: str, comment_id: str, content: str) -> Ok[Comment] | Err[DomainError]:
        with self._transaction():
            project_id = self._comment_project(comment_id)
            if project_id is None:
                return _forbidden()
            granted = self.gateway.require(actor_id, project_id, Operation.ADD_COMMENT)
            if isinstance(granted, Err):
                return granted
            result = self.comments.edit(comment_id, actor_id, content, project_id)
            if isinstance(result, Err):
                return result
        comment, event = result.value
        self._publish([event])
        return Ok(comment)

    def delete_comment(self, actor_id: str, comment_id: str) -> Ok[None] | Err[DomainError]:
        with self._transaction():
            project_id = self._comment_project(comment_id)
            if project_id is None:
                return _forbidden()
            granted = self.gateway.require(actor_id, project_id, Operation.ADD_COMMENT)
            if isinstance(granted, Err):
                return granted
            result = self.comments.delete(comment_id, actor_id, project_id)
            if isinstance(result, Err):
                return result
        self._publish([result.value])
        return Ok(None)

    # =========================================================================
    # Statuses
    # =========================================================================

    def create_status(
        self,
        actor_id: str,
        project_id: str,
        label: str,
        *,
        order: int | None = None,
        color: str | None = None,
        flags: StatusFlags | None = None,
    ) -> Ok[TaskStatus] | Err[DomainError]:
        with self._transaction():
            granted = self.gateway.require(actor_id, project_id, Operation.CREATE_STATUS)
            if isinstance(granted, Err):
                return granted
            result = self.statuses.create(
                project_id,
                label,
                order=order,
                color=color,
                flags=flags,
                actor_id=actor_id,
            )
            if isinstance(result, Err):
                return result
        status, event = result.value
        self._publish([event])
        return Ok(status)

    def update_status(self, actor_id: str, status_id: str, patch: StatusPatch) -> Ok[TaskStatus] | Err[DomainError]:
        with self._transaction():
            project_id = self._status_project(status_id)
            if project_id is None:
                return _forbidden()
            granted = self.gateway.require(actor_id, project_id, Operation.UPDATE_STATUS)
            if isinstance(granted, Err):
                return granted
            result = self.statuses.update(status_id, patch, actor_id=actor_id)
            if isinstance(result, Err):
                return result
        status, event = result.value
        self._publish([event])
        return Ok(status)

    def delete_status(self, actor_id: str, status_id: str, on_in_use: OnInUse) -> Ok[list[str]] | Err[DomainError]:
        """Delete a status.

        Returns:
            Ok(ids of the tasks moved to the fallback) or Err.
        """
        with self._transaction():
            project_id = self._status_project(status_id)
            if project_id is None:
                return _forbidden()
            granted = self.gateway.require(actor_id, project_id, Operation.DELETE_STATUS)
            if isinstance(granted, Err):
                return granted
            result = self.statuses.delete(status_id, on_in_use, actor_id=actor_id)
            if isinstance(result, Err):
                return result
            self.cache.invalidate(project_id)
        self._publish([result.value])
        return Ok(result.value.reassigned_task_ids)

    def reorder_statuses(
        self,
        actor_id: str,
        project_id: str,
        moves: list[tuple[str, int]],
    ) -> Ok[list[TaskStatus]] | Err[DomainError]:
        """Apply several order changes at once; returns the new workflow."""
        with self._transaction():
            granted = self.gateway.require(actor_id, project_id, Operation.REORDER_STATUSES)
            if isinstance(granted, Err):
                return granted
            result = self.statuses.reorder(project_id, moves, actor_id=actor_id)
            if isinstance(result, Err):
                return result
            ordered = self.statuses.list_statuses(project_id)
        self._publish([result.value])
        return Ok(ordered)

    def list_statuses(self, actor_id: str, project_id: str) -> Ok[list[TaskStatus]] | Err[DomainError]:
        with self._transaction():
            granted = self.gateway.require(actor_id, project_id, Operation.LIST_STATUSES)
            if isinstance(granted, Err):
                return granted
            return Ok(self.statuses.list_statuses(project_id))

    def backfill_status_colors(self) -> list[StatusColorBackfilled]:
        """Maintenance: derive colours for statuses stored without one."""
        with self._transaction():
            events = self.statuses.backfill_colors()
        self._publish(events)
        return events
