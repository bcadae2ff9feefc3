"""Projects, the project forest and project membership."""

import logging

from orcheplan.application.status_service import StatusWorkflowRegistry
from orcheplan.application.task_service import SubtreeCache
from orcheplan.domain.access.models import Role
from orcheplan.domain.project import (
    MemberAdded,
    MemberRemoved,
    MemberRoleChanged,
    Project,
    ProjectCreated,
    ProjectDeleted,
    ProjectMember,
    ProjectUpdated,
    check_project_parent,
    subprojects_depth_first,
)
from orcheplan.domain.shared.errors import DomainError, ErrorKind, fail
from orcheplan.domain.shared.result import Err, Ok
from orcheplan.infrastructure.storage.base import WorkspaceStore

logger = logging.getLogger(__name__)


class ProjectService:
    """Project lifecycle and membership rows.

    Authorization is the caller's job; this service enforces the data
    invariants (existing parents, acyclic forest, unique memberships).
    """

    def __init__(
        self,
        store: WorkspaceStore,
        statuses: StatusWorkflowRegistry,
        cache: SubtreeCache | None = None,
    ) -> None:
        self._store = store
        self._statuses = statuses
        self._cache = cache

    # =========================================================================
    # Projects
    # =========================================================================

    def create(
        self,
        owner_id: str,
        name: str,
        *,
        description: str | None = None,
        parent_project_id: str | None = None,
    ) -> Ok[tuple[Project, ProjectCreated]] | Err[DomainError]:
        """Create a project owned by ``owner_id`` and seed its default workflow."""
        name = name.strip()
        if not name:
            return fail(ErrorKind.VALIDATION, "project name must not be empty")
        if parent_project_id is not None and self._store.get_project(parent_project_id) is None:
            return fail(ErrorKind.INVALID_REFERENCE, f"parent project {parent_project_id} not found")

        project = self._store.put_project(
            Project(
                name=name,
                description=description,
                owner_id=owner_id,
                parent_project_id=parent_project_id,
            )
        )
        self._statuses.seed_defaults(project.id)
        logger.info(f"Created project '{name}' ({project.id}) for {owner_id}")
        return Ok(
            (
                project,
                ProjectCreated(
                    project_id=project.id,
                    actor_id=owner_id,
                    name=name,
                    owner_id=owner_id,
                    parent_project_id=parent_project_id,
                ),
            )
        )

    def update(
        self,
        project_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        actor_id: str | None = None,
    ) -> Ok[tuple[Project, ProjectUpdated]] | Err[DomainError]:
        project = self._store.get_project(project_id)
        if project is None:
            return fail(ErrorKind.NOT_FOUND, f"project {project_id} not found")

        changes: dict[str, str] = {}
        if name is not None:
            name = name.strip()
            if not name:
                return fail(ErrorKind.VALIDATION, "project name must not be empty")
            changes["name"] = name
        if description is not None:
            changes["description"] = description

        updated = self._store.put_project(project.model_copy(update=changes))
        return Ok(
            (
                updated,
                ProjectUpdated(project_id=project_id, actor_id=actor_id, fields=sorted(changes)),
            )
        )

    def move(
        self,
        project_id: str,
        new_parent_id: str | None,
        actor_id: str | None = None,
    ) -> Ok[tuple[Project, ProjectUpdated]] | Err[DomainError]:
        """Place a project under another one, or make it a root."""
        project = self._store.get_project(project_id)
        if project is None:
            return fail(ErrorKind.NOT_FOUND, f"project {project_id} not found")

        projects = {p.id: p for p in self._store.list_projects()}
        checked = check_project_parent(projects, project_id, new_parent_id)
        if isinstance(checked, Err):
            if checked.error.kind is ErrorKind.GRAPH_CORRUPTION:
                logger.error(f"Project hierarchy corrupted: {checked.error.message}")
            return checked

        updated = self._store.put_project(project.model_copy(update={"parent_project_id": new_parent_id}))
        logger.info(f"Moved project {project_id}: {project.parent_project_id} -> {new_parent_id}")
        return Ok(
            (
                updated,
                ProjectUpdated(project_id=project_id, actor_id=actor_id, fields=["parent_project_id"]),
            )
        )

    def delete(self, project_id: str, actor_id: str | None = None) -> Ok[list[ProjectDeleted]] | Err[DomainError]:
        """Delete a project together with its sub-projects, deepest first.

        Each removed project takes its tasks, comments, statuses and
        membership rows with it.
        """
        if self._store.get_project(project_id) is None:
            return fail(ErrorKind.NOT_FOUND, f"project {project_id} not found")

        projects = {p.id: p for p in self._store.list_projects()}
        order = subprojects_depth_first(projects, project_id)
        if isinstance(order, Err):
            logger.error(f"Project hierarchy corrupted: {order.error.message}")
            return order

        events = [self._delete_one(doomed_id, actor_id) for doomed_id in order.value]
        logger.info(f"Deleted project {project_id} and {len(events) - 1} sub-project(s)")
        return Ok(events)

    def _delete_one(self, project_id: str, actor_id: str | None) -> ProjectDeleted:
        tasks = self._store.list_tasks_by_project(project_id)
        for task in tasks:
            for comment in self._store.list_comments_by_task(task.id):
                self._store.delete_comment(comment.id)
            self._store.delete_task(task.id)

        statuses = self._store.list_statuses_by_project(project_id)
        for status in statuses:
            self._store.delete_status(status.id)

        members = self._store.list_members(project_id)
        for member in members:
            self._store.delete_member(project_id, member.user_id)

        self._store.delete_project(project_id)
        if self._cache is not None:
            self._cache.invalidate(project_id)
        return ProjectDeleted(
            project_id=project_id,
            actor_id=actor_id,
            task_count=len(tasks),
            status_count=len(statuses),
            member_count=len(members),
        )

    # =========================================================================
    # Members
    # =========================================================================

    def add_member(
        self,
        project_id: str,
        user_id: str,
        role: Role,
        actor_id: str | None = None,
    ) -> Ok[tuple[ProjectMember, MemberAdded]] | Err[DomainError]:
        project = self._store.get_project(project_id)
        if project is None:
            return fail(ErrorKind.NOT_FOUND, f"project {project_id} not found")
        if role is Role.NONE:
            return fail(ErrorKind.VALIDATION, "role must be one of owner, editor, viewer")
        if self._store.get_user(user_id) is None:
            return fail(ErrorKind.NOT_FOUND, f"user {user_id} not found")
        if user_id == project.owner_id:
            return fail(ErrorKind.CONFLICT, f"user {user_id} already owns project {project_id}")
        if self._store.get_member(project_id, user_id) is not None:
            return fail(ErrorKind.CONFLICT, f"user {user_id} is already a member of {project_id}")

        member = self._store.put_member(ProjectMember(project_id=project_id, user_id=user_id, role=role))
        logger.info(f"Added {user_id} to project {project_id} as {role.value}")
        return Ok(
            (
                member,
                MemberAdded(project_id=project_id, actor_id=actor_id, user_id=user_id, role=role),
            )
        )

    def update_member_role(
        self,
        project_id: str,
        user_id: str,
        role: Role,
        actor_id: str | None = None,
    ) -> Ok[tuple[ProjectMember, MemberRoleChanged]] | Err[DomainError]:
        if role is Role.NONE:
            return fail(ErrorKind.VALIDATION, "role must be one of owner, editor, viewer")
        member = self._store.get_member(project_id, user_id)
        if member is None:
            return fail(ErrorKind.NOT_FOUND, f"user {user_id} is not a member of {project_id}")

        updated = self._store.put_member(member.model_copy(update={"role": role}))
        return Ok(
            (
                updated,
                MemberRoleChanged(
                    project_id=project_id,
                    actor_id=actor_id,
                    user_id=user_id,
                    old_role=member.role,
                    new_role=role,
                ),
            )
        )

    def remove_member(
        self,
        project_id: str,
        user_id: str,
        actor_id: str | None = None,
    ) -> Ok[MemberRemoved] | Err[DomainError]:
        if self._store.get_member(project_id, user_id) is None:
            return fail(ErrorKind.NOT_FOUND, f"user {user_id} is not a member of {project_id}")
        self._store.delete_member(project_id, user_id)
        logger.info(f"Removed {user_id} from project {project_id}")
        return Ok(MemberRemoved(project_id=project_id, actor_id=actor_id, user_id=user_id))

    def list_members(self, project_id: str) -> list[ProjectMember]:
        return self._store.list_members(project_id)
