"""Role Resolver.

Computes the role a user holds on a project from fresh store reads. Edit
rights are strictly per-project; the only thing the project hierarchy
contributes is visibility: a user who can see a sub-project can list its
ancestors, without gaining any role on them.
"""

import logging

from orcheplan.domain.access.models import Role
from orcheplan.domain.access.resolution import resolve_role
from orcheplan.domain.project.hierarchy import with_ancestors
from orcheplan.domain.project.models import Project
from orcheplan.domain.shared.errors import DomainError, ErrorKind, fail
from orcheplan.domain.shared.result import Err, Ok
from orcheplan.infrastructure.storage.base import WorkspaceStore

logger = logging.getLogger(__name__)


class RoleResolver:
    """Answers "what may this user do on this project" from the store.

    Nothing is cached: every call re-reads the project and the membership
    row, so a role change is visible to the very next decision.
    """

    def __init__(self, store: WorkspaceStore) -> None:
        self._store = store

    def effective_role(self, user_id: str, project_id: str) -> Ok[Role] | Err[DomainError]:
        """Resolve the user's role on a project.

        Returns:
            Ok(Role) - ``Role.NONE`` when the user has no access - or
            Err(NotFound) when the project does not exist.
        """
        project = self._store.get_project(project_id)
        if project is None:
            return fail(ErrorKind.NOT_FOUND, f"project {project_id} not found")
        if user_id == project.owner_id:
            return Ok(Role.OWNER)
        member = self._store.get_member(project_id, user_id)
        return Ok(resolve_role(user_id, project, member))

    def is_owner(self, user_id: str, project_id: str) -> bool:
        project = self._store.get_project(project_id)
        return project is not None and project.owner_id == user_id

    def is_editor_or_owner(self, user_id: str, project_id: str) -> bool:
        project = self._store.get_project(project_id)
        if project is None:
            return False
        if project.owner_id == user_id:
            return True
        member = self._store.get_member(project_id, user_id)
        return resolve_role(user_id, project, member).at_least(Role.EDITOR)

    def visible_projects(self, user_id: str) -> Ok[list[Project]] | Err[DomainError]:
        """Projects a user may list.

        The union of owned projects, directly-member projects, and every
        ancestor of either. Being able to list an ancestor grants no role
        on it.
        """
        projects = {p.id: p for p in self._store.list_projects()}
        seeds = {p.id for p in projects.values() if p.owner_id == user_id}
        seeds.update(m.project_id for m in self._store.list_memberships(user_id))

        closed = with_ancestors(projects, seeds)
        if isinstance(closed, Err):
            logger.error(f"Project hierarchy corrupted: {closed.error.message}")
            return closed
        return Ok(sorted((projects[pid] for pid in closed.value), key=lambda p: p.seq))
