"""The store capability the core consumes.

The core never owns persistent state. It reads and writes through a
``WorkspaceStore`` and relies on ``transaction()`` for all-or-nothing
commits: every check the core makes runs inside the transaction,
immediately before the writes it guards.
"""

from collections.abc import Iterator
from contextlib import AbstractContextManager
from typing import Protocol

from orcheplan.domain.project.models import Project, ProjectMember, User
from orcheplan.domain.status.models import TaskStatus
from orcheplan.domain.task.models import Comment, Task


class WorkspaceStore(Protocol):
    """Transactional, id-keyed storage for workspace records.

    ``put_*`` methods insert or replace a record and return it as stored
    (new records get their creation ``seq``). ``delete_*`` methods are
    no-ops for missing ids. Implementations raise
    ``TransientStoreError`` when they time out or are unavailable.
    """

    def transaction(self, timeout: float | None = None) -> AbstractContextManager["WorkspaceStore"]:
        """Open an all-or-nothing unit of work.

        Any exception leaving the block, including cancellation, rolls
        back every write made inside it.
        """
        ...

    # Users

    def get_user(self, user_id: str) -> User | None: ...

    def put_user(self, user: User) -> User: ...

    def list_users(self) -> list[User]: ...

    # Projects

    def get_project(self, project_id: str) -> Project | None: ...

    def list_projects(self) -> list[Project]: ...

    def put_project(self, project: Project) -> Project: ...

    def delete_project(self, project_id: str) -> None: ...

    # Memberships

    def get_member(self, project_id: str, user_id: str) -> ProjectMember | None: ...

    def list_members(self, project_id: str) -> list[ProjectMember]: ...

    def list_memberships(self, user_id: str) -> list[ProjectMember]: ...

    def put_member(self, member: ProjectMember) -> ProjectMember: ...

    def delete_member(self, project_id: str, user_id: str) -> None: ...

    # Tasks

    def get_task(self, task_id: str) -> Task | None: ...

    def list_tasks_by_project(self, project_id: str) -> list[Task]: ...

    def put_task(self, task: Task) -> Task: ...

    def delete_task(self, task_id: str) -> None: ...

    # Statuses

    def get_status(self, status_id: str) -> TaskStatus | None: ...

    def list_statuses_by_project(self, project_id: str) -> list[TaskStatus]: ...

    def list_all_statuses(self) -> list[TaskStatus]: ...

    def put_status(self, status: TaskStatus) -> TaskStatus: ...

    def delete_status(self, status_id: str) -> None: ...

    # Comments

    def get_comment(self, comment_id: str) -> Comment | None: ...

    def list_comments_by_task(self, task_id: str) -> list[Comment]: ...

    def put_comment(self, comment: Comment) -> Comment: ...

    def delete_comment(self, comment_id: str) -> None: ...


def iter_project_comments(store: WorkspaceStore, project_id: str) -> Iterator[Comment]:
    """Every comment on every task of a project."""
    for task in store.list_tasks_by_project(project_id):
        yield from store.list_comments_by_task(task.id)
