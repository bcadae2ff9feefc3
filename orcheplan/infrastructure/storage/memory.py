"""In-memory workspace store with snapshot transactions.

Records live in id-keyed dictionaries (one arena per record type). A
single re-entrant lock serializes units of work; the outermost
``transaction()`` takes a snapshot of every arena on entry and restores
it if anything escapes the block, so a failed or cancelled operation
leaves no trace. When a state file is configured, the committed state is
written to it through ``JsonStorage`` after every successful outermost
transaction and read back at construction.
"""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from orcheplan.domain.project.models import Project, ProjectMember, User
from orcheplan.domain.shared.errors import TransientStoreError
from orcheplan.domain.shared.result import Err
from orcheplan.domain.status.models import TaskStatus
from orcheplan.domain.task.models import Comment, Task
from orcheplan.infrastructure.storage.json_storage import JsonStorage

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1

R = TypeVar("R", bound=BaseModel)


class SnapshotError(Exception):
    """The state file exists but cannot be turned back into records."""


class InMemoryStore:
    """Thread-safe, transactional implementation of ``WorkspaceStore``.

    Example:
        store = InMemoryStore(state_file="~/.orcheplan/workspace.json")
        with store.transaction(timeout=5.0):
            store.put_user(User(id="alice"))
    """

    def __init__(
        self,
        state_file: str | Path | None = None,
        storage: JsonStorage | None = None,
    ) -> None:
        self._state_file = Path(state_file).expanduser() if state_file else None
        self._storage = storage or JsonStorage()
        self._lock = threading.RLock()
        self._depth = 0
        self._seq = 0
        self._users: dict[str, User] = {}
        self._projects: dict[str, Project] = {}
        self._members: dict[tuple[str, str], ProjectMember] = {}
        self._tasks: dict[str, Task] = {}
        self._statuses: dict[str, TaskStatus] = {}
        self._comments: dict[str, Comment] = {}
        self._load_state()

    # =========================================================================
    # Transactions
    # =========================================================================

    @contextmanager
    def transaction(self, timeout: float | None = None) -> Iterator["InMemoryStore"]:
        """Run a block as one all-or-nothing unit of work.

        Args:
            timeout: Seconds to wait for the store; None waits forever.

        Raises:
            TransientStoreError: The store could not be acquired in time,
                or the committed state could not be persisted.
        """
        acquired = self._lock.acquire(timeout=-1 if timeout is None else timeout)
        if not acquired:
            raise TransientStoreError(f"store busy: lock not acquired within {timeout}s")

        outermost = self._depth == 0
        snapshot = self._snapshot() if outermost else None
        self._depth += 1
        try:
            yield self
            if outermost:
                self._persist_state()
        except BaseException:
            if snapshot is not None:
                self._restore(snapshot)
                logger.info("Transaction rolled back")
            raise
        finally:
            self._depth -= 1
            self._lock.release()

    def _snapshot(self) -> dict[str, Any]:
        return {
            "seq": self._seq,
            "users": dict(self._users),
            "projects": dict(self._projects),
            "members": dict(self._members),
            "tasks": dict(self._tasks),
            "statuses": dict(self._statuses),
            "comments": dict(self._comments),
        }

    def _restore(self, snapshot: dict[str, Any]) -> None:
        self._seq = snapshot["seq"]
        self._users = snapshot["users"]
        self._projects = snapshot["projects"]
        self._members = snapshot["members"]
        self._tasks = snapshot["tasks"]
        self._statuses = snapshot["statuses"]
        self._comments = snapshot["comments"]

    def _stamp(self, record: R, existing: R | None) -> R:
        """Give new records a creation seq; keep the seq of replaced ones."""
        if existing is not None:
            if record.seq != existing.seq:  # type: ignore[attr-defined]
                return record.model_copy(update={"seq": existing.seq})  # type: ignore[attr-defined]
            return record
        self._seq += 1
        return record.model_copy(update={"seq": self._seq})

    # =========================================================================
    # Users
    # =========================================================================

    def get_user(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def put_user(self, user: User) -> User:
        with self._lock:
            stored = self._stamp(user, self._users.get(user.id))
            self._users[user.id] = stored
            return stored

    def list_users(self) -> list[User]:
        return sorted(self._users.values(), key=lambda u: u.seq)

    # =========================================================================
    # Projects
    # =========================================================================

    def get_project(self, project_id: str) -> Project | None:
        return self._projects.get(project_id)

    def list_projects(self) -> list[Project]:
        return sorted(self._projects.values(), key=lambda p: p.seq)

    def put_project(self, project: Project) -> Project:
        with self._lock:
            stored = self._stamp(project, self._projects.get(project.id))
            self._projects[project.id] = stored
            return stored

    def delete_project(self, project_id: str) -> None:
        with self._lock:
            self._projects.pop(project_id, None)

    # =========================================================================
    # Memberships
    # =========================================================================

    def get_member(self, project_id: str, user_id: str) -> ProjectMember | None:
        return self._members.get((project_id, user_id))

    def list_members(self, project_id: str) -> list[ProjectMember]:
        return sorted(
            (m for m in self._members.values() if m.project_id == project_id),
            key=lambda m: m.seq,
        )

    def list_memberships(self, user_id: str) -> list[ProjectMember]:
        return sorted(
            (m for m in self._members.values() if m.user_id == user_id),
            key=lambda m: m.seq,
        )

    def put_member(self, member: ProjectMember) -> ProjectMember:
        key = (member.project_id, member.user_id)
        with self._lock:
            stored = self._stamp(member, self._members.get(key))
            self._members[key] = stored
            return stored

    def delete_member(self, project_id: str, user_id: str) -> None:
        with self._lock:
            self._members.pop((project_id, user_id), None)

    # =========================================================================
    # Tasks
    # =========================================================================

    def get_task(self, task_id: str) -> Task | None:
        return self._tasks.get(task_id)

    def list_tasks_by_project(self, project_id: str) -> list[Task]:
        return sorted(
            (t for t in self._tasks.values() if t.project_id == project_id),
            key=lambda t: t.seq,
        )

    def put_task(self, task: Task) -> Task:
        with self._lock:
            stored = self._stamp(task, self._tasks.get(task.id))
            self._tasks[task.id] = stored
            return stored

    def delete_task(self, task_id: str) -> None:
        with self._lock:
            self._tasks.pop(task_id, None)

    # =========================================================================
    # Statuses
    # =========================================================================

    def get_status(self, status_id: str) -> TaskStatus | None:
        return self._statuses.get(status_id)

    def list_statuses_by_project(self, project_id: str) -> list[TaskStatus]:
        return sorted(
            (s for s in self._statuses.values() if s.project_id == project_id),
            key=lambda s: s.seq,
        )

    def list_all_statuses(self) -> list[TaskStatus]:
        return sorted(self._statuses.values(), key=lambda s: s.seq)

    def put_status(self, status: TaskStatus) -> TaskStatus:
        with self._lock:
            stored = self._stamp(status, self._statuses.get(status.id))
            self._statuses[status.id] = stored
            return stored

    def delete_status(self, status_id: str) -> None:
        with self._lock:
            self._statuses.pop(status_id, None)

    # =========================================================================
    # Comments
    # =========================================================================

    def get_comment(self, comment_id: str) -> Comment | None:
        return self._comments.get(comment_id)

    def list_comments_by_task(self, task_id: str) -> list[Comment]:
        return sorted(
            (c for c in self._comments.values() if c.task_id == task_id),
            key=lambda c: c.seq,
        )

    def put_comment(self, comment: Comment) -> Comment:
        with self._lock:
            stored = self._stamp(comment, self._comments.get(comment.id))
            self._comments[comment.id] = stored
            return stored

    def delete_comment(self, comment_id: str) -> None:
        with self._lock:
            self._comments.pop(comment_id, None)

    # =========================================================================
    # Persistence
    # =========================================================================

    def _persist_state(self) -> None:
        if self._state_file is None:
            return
        payload = {
            "version": SNAPSHOT_VERSION,
            "seq": self._seq,
            "users": [r.model_dump(mode="json") for r in self._users.values()],
            "projects": [r.model_dump(mode="json") for r in self._projects.values()],
            "members": [r.model_dump(mode="json") for r in self._members.values()],
            "tasks": [r.model_dump(mode="json") for r in self._tasks.values()],
            "statuses": [r.model_dump(mode="json") for r in self._statuses.values()],
            "comments": [r.model_dump(mode="json") for r in self._comments.values()],
        }
        result = self._storage.save_json(self._state_file, payload)
        if isinstance(result, Err):
            logger.error(f"Failed to persist workspace state: {result.error}")
            raise TransientStoreError(result.error)

    def _load_state(self) -> None:
        if self._state_file is None or not self._state_file.exists():
            return
        result = self._storage.load_json(self._state_file)
        if isinstance(result, Err):
            raise SnapshotError(result.error)

        data = result.value
        try:
            users = [User.model_validate(r) for r in data.get("users", [])]
            projects = [Project.model_validate(r) for r in data.get("projects", [])]
            members = [ProjectMember.model_validate(r) for r in data.get("members", [])]
            tasks = [Task.model_validate(r) for r in data.get("tasks", [])]
            statuses = [TaskStatus.model_validate(r) for r in data.get("statuses", [])]
            comments = [Comment.model_validate(r) for r in data.get("comments", [])]
        except ValidationError as e:
            raise SnapshotError(f"Invalid workspace state in {self._state_file}: {e}") from e

        self._users = {r.id: r for r in users}
        self._projects = {r.id: r for r in projects}
        self._members = {(r.project_id, r.user_id): r for r in members}
        self._tasks = {r.id: r for r in tasks}
        self._statuses = {r.id: r for r in statuses}
        self._comments = {r.id: r for r in comments}

        seqs = [r.seq for arena in (users, projects, members, tasks, statuses, comments) for r in arena]
        self._seq = max([int(data.get("seq", 0)), *seqs])
        logger.debug(
            f"Loaded workspace state from {self._state_file}: "
            f"{len(projects)} projects, {len(tasks)} tasks"
        )
