import pytest

from orcheplan.application import Workspace
from orcheplan.config import Settings
from orcheplan.domain.access.models import Role
from orcheplan.domain.project.models import Project
from orcheplan.domain.shared.result import unwrap
from orcheplan.infrastructure import InMemoryStore


@pytest.fixture()
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture()
def workspace(store: InMemoryStore) -> Workspace:
    ws = Workspace(store, Settings(store_timeout=1.0))
    for user_id in ("alice", "bob", "carol", "dave"):
        unwrap(ws.register_user(user_id))
    return ws


@pytest.fixture()
def project(workspace: Workspace) -> Project:
    """Owned by alice; bob edits, carol views, dave is an outsider."""
    created = unwrap(workspace.create_project("alice", "Launch"))
    unwrap(workspace.add_member("alice", created.id, "bob", Role.EDITOR))
    unwrap(workspace.add_member("alice", created.id, "carol", Role.VIEWER))
    return created
