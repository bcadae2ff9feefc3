from orcheplan.application import Workspace
from orcheplan.domain.access.models import Role
from orcheplan.domain.project import ProjectCreated, ProjectDeleted
from orcheplan.domain.project.models import Project
from orcheplan.domain.shared.errors import ErrorKind
from orcheplan.domain.shared.result import Err, Ok, unwrap
from orcheplan.domain.task import CascadePolicy
from orcheplan.infrastructure import InMemoryStore


def test_create_project_emits_event(workspace: Workspace) -> None:
    events = []
    workspace.subscribe(events.append)

    project = unwrap(workspace.create_project("dave", "  Side quest  ", description="fun"))

    assert project.name == "Side quest"
    assert project.owner_id == "dave"
    assert isinstance(events[0], ProjectCreated)
    assert events[0].project_id == project.id


def test_unregistered_user_cannot_create_projects(workspace: Workspace) -> None:
    result = workspace.create_project("mallory", "Nope")
    assert isinstance(result, Err)
    assert result.error.kind is ErrorKind.FORBIDDEN


def test_subproject_needs_editor_on_parent(workspace: Workspace, project: Project) -> None:
    assert isinstance(workspace.create_project("bob", "Sub", parent_project_id=project.id), Ok)

    denied = workspace.create_project("carol", "Sub", parent_project_id=project.id)
    assert isinstance(denied, Err)
    assert denied.error.kind is ErrorKind.FORBIDDEN


def test_update_project_needs_editor(workspace: Workspace, project: Project) -> None:
    renamed = unwrap(workspace.update_project("bob", project.id, name="Relaunch"))
    assert renamed.name == "Relaunch"
    assert isinstance(workspace.update_project("carol", project.id, name="x"), Err)


def test_move_project_rejects_cycles(workspace: Workspace) -> None:
    root = unwrap(workspace.create_project("alice", "Root"))
    child = unwrap(workspace.create_project("alice", "Child", parent_project_id=root.id))
    grandchild = unwrap(workspace.create_project("alice", "Grandchild", parent_project_id=child.id))

    into_descendant = workspace.move_project("alice", root.id, grandchild.id)
    onto_itself = workspace.move_project("alice", root.id, root.id)
    assert isinstance(into_descendant, Err)
    assert into_descendant.error.kind is ErrorKind.CYCLE_DETECTED
    assert isinstance(onto_itself, Err)
    assert onto_itself.error.kind is ErrorKind.CYCLE_DETECTED

    moved = unwrap(workspace.move_project("alice", grandchild.id, None))
    assert moved.parent_project_id is None


def test_move_project_needs_owner_and_editor_on_target(workspace: Workspace, project: Project) -> None:
    bobs = unwrap(workspace.create_project("bob", "Bob's"))
    carols = unwrap(workspace.create_project("carol", "Carol's"))

    assert isinstance(workspace.move_project("bob", project.id, bobs.id), Err)
    assert isinstance(workspace.move_project("bob", bobs.id, carols.id), Err)
    assert isinstance(workspace.move_project("bob", bobs.id, project.id), Ok)


def test_delete_project_cascades(store: InMemoryStore, workspace: Workspace, project: Project) -> None:
    sub = unwrap(workspace.create_project("alice", "Sub", parent_project_id=project.id))
    parent = unwrap(workspace.create_task("bob", project.id, "parent"))
    child = unwrap(workspace.create_task("bob", project.id, "child", parent_task_id=parent.id))
    comment = unwrap(workspace.add_comment("bob", child.id, "hi"))
    sub_task = unwrap(workspace.create_task("alice", sub.id, "sub task"))
    events = []
    workspace.subscribe(events.append)

    assert unwrap(workspace.delete_project("alice", project.id)) == 2

    deleted = [e for e in events if isinstance(e, ProjectDeleted)]
    assert [e.project_id for e in deleted] == [sub.id, project.id]
    assert deleted[1].task_count == 2
    assert deleted[1].status_count == 4
    assert deleted[1].member_count == 2
    assert store.list_projects() == []
    assert store.get_task(sub_task.id) is None
    assert store.get_comment(comment.id) is None
    assert store.list_all_statuses() == []
    assert store.list_memberships("bob") == []


def test_delete_project_needs_owner(workspace: Workspace, project: Project) -> None:
    result = workspace.delete_project("bob", project.id)
    assert isinstance(result, Err)
    assert result.error.kind is ErrorKind.FORBIDDEN


def test_failed_operation_leaves_no_trace(store: InMemoryStore, workspace: Workspace, project: Project) -> None:
    task = unwrap(workspace.create_task("bob", project.id, "t"))
    before = store.list_tasks_by_project(project.id)

    result = workspace.delete_task("carol", task.id, CascadePolicy.CASCADE)

    assert isinstance(result, Err)
    assert store.list_tasks_by_project(project.id) == before


# =============================================================================
# Members
# =============================================================================


def test_add_member_rules(workspace: Workspace, project: Project) -> None:
    duplicate = workspace.add_member("alice", project.id, "bob", Role.VIEWER)
    owner = workspace.add_member("alice", project.id, "alice", Role.EDITOR)
    unknown = workspace.add_member("alice", project.id, "mallory", Role.VIEWER)
    by_editor = workspace.add_member("bob", project.id, "dave", Role.VIEWER)
    no_role = workspace.add_member("alice", project.id, "dave", Role.NONE)

    assert isinstance(duplicate, Err) and duplicate.error.kind is ErrorKind.CONFLICT
    assert isinstance(owner, Err) and owner.error.kind is ErrorKind.CONFLICT
    assert isinstance(unknown, Err) and unknown.error.kind is ErrorKind.NOT_FOUND
    assert isinstance(by_editor, Err) and by_editor.error.kind is ErrorKind.FORBIDDEN
    assert isinstance(no_role, Err) and no_role.error.kind is ErrorKind.VALIDATION


def test_list_and_update_members(workspace: Workspace, project: Project) -> None:
    members = unwrap(workspace.list_members("carol", project.id))
    assert [(m.user_id, m.role) for m in members] == [("bob", Role.EDITOR), ("carol", Role.VIEWER)]

    updated = unwrap(workspace.update_member_role("alice", project.id, "bob", Role.VIEWER))
    assert updated.role is Role.VIEWER

    missing = workspace.update_member_role("alice", project.id, "dave", Role.EDITOR)
    assert isinstance(missing, Err) and missing.error.kind is ErrorKind.NOT_FOUND


def test_remove_member(workspace: Workspace, project: Project) -> None:
    unwrap(workspace.remove_member("alice", project.id, "carol"))
    assert [m.user_id for m in unwrap(workspace.list_members("bob", project.id))] == ["bob"]

    again = workspace.remove_member("alice", project.id, "carol")
    assert isinstance(again, Err) and again.error.kind is ErrorKind.NOT_FOUND
