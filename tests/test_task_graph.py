import random

import pytest

from orcheplan.application import Workspace
from orcheplan.domain.project.models import Project
from orcheplan.domain.shared.errors import ErrorKind
from orcheplan.domain.shared.result import Err, is_err, is_ok, unwrap
from orcheplan.domain.task import (
    CascadePolicy,
    Task,
    TaskDeleted,
    TaskPatch,
    ancestors,
    descendants_depth_first,
    find_cycle,
    flatten_forest,
)
from orcheplan.domain.task.events import TaskReparented
from orcheplan.infrastructure import InMemoryStore


def _tree(workspace: Workspace, project: Project) -> dict[str, Task]:
    """a -> (b -> d, c)"""
    a = unwrap(workspace.create_task("bob", project.id, "a"))
    b = unwrap(workspace.create_task("bob", project.id, "b", parent_task_id=a.id))
    c = unwrap(workspace.create_task("bob", project.id, "c", parent_task_id=a.id))
    d = unwrap(workspace.create_task("bob", project.id, "d", parent_task_id=b.id))
    return {"a": a, "b": b, "c": c, "d": d}


def _has_cycle(tasks: dict[str, Task]) -> bool:
    for task in tasks.values():
        seen = set()
        current = task.id
        while current is not None:
            if current in seen:
                return True
            seen.add(current)
            parent = tasks.get(current)
            current = parent.parent_task_id if parent else None
    return False


# =============================================================================
# Pure walks
# =============================================================================


def test_find_cycle_rejects_self_and_descendants() -> None:
    a = Task(id="a", project_id="p", title="a", seq=1)
    b = Task(id="b", project_id="p", title="b", parent_task_id="a", seq=2)
    tasks = {"a": a, "b": b}

    assert is_err(find_cycle(tasks, "a", "a"))
    result = find_cycle(tasks, "a", "b")
    assert isinstance(result, Err) and result.error.kind is ErrorKind.CYCLE_DETECTED
    assert is_ok(find_cycle(tasks, "b", "a"))


def test_stored_cycle_is_reported_as_corruption() -> None:
    tasks = {
        "x": Task(id="x", project_id="p", title="x", parent_task_id="y", seq=1),
        "y": Task(id="y", project_id="p", title="y", parent_task_id="x", seq=2),
        "z": Task(id="z", project_id="p", title="z", seq=3),
    }

    walk = find_cycle(tasks, "z", "x")
    assert isinstance(walk, Err) and walk.error.kind is ErrorKind.GRAPH_CORRUPTION

    flat = flatten_forest(tasks)
    assert isinstance(flat, Err) and flat.error.kind is ErrorKind.GRAPH_CORRUPTION

    down = descendants_depth_first(tasks, "x")
    assert isinstance(down, Err) and down.error.kind is ErrorKind.GRAPH_CORRUPTION


def test_descendants_come_before_their_parents() -> None:
    tasks = {
        "a": Task(id="a", project_id="p", title="a", seq=1),
        "b": Task(id="b", project_id="p", title="b", parent_task_id="a", seq=2),
        "c": Task(id="c", project_id="p", title="c", parent_task_id="b", seq=3),
        "d": Task(id="d", project_id="p", title="d", parent_task_id="a", seq=4),
    }
    assert unwrap(descendants_depth_first(tasks, "a")) == ["c", "b", "d", "a"]


# =============================================================================
# Manager through the workspace
# =============================================================================


def test_flatten_is_preorder_with_depth(workspace: Workspace, project: Project) -> None:
    _tree(workspace, project)
    rows = unwrap(workspace.flatten_tasks("carol", project.id))
    assert [(row.task.title, row.depth) for row in rows] == [
        ("a", 0),
        ("b", 1),
        ("d", 2),
        ("c", 1),
    ]


def test_new_task_gets_the_first_status(workspace: Workspace, project: Project) -> None:
    first = unwrap(workspace.list_statuses("bob", project.id))[0]
    task = unwrap(workspace.create_task("bob", project.id, "Write docs"))
    assert first.label == "To-Do"
    assert task.status_id == first.id


def test_create_rejects_parent_from_another_project(workspace: Workspace, project: Project) -> None:
    other = unwrap(workspace.create_project("bob", "Other"))
    foreign = unwrap(workspace.create_task("bob", other.id, "foreign"))

    result = workspace.create_task("bob", project.id, "child", parent_task_id=foreign.id)
    assert isinstance(result, Err)
    assert result.error.kind is ErrorKind.INVALID_REFERENCE


def test_create_rejects_missing_parent_and_foreign_status(workspace: Workspace, project: Project) -> None:
    other = unwrap(workspace.create_project("bob", "Other"))
    foreign_status = unwrap(workspace.list_statuses("bob", other.id))[0]

    missing = workspace.create_task("bob", project.id, "t", parent_task_id="nope")
    wrong = workspace.create_task("bob", project.id, "t", status_id=foreign_status.id)
    assert isinstance(missing, Err) and missing.error.kind is ErrorKind.INVALID_REFERENCE
    assert isinstance(wrong, Err) and wrong.error.kind is ErrorKind.INVALID_REFERENCE


def test_reparent_under_descendant_is_a_cycle(workspace: Workspace, project: Project) -> None:
    t = _tree(workspace, project)

    into_grandchild = workspace.reparent_task("bob", t["a"].id, t["d"].id)
    onto_itself = workspace.reparent_task("bob", t["b"].id, t["b"].id)

    assert isinstance(into_grandchild, Err)
    assert into_grandchild.error.kind is ErrorKind.CYCLE_DETECTED
    assert isinstance(onto_itself, Err)
    assert onto_itself.error.kind is ErrorKind.CYCLE_DETECTED


def test_reparent_moves_subtree_and_refreshes_flatten(workspace: Workspace, project: Project) -> None:
    t = _tree(workspace, project)
    unwrap(workspace.flatten_tasks("bob", project.id))
    assert project.id in workspace.cache

    events = []
    workspace.subscribe(events.append)
    unwrap(workspace.reparent_task("bob", t["b"].id, t["c"].id))

    assert project.id not in workspace.cache
    rows = unwrap(workspace.flatten_tasks("bob", project.id))
    assert [(row.task.title, row.depth) for row in rows] == [
        ("a", 0),
        ("c", 1),
        ("b", 2),
        ("d", 3),
    ]
    assert isinstance(events[0], TaskReparented)
    assert events[0].old_parent_task_id == t["a"].id
    assert events[0].new_parent_task_id == t["c"].id


def test_reparent_to_root(workspace: Workspace, project: Project) -> None:
    t = _tree(workspace, project)
    unwrap(workspace.reparent_task("bob", t["d"].id, None))
    rows = unwrap(workspace.flatten_tasks("bob", project.id))
    assert [row.task.title for row in rows if row.depth == 0] == ["a", "d"]


def test_attach_checks_the_project(workspace: Workspace, project: Project) -> None:
    t = _tree(workspace, project)
    other = unwrap(workspace.create_project("bob", "Other"))

    wrong_project = workspace.attach_task("bob", t["c"].id, None, other.id)
    assert isinstance(wrong_project, Err)

    unwrap(workspace.attach_task("bob", t["c"].id, t["d"].id, project.id))
    assert unwrap(workspace.get_task("bob", t["c"].id)).parent_task_id == t["d"].id


def test_delete_with_children_is_rejected(workspace: Workspace, project: Project) -> None:
    t = _tree(workspace, project)

    result = workspace.delete_task("bob", t["a"].id, CascadePolicy.REJECT_IF_CHILDREN)
    assert isinstance(result, Err)
    assert result.error.kind is ErrorKind.HAS_CHILDREN
    assert len(unwrap(workspace.flatten_tasks("bob", project.id))) == 4

    assert unwrap(workspace.delete_task("bob", t["d"].id, CascadePolicy.REJECT_IF_CHILDREN)) == [t["d"].id]


def test_cascade_delete_is_depth_first_with_one_event_per_task(
    workspace: Workspace,
    project: Project,
) -> None:
    t = _tree(workspace, project)
    unwrap(workspace.add_comment("bob", t["d"].id, "note"))
    events = []
    workspace.subscribe(events.append)

    removed = unwrap(workspace.delete_task("bob", t["a"].id, CascadePolicy.CASCADE))

    assert removed == [t["d"].id, t["b"].id, t["c"].id, t["a"].id]
    deleted = [e for e in events if isinstance(e, TaskDeleted)]
    assert [e.task_id for e in deleted] == removed
    assert deleted[0].comment_count == 1
    assert unwrap(workspace.flatten_tasks("bob", project.id)) == []


def test_delete_policy_defaults_to_settings(workspace: Workspace, project: Project) -> None:
    t = _tree(workspace, project)
    result = workspace.delete_task("bob", t["b"].id)
    assert isinstance(result, Err)
    assert result.error.kind is ErrorKind.HAS_CHILDREN


def test_update_task_fields(workspace: Workspace, project: Project) -> None:
    task = unwrap(workspace.create_task("bob", project.id, "draft"))
    updated = unwrap(workspace.update_task("bob", task.id, TaskPatch(title="final", priority="high")))

    assert updated.title == "final"
    assert updated.priority == "high"
    assert updated.seq == task.seq
    empty = workspace.update_task("bob", task.id, TaskPatch(title="  "))
    assert isinstance(empty, Err) and empty.error.kind is ErrorKind.VALIDATION


def test_viewer_cannot_mutate_tasks(workspace: Workspace, project: Project) -> None:
    task = unwrap(workspace.create_task("bob", project.id, "t"))

    for result in (
        workspace.create_task("carol", project.id, "t2"),
        workspace.update_task("carol", task.id, TaskPatch(title="x")),
        workspace.reparent_task("carol", task.id, None),
        workspace.delete_task("carol", task.id, CascadePolicy.CASCADE),
    ):
        assert isinstance(result, Err)
        assert result.error.kind is ErrorKind.FORBIDDEN


def test_missing_task_is_forbidden(workspace: Workspace, project: Project) -> None:
    result = workspace.delete_task("bob", "nope", CascadePolicy.CASCADE)
    assert isinstance(result, Err)
    assert result.error.kind is ErrorKind.FORBIDDEN


@pytest.mark.parametrize("seed", [7, 1234, 20240601])
def test_random_reparents_never_create_a_cycle(
    store: InMemoryStore,
    workspace: Workspace,
    project: Project,
    seed: int,
) -> None:
    rng = random.Random(seed)
    ids = [unwrap(workspace.create_task("bob", project.id, f"t{i}")).id for i in range(12)]

    for _ in range(300):
        task_id = rng.choice(ids)
        parent_id = rng.choice(ids + [None])
        result = workspace.reparent_task("bob", task_id, parent_id)
        if isinstance(result, Err):
            assert result.error.kind is ErrorKind.CYCLE_DETECTED

        tasks = {t.id: t for t in store.list_tasks_by_project(project.id)}
        assert not _has_cycle(tasks)
        assert all(is_ok(ancestors(tasks, tid)) for tid in ids)

    rows = unwrap(workspace.flatten_tasks("bob", project.id))
    assert sorted(row.task.id for row in rows) == sorted(ids)


def test_ancestors_nearest_first(workspace: Workspace, project: Project, store: InMemoryStore) -> None:
    t = _tree(workspace, project)
    tasks = {task.id: task for task in store.list_tasks_by_project(project.id)}
    assert unwrap(ancestors(tasks, t["d"].id)) == [t["b"].id, t["a"].id]
    assert unwrap(ancestors(tasks, t["a"].id)) == []


def test_reparent_across_projects_leaves_the_tree_unchanged(workspace: Workspace, project: Project) -> None:
    t = _tree(workspace, project)
    other = unwrap(workspace.create_project("bob", "Other"))
    foreign = unwrap(workspace.create_task("bob", other.id, "foreign"))
    before = unwrap(workspace.flatten_tasks("bob", project.id))

    result = workspace.reparent_task("bob", t["b"].id, foreign.id)

    assert isinstance(result, Err)
    assert result.error.kind is ErrorKind.INVALID_REFERENCE
    assert unwrap(workspace.flatten_tasks("bob", project.id)) == before


def test_update_rejects_a_blank_status(workspace: Workspace, project: Project, store: InMemoryStore) -> None:
    task = unwrap(workspace.create_task("bob", project.id, "t"))

    result = workspace.update_task("bob", task.id, TaskPatch(status_id=""))

    assert isinstance(result, Err)
    assert result.error.kind is ErrorKind.INVALID_REFERENCE
    assert store.get_task(task.id).status_id == task.status_id
