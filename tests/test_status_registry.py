import pytest

from orcheplan.application import Workspace
from orcheplan.domain.project.models import Project
from orcheplan.domain.shared.errors import ErrorKind
from orcheplan.domain.shared.result import Err, unwrap
from orcheplan.domain.status import (
    DEFAULT_COLOR,
    DONE_COLOR,
    IN_PROGRESS_COLOR,
    REMOVE_COLOR,
    TODO_COLOR,
    Reassign,
    Reject,
    StatusPatch,
    TaskStatus,
    is_valid_color,
    is_valid_label,
    pick_color_for_label,
)
from orcheplan.infrastructure import InMemoryStore


@pytest.mark.parametrize(
    ("label", "color"),
    [
        (None, DEFAULT_COLOR),
        ("", DEFAULT_COLOR),
        ("To-Do", TODO_COLOR),
        (" todo ", TODO_COLOR),
        ("to do", TODO_COLOR),
        ("Todo later", DEFAULT_COLOR),
        (" In Progress ", IN_PROGRESS_COLOR),
        ("in-progress review", IN_PROGRESS_COLOR),
        ("Done", DONE_COLOR),
        ("Almost done", DONE_COLOR),
        ("Done and Remove", DONE_COLOR),
        ("Archived", REMOVE_COLOR),
        ("To delete", REMOVE_COLOR),
        ("Blocked", DEFAULT_COLOR),
    ],
)
def test_pick_color_for_label(label: str | None, color: str) -> None:
    assert pick_color_for_label(label) == color


def test_label_and_color_validation() -> None:
    assert is_valid_label("Won't fix - v1.2")
    assert not is_valid_label("")
    assert not is_valid_label("x" * 51)
    assert not is_valid_label("bad/label")
    assert is_valid_color("#fff")
    assert is_valid_color("#22C55E")
    assert not is_valid_color("22C55E")
    assert not is_valid_color("#12345")


def test_new_project_has_default_workflow(workspace: Workspace, project: Project) -> None:
    statuses = unwrap(workspace.list_statuses("carol", project.id))
    assert [(s.label, s.order, s.color) for s in statuses] == [
        ("To-Do", 0, TODO_COLOR),
        ("In Progress", 1, IN_PROGRESS_COLOR),
        ("Done", 2, DONE_COLOR),
        ("Remove", 3, REMOVE_COLOR),
    ]


def test_create_appends_and_derives_color(workspace: Workspace, project: Project) -> None:
    status = unwrap(workspace.create_status("bob", project.id, "Archived"))
    assert status.order == 4
    assert status.color == REMOVE_COLOR

    explicit = unwrap(workspace.create_status("bob", project.id, "Review", order=1, color="#abc"))
    assert explicit.color == "#abc"


def test_create_validates_input(workspace: Workspace, project: Project) -> None:
    bad_label = workspace.create_status("bob", project.id, "a/b")
    bad_color = workspace.create_status("bob", project.id, "Review", color="red")
    viewer = workspace.create_status("carol", project.id, "Review")

    assert isinstance(bad_label, Err) and bad_label.error.kind is ErrorKind.VALIDATION
    assert isinstance(bad_color, Err) and bad_color.error.kind is ErrorKind.VALIDATION
    assert isinstance(viewer, Err) and viewer.error.kind is ErrorKind.FORBIDDEN


def test_list_sorts_by_order_then_creation(workspace: Workspace, project: Project) -> None:
    first = unwrap(workspace.create_status("bob", project.id, "Review", order=1))
    second = unwrap(workspace.create_status("bob", project.id, "QA", order=1))

    labels = [s.label for s in unwrap(workspace.list_statuses("bob", project.id))]
    assert labels == ["To-Do", "In Progress", "Review", "QA", "Done", "Remove"]
    assert first.seq < second.seq


def test_update_with_null_color_rederives_from_label(workspace: Workspace, project: Project) -> None:
    status = unwrap(workspace.create_status("bob", project.id, "Review", color="#123456"))

    relabeled = unwrap(workspace.update_status("bob", status.id, StatusPatch(label="Done", color=None)))
    assert relabeled.color == DONE_COLOR

    untouched = unwrap(workspace.update_status("bob", status.id, StatusPatch(hidden=True)))
    assert untouched.color == DONE_COLOR
    assert untouched.hidden


def test_delete_in_use_status_is_rejected(workspace: Workspace, project: Project) -> None:
    todo = unwrap(workspace.list_statuses("bob", project.id))[0]
    unwrap(workspace.create_task("bob", project.id, "t"))

    result = workspace.delete_status("alice", todo.id, Reject())
    assert isinstance(result, Err)
    assert result.error.kind is ErrorKind.STATUS_IN_USE
    assert len(unwrap(workspace.list_statuses("bob", project.id))) == 4


def test_delete_status_needs_owner(workspace: Workspace, project: Project) -> None:
    remove = unwrap(workspace.list_statuses("bob", project.id))[3]
    result = workspace.delete_status("bob", remove.id, Reject())
    assert isinstance(result, Err)
    assert result.error.kind is ErrorKind.FORBIDDEN


def test_delete_with_reassign_moves_tasks_and_comments(workspace: Workspace, project: Project) -> None:
    todo, doing, *_ = unwrap(workspace.list_statuses("bob", project.id))
    task = unwrap(workspace.create_task("bob", project.id, "t"))
    comment = unwrap(workspace.add_comment("bob", task.id, "started"))
    assert comment.status_id == todo.id

    moved = unwrap(workspace.delete_status("alice", todo.id, Reassign(fallback_status_id=doing.id)))

    assert moved == [task.id]
    assert unwrap(workspace.get_task("bob", task.id)).status_id == doing.id
    assert unwrap(workspace.list_comments("bob", task.id))[0].status_id == doing.id
    assert [s.label for s in unwrap(workspace.list_statuses("bob", project.id))] == [
        "In Progress",
        "Done",
        "Remove",
    ]


def test_reassign_fallback_must_be_valid(workspace: Workspace, project: Project) -> None:
    todo = unwrap(workspace.list_statuses("bob", project.id))[0]
    other = unwrap(workspace.create_project("alice", "Other"))
    foreign = unwrap(workspace.list_statuses("alice", other.id))[1]

    for fallback in (todo.id, "nope", foreign.id):
        result = workspace.delete_status("alice", todo.id, Reassign(fallback_status_id=fallback))
        assert isinstance(result, Err)
        assert result.error.kind is ErrorKind.INVALID_REFERENCE


def test_reorder_is_all_or_nothing(workspace: Workspace, project: Project) -> None:
    todo, doing, done, remove = unwrap(workspace.list_statuses("bob", project.id))

    bad = workspace.reorder_statuses("bob", project.id, [(done.id, 0), ("nope", 5)])
    assert isinstance(bad, Err)
    assert [s.id for s in unwrap(workspace.list_statuses("bob", project.id))] == [
        todo.id,
        doing.id,
        done.id,
        remove.id,
    ]

    reordered = unwrap(workspace.reorder_statuses("bob", project.id, [(done.id, -1), (todo.id, 2)]))
    assert [s.label for s in reordered] == ["Done", "In Progress", "To-Do", "Remove"]


def test_backfill_colors(store: InMemoryStore, workspace: Workspace, project: Project) -> None:
    with store.transaction():
        legacy = store.put_status(TaskStatus(project_id=project.id, label="In Progress (legacy)", order=9))

    events = workspace.backfill_status_colors()

    assert [e.status_id for e in events] == [legacy.id]
    assert store.get_status(legacy.id).color == IN_PROGRESS_COLOR
    assert workspace.backfill_status_colors() == []


def test_reject_delete_keeps_the_status_recorded_on_comments(workspace: Workspace, project: Project) -> None:
    todo = unwrap(workspace.list_statuses("bob", project.id))[0]
    blocked = unwrap(workspace.create_status("bob", project.id, "Blocked"))
    task = unwrap(workspace.create_task("bob", project.id, "t"))
    unwrap(workspace.move_task("bob", task.id, blocked.id, "waiting on review"))
    unwrap(workspace.move_task("bob", task.id, todo.id))

    unwrap(workspace.delete_status("alice", blocked.id, Reject()))

    comments = unwrap(workspace.list_comments("bob", task.id))
    assert [c.status_id for c in comments] == [blocked.id]
    assert blocked.id not in [s.id for s in unwrap(workspace.list_statuses("bob", project.id))]
