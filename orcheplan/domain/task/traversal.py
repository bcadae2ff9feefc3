"""Pure walks over a project's task forest.

All functions in this module are pure - no I/O, no side effects. They take
the project's tasks as an id-keyed mapping and follow ``parent_task_id``
links by lookup. Every walk is bounded by the number of tasks, so a cycle
that somehow made it into storage is reported as graph corruption rather
than hanging the caller.
"""

from collections.abc import Mapping

from orcheplan.domain.shared.errors import DomainError, ErrorKind, fail
from orcheplan.domain.shared.result import Err, Ok

from .models import FlatTask, Task


# =============================================================================
# Indexing
# =============================================================================


def children_index(tasks: Mapping[str, Task]) -> dict[str | None, list[Task]]:
    """Group tasks by parent id, siblings in creation order.

    Roots are listed under the ``None`` key. A task whose parent is not in
    the mapping is treated as a root.
    """
    index: dict[str | None, list[Task]] = {}
    for task in tasks.values():
        parent = task.parent_task_id if task.parent_task_id in tasks else None
        index.setdefault(parent, []).append(task)
    for siblings in index.values():
        siblings.sort(key=lambda t: t.seq)
    return index


def children_of(tasks: Mapping[str, Task], task_id: str) -> list[Task]:
    """Direct sub-tasks of a task, in creation order."""
    return sorted(
        (t for t in tasks.values() if t.parent_task_id == task_id),
        key=lambda t: t.seq,
    )


# =============================================================================
# Upward walks
# =============================================================================


def find_cycle(
    tasks: Mapping[str, Task],
    task_id: str,
    parent_id: str,
) -> Ok[None] | Err[DomainError]:
    """Check that linking ``task_id`` under ``parent_id`` keeps the forest acyclic.

    Walks from the candidate parent upward through ``parent_task_id``. If
    the walk reaches ``task_id`` the link would make the task its own
    ancestor. If it takes more steps than there are tasks, the stored
    graph already contains a cycle.

    Args:
        tasks: Every task of the project, keyed by id.
        task_id: The task being placed.
        parent_id: The proposed parent.

    Returns:
        Ok(None), Err(CycleDetected) or Err(GraphCorruption).
    """
    if parent_id == task_id:
        return fail(ErrorKind.CYCLE_DETECTED, f"task {task_id} cannot be its own parent")

    bound = len(tasks)
    steps = 0
    current: str | None = parent_id
    while current is not None:
        if current == task_id:
            return fail(
                ErrorKind.CYCLE_DETECTED,
                f"task {parent_id} is a descendant of {task_id}",
            )
        steps += 1
        if steps > bound:
            return fail(
                ErrorKind.GRAPH_CORRUPTION,
                f"parent chain above task {parent_id} does not terminate",
            )
        node = tasks.get(current)
        current = node.parent_task_id if node is not None else None
    return Ok(None)


def ancestors(tasks: Mapping[str, Task], task_id: str) -> Ok[list[str]] | Err[DomainError]:
    """List the ancestors of a task, nearest first."""
    chain: list[str] = []
    node = tasks.get(task_id)
    while node is not None and node.parent_task_id is not None:
        if len(chain) >= len(tasks):
            return fail(
                ErrorKind.GRAPH_CORRUPTION,
                f"parent chain above task {task_id} does not terminate",
            )
        chain.append(node.parent_task_id)
        node = tasks.get(node.parent_task_id)
    return Ok(chain)


# =============================================================================
# Downward walks
# =============================================================================


def descendants_depth_first(
    tasks: Mapping[str, Task],
    root_id: str,
) -> Ok[list[str]] | Err[DomainError]:
    """List a task and all its descendants, children before parents.

    This is the order a cascading delete removes them in: every node is
    listed after its whole subtree.
    """
    index = children_index(tasks)
    order: list[str] = []
    visited: set[str] = set()
    # (id, expanded) pairs; a node is emitted on its second visit
    stack: list[tuple[str, bool]] = [(root_id, False)]
    while stack:
        node_id, expanded = stack.pop()
        if expanded:
            order.append(node_id)
            continue
        if node_id in visited:
            return fail(
                ErrorKind.GRAPH_CORRUPTION,
                f"task {node_id} reached twice below {root_id}",
            )
        visited.add(node_id)
        stack.append((node_id, True))
        for child in reversed(index.get(node_id, [])):
            stack.append((child.id, False))
    return Ok(order)


def flatten_forest(tasks: Mapping[str, Task]) -> Ok[list[FlatTask]] | Err[DomainError]:
    """Materialize the forest in display order.

    Parents come before their children (pre-order), siblings in creation
    order, each row tagged with its depth.

    Returns:
        Ok(rows), or Err(GraphCorruption) if some tasks are unreachable
        from any root (they sit on a stored cycle).
    """
    index = children_index(tasks)
    rows: list[FlatTask] = []
    stack: list[tuple[Task, int]] = [(t, 0) for t in reversed(index.get(None, []))]
    while stack:
        task, depth = stack.pop()
        rows.append(FlatTask(task=task, depth=depth))
        for child in reversed(index.get(task.id, [])):
            stack.append((child, depth + 1))

    if len(rows) != len(tasks):
        return fail(
            ErrorKind.GRAPH_CORRUPTION,
            f"{len(tasks) - len(rows)} task(s) are not reachable from any root",
        )
    return Ok(rows)
