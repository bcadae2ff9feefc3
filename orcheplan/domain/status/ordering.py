"""Workflow ordering rules.

``order`` values need not be contiguous or unique. Reads always sort
ascending by ``order`` and break ties by creation sequence.
"""

from collections.abc import Iterable

from orcheplan.domain.status.colors import (
    DONE_COLOR,
    IN_PROGRESS_COLOR,
    REMOVE_COLOR,
    TODO_COLOR,
)
from orcheplan.domain.status.models import TaskStatus

# (label, order, color) seeded into every new project
DEFAULT_WORKFLOW: tuple[tuple[str, int, str], ...] = (
    ("To-Do", 0, TODO_COLOR),
    ("In Progress", 1, IN_PROGRESS_COLOR),
    ("Done", 2, DONE_COLOR),
    ("Remove", 3, REMOVE_COLOR),
)


def sort_statuses(statuses: Iterable[TaskStatus]) -> list[TaskStatus]:
    """Sort statuses by order, ties by creation sequence."""
    return sorted(statuses, key=lambda s: (s.order, s.seq))


def next_order(statuses: Iterable[TaskStatus]) -> int:
    """Order value that appends after the current maximum (0 when empty)."""
    orders = [s.order for s in statuses]
    return max(orders) + 1 if orders else 0


def first_status(statuses: Iterable[TaskStatus]) -> TaskStatus | None:
    """The workflow's entry status, used as a task's default."""
    ordered = sort_statuses(statuses)
    return ordered[0] if ordered else None
