"""Status domain - the ordered, coloured workflow of a project."""

from orcheplan.domain.status.colors import (
    DEFAULT_COLOR,
    DONE_COLOR,
    IN_PROGRESS_COLOR,
    REMOVE_COLOR,
    TODO_COLOR,
    is_valid_color,
    pick_color_for_label,
)
from orcheplan.domain.status.events import (
    StatusColorBackfilled,
    StatusCreated,
    StatusDeleted,
    StatusesReordered,
    StatusUpdated,
)
from orcheplan.domain.status.models import (
    OnInUse,
    Reassign,
    Reject,
    StatusFlags,
    StatusPatch,
    TaskStatus,
    is_valid_label,
)
from orcheplan.domain.status.ordering import (
    DEFAULT_WORKFLOW,
    first_status,
    next_order,
    sort_statuses,
)

__all__ = [
    # Models
    "TaskStatus",
    "StatusFlags",
    "StatusPatch",
    "OnInUse",
    "Reject",
    "Reassign",
    "is_valid_label",
    # Colours
    "DEFAULT_COLOR",
    "TODO_COLOR",
    "IN_PROGRESS_COLOR",
    "DONE_COLOR",
    "REMOVE_COLOR",
    "pick_color_for_label",
    "is_valid_color",
    # Ordering
    "DEFAULT_WORKFLOW",
    "sort_statuses",
    "next_order",
    "first_status",
    # Events
    "StatusCreated",
    "StatusUpdated",
    "StatusesReordered",
    "StatusDeleted",
    "StatusColorBackfilled",
]
