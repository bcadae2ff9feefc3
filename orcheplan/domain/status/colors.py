"""Display colour derivation for workflow statuses.

Statuses created or migrated without a colour get one derived from their
label. The rules and their order are a compatibility contract with data
already in the wild: the first matching rule wins, so a label containing
both "done" and "remove" is green.
"""

import re

DEFAULT_COLOR = "#9CA3AF"
TODO_COLOR = "#3B82F6"
IN_PROGRESS_COLOR = "#EAB308"
DONE_COLOR = "#22C55E"
REMOVE_COLOR = "#EF4444"

_TODO_LABELS = ("to-do", "todo", "to do")
_IN_PROGRESS_MARKERS = ("in progress", "in-progress")
_REMOVE_MARKERS = ("remove", "archiv", "delete")

_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def pick_color_for_label(label: str | None) -> str:
    """Derive a display colour from a status label.

    Args:
        label: The status label, or None.

    Returns:
        A ``#RRGGBB`` colour string.

    Example:
        pick_color_for_label(" In Progress ")  # -> "#EAB308"
        pick_color_for_label("Done and Remove")  # -> "#22C55E"
    """
    if not label:
        return DEFAULT_COLOR
    normalized = label.lower().strip()
    if normalized in _TODO_LABELS:
        return TODO_COLOR
    if any(marker in normalized for marker in _IN_PROGRESS_MARKERS):
        return IN_PROGRESS_COLOR
    if normalized == "done" or "done" in normalized:
        return DONE_COLOR
    if normalized == "remove" or any(marker in normalized for marker in _REMOVE_MARKERS):
        return REMOVE_COLOR
    return DEFAULT_COLOR


def is_valid_color(color: str) -> bool:
    """Check for a ``#RGB`` or ``#RRGGBB`` hex colour."""
    return bool(_HEX_COLOR_RE.match(color))
