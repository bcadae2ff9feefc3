"""Status Workflow Registry.

Owns the per-project list of statuses: their order, display colour and
behaviour flags, plus the rule that a status still referenced by tasks
is never silently removed.
"""

import logging

from orcheplan.domain.shared.errors import DomainError, ErrorKind, fail
from orcheplan.domain.shared.result import Err, Ok
from orcheplan.domain.status import (
    DEFAULT_WORKFLOW,
    OnInUse,
    Reassign,
    StatusColorBackfilled,
    StatusCreated,
    StatusDeleted,
    StatusesReordered,
    StatusFlags,
    StatusPatch,
    StatusUpdated,
    TaskStatus,
    is_valid_color,
    is_valid_label,
    next_order,
    pick_color_for_label,
    sort_statuses,
)
from orcheplan.infrastructure.storage.base import WorkspaceStore, iter_project_comments

logger = logging.getLogger(__name__)


def _check_label(label: str) -> Ok[str] | Err[DomainError]:
    label = label.strip()
    if not is_valid_label(label):
        return fail(
            ErrorKind.VALIDATION,
            "status label must be 1-50 characters of letters, digits, spaces, hyphens, "
            "apostrophes or periods",
        )
    return Ok(label)


def _check_color(color: str) -> Ok[str] | Err[DomainError]:
    if not is_valid_color(color):
        return fail(ErrorKind.VALIDATION, f"invalid color {color!r}; expected #RGB or #RRGGBB")
    return Ok(color)


class StatusWorkflowRegistry:
    """Per-project workflow statuses."""

    def __init__(self, store: WorkspaceStore) -> None:
        self._store = store

    def create(
        self,
        project_id: str,
        label: str,
        *,
        order: int | None = None,
        color: str | None = None,
        flags: StatusFlags | None = None,
        actor_id: str | None = None,
    ) -> Ok[tuple[TaskStatus, StatusCreated]] | Err[DomainError]:
        """Add a status to a project's workflow.

        Args:
            project_id: Owning project.
            label: Display label.
            order: Position in the workflow; appended after the last
                status when omitted.
            color: Hex colour; derived from the label when omitted.
            flags: Behaviour switches; defaults when omitted.
            actor_id: Acting user, recorded on the event.

        Returns:
            Ok((status, event)) or Err(Validation | NotFound).
        """
        if self._store.get_project(project_id) is None:
            return fail(ErrorKind.NOT_FOUND, f"project {project_id} not found")

        checked = _check_label(label)
        if isinstance(checked, Err):
            return checked
        label = checked.value

        if color is None:
            color = pick_color_for_label(label)
        else:
            valid = _check_color(color)
            if isinstance(valid, Err):
                return valid

        if order is None:
            order = next_order(self._store.list_statuses_by_project(project_id))

        flags = flags or StatusFlags()
        status = self._store.put_status(
            TaskStatus(
                project_id=project_id,
                label=label,
                color=color,
                order=order,
                **flags.model_dump(),
            )
        )
        logger.info(f"Created status '{label}' ({status.id}) in project {project_id}")
        return Ok(
            (
                status,
                StatusCreated(
                    project_id=project_id,
                    actor_id=actor_id,
                    status_id=status.id,
                    label=label,
                    order=order,
                    color=color,
                ),
            )
        )

    def update(
        self,
        status_id: str,
        patch: StatusPatch,
        actor_id: str | None = None,
    ) -> Ok[tuple[TaskStatus, StatusUpdated]] | Err[DomainError]:
        """Apply the explicitly set fields of ``patch``.

        An explicit ``color=None`` re-derives the colour from the label,
        taking a label changed by the same patch into account.
        """
        status = self._store.get_status(status_id)
        if status is None:
            return fail(ErrorKind.NOT_FOUND, f"status {status_id} not found")

        changes = patch.model_dump(include=patch.model_fields_set)
        if "label" in changes:
            if changes["label"] is None:
                return fail(ErrorKind.VALIDATION, "status label must not be empty")
            checked = _check_label(changes["label"])
            if isinstance(checked, Err):
                return checked
            changes["label"] = checked.value

        if "color" in changes:
            if changes["color"] is None:
                changes["color"] = pick_color_for_label(changes.get("label", status.label))
            else:
                valid = _check_color(changes["color"])
                if isinstance(valid, Err):
                    return valid

        # None for a non-nullable field means "leave as is"
        for name in ("order", "show_strike_through", "hidden", "requires_comment", "allows_comment"):
            if name in changes and changes[name] is None:
                del changes[name]

        updated = self._store.put_status(status.model_copy(update=changes))
        return Ok(
            (
                updated,
                StatusUpdated(
                    project_id=status.project_id,
                    actor_id=actor_id,
                    status_id=status_id,
                    fields=sorted(changes),
                ),
            )
        )

    def delete(
        self,
        status_id: str,
        on_in_use: OnInUse,
        actor_id: str | None = None,
    ) -> Ok[StatusDeleted] | Err[DomainError]:
        """Remove a status.

        With ``Reject`` a status that tasks still use is refused; comments
        written against an unused status keep the id they recorded. With
        ``Reassign`` those tasks and comments are first repointed to the
        fallback.
        """
        status = self._store.get_status(status_id)
        if status is None:
            return fail(ErrorKind.NOT_FOUND, f"status {status_id} not found")

        users = [t for t in self._store.list_tasks_by_project(status.project_id) if t.status_id == status_id]

        fallback_id: str | None = None
        if isinstance(on_in_use, Reassign):
            fallback_id = on_in_use.fallback_status_id
            if fallback_id == status_id:
                return fail(ErrorKind.INVALID_REFERENCE, "fallback status must differ from the deleted one")
            fallback = self._store.get_status(fallback_id)
            if fallback is None or fallback.project_id != status.project_id:
                return fail(
                    ErrorKind.INVALID_REFERENCE,
                    f"fallback status {fallback_id} does not belong to project {status.project_id}",
                )
        elif users:
            return fail(
                ErrorKind.STATUS_IN_USE,
                f"status '{status.label}' is used by {len(users)} task(s)",
            )

        for task in users:
            self._store.put_task(task.model_copy(update={"status_id": fallback_id}))
        for comment in list(iter_project_comments(self._store, status.project_id)):
            if fallback_id is not None and comment.status_id == status_id:
                self._store.put_comment(comment.model_copy(update={"status_id": fallback_id}))

        self._store.delete_status(status_id)
        logger.info(
            f"Deleted status '{status.label}' ({status_id}); "
            f"{len(users)} task(s) reassigned to {fallback_id}"
        )
        return Ok(
            StatusDeleted(
                project_id=status.project_id,
                actor_id=actor_id,
                status_id=status_id,
                fallback_status_id=fallback_id,
                reassigned_task_ids=[t.id for t in users],
            )
        )

    def list_statuses(self, project_id: str) -> list[TaskStatus]:
        """Statuses of a project by ascending order, ties by creation."""
        return sort_statuses(self._store.list_statuses_by_project(project_id))

    def reorder(
        self,
        project_id: str,
        moves: list[tuple[str, int]],
        actor_id: str | None = None,
    ) -> Ok[StatusesReordered] | Err[DomainError]:
        """Assign new order values to several statuses at once.

        Every id is checked before anything is written.
        """
        statuses = {s.id: s for s in self._store.list_statuses_by_project(project_id)}
        for status_id, _ in moves:
            if status_id not in statuses:
                return fail(
                    ErrorKind.INVALID_REFERENCE,
                    f"status {status_id} does not belong to project {project_id}",
                )

        for status_id, order in moves:
            self._store.put_status(statuses[status_id].model_copy(update={"order": order}))
        return Ok(
            StatusesReordered(
                project_id=project_id,
                actor_id=actor_id,
                status_ids=[status_id for status_id, _ in moves],
            )
        )

    def backfill_colors(self) -> list[StatusColorBackfilled]:
        """Give every colourless status a colour derived from its label."""
        events: list[StatusColorBackfilled] = []
        for status in self._store.list_all_statuses():
            if status.color:
                continue
            color = pick_color_for_label(status.label)
            self._store.put_status(status.model_copy(update={"color": color}))
            events.append(
                StatusColorBackfilled(
                    project_id=status.project_id,
                    status_id=status.id,
                    color=color,
                )
            )
        if events:
            logger.info(f"Backfilled colors on {len(events)} status(es)")
        return events

    def seed_defaults(self, project_id: str) -> list[TaskStatus]:
        """Create the default workflow for a new project."""
        created: list[TaskStatus] = []
        for label, order, color in DEFAULT_WORKFLOW:
            status = self._store.put_status(
                TaskStatus(project_id=project_id, label=label, color=color, order=order)
            )
            created.append(status)
        logger.debug(f"Seeded {len(created)} default statuses in project {project_id}")
        return created
