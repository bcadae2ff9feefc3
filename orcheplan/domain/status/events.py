"""Workflow status events."""

from orcheplan.domain.shared.events import DomainEvent


class StatusCreated(DomainEvent):
    """A status was added to a project's workflow."""

    status_id: str
    label: str
    order: int
    color: str


class StatusUpdated(DomainEvent):
    """A status changed."""

    status_id: str
    fields: list[str]


class StatusesReordered(DomainEvent):
    """Several statuses moved in one atomic step."""

    status_ids: list[str]


class StatusDeleted(DomainEvent):
    """A status was removed.

    ``reassigned_task_ids`` lists the tasks moved to ``fallback_status_id``
    before the removal, empty when none referenced it.
    """

    status_id: str
    fallback_status_id: str | None = None
    reassigned_task_ids: list[str] = []


class StatusColorBackfilled(DomainEvent):
    """A status without a colour received a derived one."""

    status_id: str
    color: str
