"""Project domain events."""

from orcheplan.domain.access.models import Role
from orcheplan.domain.shared.events import DomainEvent


class ProjectCreated(DomainEvent):
    """A project was created (and seeded with the default workflow)."""

    name: str
    owner_id: str
    parent_project_id: str | None = None


class ProjectUpdated(DomainEvent):
    """A project's name, description or parent changed."""

    fields: list[str]


class ProjectDeleted(DomainEvent):
    """A project was removed together with everything it owned.

    One event is emitted per project in a cascade, sub-projects first.
    """

    task_count: int = 0
    status_count: int = 0
    member_count: int = 0


class MemberAdded(DomainEvent):
    """A user was given a role on a project."""

    user_id: str
    role: Role


class MemberRoleChanged(DomainEvent):
    """A member's role on a project changed."""

    user_id: str
    old_role: Role
    new_role: Role


class MemberRemoved(DomainEvent):
    """A user's membership on a project was revoked."""

    user_id: str
