"""Role lattice, operation table and authorization outcomes.

Roles form a fixed total order (owner > editor > viewer > none). Every
operation that touches a project declares the minimum role it needs in
``REQUIRED_ROLES``; there are no per-endpoint conditionals.
"""

from enum import Enum

from pydantic import BaseModel

from orcheplan.domain.shared.errors import DomainError, ErrorKind


class Role(str, Enum):
    """Effective role of a user on a project."""

    NONE = "none"
    VIEWER = "viewer"
    EDITOR = "editor"
    OWNER = "owner"

    @property
    def rank(self) -> int:
        """Position in the lattice; higher grants more."""
        return _RANKS[self]

    def at_least(self, required: "Role") -> bool:
        """Check whether this role satisfies a required minimum role."""
        return self.rank >= required.rank


_RANKS = {
    Role.NONE: 0,
    Role.VIEWER: 1,
    Role.EDITOR: 2,
    Role.OWNER: 3,
}

# Roles a membership row may carry
MEMBER_ROLES: tuple[Role, ...] = (Role.OWNER, Role.EDITOR, Role.VIEWER)


class Operation(str, Enum):
    """Every project-scoped operation the core exposes."""

    VIEW_PROJECT = "view-project"
    LIST_TASKS = "list-tasks"
    LIST_STATUSES = "list-statuses"
    LIST_MEMBERS = "list-members"
    LIST_COMMENTS = "list-comments"

    CREATE_TASK = "create-task"
    UPDATE_TASK = "update-task"
    DELETE_TASK = "delete-task"
    MOVE_TASK = "move-task"
    ADD_COMMENT = "add-comment"
    CREATE_STATUS = "create-status"
    UPDATE_STATUS = "update-status"
    REORDER_STATUSES = "reorder-statuses"
    UPDATE_PROJECT = "update-project"
    CREATE_SUBPROJECT = "create-subproject"

    ADD_MEMBER = "add-member"
    REMOVE_MEMBER = "remove-member"
    UPDATE_MEMBER = "update-member"
    DELETE_PROJECT = "delete-project"
    DELETE_STATUS = "delete-status"
    MOVE_PROJECT = "move-project"


REQUIRED_ROLES: dict[Operation, Role] = {
    Operation.VIEW_PROJECT: Role.VIEWER,
    Operation.LIST_TASKS: Role.VIEWER,
    Operation.LIST_STATUSES: Role.VIEWER,
    Operation.LIST_MEMBERS: Role.VIEWER,
    Operation.LIST_COMMENTS: Role.VIEWER,
    Operation.CREATE_TASK: Role.EDITOR,
    Operation.UPDATE_TASK: Role.EDITOR,
    Operation.DELETE_TASK: Role.EDITOR,
    Operation.MOVE_TASK: Role.EDITOR,
    Operation.ADD_COMMENT: Role.EDITOR,
    Operation.CREATE_STATUS: Role.EDITOR,
    Operation.UPDATE_STATUS: Role.EDITOR,
    Operation.REORDER_STATUSES: Role.EDITOR,
    Operation.UPDATE_PROJECT: Role.EDITOR,
    Operation.CREATE_SUBPROJECT: Role.EDITOR,
    Operation.ADD_MEMBER: Role.OWNER,
    Operation.REMOVE_MEMBER: Role.OWNER,
    Operation.UPDATE_MEMBER: Role.OWNER,
    Operation.DELETE_PROJECT: Role.OWNER,
    Operation.DELETE_STATUS: Role.OWNER,
    Operation.MOVE_PROJECT: Role.OWNER,
}


def required_role(operation: Operation) -> Role:
    """Look up the minimum role an operation needs."""
    return REQUIRED_ROLES[operation]


class DenialReason(str, Enum):
    """Why an authorization request was refused (for logs, not for users)."""

    NOT_A_MEMBER = "not-a-member"
    INSUFFICIENT_ROLE = "insufficient-role"
    NOT_FOUND = "not-found"


class Grant(BaseModel):
    """Proof that an actor holds a role on a project for one request."""

    actor_id: str
    project_id: str
    role: Role
    required: Role

    model_config = {"frozen": True}


class Denial(BaseModel):
    """A refused authorization request.

    The reason is kept for observability. What callers surface is
    ``to_error()``, which is always ``Forbidden`` so that a non-member
    cannot tell a missing project from one they may not see.
    """

    actor_id: str
    project_id: str
    reason: DenialReason
    role: Role = Role.NONE
    required: Role

    model_config = {"frozen": True}

    @property
    def public_kind(self) -> ErrorKind:
        return ErrorKind.FORBIDDEN

    def to_error(self) -> DomainError:
        return DomainError(kind=self.public_kind, message="forbidden")
