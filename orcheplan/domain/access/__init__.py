"""Access domain - the role lattice and the operation table.

Role resolution rules live in ``orcheplan.domain.access.resolution``; it is
not re-exported here because it depends on the project models.
"""

from orcheplan.domain.access.models import (
    MEMBER_ROLES,
    REQUIRED_ROLES,
    Denial,
    DenialReason,
    Grant,
    Operation,
    Role,
    required_role,
)

__all__ = [
    "Role",
    "MEMBER_ROLES",
    "Operation",
    "REQUIRED_ROLES",
    "required_role",
    "DenialReason",
    "Grant",
    "Denial",
]
