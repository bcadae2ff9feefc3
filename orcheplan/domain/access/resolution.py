"""Pure role resolution rules.

No I/O: callers pass in the project and the membership row they read.
"""

from orcheplan.domain.access.models import Role
from orcheplan.domain.project.models import Project, ProjectMember


def resolve_role(user_id: str, project: Project, member: ProjectMember | None) -> Role:
    """Compute the effective role of a user on a single project.

    Ownership is checked first and is authoritative. A membership row is
    consulted only for non-owners; a row that claims ``owner`` for someone
    other than ``project.owner_id`` grants editor, since ownership is not
    something membership can confer. Parent projects are never consulted.

    Args:
        user_id: The acting user.
        project: The project being accessed.
        member: The user's membership row on this project, if any.

    Returns:
        The effective role, ``Role.NONE`` when the user has no access.
    """
    if user_id == project.owner_id:
        return Role.OWNER
    if member is None or member.user_id != user_id:
        return Role.NONE
    if member.role is Role.OWNER:
        return Role.EDITOR
    return member.role
