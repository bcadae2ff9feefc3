"""Project domain package.

Project and membership models, forest walks and project events.
"""

from orcheplan.domain.project.events import (
    MemberAdded,
    MemberRemoved,
    MemberRoleChanged,
    ProjectCreated,
    ProjectDeleted,
    ProjectUpdated,
)
from orcheplan.domain.project.hierarchy import (
    ancestors,
    check_project_parent,
    subprojects_depth_first,
    with_ancestors,
)
from orcheplan.domain.project.models import Project, ProjectMember, User

__all__ = [
    "Project",
    "ProjectMember",
    "User",
    "ancestors",
    "check_project_parent",
    "subprojects_depth_first",
    "with_ancestors",
    "ProjectCreated",
    "ProjectUpdated",
    "ProjectDeleted",
    "MemberAdded",
    "MemberRoleChanged",
    "MemberRemoved",
]
