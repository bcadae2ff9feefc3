"""Application service layer for orcheplan.

Services combine the pure domain functions with a ``WorkspaceStore``.
They assume their caller already holds a transaction and has authorized
the request; ``Workspace`` is the caller that does both.

Services:
    role_resolver - effective role of a user on a project
    gateway - grant or deny a request by the operation's required role
    task_service - sub-task forest (create, attach, reparent, delete, flatten)
    status_service - per-project workflow statuses
    project_service - projects, the project forest and memberships
    comment_service - comments and status moves
    workspace - the transactional, authorized facade

Example usage:
    >>> from orcheplan.application import Workspace
    >>> from orcheplan.infrastructure import InMemoryStore
    >>>
    >>> workspace = Workspace(InMemoryStore())
    >>> result = workspace.register_user("alice")
"""

from orcheplan.application.comment_service import CommentService
from orcheplan.application.gateway import AuthorizationGateway
from orcheplan.application.project_service import ProjectService
from orcheplan.application.role_resolver import RoleResolver
from orcheplan.application.status_service import StatusWorkflowRegistry
from orcheplan.application.task_service import SubtreeCache, TaskGraphManager
from orcheplan.application.workspace import EventHandler, Workspace

__all__ = [
    "RoleResolver",
    "AuthorizationGateway",
    "SubtreeCache",
    "TaskGraphManager",
    "StatusWorkflowRegistry",
    "ProjectService",
    "CommentService",
    "Workspace",
    "EventHandler",
]
