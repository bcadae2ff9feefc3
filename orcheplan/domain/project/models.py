"""Project domain models.

Projects form a forest through ``parent_project_id``. Membership rows are
stored beside projects, keyed by ``(project_id, user_id)``, rather than
embedded in them; ownership is a field on the project itself.
"""

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, Field

from orcheplan.domain.access.models import Role


class User(BaseModel):
    """An authenticated identity known to the workspace.

    Credentials live elsewhere; the core only needs to know the id exists.
    """

    id: str
    name: str = ""
    email: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    seq: int = 0

    model_config = {"frozen": True}


class Project(BaseModel):
    """A project, possibly nested under a parent project."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    description: str | None = None
    owner_id: str
    parent_project_id: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    seq: int = 0

    model_config = {"frozen": True}


class ProjectMember(BaseModel):
    """A user's role on one project. Unique per (project_id, user_id)."""

    project_id: str
    user_id: str
    role: Role
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    seq: int = 0

    model_config = {"frozen": True}
