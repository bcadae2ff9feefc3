"""Workflow status models."""

import re
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, Field

LABEL_MAX_LENGTH = 50
_LABEL_RE = re.compile(r"^[\w\s\-'.]+$")


class StatusFlags(BaseModel):
    """Behaviour switches of a status."""

    show_strike_through: bool = False
    hidden: bool = False
    requires_comment: bool = False
    allows_comment: bool = True

    model_config = {"frozen": True}


class TaskStatus(BaseModel):
    """One step of a project's workflow.

    ``color`` is optional only so that legacy rows can be loaded and
    backfilled; everything the registry writes carries a colour.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    project_id: str
    label: str
    color: str | None = None
    order: int = 0
    show_strike_through: bool = False
    hidden: bool = False
    requires_comment: bool = False
    allows_comment: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    seq: int = 0

    model_config = {"frozen": True}

    @property
    def flags(self) -> StatusFlags:
        return StatusFlags(
            show_strike_through=self.show_strike_through,
            hidden=self.hidden,
            requires_comment=self.requires_comment,
            allows_comment=self.allows_comment,
        )


class StatusPatch(BaseModel):
    """Changes to apply to a status.

    Only fields explicitly set are applied. Setting ``color`` to None
    asks for the colour to be derived from the label again.
    """

    label: str | None = None
    order: int | None = None
    color: str | None = None
    show_strike_through: bool | None = None
    hidden: bool | None = None
    requires_comment: bool | None = None
    allows_comment: bool | None = None


@dataclass(frozen=True, slots=True)
class Reject:
    """Refuse to delete a status that tasks still reference."""


@dataclass(frozen=True, slots=True)
class Reassign:
    """Repoint referencing tasks to a fallback status, then delete.

    Attributes:
        fallback_status_id: Status of the same project to move tasks to.
    """

    fallback_status_id: str


OnInUse = Reject | Reassign


def is_valid_label(label: str) -> bool:
    """Labels are 1-50 characters of letters, digits, spaces and ``-_'.``."""
    return 0 < len(label) <= LABEL_MAX_LENGTH and bool(_LABEL_RE.match(label))
