"""Base domain event infrastructure.

Domain events are immutable records of a committed change. Services return
them alongside their results so that downstream consumers (audit trails,
realtime broadcasts, comment cleanup) can react without the core knowing
about them.

Example usage:
    >>> from orcheplan.domain.shared.events import DomainEvent
    >>>
    >>> class TaskRenamed(DomainEvent):
    ...     task_id: str
    ...     title: str
    ...
    >>> event = TaskRenamed(project_id="p1", actor_id="u1", task_id="t1", title="Ship")
    >>> print(f"Event {event.event_id} occurred at {event.occurred_at}")
"""

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, Field


class DomainEvent(BaseModel):
    """Base class for all domain events.

    Attributes:
        event_id: Unique identifier for this event instance.
        occurred_at: UTC timestamp when the event occurred.
        project_id: Project the change happened in.
        actor_id: User who caused the change, when known.
    """

    event_id: str = Field(default_factory=lambda: uuid4().hex)
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    project_id: str
    actor_id: str | None = None

    model_config = {"frozen": True}
