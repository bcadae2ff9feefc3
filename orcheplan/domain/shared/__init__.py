"""Shared domain building blocks.

- Result monad for explicit error handling
- Domain error vocabulary
- Base domain event

Example usage:
    >>> from orcheplan.domain.shared import ErrorKind, Ok, fail
    >>>
    >>> def find_task(task_id: str):
    ...     if task_id == "missing":
    ...         return fail(ErrorKind.NOT_FOUND, "task missing not found")
    ...     return Ok({"id": task_id})
"""

from orcheplan.domain.shared.errors import (
    DomainError,
    ErrorKind,
    TransientStoreError,
    fail,
)
from orcheplan.domain.shared.events import DomainEvent
from orcheplan.domain.shared.result import (
    Err,
    Ok,
    Result,
    is_err,
    is_ok,
    map_result,
    unwrap,
)

__all__ = [
    # Result monad
    "Ok",
    "Err",
    "Result",
    "is_ok",
    "is_err",
    "map_result",
    "unwrap",
    # Errors
    "DomainError",
    "ErrorKind",
    "TransientStoreError",
    "fail",
    # Domain events
    "DomainEvent",
]
