"""Result monad for explicit error handling in domain operations.

Every core operation that can be refused for a domain reason (a missing
reference, a cycle, an insufficient role) returns a Result instead of
raising. Only infrastructure failures, such as a store timeout, travel as
exceptions.

Example usage:
    >>> def pick_parent(task_id: str, parent_id: str) -> Result[str, str]:
    ...     if task_id == parent_id:
    ...         return Err("a task cannot be its own parent")
    ...     return Ok(parent_id)
    ...
    >>> result = pick_parent("t1", "t2")
    >>> if is_ok(result):
    ...     print(f"Parent: {result.value}")
    Parent: t2
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Represents a successful result containing a value.

    Attributes:
        value: The success value of type T.
    """

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Represents a failed result containing an error.

    Attributes:
        error: The error value of type E.
    """

    error: E


# Using Union here as TypeVar aliases don't work with | syntax at runtime
Result = Union[Ok[T], Err[E]]  # noqa: UP007


def is_ok(result: Ok[T] | Err[E]) -> bool:
    """Return True if the result is an Ok."""
    return isinstance(result, Ok)


def is_err(result: Ok[T] | Err[E]) -> bool:
    """Return True if the result is an Err."""
    return isinstance(result, Err)


def map_result(result: Ok[T] | Err[E], fn: Callable[[T], U]) -> Ok[U] | Err[E]:
    """Apply fn to the value of an Ok, passing an Err through unchanged."""
    if isinstance(result, Ok):
        return Ok(fn(result.value))
    return result


def unwrap(result: Ok[T] | Err[E]) -> T:
    """Extract the value from an Ok, raising ValueError on an Err.

    Intended for tests and for call sites where an Err is a programming
    error rather than an expected outcome.
    """
    if isinstance(result, Ok):
        return result.value
    raise ValueError(f"called unwrap on an Err: {result.error}")
