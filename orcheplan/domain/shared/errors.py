"""Domain error vocabulary.

Expected refusals are values (``DomainError`` wrapped in ``Err``); store
unavailability is the one failure that travels as an exception, because
the caller is expected to retry the whole operation rather than inspect it.
"""

from dataclasses import dataclass
from enum import Enum

from orcheplan.domain.shared.result import Err


class ErrorKind(str, Enum):
    """Kinds of domain errors a core operation can report."""

    NOT_FOUND = "not-found"
    FORBIDDEN = "forbidden"
    INVALID_REFERENCE = "invalid-reference"
    CYCLE_DETECTED = "cycle-detected"
    HAS_CHILDREN = "has-children"
    STATUS_IN_USE = "status-in-use"
    GRAPH_CORRUPTION = "graph-corruption"
    CONFLICT = "conflict"
    VALIDATION = "validation"
    COMMENT_REQUIRED = "comment-required"
    COMMENT_NOT_ALLOWED = "comment-not-allowed"


@dataclass(frozen=True, slots=True)
class DomainError:
    """A refused operation.

    Attributes:
        kind: Machine-readable category.
        message: Human-readable, actionable reason.
    """

    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


def fail(kind: ErrorKind, message: str) -> Err[DomainError]:
    """Shorthand for ``Err(DomainError(kind, message))``."""
    return Err(DomainError(kind=kind, message=message))


class TransientStoreError(Exception):
    """The store timed out or was unavailable.

    Raised, never returned. The operation was rolled back and may be
    retried as a whole.
    """
