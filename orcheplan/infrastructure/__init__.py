"""Infrastructure layer for orcheplan.

Storage adapters the core runs against. The core depends only on the
``WorkspaceStore`` contract; ``InMemoryStore`` is the bundled
implementation used by the CLI and the tests.
"""

from orcheplan.infrastructure.storage import (
    InMemoryStore,
    JsonStorage,
    SnapshotError,
    WorkspaceStore,
)

__all__ = [
    "WorkspaceStore",
    "InMemoryStore",
    "SnapshotError",
    "JsonStorage",
]
