"""Storage infrastructure for orcheplan.

Provides:
- WorkspaceStore: The store contract the core consumes
- InMemoryStore: Transactional in-memory store with JSON snapshots
- JsonStorage: Low-level JSON file I/O with Result types
"""

from orcheplan.infrastructure.storage.base import WorkspaceStore, iter_project_comments
from orcheplan.infrastructure.storage.json_storage import JsonStorage
from orcheplan.infrastructure.storage.memory import InMemoryStore, SnapshotError

__all__ = [
    "WorkspaceStore",
    "iter_project_comments",
    "InMemoryStore",
    "SnapshotError",
    "JsonStorage",
]
