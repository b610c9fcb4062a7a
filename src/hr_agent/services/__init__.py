"""Services package for persistence components.

This package contains the checkpoint stores that keep conversation history
across requests and restarts.
"""

from .checkpoint_store import (
    CheckpointConflictError,
    CheckpointStore,
    InMemoryCheckpointStore,
    SqlCheckpointStore,
    create_checkpoint_store,
)

__all__ = [
    "CheckpointConflictError",
    "CheckpointStore",
    "InMemoryCheckpointStore",
    "SqlCheckpointStore",
    "create_checkpoint_store",
]
