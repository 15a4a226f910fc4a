"""Collaborator interfaces for snapshot persistence and ledger anchoring."""

from .persistence import (
    GraphRecord,
    InMemoryMetadataLedger,
    InMemorySnapshotStore,
    MetadataLedger,
    SnapshotStore,
    StoredSnapshot,
    publish_graph,
    restore_graph,
)

__all__ = [
    "SnapshotStore",
    "MetadataLedger",
    "StoredSnapshot",
    "GraphRecord",
    "InMemorySnapshotStore",
    "InMemoryMetadataLedger",
    "publish_graph",
    "restore_graph",
]
