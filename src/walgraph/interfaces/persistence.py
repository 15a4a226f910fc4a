"""Interfaces for the persistence collaborators the engine talks to.

The engine never persists anything itself. A snapshot store keeps whole
graph snapshots as blobs, and a metadata ledger records which blob holds
which named graph. Real implementations live outside this package; the
in-memory ones here back tests and the command-line tool.
"""

import hashlib
import json
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

import structlog

from ..exceptions import SnapshotStorageError
from ..models import GraphSnapshot, Node, Relationship
from ..storage.memory_storage import GraphStore

logger = structlog.get_logger(__name__)


@dataclass
class StoredSnapshot:
    """Receipt returned by a snapshot store."""

    blob_id: str
    size: int
    timestamp: datetime


@dataclass
class GraphRecord:
    """Ledger entry describing a stored graph."""

    record_id: str
    name: str
    description: str
    blob_id: str
    node_count: int
    relationship_count: int
    is_public: bool = False
    tags: List[str] = field(default_factory=list)
    version: int = 1
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class SnapshotStore(ABC):
    """Content-addressable blob store for graph snapshots."""

    @abstractmethod
    def store(
        self,
        nodes: Sequence[Node],
        relationships: Sequence[Relationship],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> StoredSnapshot:
        """Store a snapshot.

        Args:
            nodes: Nodes to store
            relationships: Relationships to store
            metadata: Optional name/description metadata

        Returns:
            Receipt with the blob ID, size in bytes and timestamp
        """
        pass

    @abstractmethod
    def load(self, blob_id: str) -> GraphSnapshot:
        """Load a previously stored snapshot.

        Raises:
            SnapshotStorageError: If the blob does not exist or cannot be read
        """
        pass


class MetadataLedger(ABC):
    """Registry recording named graphs and the blobs that hold them."""

    @abstractmethod
    def record_metadata(
        self,
        name: str,
        description: str,
        blob_id: str,
        counts: Tuple[int, int],
        visibility: bool = False,
        tags: Optional[List[str]] = None,
    ) -> str:
        """Record metadata for a stored graph.

        Args:
            name: Graph name
            description: Graph description
            blob_id: Blob holding the snapshot
            counts: Tuple of (node count, relationship count)
            visibility: Whether the graph is public
            tags: Optional tags

        Returns:
            Record ID
        """
        pass

    @abstractmethod
    def get_metadata(self, record_id: str) -> Optional[GraphRecord]:
        """Get a ledger record, or None if not found."""
        pass


class InMemorySnapshotStore(SnapshotStore):
    """Snapshot store keeping JSON blobs in a dictionary.

    Blob IDs are the sha256 of the encoded blob, so storing identical
    content twice yields the same ID.
    """

    def __init__(self):
        self._blobs: Dict[str, bytes] = {}

    def __len__(self) -> int:
        return len(self._blobs)

    def store(
        self,
        nodes: Sequence[Node],
        relationships: Sequence[Relationship],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> StoredSnapshot:
        metadata = metadata or {}
        snapshot = GraphSnapshot(
            nodes=tuple(nodes),
            relationships=tuple(relationships),
            name=metadata.get("name"),
            description=metadata.get("description"),
        )
        blob = json.dumps(snapshot.to_dict(), sort_keys=True).encode("utf-8")
        blob_id = hashlib.sha256(blob).hexdigest()
        self._blobs[blob_id] = blob

        logger.info("Stored snapshot", blob_id=blob_id, size=len(blob), nodes=len(nodes))
        return StoredSnapshot(blob_id=blob_id, size=len(blob), timestamp=datetime.now(timezone.utc))

    def load(self, blob_id: str) -> GraphSnapshot:
        blob = self._blobs.get(blob_id)
        if blob is None:
            raise SnapshotStorageError(f"Blob {blob_id} not found", "load", {"blob_id": blob_id})
        try:
            return GraphSnapshot.from_dict(json.loads(blob.decode("utf-8")))
        except (ValueError, TypeError) as e:
            raise SnapshotStorageError(f"Blob {blob_id} is not a valid snapshot: {e}", "load") from e


class InMemoryMetadataLedger(MetadataLedger):
    """Ledger keeping records in a dictionary."""

    def __init__(self):
        self._records: Dict[str, GraphRecord] = {}

    def record_metadata(
        self,
        name: str,
        description: str,
        blob_id: str,
        counts: Tuple[int, int],
        visibility: bool = False,
        tags: Optional[List[str]] = None,
    ) -> str:
        record_id = f"graph_{uuid.uuid4().hex}"
        node_count, relationship_count = counts
        self._records[record_id] = GraphRecord(
            record_id=record_id,
            name=name,
            description=description,
            blob_id=blob_id,
            node_count=node_count,
            relationship_count=relationship_count,
            is_public=visibility,
            tags=list(tags or []),
        )
        logger.info("Recorded graph metadata", record_id=record_id, blob_id=blob_id)
        return record_id

    def get_metadata(self, record_id: str) -> Optional[GraphRecord]:
        return self._records.get(record_id)

    def get_public_records(self) -> List[GraphRecord]:
        return [record for record in self._records.values() if record.is_public]


def publish_graph(
    store: GraphStore,
    snapshot_store: SnapshotStore,
    ledger: MetadataLedger,
    name: str,
    description: str = "",
    is_public: bool = False,
    tags: Optional[List[str]] = None,
) -> Tuple[StoredSnapshot, str]:
    """Store the current graph and anchor it in the ledger.

    Returns:
        Tuple of (snapshot receipt, ledger record ID)
    """
    snapshot = store.get_all_data()
    receipt = snapshot_store.store(
        snapshot.nodes,
        snapshot.relationships,
        {"name": name, "description": description},
    )
    record_id = ledger.record_metadata(
        name,
        description,
        receipt.blob_id,
        (len(snapshot.nodes), len(snapshot.relationships)),
        visibility=is_public,
        tags=tags,
    )
    return receipt, record_id


def restore_graph(store: GraphStore, snapshot_store: SnapshotStore, blob_id: str) -> Tuple[int, int]:
    """Replace the contents of ``store`` with a stored snapshot.

    The snapshot is loaded and checked against the store's policies before
    the store is cleared, so a failed load or a rejected snapshot leaves the
    store untouched.

    Returns:
        Tuple of (node count, relationship count) loaded
    """
    snapshot = snapshot_store.load(blob_id)
    store.check_snapshot(snapshot, replace=True)
    store.clear_graph()
    return store.import_snapshot(snapshot)
