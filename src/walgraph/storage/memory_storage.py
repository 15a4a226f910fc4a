"""In-memory property graph store."""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

import structlog
from pydantic import ValidationError

from ..config import get_settings
from ..exceptions import ConstraintError, GraphReferenceError, GraphValidationError
from ..models import GraphSnapshot, GraphStats, Node, Relationship
from ..models.types import NodeId, Properties, RelationshipId
from ..utils.id_generation import IDGenerator, IDValidationError, IDValidator
from .base import BaseGraphStore

logger = structlog.get_logger(__name__)

DIRECTIONS = ("in", "out", "both")


class GraphStore(BaseGraphStore):
    """In-memory property graph store.

    The store is the sole owner of node and relationship identity and
    lifetime. Elements are kept in insertion order. Everything handed out
    (single lookups and snapshots) is a copy, so callers cannot break the
    store's invariants by mutating returned objects.

    Deleting a node that still has incident relationships either removes
    those relationships too (cascade, the default) or is rejected with a
    ``ConstraintError``. Self-loops are allowed unless disabled.
    """

    def __init__(
        self,
        cascade_deletes: Optional[bool] = None,
        allow_self_loops: Optional[bool] = None,
    ):
        """Initialize the store.

        Args:
            cascade_deletes: Delete incident relationships with their node.
                Falls back to ``WALGRAPH_CASCADE_DELETES``.
            allow_self_loops: Accept relationships whose source and target
                are the same node. Falls back to ``WALGRAPH_ALLOW_SELF_LOOPS``.
        """
        settings = get_settings()
        self.cascade_deletes = settings.cascade_deletes if cascade_deletes is None else cascade_deletes
        self.allow_self_loops = settings.allow_self_loops if allow_self_loops is None else allow_self_loops

        self._nodes: Dict[NodeId, Node] = {}
        self._relationships: Dict[RelationshipId, Relationship] = {}
        self._last_timestamp: Optional[datetime] = None
        self.logger = logger.bind(store_id=id(self))

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def relationship_count(self) -> int:
        return len(self._relationships)

    def _now(self) -> datetime:
        """Current time, never earlier than any timestamp handed out before."""
        now = datetime.now(timezone.utc)
        if self._last_timestamp is not None and now < self._last_timestamp:
            now = self._last_timestamp
        self._last_timestamp = now
        return now

    def _advance_clock(self, seen: datetime) -> None:
        if seen.tzinfo is None:
            seen = seen.replace(tzinfo=timezone.utc)
        if self._last_timestamp is None or seen > self._last_timestamp:
            self._last_timestamp = seen

    def _require_node(self, node_id: NodeId) -> Node:
        node = self._nodes.get(node_id)
        if node is None:
            raise GraphReferenceError(f"Node {node_id} not found", node_id)
        return node

    def _require_relationship(self, relationship_id: RelationshipId) -> Relationship:
        relationship = self._relationships.get(relationship_id)
        if relationship is None:
            raise GraphReferenceError(f"Relationship {relationship_id} not found", relationship_id)
        return relationship

    def _check_new_id(self, element_id: str, taken: Dict[str, object]) -> str:
        try:
            IDValidator.validate_id(element_id)
        except IDValidationError as e:
            raise GraphValidationError(str(e)) from e
        if element_id in taken:
            raise ConstraintError(f"ID {element_id} is already in use", {"id": element_id})
        return element_id

    def _incident_relationship_ids(self, node_id: NodeId) -> List[RelationshipId]:
        return [
            rel_id for rel_id, rel in self._relationships.items()
            if rel.source_id == node_id or rel.target_id == node_id
        ]

    # Nodes

    def create_node(
        self,
        node_type: str,
        properties: Optional[Properties] = None,
        labels: Optional[List[str]] = None,
        node_id: Optional[NodeId] = None,
    ) -> NodeId:
        """Create a node.

        Args:
            node_type: Primary label of the node
            properties: Optional property map (copied)
            labels: Optional auxiliary labels
            node_id: Caller-supplied ID, used verbatim (bulk import)

        Returns:
            ID of the created node

        Raises:
            GraphValidationError: If the type is empty or properties are invalid
            ConstraintError: If ``node_id`` is already in use
        """
        if not isinstance(node_type, str) or not node_type.strip():
            raise GraphValidationError("Node type must be a non-empty string")

        if node_id is None:
            node_id = IDGenerator.generate_unique(IDGenerator.generate_node_id, self._nodes)
        else:
            self._check_new_id(node_id, self._nodes)

        now = self._now()
        try:
            node = Node(
                id=node_id,
                type=node_type,
                properties=dict(properties or {}),
                labels=list(labels or []),
                created_at=now,
                updated_at=now,
            )
        except ValidationError as e:
            raise GraphValidationError(f"Invalid node data: {e}") from e

        self._nodes[node.id] = node
        self.logger.debug("Node created", node_id=node.id, node_type=node.type)
        return node.id

    def get_node(self, node_id: NodeId) -> Optional[Node]:
        """Get a node by ID.

        Args:
            node_id: ID of the node to get

        Returns:
            Copy of the node if found, None otherwise
        """
        node = self._nodes.get(node_id)
        return node.model_copy(deep=True) if node is not None else None

    def update_node(
        self,
        node_id: NodeId,
        properties: Optional[Properties] = None,
        labels: Optional[List[str]] = None,
        replace: bool = False,
    ) -> Node:
        """Update a node's properties and labels.

        Args:
            node_id: ID of the node to update
            properties: Properties to merge in (or to replace with)
            labels: New labels, when given
            replace: Replace the property map instead of merging into it

        Returns:
            Copy of the updated node

        Raises:
            GraphReferenceError: If the node does not exist
            GraphValidationError: If the new properties are invalid
        """
        node = self._require_node(node_id)

        new_properties = {} if replace else dict(node.properties)
        new_properties.update(properties or {})
        new_labels = list(labels) if labels is not None else list(node.labels)

        try:
            updated = Node(
                id=node.id,
                type=node.type,
                properties=new_properties,
                labels=new_labels,
                created_at=node.created_at,
                updated_at=self._now(),
            )
        except ValidationError as e:
            raise GraphValidationError(f"Invalid node data: {e}") from e

        self._nodes[node_id] = updated
        self.logger.debug("Node updated", node_id=node_id)
        return updated.model_copy(deep=True)

    def delete_node(self, node_id: NodeId) -> List[RelationshipId]:
        """Delete a node.

        With cascading deletes, incident relationships are removed with the
        node. Otherwise the delete is rejected while any exist.

        Args:
            node_id: ID of the node to delete

        Returns:
            IDs of the relationships removed along with the node

        Raises:
            GraphReferenceError: If the node does not exist
            ConstraintError: If incident relationships exist and cascading is off
        """
        self._require_node(node_id)
        incident = self._incident_relationship_ids(node_id)

        if incident and not self.cascade_deletes:
            raise ConstraintError(
                f"Node {node_id} still has {len(incident)} incident relationships",
                {"id": node_id, "relationship_ids": incident},
            )

        for rel_id in incident:
            del self._relationships[rel_id]
        del self._nodes[node_id]

        self.logger.debug("Node deleted", node_id=node_id, cascaded=len(incident))
        return incident

    def get_nodes_by_type(self, node_type: Optional[str] = None) -> List[Node]:
        """Get copies of nodes whose type equals ``node_type`` (all when None)."""
        return [
            node.model_copy(deep=True) for node in self._nodes.values()
            if node_type is None or node.type == node_type
        ]

    # Relationships

    def create_relationship(
        self,
        relationship_type: str,
        source_id: NodeId,
        target_id: NodeId,
        properties: Optional[Properties] = None,
        weight: Optional[float] = None,
        relationship_id: Optional[RelationshipId] = None,
    ) -> RelationshipId:
        """Create a relationship between two live nodes.

        Args:
            relationship_type: Relationship type
            source_id: ID of the source node
            target_id: ID of the target node
            properties: Optional property map (copied)
            weight: Optional positive weight for analytics
            relationship_id: Caller-supplied ID, used verbatim (bulk import)

        Returns:
            ID of the created relationship

        Raises:
            GraphReferenceError: If either endpoint does not exist
            ConstraintError: If a forbidden self-loop or a duplicate ID is given
            GraphValidationError: If the type, weight or properties are invalid
        """
        if source_id not in self._nodes:
            raise GraphReferenceError(f"Source node {source_id} not found", source_id)
        if target_id not in self._nodes:
            raise GraphReferenceError(f"Target node {target_id} not found", target_id)
        if source_id == target_id and not self.allow_self_loops:
            raise ConstraintError(
                f"Self-loop on node {source_id} is not allowed",
                {"id": source_id},
            )
        if not isinstance(relationship_type, str) or not relationship_type.strip():
            raise GraphValidationError("Relationship type must be a non-empty string")

        if relationship_id is None:
            relationship_id = IDGenerator.generate_unique(
                IDGenerator.generate_relationship_id, self._relationships
            )
        else:
            self._check_new_id(relationship_id, self._relationships)

        now = self._now()
        try:
            relationship = Relationship(
                id=relationship_id,
                type=relationship_type,
                source_id=source_id,
                target_id=target_id,
                properties=dict(properties or {}),
                weight=weight,
                created_at=now,
                updated_at=now,
            )
        except ValidationError as e:
            raise GraphValidationError(f"Invalid relationship data: {e}") from e

        self._relationships[relationship.id] = relationship
        self.logger.debug(
            "Relationship created",
            relationship_id=relationship.id,
            relationship_type=relationship.type,
            source_id=source_id,
            target_id=target_id,
        )
        return relationship.id

    def get_relationship(self, relationship_id: RelationshipId) -> Optional[Relationship]:
        """Get a relationship by ID.

        Args:
            relationship_id: ID of the relationship to get

        Returns:
            Copy of the relationship if found, None otherwise
        """
        relationship = self._relationships.get(relationship_id)
        return relationship.model_copy(deep=True) if relationship is not None else None

    def update_relationship(
        self,
        relationship_id: RelationshipId,
        properties: Optional[Properties] = None,
        weight: Optional[float] = None,
        replace: bool = False,
    ) -> Relationship:
        """Update a relationship's properties and weight.

        Raises:
            GraphReferenceError: If the relationship does not exist
            GraphValidationError: If the new data is invalid
        """
        relationship = self._require_relationship(relationship_id)

        new_properties = {} if replace else dict(relationship.properties)
        new_properties.update(properties or {})

        try:
            updated = Relationship(
                id=relationship.id,
                type=relationship.type,
                source_id=relationship.source_id,
                target_id=relationship.target_id,
                properties=new_properties,
                weight=weight if weight is not None else relationship.weight,
                created_at=relationship.created_at,
                updated_at=self._now(),
            )
        except ValidationError as e:
            raise GraphValidationError(f"Invalid relationship data: {e}") from e

        self._relationships[relationship_id] = updated
        self.logger.debug("Relationship updated", relationship_id=relationship_id)
        return updated.model_copy(deep=True)

    def delete_relationship(self, relationship_id: RelationshipId) -> None:
        """Delete a relationship. Nodes are never affected.

        Raises:
            GraphReferenceError: If the relationship does not exist
        """
        self._require_relationship(relationship_id)
        del self._relationships[relationship_id]
        self.logger.debug("Relationship deleted", relationship_id=relationship_id)

    def get_relationships_by_type(self, relationship_type: Optional[str] = None) -> List[Relationship]:
        """Get copies of relationships whose type equals ``relationship_type`` (all when None)."""
        return [
            rel.model_copy(deep=True) for rel in self._relationships.values()
            if relationship_type is None or rel.type == relationship_type
        ]

    def get_node_relationships(
        self,
        node_id: NodeId,
        relationship_type: Optional[str] = None,
        direction: str = "both",
    ) -> List[Relationship]:
        """Get relationships incident to a node.

        Args:
            node_id: ID of the node
            relationship_type: Optional relationship type filter
            direction: ``out`` (node is source), ``in`` (node is target) or ``both``

        Returns:
            Copies of matching relationships

        Raises:
            GraphReferenceError: If the node does not exist
            ValueError: If the direction is not recognized
        """
        if direction not in DIRECTIONS:
            raise ValueError(f"Direction must be one of {DIRECTIONS}, got {direction}")
        self._require_node(node_id)

        results = []
        for rel in self._relationships.values():
            if relationship_type is not None and rel.type != relationship_type:
                continue
            outgoing = direction in ("out", "both") and rel.source_id == node_id
            incoming = direction in ("in", "both") and rel.target_id == node_id
            if outgoing or incoming:
                results.append(rel.model_copy(deep=True))
        return results

    def get_neighbors(self, node_id: NodeId, relationship_type: Optional[str] = None) -> List[Node]:
        """Get neighbouring nodes, ignoring relationship direction.

        Neighbours are returned in store insertion order, each once.

        Raises:
            GraphReferenceError: If the node does not exist
        """
        neighbor_ids = set()
        for rel in self.get_node_relationships(node_id, relationship_type):
            neighbor_ids.add(rel.target_id if rel.source_id == node_id else rel.source_id)

        return [
            node.model_copy(deep=True) for n_id, node in self._nodes.items()
            if n_id in neighbor_ids
        ]

    # Whole graph

    def get_all_data(self) -> GraphSnapshot:
        """Get an immutable snapshot of all nodes and relationships.

        Returns:
            Snapshot holding copies, in insertion order
        """
        return GraphSnapshot(
            nodes=tuple(node.model_copy(deep=True) for node in self._nodes.values()),
            relationships=tuple(rel.model_copy(deep=True) for rel in self._relationships.values()),
        )

    def get_graph_stats(self) -> GraphStats:
        """Compute statistics over the current contents."""
        return GraphStats.from_elements(list(self._nodes.values()), list(self._relationships.values()))

    def clear_graph(self) -> None:
        """Remove all nodes and relationships."""
        node_count = len(self._nodes)
        relationship_count = len(self._relationships)
        self._nodes = {}
        self._relationships = {}
        self.logger.info(
            "Cleared graph",
            removed_nodes=node_count,
            removed_relationships=relationship_count,
        )

    def check_snapshot(self, snapshot: GraphSnapshot, replace: bool = False) -> None:
        """Check that a snapshot could be imported, without changing anything.

        Args:
            snapshot: Nodes and relationships to check
            replace: Check against an empty store, as if it were cleared first

        Raises:
            ConstraintError: If an ID is already in use or repeated, or a
                self-loop is forbidden
            GraphReferenceError: If a relationship endpoint is missing
        """
        existing_nodes = {} if replace else self._nodes
        existing_relationships = {} if replace else self._relationships

        new_node_ids = set()
        for node in snapshot.nodes:
            if node.id in existing_nodes or node.id in new_node_ids:
                raise ConstraintError(f"ID {node.id} is already in use", {"id": node.id})
            new_node_ids.add(node.id)

        new_rel_ids = set()
        for rel in snapshot.relationships:
            if rel.id in existing_relationships or rel.id in new_rel_ids:
                raise ConstraintError(f"ID {rel.id} is already in use", {"id": rel.id})
            for endpoint in (rel.source_id, rel.target_id):
                if endpoint not in existing_nodes and endpoint not in new_node_ids:
                    raise GraphReferenceError(
                        f"Relationship {rel.id} references missing node {endpoint}",
                        endpoint,
                    )
            if rel.is_self_loop and not self.allow_self_loops:
                raise ConstraintError(
                    f"Self-loop on node {rel.source_id} is not allowed",
                    {"id": rel.source_id},
                )
            new_rel_ids.add(rel.id)

    def import_snapshot(self, snapshot: GraphSnapshot) -> Tuple[int, int]:
        """Bulk-load a snapshot, keeping its IDs and timestamps verbatim.

        The whole snapshot is checked before anything is inserted, so a
        rejected import leaves the store untouched.

        Args:
            snapshot: Nodes and relationships to add

        Returns:
            Tuple of (imported node count, imported relationship count)

        Raises:
            ConstraintError: If an ID is already in use or repeated
            GraphReferenceError: If a relationship endpoint is missing
        """
        self.check_snapshot(snapshot)

        for node in snapshot.nodes:
            self._nodes[node.id] = node.model_copy(deep=True)
            self._advance_clock(node.updated_at)
        for rel in snapshot.relationships:
            self._relationships[rel.id] = rel.model_copy(deep=True)
            self._advance_clock(rel.updated_at)

        self.logger.info(
            "Imported snapshot",
            nodes=len(snapshot.nodes),
            relationships=len(snapshot.relationships),
        )
        return len(snapshot.nodes), len(snapshot.relationships)
