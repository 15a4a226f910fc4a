"""Graph-level models: statistics and snapshots."""

from collections import Counter
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .node import Node
from .relationship import Relationship
from .types import NodeId


class GraphStats(BaseModel):
    """Statistics derived from the live contents of a store.

    Never stored; always recomputed, so it cannot drift from the store.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    node_count: int = 0
    relationship_count: int = 0
    node_types: Dict[str, int] = Field(default_factory=dict)
    relationship_types: Dict[str, int] = Field(default_factory=dict)

    @classmethod
    def from_elements(cls, nodes: List[Node], relationships: List[Relationship]) -> "GraphStats":
        """Compute statistics from node and relationship collections."""
        return cls(
            node_count=len(nodes),
            relationship_count=len(relationships),
            node_types=dict(Counter(node.type for node in nodes)),
            relationship_types=dict(Counter(rel.type for rel in relationships)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class GraphSnapshot(BaseModel):
    """Immutable copy of all nodes and relationships of a store.

    Nodes and relationships keep store insertion order. Mutating a snapshot
    never affects the store it was taken from.

    Attributes:
        nodes: Copies of all nodes
        relationships: Copies of all relationships
        name: Optional name of the graph
        description: Optional description of the graph
    """

    model_config = ConfigDict(frozen=True)

    nodes: Tuple[Node, ...] = ()
    relationships: Tuple[Relationship, ...] = ()
    name: Optional[str] = None
    description: Optional[str] = None

    @property
    def node_ids(self) -> List[NodeId]:
        return [node.id for node in self.nodes]

    def get_stats(self) -> GraphStats:
        """Compute statistics for the snapshot contents."""
        return GraphStats.from_elements(list(self.nodes), list(self.relationships))

    def to_dict(self) -> Dict[str, Any]:
        """Convert snapshot to dictionary for JSON serialization."""
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "relationships": [rel.to_dict() for rel in self.relationships],
            "name": self.name,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GraphSnapshot":
        """Create snapshot from dictionary.

        Args:
            data: Dictionary representation of the snapshot

        Returns:
            GraphSnapshot instance
        """
        return cls(
            nodes=tuple(Node.from_dict(n) for n in data.get("nodes", [])),
            relationships=tuple(Relationship.from_dict(r) for r in data.get("relationships", [])),
            name=data.get("name"),
            description=data.get("description"),
        )
