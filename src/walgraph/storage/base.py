"""Base storage interface for graph data."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import GraphSnapshot, GraphStats, Node, Relationship
from ..models.types import NodeId, Properties, RelationshipId


class BaseGraphStore(ABC):
    """Base class for property graph stores.

    This abstract class defines the interface that the executor and the
    analytics engine rely on. All operations are synchronous and run to
    completion; implementations provide no thread safety.
    """

    @abstractmethod
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
            properties: Optional property map
            labels: Optional auxiliary labels
            node_id: Caller-supplied ID (bulk import only)

        Returns:
            ID of the created node
        """
        pass

    @abstractmethod
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

        Returns:
            ID of the created relationship
        """
        pass

    @abstractmethod
    def get_node(self, node_id: NodeId) -> Optional[Node]:
        """Get a node by ID, or None if not found."""
        pass

    @abstractmethod
    def get_relationship(self, relationship_id: RelationshipId) -> Optional[Relationship]:
        """Get a relationship by ID, or None if not found."""
        pass

    @abstractmethod
    def delete_node(self, node_id: NodeId) -> List[RelationshipId]:
        """Delete a node.

        Returns:
            IDs of relationships deleted along with the node
        """
        pass

    @abstractmethod
    def delete_relationship(self, relationship_id: RelationshipId) -> None:
        """Delete a relationship."""
        pass

    @abstractmethod
    def get_all_data(self) -> GraphSnapshot:
        """Get an immutable snapshot of all nodes and relationships."""
        pass

    @abstractmethod
    def get_graph_stats(self) -> GraphStats:
        """Compute statistics over the current contents."""
        pass

    @abstractmethod
    def clear_graph(self) -> None:
        """Remove all nodes and relationships."""
        pass

    def get_nodes_by_type(self, node_type: Optional[str] = None) -> List[Node]:
        """Get nodes whose type equals ``node_type`` (all nodes when None)."""
        nodes = list(self.get_all_data().nodes)
        if node_type is None:
            return nodes
        return [node for node in nodes if node.type == node_type]

    def get_relationships_by_type(self, relationship_type: Optional[str] = None) -> List[Relationship]:
        """Get relationships whose type equals ``relationship_type`` (all when None)."""
        relationships = list(self.get_all_data().relationships)
        if relationship_type is None:
            return relationships
        return [rel for rel in relationships if rel.type == relationship_type]
