"""Graph analytics operations.

This module provides structural analytics over a read-only snapshot of a
graph store: degree centrality, connected components, PageRank and summary
statistics. Nothing here mutates the store, and an empty graph yields empty
results rather than errors.
"""

from collections import Counter, defaultdict, deque
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import structlog

from ..config import get_settings
from ..models import GraphSnapshot, Relationship
from ..models.types import NodeId
from ..storage.base import BaseGraphStore

logger = structlog.get_logger(__name__)


@dataclass
class DegreeCentrality:
    """Degree of one node, counting both directions."""

    node_id: NodeId
    degree: int

    def to_dict(self) -> Dict[str, Any]:
        return {"nodeId": self.node_id, "degree": self.degree}


@dataclass
class PageRankScore:
    """PageRank score of one node."""

    node_id: NodeId
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return {"nodeId": self.node_id, "score": self.score}


def _filter_relationships(
    relationships: Sequence[Relationship], relation_types: Optional[List[str]]
) -> List[Relationship]:
    if not relation_types:
        return list(relationships)
    return [r for r in relationships if r.type in relation_types]


class GraphAnalytics:
    """Graph analytics and metrics.

    Every call takes one snapshot of the store and computes over it, so a
    result always describes a single consistent state of the graph.
    """

    def __init__(self, store: BaseGraphStore):
        """Initialize GraphAnalytics with a graph store.

        Args:
            store: Store to read snapshots from
        """
        self.store = store
        self.logger = logger.bind(component=self.__class__.__name__)

    def _snapshot(self) -> GraphSnapshot:
        return self.store.get_all_data()

    def calculate_degree_centrality(
        self, relation_types: Optional[List[str]] = None, top_k: Optional[int] = None
    ) -> List[DegreeCentrality]:
        """Calculate degree centrality for all nodes.

        Both directions count, so an edge between A and B adds one to each
        and a self-loop adds two to its node. Ties keep node insertion order.

        Args:
            relation_types: Optional filter for relationship types
            top_k: Return only top K nodes by degree

        Returns:
            Degrees sorted in descending order
        """
        self.logger.info("Calculating degree centrality")
        snapshot = self._snapshot()
        relationships = _filter_relationships(snapshot.relationships, relation_types)

        degree_counts: Dict[NodeId, int] = defaultdict(int)
        for rel in relationships:
            degree_counts[rel.source_id] += 1
            degree_counts[rel.target_id] += 1

        scores = [
            DegreeCentrality(node_id=node_id, degree=degree_counts.get(node_id, 0))
            for node_id in snapshot.node_ids
        ]
        # list.sort is stable, so ties stay in insertion order
        scores.sort(key=lambda s: s.degree, reverse=True)

        if top_k:
            scores = scores[:top_k]
        return scores

    def find_connected_components(
        self, relation_types: Optional[List[str]] = None
    ) -> List[List[NodeId]]:
        """Find connected components, ignoring relationship direction.

        Components are discovered by breadth-first search started from each
        unvisited node in insertion order. Isolated nodes form singleton
        components.

        Args:
            relation_types: Optional filter for relationship types

        Returns:
            List of components, each a list of node IDs in visit order
        """
        self.logger.info("Finding connected components")
        snapshot = self._snapshot()
        relationships = _filter_relationships(snapshot.relationships, relation_types)

        adjacency: Dict[NodeId, List[NodeId]] = defaultdict(list)
        for rel in relationships:
            adjacency[rel.source_id].append(rel.target_id)
            adjacency[rel.target_id].append(rel.source_id)

        visited = set()
        components = []

        for start_id in snapshot.node_ids:
            if start_id in visited:
                continue

            component = []
            visited.add(start_id)
            queue = deque([start_id])
            while queue:
                current_id = queue.popleft()
                component.append(current_id)
                for neighbor_id in adjacency.get(current_id, []):
                    if neighbor_id not in visited:
                        visited.add(neighbor_id)
                        queue.append(neighbor_id)

            components.append(component)

        self.logger.info("Found connected components", count=len(components))
        return components

    def calculate_pagerank(
        self,
        damping: Optional[float] = None,
        max_iterations: Optional[int] = None,
        tolerance: Optional[float] = None,
        weighted: bool = False,
        relation_types: Optional[List[str]] = None,
        top_k: Optional[int] = None,
    ) -> List[PageRankScore]:
        """Calculate PageRank over the directed graph.

        Every node starts at ``1/N``. Each iteration applies
        ``rank'(v) = (1-d)/N + d * sum(rank(u) / out(u))`` over incoming
        edges, and spreads the rank of dangling nodes (no outgoing edges)
        evenly over all nodes so the total stays 1. Iteration stops after
        ``max_iterations`` or once the L1 change drops below ``tolerance``.

        Args:
            damping: Damping factor (defaults to ``WALGRAPH_PAGERANK_DAMPING``, 0.85)
            max_iterations: Iteration cap (defaults to 100)
            tolerance: L1 convergence threshold (defaults to 1e-6)
            weighted: Spread rank in proportion to relationship weight
            relation_types: Optional filter for relationship types
            top_k: Return only top K nodes by score

        Returns:
            Scores sorted in descending order
        """
        settings = get_settings()
        damping = settings.pagerank_damping if damping is None else damping
        max_iterations = settings.pagerank_max_iterations if max_iterations is None else max_iterations
        tolerance = settings.pagerank_tolerance if tolerance is None else tolerance

        self.logger.info("Calculating PageRank", damping=damping, weighted=weighted)
        snapshot = self._snapshot()
        node_ids = snapshot.node_ids
        n = len(node_ids)
        if n == 0:
            return []

        index = {node_id: i for i, node_id in enumerate(node_ids)}
        out_weight = [0.0] * n
        incoming: List[List[tuple]] = [[] for _ in range(n)]
        for rel in _filter_relationships(snapshot.relationships, relation_types):
            source = index.get(rel.source_id)
            target = index.get(rel.target_id)
            if source is None or target is None:
                continue
            weight = rel.effective_weight if weighted else 1.0
            out_weight[source] += weight
            incoming[target].append((source, weight))

        ranks = [1.0 / n] * n
        iterations = 0
        for iterations in range(1, max_iterations + 1):
            dangling_mass = sum(ranks[i] for i in range(n) if out_weight[i] == 0.0)
            base = (1.0 - damping) / n + damping * dangling_mass / n

            new_ranks = [
                base + damping * sum(ranks[u] * w / out_weight[u] for u, w in incoming[v])
                for v in range(n)
            ]
            delta = sum(abs(new - old) for new, old in zip(new_ranks, ranks))
            ranks = new_ranks
            if delta < tolerance:
                break

        self.logger.debug("PageRank finished", iterations=iterations)

        scores = [PageRankScore(node_id=node_id, score=ranks[i]) for i, node_id in enumerate(node_ids)]
        scores.sort(key=lambda s: s.score, reverse=True)

        if top_k:
            scores = scores[:top_k]
        return scores

    def calculate_graph_density(self, relation_types: Optional[List[str]] = None) -> float:
        """Calculate the density of the graph.

        Graph density is the ratio of existing edges to possible undirected
        edges, capped at 1.0.
        """
        snapshot = self._snapshot()
        num_nodes = len(snapshot.nodes)
        num_relationships = len(_filter_relationships(snapshot.relationships, relation_types))

        if num_nodes <= 1:
            return 0.0

        max_possible_edges = num_nodes * (num_nodes - 1) / 2
        return min(num_relationships / max_possible_edges, 1.0)

    def get_graph_statistics(self) -> Dict[str, Any]:
        """Get comprehensive graph statistics.

        Returns:
            Dictionary containing counts, type distributions, degree
            statistics and connectivity
        """
        self.logger.info("Calculating comprehensive graph statistics")
        snapshot = self._snapshot()
        stats = snapshot.get_stats()

        degrees = [score.degree for score in self.calculate_degree_centrality()]
        components = self.find_connected_components()

        return {
            "basic_metrics": {
                "num_nodes": stats.node_count,
                "num_relationships": stats.relationship_count,
                "density": self.calculate_graph_density(),
            },
            "degree_statistics": {
                "average_degree": sum(degrees) / len(degrees) if degrees else 0.0,
                "max_degree": max(degrees) if degrees else 0,
                "min_degree": min(degrees) if degrees else 0,
                "degree_distribution": dict(Counter(degrees)),
            },
            "connectivity": {
                "num_components": len(components),
                "largest_component_size": max((len(c) for c in components), default=0),
                "is_connected": len(components) <= 1,
            },
            "node_types": stats.node_types,
            "relationship_types": stats.relationship_types,
        }
