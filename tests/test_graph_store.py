"""Tests for the in-memory graph store."""

from datetime import datetime, timedelta, timezone

import pytest

from walgraph.exceptions import ConstraintError, GraphReferenceError, GraphValidationError
from walgraph.models import GraphSnapshot, Node, Relationship
from walgraph.storage import GraphStore


class TestNodeCrud:
    """Test node creation, lookup, update and deletion."""

    def test_create_and_get_node(self, store):
        """Created nodes round-trip with matching type and properties."""
        node_id = store.create_node("Person", {"name": "Alice", "age": 30})
        node = store.get_node(node_id)

        assert node is not None
        assert node.id == node_id
        assert node.type == "Person"
        assert node.properties == {"name": "Alice", "age": 30}
        assert node.labels == []
        assert node.created_at == node.updated_at

    def test_generated_ids_are_unique(self, store):
        ids = {store.create_node("Thing") for _ in range(200)}
        assert len(ids) == 200
        assert all(node_id.startswith("node_") for node_id in ids)

    def test_create_node_copies_properties(self, store):
        properties = {"name": "Alice"}
        node_id = store.create_node("Person", properties)
        properties["name"] = "Mallory"

        assert store.get_node(node_id).properties == {"name": "Alice"}

    @pytest.mark.parametrize("node_type", ["", "   "])
    def test_create_node_requires_type(self, store, node_type):
        with pytest.raises(GraphValidationError):
            store.create_node(node_type)
        assert store.node_count == 0

    def test_create_node_rejects_non_scalar_properties(self, store):
        with pytest.raises(GraphValidationError):
            store.create_node("Person", {"tags": ["a", "b"]})
        assert store.node_count == 0

    def test_create_node_with_caller_id(self, store):
        """Bulk importers may supply their own IDs."""
        node_id = store.create_node("Person", {"name": "Alice"}, node_id="csv-1")
        assert node_id == "csv-1"
        assert "csv-1" in store

    def test_duplicate_caller_id_rejected(self, store):
        store.create_node("Person", node_id="csv-1")
        with pytest.raises(ConstraintError):
            store.create_node("Person", node_id="csv-1")

    def test_get_missing_node_returns_none(self, store):
        assert store.get_node("node_missing") is None

    def test_returned_node_is_a_copy(self, store):
        node_id = store.create_node("Person", {"name": "Alice"})
        node = store.get_node(node_id)
        node.properties["name"] = "Mallory"

        assert store.get_node(node_id).properties["name"] == "Alice"

    def test_update_node_merges_properties(self, store):
        node_id = store.create_node("Person", {"name": "Alice", "age": 30})
        before = store.get_node(node_id)

        updated = store.update_node(node_id, {"age": 31, "city": "Berlin"})

        assert updated.properties == {"name": "Alice", "age": 31, "city": "Berlin"}
        assert updated.created_at == before.created_at
        assert updated.updated_at >= before.updated_at

    def test_update_node_replace(self, store):
        node_id = store.create_node("Person", {"name": "Alice", "age": 30})
        updated = store.update_node(node_id, {"name": "Alicia"}, labels=["Employee"], replace=True)

        assert updated.properties == {"name": "Alicia"}
        assert updated.labels == ["Employee"]

    def test_update_missing_node(self, store):
        with pytest.raises(GraphReferenceError):
            store.update_node("node_missing", {"a": 1})

    def test_delete_missing_node(self, store):
        with pytest.raises(GraphReferenceError) as exc_info:
            store.delete_node("node_missing")
        assert exc_info.value.entity_id == "node_missing"

    def test_timestamps_never_decrease(self, store):
        ids = [store.create_node("Thing") for _ in range(20)]
        stamps = [store.get_node(node_id).created_at for node_id in ids]
        assert stamps == sorted(stamps)


class TestRelationshipCrud:
    """Test relationship creation, lookup, update and deletion."""

    def test_create_relationship(self, store):
        alice = store.create_node("Person", {"name": "Alice"})
        bob = store.create_node("Person", {"name": "Bob"})

        rel_id = store.create_relationship("KNOWS", alice, bob, {"since": 2020})
        rel = store.get_relationship(rel_id)

        assert rel.type == "KNOWS"
        assert rel.source_id == alice
        assert rel.target_id == bob
        assert rel.properties == {"since": 2020}
        assert rel.weight is None
        assert rel.effective_weight == 1.0
        assert rel.created_at == rel.updated_at
        assert rel_id.startswith("rel_")

    @pytest.mark.parametrize("missing", ["source", "target", "both"])
    def test_missing_endpoint_raises_and_creates_nothing(self, store, missing):
        existing = store.create_node("Person")
        source = "node_missing" if missing in ("source", "both") else existing
        target = "node_missing" if missing in ("target", "both") else existing

        with pytest.raises(GraphReferenceError):
            store.create_relationship("KNOWS", source, target)
        assert store.relationship_count == 0

    def test_weight_must_be_positive(self, store):
        a = store.create_node("A")
        b = store.create_node("B")
        with pytest.raises(GraphValidationError):
            store.create_relationship("LINKS", a, b, weight=0)

    def test_self_loop_allowed_by_default(self, store):
        a = store.create_node("A")
        rel_id = store.create_relationship("LIKES", a, a)
        assert store.get_relationship(rel_id).is_self_loop

    def test_self_loop_rejected_when_disabled(self):
        store = GraphStore(allow_self_loops=False)
        a = store.create_node("A")
        with pytest.raises(ConstraintError):
            store.create_relationship("LIKES", a, a)
        assert store.relationship_count == 0

    def test_self_loop_policy_from_environment(self, monkeypatch):
        monkeypatch.setenv("WALGRAPH_ALLOW_SELF_LOOPS", "false")
        from walgraph.config import reset_settings
        reset_settings()

        store = GraphStore()
        assert store.allow_self_loops is False

    def test_update_relationship(self, store):
        a = store.create_node("A")
        b = store.create_node("B")
        rel_id = store.create_relationship("LINKS", a, b, {"x": 1})

        updated = store.update_relationship(rel_id, {"y": 2}, weight=2.5)

        assert updated.properties == {"x": 1, "y": 2}
        assert updated.weight == 2.5

    def test_delete_relationship_keeps_nodes(self, store):
        a = store.create_node("A")
        b = store.create_node("B")
        rel_id = store.create_relationship("LINKS", a, b)

        store.delete_relationship(rel_id)

        assert store.get_relationship(rel_id) is None
        assert store.node_count == 2

    def test_delete_missing_relationship(self, store):
        with pytest.raises(GraphReferenceError):
            store.delete_relationship("rel_missing")


class TestDeletePolicy:
    """Deleting a node with incident relationships."""

    def test_cascade_delete_is_default(self, store, sample_graph):
        """Incident relationships are removed with the node."""
        removed = store.delete_node(sample_graph["bob"])

        assert set(removed) == {
            sample_graph["alice_knows_bob"],
            sample_graph["bob_knows_charlie"],
            sample_graph["bob_works_at"],
        }
        assert store.get_node(sample_graph["bob"]) is None
        assert store.relationship_count == 2
        for rel in store.get_all_data().relationships:
            assert rel.source_id in store
            assert rel.target_id in store

    def test_reject_delete_when_cascade_disabled(self):
        store = GraphStore(cascade_deletes=False)
        a = store.create_node("A")
        b = store.create_node("B")
        rel_id = store.create_relationship("LINKS", a, b)

        with pytest.raises(ConstraintError) as exc_info:
            store.delete_node(a)

        assert exc_info.value.details["relationship_ids"] == [rel_id]
        assert a in store
        assert store.relationship_count == 1

    def test_reject_policy_allows_isolated_node(self):
        store = GraphStore(cascade_deletes=False)
        a = store.create_node("A")
        assert store.delete_node(a) == []
        assert store.node_count == 0


class TestQueries:
    """Test lookups by type, direction and neighbourhood."""

    def test_nodes_by_type(self, store, sample_graph):
        people = store.get_nodes_by_type("Person")
        assert [n.properties["name"] for n in people] == ["Alice", "Bob", "Charlie"]
        assert len(store.get_nodes_by_type()) == 5
        assert store.get_nodes_by_type("Robot") == []

    def test_relationships_by_type(self, store, sample_graph):
        assert len(store.get_relationships_by_type("KNOWS")) == 2
        assert len(store.get_relationships_by_type()) == 5

    def test_node_relationships_by_direction(self, store, sample_graph):
        bob = sample_graph["bob"]
        assert len(store.get_node_relationships(bob)) == 3
        assert len(store.get_node_relationships(bob, direction="out")) == 2
        assert len(store.get_node_relationships(bob, direction="in")) == 1
        assert len(store.get_node_relationships(bob, relationship_type="KNOWS")) == 2

    def test_node_relationships_bad_direction(self, store, sample_graph):
        with pytest.raises(ValueError):
            store.get_node_relationships(sample_graph["bob"], direction="sideways")

    def test_neighbors(self, store, sample_graph):
        neighbors = store.get_neighbors(sample_graph["bob"])
        assert [n.properties["name"] for n in neighbors] == ["Alice", "Charlie", "TechCorp"]


class TestSnapshotsAndStats:
    """Test snapshots, statistics and clearing."""

    def test_stats(self, store, sample_graph):
        stats = store.get_graph_stats()

        assert stats.node_count == 5
        assert stats.relationship_count == 5
        assert stats.node_types == {"Person": 3, "Company": 1, "Product": 1}
        assert stats.relationship_types == {"KNOWS": 2, "WORKS_AT": 2, "DEVELOPS": 1}
        assert stats.to_dict()["nodeCount"] == 5

    def test_stats_match_snapshot_after_mutations(self, store, sample_graph):
        """Stats never drift from the store contents."""
        store.delete_node(sample_graph["techcorp"])
        store.delete_relationship(sample_graph["alice_knows_bob"])
        extra = store.create_node("Robot")
        store.create_relationship("BUILT", extra, sample_graph["charlie"])

        assert store.get_graph_stats() == store.get_all_data().get_stats()

    def test_snapshot_is_isolated(self, store, sample_graph):
        snapshot = store.get_all_data()
        snapshot.nodes[0].properties["name"] = "Mallory"
        store.create_node("Robot")

        assert store.get_node(sample_graph["alice"]).properties["name"] == "Alice"
        assert len(snapshot.nodes) == 5

    def test_snapshot_keeps_insertion_order(self, store, sample_graph):
        snapshot = store.get_all_data()
        assert snapshot.node_ids == [
            sample_graph[name] for name in ("alice", "bob", "charlie", "techcorp", "webapp")
        ]

    def test_clear_graph(self, store, sample_graph):
        store.clear_graph()

        stats = store.get_graph_stats()
        assert stats.node_count == 0
        assert stats.relationship_count == 0
        assert len(store) == 0

        # The store stays usable after clearing
        node_id = store.create_node("Person")
        assert store.get_node(node_id) is not None

    def test_snapshot_dict_round_trip(self, store, sample_graph):
        snapshot = store.get_all_data()
        restored = GraphSnapshot.from_dict(snapshot.to_dict())

        assert restored.node_ids == snapshot.node_ids
        assert restored.get_stats() == snapshot.get_stats()
        assert snapshot.to_dict()["relationships"][0]["sourceId"] == sample_graph["alice"]


class TestImportSnapshot:
    """Test bulk loading with caller-supplied IDs."""

    def _node(self, node_id, node_type="Person", **properties):
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        return Node(id=node_id, type=node_type, properties=properties, created_at=now, updated_at=now)

    def _relationship(self, rel_id, source_id, target_id):
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        return Relationship(
            id=rel_id, type="KNOWS", source_id=source_id, target_id=target_id,
            created_at=now, updated_at=now,
        )

    def test_import_keeps_ids(self, store):
        snapshot = GraphSnapshot(
            nodes=(self._node("p1", name="Alice"), self._node("p2", name="Bob")),
            relationships=(self._relationship("r1", "p1", "p2"),),
        )

        assert store.import_snapshot(snapshot) == (2, 1)
        assert store.get_node("p1").properties == {"name": "Alice"}
        assert store.get_relationship("r1").target_id == "p2"

    def test_import_rejects_dangling_relationship(self, store):
        snapshot = GraphSnapshot(
            nodes=(self._node("p1"),),
            relationships=(self._relationship("r1", "p1", "p9"),),
        )

        with pytest.raises(GraphReferenceError):
            store.import_snapshot(snapshot)
        assert store.node_count == 0

    def test_import_rejects_duplicate_ids(self, store):
        store.create_node("Person", node_id="p1")
        snapshot = GraphSnapshot(nodes=(self._node("p1"),))

        with pytest.raises(ConstraintError):
            store.import_snapshot(snapshot)

    def test_clock_moves_past_imported_timestamps(self, store):
        future = datetime.now(timezone.utc) + timedelta(days=1)
        node = Node(id="p1", type="Person", created_at=future, updated_at=future)
        store.import_snapshot(GraphSnapshot(nodes=(node,)))

        node_id = store.create_node("Person")
        assert store.get_node(node_id).created_at >= future
