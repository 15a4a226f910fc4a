"""Test configuration and fixtures for WalGraph tests."""

import pytest

from walgraph.config import reset_settings
from walgraph.operations import GraphAnalytics
from walgraph.query import QueryExecutor
from walgraph.storage import GraphStore


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Give every test settings read from a clean environment."""
    for name in (
        "WALGRAPH_LOG_LEVEL",
        "WALGRAPH_ENVIRONMENT",
        "WALGRAPH_CASCADE_DELETES",
        "WALGRAPH_ALLOW_SELF_LOOPS",
        "WALGRAPH_PAGERANK_DAMPING",
        "WALGRAPH_PAGERANK_MAX_ITERATIONS",
        "WALGRAPH_PAGERANK_TOLERANCE",
        "WALGRAPH_MAX_BATCH_LINES",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def store():
    """Empty graph store with default policies."""
    return GraphStore()


@pytest.fixture
def executor(store):
    return QueryExecutor(store)


@pytest.fixture
def analytics(store):
    return GraphAnalytics(store)


@pytest.fixture
def sample_graph(store):
    """Small people/company graph.

    Returns:
        Dictionary of node and relationship IDs by name
    """
    ids = {
        "alice": store.create_node("Person", {"name": "Alice", "age": 30}),
        "bob": store.create_node("Person", {"name": "Bob", "age": 25}),
        "charlie": store.create_node("Person", {"name": "Charlie", "age": 28}),
        "techcorp": store.create_node("Company", {"name": "TechCorp", "founded": 2020}),
        "webapp": store.create_node("Product", {"name": "WebApp", "version": "2.0"}),
    }
    ids["alice_knows_bob"] = store.create_relationship("KNOWS", ids["alice"], ids["bob"], {"since": "2020"})
    ids["bob_knows_charlie"] = store.create_relationship("KNOWS", ids["bob"], ids["charlie"], {"since": "2021"})
    ids["alice_works_at"] = store.create_relationship("WORKS_AT", ids["alice"], ids["techcorp"], {"role": "Engineer"})
    ids["bob_works_at"] = store.create_relationship("WORKS_AT", ids["bob"], ids["techcorp"], {"role": "Designer"})
    ids["develops"] = store.create_relationship("DEVELOPS", ids["techcorp"], ids["webapp"], {"responsibility": 100})
    return ids
