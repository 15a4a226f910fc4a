"""WalGraph.

An embeddable in-memory property-graph engine with a small Cypher-like
command language and structural analytics.
"""

__version__ = "0.1.0"

from .config import Settings, get_settings, reset_settings
from .exceptions import (
    ConstraintError,
    ExecutionError,
    GraphReferenceError,
    GraphValidationError,
    ParseError,
    SnapshotStorageError,
    WalGraphError,
)
from .models import GraphSnapshot, GraphStats, Node, Relationship
from .operations import DegreeCentrality, GraphAnalytics, PageRankScore
from .query import (
    CommandParser,
    ExecutionErrorResult,
    ExecutionResult,
    QueryExecutor,
    parse_command,
    parse_properties,
)
from .storage import BaseGraphStore, GraphStore

__all__ = [
    # Models
    "Node",
    "Relationship",
    "GraphStats",
    "GraphSnapshot",
    # Store
    "BaseGraphStore",
    "GraphStore",
    # Command language
    "CommandParser",
    "parse_command",
    "parse_properties",
    "QueryExecutor",
    "ExecutionResult",
    "ExecutionErrorResult",
    # Analytics
    "GraphAnalytics",
    "DegreeCentrality",
    "PageRankScore",
    # Errors
    "WalGraphError",
    "ParseError",
    "GraphReferenceError",
    "ConstraintError",
    "GraphValidationError",
    "ExecutionError",
    "SnapshotStorageError",
    # Configuration
    "Settings",
    "get_settings",
    "reset_settings",
]
