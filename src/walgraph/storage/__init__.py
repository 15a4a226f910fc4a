"""Storage backends for graph data."""

from .base import BaseGraphStore
from .memory_storage import GraphStore

__all__ = ["BaseGraphStore", "GraphStore"]
