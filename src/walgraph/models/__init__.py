"""Models for the property graph."""

from .graph import GraphSnapshot, GraphStats
from .node import Node
from .relationship import Relationship

__all__ = [
    "Node",
    "Relationship",
    "GraphStats",
    "GraphSnapshot",
]
