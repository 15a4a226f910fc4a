"""Graph operations package.

This package provides read-only analytics over a graph store.
"""

from .analytics import DegreeCentrality, GraphAnalytics, PageRankScore

__all__ = ["GraphAnalytics", "DegreeCentrality", "PageRankScore"]
