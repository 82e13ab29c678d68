"""Graph module providing topological ordering.

This module contains:
- build_adjacency: Normalizes an edge description into incoming/outgoing mappings
- kahn_sort: Kahn's algorithm over a pair of adjacency mappings
- topological_sort: Ordering of caller-described vertices and edges
"""

from ._edges import (
    Adjacency,
    EdgeSource,
    FunctionEdges,
    IteratorEdges,
    SequenceEdges,
    build_adjacency,
    resolve_edge_source,
)
from ._kahn import kahn_sort
from ._sort import topological_sort

__all__ = [
    "Adjacency",
    "EdgeSource",
    "FunctionEdges",
    "IteratorEdges",
    "SequenceEdges",
    "build_adjacency",
    "kahn_sort",
    "resolve_edge_source",
    "topological_sort",
]
