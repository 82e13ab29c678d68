"""Topological ordering of dependency graphs."""

__all__ = [
    "Adjacency",
    "CyclicGraphError",
    "DanglingVertexError",
    "DataSet",
    "DataSetError",
    "InputFileError",
    "InvalidInputError",
    "Table",
    "TopologicalSortError",
    "UnsupportedEdgeSourceError",
    "build_adjacency",
    "kahn_sort",
    "load_graph",
    "resolve_edge_source",
    "topological_sort",
]

from ._dataset import DataSet, DataSetError, Table
from ._errors import (
    CyclicGraphError,
    DanglingVertexError,
    InvalidInputError,
    TopologicalSortError,
    UnsupportedEdgeSourceError,
)
from ._graph import Adjacency, build_adjacency, kahn_sort, resolve_edge_source, topological_sort
from ._io import InputFileError, load_graph
