"""Exceptions raised by the topological sort."""

from collections.abc import Hashable, Iterable


class TopologicalSortError(Exception):
    """Base class for all errors raised while sorting a graph."""


class InvalidInputError(TopologicalSortError, TypeError):
    """Raised when the edge description cannot be used to sort the vertices."""


class UnsupportedEdgeSourceError(TopologicalSortError, TypeError):
    """Raised when an iterable edge source does not produce an iterator."""


class CyclicGraphError(TopologicalSortError, ValueError):
    """Raised when the graph contains at least one cycle.

    Attributes:
        remaining: Vertices that could not be ordered. Every one of them lies
            on a cycle or depends, directly or transitively, on a vertex that does.

    """

    def __init__(self, remaining: Iterable[Hashable]) -> None:
        self.remaining = tuple(remaining)
        super().__init__(f"Cycle detected in graph: {len(self.remaining)} vertices could not be ordered")


class DanglingVertexError(TopologicalSortError, ValueError):
    """Raised when edges reference vertices that are not part of the sorted set."""

    def __init__(self, vertices: Iterable[Hashable]) -> None:
        self.vertices = tuple(vertices)
        names = ", ".join(repr(v) for v in self.vertices)
        super().__init__(f"Edges reference vertices outside the vertex set: {names}")
