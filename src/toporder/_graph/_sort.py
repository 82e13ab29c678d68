"""Topological sort of caller-described graphs."""

import logging
from collections.abc import Callable, Hashable, Iterable
from typing import TypeVar

from toporder._errors import DanglingVertexError

from ._edges import build_adjacency
from ._kahn import kahn_sort

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)


def topological_sort(  # noqa: PLR0913
    nodes: Iterable[T],
    edges: object,
    *,
    flip_edges: bool = False,
    action: Callable[[T], object] | None = None,
    exclude: Callable[[T], bool] | None = None,
    strict: bool = False,
) -> tuple[T, ...]:
    """Order vertices so that every vertex comes after the vertices it depends on.

    By default the edge set of a vertex lists its prerequisites: `{"b": ["a"]}`
    means "b depends on a" and puts `a` first. With `flip_edges` the edge set
    lists dependents instead: `{"a": ["b"]}` then puts `a` first.

    Args:
        nodes: The vertices to sort, iterated exactly once.
        edges: The edge set of each vertex, given as a mapping, a callable, a
            sequence aligned with `nodes`, or an iterator yielding edge sets in
            the order of `nodes`.
        flip_edges: Treat edge sets as dependents rather than prerequisites.
        action: Called with each vertex as it is appended to the order.
        exclude: Predicate returning True for vertices to leave out of the order.
        strict: Fail on edges naming vertices that are excluded or absent from
            `nodes` instead of ignoring them.

    Returns:
        The surviving vertices in topological order.

    Raises:
        InvalidInputError: If `edges` is not a supported form or runs short of `nodes`.
        UnsupportedEdgeSourceError: If an iterable `edges` yields no iterator.
        DanglingVertexError: If `strict` is set and an edge leaves the vertex set.
        CyclicGraphError: If the graph contains a cycle.

    Example:
        >>> topological_sort(["c", "b", "a"], {"b": ["a"], "c": ["a", "b"]})
        ('a', 'b', 'c')

    """
    adjacency = build_adjacency(nodes, edges, exclude=exclude)

    dangling = adjacency.dangling()
    if dangling:
        if strict:
            raise DanglingVertexError(dangling)
        logger.debug(f"Ignoring edges to vertices outside the vertex set: {dangling!r}")

    graph = adjacency.restricted()
    if flip_edges:
        return kahn_sort(graph.incoming, graph.outgoing, action)
    return kahn_sort(graph.outgoing, graph.incoming, action)
