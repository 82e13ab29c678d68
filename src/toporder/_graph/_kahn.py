"""Kahn's algorithm over a pair of adjacency mappings."""

import logging
from collections import deque
from collections.abc import Callable, Collection, Hashable, Mapping
from typing import TypeVar

from toporder._errors import CyclicGraphError, DanglingVertexError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)


def kahn_sort(
    incoming: Mapping[T, Collection[T]],
    outgoing: Mapping[T, Collection[T]],
    action: Callable[[T], object] | None = None,
) -> tuple[T, ...]:
    """Sort a graph topologically (prerequisites before dependents).

    Both mappings describe the same edges from opposite ends: if `v` appears
    in `outgoing[u]` then `u` appears in `incoming[v]`, once per occurrence.
    The keys of `outgoing` are the vertices to sort. A vertex missing from
    `incoming` has no prerequisites.

    Each vertex keeps a count of unresolved prerequisites. Duplicate edges are
    counted, and released, once per occurrence. Vertices whose count reaches
    zero are emitted first-in first-out, so vertices that become ready together
    keep the order in which they were discovered.

    Args:
        incoming: Mapping from vertex to its prerequisites.
        outgoing: Mapping from vertex to the vertices that depend on it.
        action: Called with each vertex at the moment it is appended to the order.

    Returns:
        Every key of `outgoing`, in topological order.

    Raises:
        DanglingVertexError: If an edge names a vertex that is not a key of `outgoing`.
        CyclicGraphError: If the graph contains a cycle.

    Example:
        >>> # b depends on a, c depends on b
        >>> kahn_sort({"a": [], "b": ["a"], "c": ["b"]}, {"a": ["b"], "b": ["c"], "c": []})
        ('a', 'b', 'c')

    """
    remaining: dict[T, int] = dict.fromkeys(outgoing, 0)

    dangling: dict[T, None] = {}
    for vertex, prerequisites in incoming.items():
        if vertex not in remaining:
            dangling[vertex] = None
            continue
        remaining[vertex] = len(prerequisites)
        dangling.update((p, None) for p in prerequisites if p not in remaining)
    for dependents in outgoing.values():
        dangling.update((d, None) for d in dependents if d not in remaining)
    if dangling:
        raise DanglingVertexError(dangling)

    # Start with vertices that have no prerequisites
    frontier = deque(vertex for vertex, count in remaining.items() if count == 0)
    logger.debug(f"Sorting {len(remaining)} vertices, {len(frontier)} ready at start")
    order: list[T] = []

    while frontier:
        vertex = frontier.popleft()
        if action is not None:
            action(vertex)
        order.append(vertex)
        for dependent in outgoing[vertex]:
            remaining[dependent] -= 1
            if remaining[dependent] == 0:
                frontier.append(dependent)

    if len(order) != len(remaining):
        raise CyclicGraphError(vertex for vertex, count in remaining.items() if count > 0)

    return tuple(order)
