"""Normalization of edge descriptions into adjacency mappings.

Callers describe the edges of a graph in one of several forms:

- a mapping from vertex to its edge set (looked up per vertex)
- a function called with each vertex
- a sequence aligned by position with the vertices
- an iterator (or an iterable producing one) yielding edge sets in vertex order

`resolve_edge_source` turns any of these into an `EdgeSource` exposing a single
`next_edge_set(vertex)` method, and `build_adjacency` walks the vertices once to
record both edge directions.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from toporder._errors import InvalidInputError, UnsupportedEdgeSourceError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)


def _as_edge_set(vertex: T, value: Iterable[T] | None) -> tuple[T, ...]:
    if value is None:
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        msg = f"Edge set for vertex {vertex!r} must be an iterable of vertices, got {type(value).__name__}"
        raise InvalidInputError(msg)
    return tuple(value)


@dataclass(slots=True)
class FunctionEdges(Generic[T]):
    """Edge sets computed by calling a function with each vertex."""

    fn: Callable[[T], Iterable[T] | None]

    def next_edge_set(self, vertex: T) -> tuple[T, ...]:
        return _as_edge_set(vertex, self.fn(vertex))


@dataclass(slots=True)
class SequenceEdges(Generic[T]):
    """Edge sets aligned by position with the vertex sequence."""

    items: Sequence[Iterable[T] | None]
    position: int = 0

    def next_edge_set(self, vertex: T) -> tuple[T, ...]:
        if self.position >= len(self.items):
            msg = f"No edge set for vertex {vertex!r}: the edge sequence has only {len(self.items)} items"
            raise InvalidInputError(msg)
        value = self.items[self.position]
        self.position += 1
        return _as_edge_set(vertex, value)


@dataclass(slots=True)
class IteratorEdges(Generic[T]):
    """Edge sets pulled from an iterator, one per vertex."""

    iterator: Iterator[Iterable[T] | None]

    def next_edge_set(self, vertex: T) -> tuple[T, ...]:
        try:
            value = next(self.iterator)
        except StopIteration:
            msg = f"No edge set for vertex {vertex!r}: the edge iterator is exhausted"
            raise InvalidInputError(msg) from None
        return _as_edge_set(vertex, value)


EdgeSource = FunctionEdges | SequenceEdges | IteratorEdges


def resolve_edge_source(edges: object) -> EdgeSource:
    """Classify an edge description and wrap it in an `EdgeSource`.

    Args:
        edges: A mapping, callable, sequence, iterator or iterable of edge sets.

    Returns:
        An edge source whose `next_edge_set` yields one edge set per vertex.

    Raises:
        InvalidInputError: If `edges` is none of the supported forms.
        UnsupportedEdgeSourceError: If `edges` is iterable but yields no iterator.

    """
    match edges:
        case Mapping():
            return FunctionEdges(edges.get)
        case str() | bytes():
            msg = f"Edges must not be a string, got {edges!r}"
            raise InvalidInputError(msg)
        case _ if callable(edges):
            return FunctionEdges(edges)
        case Sequence():
            return SequenceEdges(edges)
        case Iterator():
            return IteratorEdges(edges)
        case Iterable():
            try:
                cursor = iter(edges)
            except TypeError as e:
                msg = f"Edge source of type {type(edges).__name__} does not produce an iterator"
                raise UnsupportedEdgeSourceError(msg) from e
            return IteratorEdges(cursor)
        case _:
            msg = f"Edges must be a mapping, callable, sequence or iterable, got {type(edges).__name__}"
            raise InvalidInputError(msg)


@dataclass(frozen=True, slots=True)
class Adjacency(Generic[T]):
    """Both directions of the edge relation over a walked vertex sequence.

    Attributes:
        vertices: Vertices that passed the filter, in walk order.
        incoming: Mapping from vertex to the walked vertices whose edge set names it,
            one entry per occurrence. Sources that were filtered out are still recorded.
        outgoing: Mapping from each surviving vertex to its edge set.
        excluded: Vertices removed by the filter, in walk order.

    """

    vertices: tuple[T, ...] = ()
    incoming: dict[T, tuple[T, ...]] = field(default_factory=dict)
    outgoing: dict[T, tuple[T, ...]] = field(default_factory=dict)
    excluded: tuple[T, ...] = ()

    def dangling(self) -> tuple[T, ...]:
        """Vertices named in the edge set of a surviving vertex but not surviving themselves.

        These are either excluded by the filter or were never listed in the walked
        vertices. Edge sets of excluded vertices are not inspected.

        Returns:
            The referenced vertices in first-seen order.

        """
        known = frozenset(self.vertices)
        seen: dict[T, None] = {}
        for edge_set in self.outgoing.values():
            seen.update((neighbor, None) for neighbor in edge_set if neighbor not in known)
        return tuple(seen)

    def restricted(self) -> Adjacency[T]:
        """Drop every edge that touches a vertex outside the surviving set.

        Returns:
            A new Adjacency whose mappings are keyed by exactly the surviving
            vertices and only name surviving vertices.

        """
        known = frozenset(self.vertices)
        return Adjacency(
            vertices=self.vertices,
            incoming={v: tuple(s for s in self.incoming.get(v, ()) if s in known) for v in self.vertices},
            outgoing={v: tuple(n for n in self.outgoing[v] if n in known) for v in self.vertices},
            excluded=self.excluded,
        )


def build_adjacency(
    nodes: Iterable[T],
    edges: object,
    *,
    exclude: Callable[[T], bool] | None = None,
) -> Adjacency[T]:
    """Walk the vertices once, recording incoming and outgoing edges.

    The edge set of every vertex is fetched before the filter is consulted, so
    positional and iterator sources stay aligned with `nodes` even when a vertex
    is excluded. An excluded vertex is not added to `outgoing`, but its edge set
    still registers it in the `incoming` entries of its neighbors.

    Args:
        nodes: The vertices, iterated exactly once.
        edges: Edge description accepted by `resolve_edge_source`.
        exclude: Predicate returning True for vertices to leave out of the sort.

    Returns:
        The adjacency of the walked graph.

    Raises:
        InvalidInputError: If `edges` is unsupported, runs short of `nodes`,
            or a vertex is listed twice.
        UnsupportedEdgeSourceError: If `edges` yields no iterator.

    """
    source = resolve_edge_source(edges)

    vertices: list[T] = []
    excluded: list[T] = []
    walked: set[T] = set()
    incoming: dict[T, list[T]] = {}
    outgoing: dict[T, tuple[T, ...]] = {}

    for vertex in nodes:
        if vertex in walked:
            msg = f"Vertex {vertex!r} is listed more than once"
            raise InvalidInputError(msg)
        walked.add(vertex)

        edge_set = source.next_edge_set(vertex)
        if exclude is not None and exclude(vertex):
            excluded.append(vertex)
        else:
            vertices.append(vertex)
            outgoing[vertex] = edge_set
            incoming.setdefault(vertex, [])

        for neighbor in edge_set:
            incoming.setdefault(neighbor, []).append(vertex)

    logger.debug(f"Walked {len(walked)} vertices ({len(excluded)} excluded)")
    return Adjacency(
        vertices=tuple(vertices),
        incoming={vertex: tuple(sources) for vertex, sources in incoming.items()},
        outgoing=outgoing,
        excluded=tuple(excluded),
    )
