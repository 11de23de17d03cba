"""Directed graph container used to describe mapping hierarchies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Iterator, TypeVar

from typed_mapper.errors import FrozenGraphError

T = TypeVar("T")


@dataclass(frozen=True, eq=False)
class Edge(Generic[T]):
    """A directed edge from source to sink."""

    source: Vertex[T]
    sink: Vertex[T]

    def __repr__(self) -> str:
        return f"Edge({self.source.data!r} -> {self.sink.data!r})"


class Vertex(Generic[T]):
    """A vertex wrapping an opaque payload.

    Vertices compare by identity: two vertices holding equal payloads are
    still distinct vertices.
    """

    def __init__(self, data: T, graph: Graph[T]) -> None:
        self._data = data
        self._graph = graph
        self._outgoing: list[Edge[T]] = []
        self._incoming: list[Edge[T]] = []

    @property
    def data(self) -> T:
        return self._data

    @property
    def graph(self) -> Graph[T]:
        return self._graph

    @property
    def outgoing(self) -> tuple[Edge[T], ...]:
        return tuple(self._outgoing)

    @property
    def incoming(self) -> tuple[Edge[T], ...]:
        return tuple(self._incoming)

    def add_outgoing_edge(self, sink: Vertex[T]) -> Edge[T]:
        """Add an edge from this vertex to sink."""
        if sink.graph is not self._graph:
            raise ValueError("Both vertices must belong to the same graph")
        self._graph._check_mutable()
        edge = Edge(source=self, sink=sink)
        self._outgoing.append(edge)
        sink._incoming.append(edge)
        self._graph._edges.append(edge)
        return edge

    def sinks(self) -> list[Vertex[T]]:
        """Vertices this vertex points to, in edge order."""
        return [e.sink for e in self._outgoing]

    def sources(self) -> list[Vertex[T]]:
        """Vertices pointing at this vertex, in edge order."""
        return [e.source for e in self._incoming]

    def __repr__(self) -> str:
        return f"Vertex({self._data!r})"


class Graph(Generic[T]):
    """A directed graph over arbitrary payloads.

    No duplicate, self-loop or cycle detection is done; the graph records
    exactly what callers add. Once freeze() has been called the graph
    rejects further changes and can be shared between readers.
    """

    def __init__(self) -> None:
        self._vertices: list[Vertex[T]] = []
        self._edges: list[Edge[T]] = []
        self._frozen = False

    @property
    def vertices(self) -> tuple[Vertex[T], ...]:
        """All vertices in insertion order."""
        return tuple(self._vertices)

    @property
    def edges(self) -> tuple[Edge[T], ...]:
        """All edges in insertion order."""
        return tuple(self._edges)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> Graph[T]:
        """Make the graph read-only and return it."""
        self._frozen = True
        return self

    def _check_mutable(self) -> None:
        if self._frozen:
            raise FrozenGraphError("Graph is frozen")

    def add_vertex(self, data: T) -> Vertex[T]:
        """Add a new vertex holding data and return it."""
        self._check_mutable()
        vertex = Vertex(data, self)
        self._vertices.append(vertex)
        return vertex

    def add_edge(self, source: Vertex[T], sink: Vertex[T]) -> Edge[T]:
        """Add a directed edge between two vertices of this graph."""
        if source.graph is not self or sink.graph is not self:
            raise ValueError("Both vertices must belong to this graph")
        return source.add_outgoing_edge(sink)

    def find_vertex(self, data: Any) -> Vertex[T] | None:
        """Return the first vertex holding data, or None."""
        for vertex in self._vertices:
            if vertex.data is data:
                return vertex
        for vertex in self._vertices:
            if vertex.data == data:
                return vertex
        return None

    def __len__(self) -> int:
        return len(self._vertices)

    def __iter__(self) -> Iterator[Vertex[T]]:
        return iter(tuple(self._vertices))

    def __repr__(self) -> str:
        return f"Graph(vertices={len(self._vertices)}, edges={len(self._edges)})"
