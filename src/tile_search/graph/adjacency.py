"""Directed weighted graph over named vertices."""

from typing import Any, Dict, Hashable, Iterator, Optional, Tuple

from tile_search.core.data_models import Edge, validate_edge_cost


class Vertex:
    """Named vertex of an ``AdjacencyGraph``; compared by identity."""

    __slots__ = ('graph', 'name', 'position')

    def __init__(self, graph: 'AdjacencyGraph', name: Hashable,
                 position: Optional[Tuple[float, float]] = None):
        self.graph = graph
        self.name = name
        self.position = position

    @property
    def key(self) -> Hashable:
        return self.name

    def neighbors(self) -> Dict[Hashable, Edge]:
        return dict(self.graph._edges[self.name])

    def __repr__(self) -> str:
        return f"Vertex({self.name!r})"


class AdjacencyGraph:
    """Arbitrary directed graph with per-edge costs.

    Example:
        graph = AdjacencyGraph()
        graph.add_edge('a', 'b', 2.0)
        graph.add_edge('b', 'c', 1.0, bidirectional=True)
    """

    def __init__(self):
        self._vertices: Dict[Hashable, Vertex] = {}
        self._edges: Dict[Hashable, Dict[Hashable, Edge]] = {}

    def __len__(self) -> int:
        return len(self._vertices)

    def __contains__(self, name: Hashable) -> bool:
        return name in self._vertices

    def __getitem__(self, name: Hashable) -> Vertex:
        return self._vertices[name]

    def vertices(self) -> Iterator[Vertex]:
        return iter(self._vertices.values())

    def add_vertex(self, name: Hashable, position: Optional[Tuple[float, float]] = None) -> Vertex:
        """Add a vertex, or update the position of an existing one."""
        vertex = self._vertices.get(name)
        if vertex is None:
            vertex = Vertex(self, name, position)
            self._vertices[name] = vertex
            self._edges[name] = {}
        elif position is not None:
            vertex.position = position
        return vertex

    def add_edge(self, source: Hashable, target: Hashable, cost: float = 1.0,
                 label: Optional[Hashable] = None, bidirectional: bool = False) -> None:
        """Connect ``source`` to ``target``, creating vertices as needed.

        Args:
            source: Source vertex name
            target: Target vertex name
            cost: Non-negative traversal cost
            label: Edge label; defaults to the target name
            bidirectional: Also add the reverse edge with the same cost
        """
        cost = validate_edge_cost(cost, source, target)
        src = self.add_vertex(source)
        dst = self.add_vertex(target)
        self._edges[source][target if label is None else label] = Edge(dst, cost)
        if bidirectional:
            self._edges[target][source if label is None else label] = Edge(src, cost)

    def remove_edge(self, source: Hashable, target: Hashable) -> None:
        """Remove every edge from ``source`` to ``target``."""
        edges = self._edges.get(source, {})
        for label in [label for label, edge in edges.items() if edge.target.name == target]:
            del edges[label]
