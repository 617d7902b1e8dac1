"""Graph implementations providing the node capability used by search."""

from .grid import Direction, GridTile, GridGraph
from .adjacency import Vertex, AdjacencyGraph

__all__ = [
    'Direction',
    'GridTile',
    'GridGraph',
    'Vertex',
    'AdjacencyGraph'
]
