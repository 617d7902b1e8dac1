"""Tile Search - informed graph search for grid-tile games.

Best-first search over tile graphs covering Dijkstra's algorithm and A*,
with pluggable heuristics, step-by-step progress events and path
reconstruction.
"""

__version__ = "0.1.0"

from tile_search.core import (
    Edge, GraphNode, SearchRecord, TileSearchError,
    SearchConfigurationError, PathReconstructionError
)
from tile_search.search import (
    SearchEngine, SearchRun, SearchConfig, create_search_engine,
    SearchDriver, DriverConfig, create_driver,
    Found, NotFound, Abandoned,
    NodeActivated, NodeDiscoveredOrUpdated, NodeSettled,
    ZeroHeuristic, ManhattanHeuristic, EuclideanHeuristic,
    CrossProductHeuristic, FunctionHeuristic, create_heuristic,
    reconstruct_path, find_nearest, plan_route_to_nearest
)
from tile_search.graph import Direction, GridGraph, GridTile, AdjacencyGraph

__all__ = [
    'Edge',
    'GraphNode',
    'SearchRecord',
    'TileSearchError',
    'SearchConfigurationError',
    'PathReconstructionError',
    'SearchEngine',
    'SearchRun',
    'SearchConfig',
    'create_search_engine',
    'SearchDriver',
    'DriverConfig',
    'create_driver',
    'Found',
    'NotFound',
    'Abandoned',
    'NodeActivated',
    'NodeDiscoveredOrUpdated',
    'NodeSettled',
    'ZeroHeuristic',
    'ManhattanHeuristic',
    'EuclideanHeuristic',
    'CrossProductHeuristic',
    'FunctionHeuristic',
    'create_heuristic',
    'reconstruct_path',
    'find_nearest',
    'plan_route_to_nearest',
    'Direction',
    'GridGraph',
    'GridTile',
    'AdjacencyGraph'
]
