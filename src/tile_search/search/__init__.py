"""Informed graph search for tile games.

This module implements a best-first search engine that covers Dijkstra's
algorithm and A*, together with the heuristics, record store, path
reconstruction and pacing driver built around it.
"""

from .heuristics import (
    BaseHeuristic, ZeroHeuristic, ManhattanHeuristic, EuclideanHeuristic,
    CrossProductHeuristic, FunctionHeuristic, HeuristicType, SearchAlgorithm,
    create_heuristic
)
from .records import RecordStore
from .events import (
    NodeActivated, NodeDiscoveredOrUpdated, NodeSettled,
    SearchOutcome, SearchStatistics, Found, NotFound, Abandoned
)
from .path import reconstruct_path, path_cost
from .engine import SearchEngine, SearchRun, SearchConfig, create_search_engine
from .driver import SearchDriver, DriverConfig, create_driver
from .targets import find_nearest, plan_route_to_nearest

__all__ = [
    'BaseHeuristic',
    'ZeroHeuristic',
    'ManhattanHeuristic',
    'EuclideanHeuristic',
    'CrossProductHeuristic',
    'FunctionHeuristic',
    'HeuristicType',
    'SearchAlgorithm',
    'create_heuristic',
    'RecordStore',
    'NodeActivated',
    'NodeDiscoveredOrUpdated',
    'NodeSettled',
    'SearchOutcome',
    'SearchStatistics',
    'Found',
    'NotFound',
    'Abandoned',
    'reconstruct_path',
    'path_cost',
    'SearchEngine',
    'SearchRun',
    'SearchConfig',
    'create_search_engine',
    'SearchDriver',
    'DriverConfig',
    'create_driver',
    'find_nearest',
    'plan_route_to_nearest'
]
