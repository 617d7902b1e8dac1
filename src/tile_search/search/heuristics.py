"""Heuristic functions for best-first tile search.

Every heuristic follows the contract ``h(start, tile, goal) -> float`` with
a non-negative, finite result:

- ZeroHeuristic: h = 0, turns the engine into Dijkstra's algorithm
- ManhattanHeuristic: |dx| + |dy| between tile positions
- EuclideanHeuristic: straight-line distance between tile positions
- CrossProductHeuristic: Manhattan plus a small term that prefers tiles on
  the straight line from start to goal
- FunctionHeuristic: wraps any caller-supplied callable

A heuristic declares whether it is admissible (never overestimates) and
consistent (satisfies the triangle inequality along edges). The engine
only guarantees minimum-cost paths for admissible heuristics; reopening
keeps it correct for inconsistent ones at the cost of extra expansions.
"""

import math
import time
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, Optional, Union

import numpy as np

from tile_search.core.errors import SearchConfigurationError

logger = logging.getLogger(__name__)

HeuristicFn = Callable[[Any, Any, Any], float]


class HeuristicType(str, Enum):
    """Names of the built-in heuristics."""
    ZERO = 'zero'
    UNIFORM = 'uniform'
    MANHATTAN = 'manhattan'
    EUCLIDEAN = 'euclidean'
    CROSS_PRODUCT = 'cross_product'


class SearchAlgorithm(str, Enum):
    """Search modes selectable by name."""
    DIJKSTRA = 'dijkstra'
    ASTAR = 'astar'


def node_position(node: Any) -> np.ndarray:
    """Return the (x, y) world position of ``node`` as a float array.

    Raises:
        SearchConfigurationError: If the node has no usable position
    """
    position = getattr(node, 'position', None)
    if position is None:
        raise SearchConfigurationError(
            f"Node {node!r} has no position; geometric heuristics need one"
        )
    array = np.asarray(position, dtype=np.float64)
    if array.shape != (2,):
        raise SearchConfigurationError(
            f"Node position must be an (x, y) pair, got {position!r}"
        )
    return array


def check_heuristic_value(value: Any, name: str = 'heuristic') -> float:
    """Validate a heuristic result and return it as a float."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise SearchConfigurationError(f"{name} returned a non-numeric value: {value!r}")
    if math.isnan(value) or math.isinf(value) or value < 0:
        raise SearchConfigurationError(
            f"{name} must return a finite, non-negative estimate, got {value}"
        )
    return value


class BaseHeuristic(ABC):
    """Abstract base class for heuristics."""

    admissible: bool = True
    consistent: bool = True

    def __init__(self, name: str, weight: float = 1.0):
        """Initialize heuristic.

        Args:
            name: Name of the heuristic
            weight: Multiplier applied to every estimate. Weights above 1
                trade optimality for fewer expansions.
        """
        if not isinstance(weight, (int, float)) or not math.isfinite(weight) or weight < 0:
            raise SearchConfigurationError(f"Heuristic weight must be a non-negative number, got {weight!r}")
        self.name = name
        self.weight = float(weight)
        self.computation_count = 0
        self.total_computation_time = 0.0

    @property
    def is_admissible(self) -> bool:
        return self.admissible and self.weight <= 1.0

    @property
    def is_consistent(self) -> bool:
        return self.consistent and self.weight <= 1.0

    @abstractmethod
    def compute(self, start: Any, tile: Any, goal: Any) -> float:
        """Compute the unweighted estimate from ``tile`` to ``goal``.

        Args:
            start: Start node of the search
            tile: Node being estimated
            goal: Goal node of the search

        Returns:
            Estimated remaining cost
        """
        pass

    def __call__(self, start: Any, tile: Any, goal: Any) -> float:
        """Compute the weighted estimate with validation and statistics."""
        start_time = time.perf_counter()
        value = check_heuristic_value(self.compute(start, tile, goal), self.name)
        self.computation_count += 1
        self.total_computation_time += time.perf_counter() - start_time
        return self.weight * value

    def get_stats(self) -> Dict[str, Any]:
        """Get computation statistics."""
        avg_time = (self.total_computation_time / self.computation_count
                    if self.computation_count > 0 else 0.0)

        return {
            'name': self.name,
            'weight': self.weight,
            'admissible': self.is_admissible,
            'consistent': self.is_consistent,
            'computation_count': self.computation_count,
            'total_time': self.total_computation_time,
            'average_time_us': avg_time * 1000000
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(weight={self.weight})"


class ZeroHeuristic(BaseHeuristic):
    """Uninformed estimate; reduces the engine to uniform-cost search."""

    def __init__(self):
        super().__init__('zero')

    def compute(self, start: Any, tile: Any, goal: Any) -> float:
        return 0.0


class ManhattanHeuristic(BaseHeuristic):
    """Sum of axis distances between tile and goal positions.

    Admissible and consistent on 4-connected grids whose edge costs are at
    least ``cost_per_unit`` times the distance between neighboring tiles.
    """

    def __init__(self, cost_per_unit: float = 1.0, weight: float = 1.0):
        super().__init__('manhattan', weight)
        self.cost_per_unit = float(cost_per_unit)

    def compute(self, start: Any, tile: Any, goal: Any) -> float:
        delta = np.abs(node_position(tile) - node_position(goal))
        return float(delta.sum()) * self.cost_per_unit


class EuclideanHeuristic(BaseHeuristic):
    """Straight-line distance between tile and goal positions."""

    def __init__(self, cost_per_unit: float = 1.0, weight: float = 1.0):
        super().__init__('euclidean', weight)
        self.cost_per_unit = float(cost_per_unit)

    def compute(self, start: Any, tile: Any, goal: Any) -> float:
        return float(np.linalg.norm(node_position(tile) - node_position(goal))) * self.cost_per_unit


class CrossProductHeuristic(BaseHeuristic):
    """Manhattan distance nudged towards the start-goal line.

    Adds ``tie_break * |cross(tile - goal, start - goal)|`` so that among
    equal-cost tiles the ones closest to the straight line are expanded
    first. The extra term can overestimate, so this heuristic is neither
    admissible nor consistent.
    """

    admissible = False
    consistent = False

    def __init__(self, tie_break: float = 0.001, cost_per_unit: float = 1.0, weight: float = 1.0):
        super().__init__('cross_product', weight)
        self.tie_break = float(tie_break)
        self.cost_per_unit = float(cost_per_unit)

    def compute(self, start: Any, tile: Any, goal: Any) -> float:
        goal_pos = node_position(goal)
        d1 = node_position(tile) - goal_pos
        d2 = node_position(start) - goal_pos
        cross = abs(d1[0] * d2[1] - d2[0] * d1[1])
        manhattan = float(np.abs(d1).sum()) * self.cost_per_unit
        return manhattan + cross * self.tie_break


class FunctionHeuristic(BaseHeuristic):
    """Adapter for caller-defined heuristic callables.

    The caller states whether the function is admissible and consistent;
    the engine does not verify either claim.
    """

    def __init__(self, fn: HeuristicFn, name: Optional[str] = None,
                 admissible: bool = False, consistent: bool = False,
                 weight: float = 1.0):
        if not callable(fn):
            raise SearchConfigurationError(f"Heuristic must be callable, got {fn!r}")
        super().__init__(name or getattr(fn, '__name__', 'custom'), weight)
        self.fn = fn
        self.admissible = admissible
        self.consistent = consistent

    def compute(self, start: Any, tile: Any, goal: Any) -> float:
        return self.fn(start, tile, goal)


_HEURISTICS = {
    HeuristicType.ZERO: ZeroHeuristic,
    HeuristicType.UNIFORM: ZeroHeuristic,
    HeuristicType.MANHATTAN: ManhattanHeuristic,
    HeuristicType.EUCLIDEAN: EuclideanHeuristic,
    HeuristicType.CROSS_PRODUCT: CrossProductHeuristic,
}


def create_heuristic(name: Union[str, HeuristicType] = HeuristicType.MANHATTAN,
                     weight: float = 1.0, **kwargs) -> BaseHeuristic:
    """Factory function to create a built-in heuristic by name.

    Args:
        name: One of the ``HeuristicType`` names
        weight: Estimate multiplier (ignored by the zero heuristic)
        **kwargs: Extra constructor arguments, e.g. ``cost_per_unit``

    Returns:
        Configured heuristic instance

    Raises:
        SearchConfigurationError: If the name is unknown
    """
    try:
        heuristic_type = name if isinstance(name, HeuristicType) else HeuristicType(str(name).lower())
    except ValueError:
        valid = ', '.join(h.value for h in HeuristicType)
        raise SearchConfigurationError(f"Unknown heuristic '{name}', expected one of: {valid}")

    cls = _HEURISTICS[heuristic_type]
    if cls is ZeroHeuristic:
        return ZeroHeuristic()
    return cls(weight=weight, **kwargs)


def resolve_heuristic(heuristic: Union[None, str, HeuristicFn]) -> BaseHeuristic:
    """Turn ``None``, a name or a plain callable into a heuristic instance."""
    if heuristic is None:
        return ZeroHeuristic()
    if isinstance(heuristic, BaseHeuristic):
        return heuristic
    if isinstance(heuristic, str):
        return create_heuristic(heuristic)
    if callable(heuristic):
        return FunctionHeuristic(heuristic)
    raise SearchConfigurationError(f"Heuristic must be callable, got {heuristic!r}")


def parse_algorithm(name: Union[str, SearchAlgorithm]) -> SearchAlgorithm:
    """Parse a search algorithm name.

    Raises:
        SearchConfigurationError: If the name is unknown
    """
    try:
        if isinstance(name, SearchAlgorithm):
            return name
        return SearchAlgorithm(str(name).lower())
    except ValueError:
        valid = ', '.join(a.value for a in SearchAlgorithm)
        raise SearchConfigurationError(f"Unknown search algorithm '{name}', expected one of: {valid}")
