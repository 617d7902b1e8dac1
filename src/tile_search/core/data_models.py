"""Core data models for tile search."""

import math
from dataclasses import dataclass, field
from typing import Any, Hashable, Mapping, NamedTuple, Optional, Protocol, runtime_checkable

from .errors import SearchConfigurationError


class Edge(NamedTuple):
    """Directed, weighted connection to a neighboring node."""
    target: Any
    cost: float


@runtime_checkable
class GraphNode(Protocol):
    """Capability a node must provide to be searched.

    ``neighbors()`` maps an edge label (e.g. a direction) to an ``Edge``
    or any ``(target, cost)`` pair. Nodes must be hashable.
    """

    def neighbors(self) -> Mapping[Hashable, Edge]:
        ...


def has_graph_capability(node: Any) -> bool:
    """Check whether ``node`` can be used as a search node."""
    if node is None:
        return False
    return callable(getattr(node, 'neighbors', None))


def validate_edge_cost(cost: Any, source: Any = None, target: Any = None) -> float:
    """Return ``cost`` as a float, rejecting negative and non-finite values."""
    try:
        value = float(cost)
    except (TypeError, ValueError):
        raise SearchConfigurationError(
            f"Edge cost must be a number, got {cost!r} for edge {source!r} -> {target!r}"
        )
    if not math.isfinite(value) or value < 0:
        raise SearchConfigurationError(
            f"Edge cost must be finite and non-negative, got {value} for edge {source!r} -> {target!r}"
        )
    return value


@dataclass(eq=False)
class SearchRecord:
    """Per-node bookkeeping for one search.

    Records are identity-compared: two records for the same node never
    coexist within one search.
    """
    node: Any
    cost_so_far: float = 0.0
    estimated_total_cost: float = 0.0
    came_from: Optional['SearchRecord'] = None
    # Position in the open set used for FIFO tie-breaking; set by the store.
    entry_order: int = field(default=-1, repr=False)

    @property
    def heuristic(self) -> float:
        """Heuristic part of the estimate, h = f - g."""
        return self.estimated_total_cost - self.cost_so_far

    def improve(self, cost_so_far: float, came_from: 'SearchRecord', heuristic: float) -> None:
        """Overwrite cost, backlink and estimate together."""
        self.cost_so_far = cost_so_far
        self.came_from = came_from
        self.estimated_total_cost = cost_so_far + heuristic
