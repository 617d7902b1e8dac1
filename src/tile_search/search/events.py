"""Progress events and result types produced by the search engine."""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class SearchEvent:
    """Base class for progress events; ``node`` is the node that changed state."""
    node: Any


@dataclass(frozen=True)
class NodeActivated(SearchEvent):
    """Node was selected from the open set as the next to expand."""
    pass


@dataclass(frozen=True)
class NodeDiscoveredOrUpdated(SearchEvent):
    """Node entered the open set or got a cheaper cost while in it."""
    cost: float = 0.0


@dataclass(frozen=True)
class NodeSettled(SearchEvent):
    """Node moved from the open set to the closed set."""
    cost: float = 0.0


@dataclass
class SearchStatistics:
    """Counters collected during one search."""
    nodes_expanded: int = 0
    nodes_generated: int = 0
    nodes_updated: int = 0
    nodes_reopened: int = 0
    heuristic_computations: int = 0
    events_emitted: int = 0
    max_open_size: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert statistics to dictionary."""
        return {
            'nodes_expanded': self.nodes_expanded,
            'nodes_generated': self.nodes_generated,
            'nodes_updated': self.nodes_updated,
            'nodes_reopened': self.nodes_reopened,
            'heuristic_computations': self.heuristic_computations,
            'events_emitted': self.events_emitted,
            'max_open_size': self.max_open_size
        }


@dataclass
class SearchOutcome:
    """Result of a search; see ``Found``, ``NotFound`` and ``Abandoned``."""
    nodes_expanded: int = 0
    elapsed: float = 0.0
    statistics: SearchStatistics = field(default_factory=SearchStatistics)

    @property
    def success(self) -> bool:
        return False

    @property
    def termination_reason(self) -> str:
        return 'unknown'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'termination_reason': self.termination_reason,
            'nodes_expanded': self.nodes_expanded,
            'elapsed': self.elapsed,
            'statistics': self.statistics.to_dict()
        }


@dataclass
class Found(SearchOutcome):
    """The goal was reached; ``path`` runs from start to goal inclusive."""
    path: List[Any] = field(default_factory=list)
    cost: float = 0.0

    @property
    def success(self) -> bool:
        return True

    @property
    def termination_reason(self) -> str:
        return 'goal_reached'

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result['path'] = [getattr(node, 'key', repr(node)) for node in self.path]
        result['cost'] = self.cost
        return result


@dataclass
class NotFound(SearchOutcome):
    """The open set ran empty before reaching the goal."""

    @property
    def termination_reason(self) -> str:
        return 'exhausted'


@dataclass
class Abandoned(SearchOutcome):
    """A driver stopped the search before it finished."""
    reason: str = 'cancelled'

    @property
    def termination_reason(self) -> str:
        return self.reason
