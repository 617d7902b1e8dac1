"""Best-first search engine generalizing Dijkstra's algorithm and A*.

The engine keeps one record per discovered node in a ``RecordStore`` and
repeatedly expands the open record with the lowest estimated total cost.
With the zero heuristic this is Dijkstra's algorithm; with a positive
heuristic it is A*. Closed records are reopened whenever a strictly
cheaper route to them turns up, which keeps results correct for
inconsistent heuristics.

A search runs as a ``SearchRun`` that advances one state change per
``step()`` and reports each change as an event:

    NodeDiscoveredOrUpdated(start)
    NodeActivated(n) -> NodeDiscoveredOrUpdated(m)* -> NodeSettled(n)   (repeated)
    NodeActivated(goal)                                                 (on success)

The engine never sleeps; pacing is left to whoever drives the steps
(see ``tile_search.search.driver``).
"""

import time
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, Tuple, Union

from tile_search.core.data_models import SearchRecord, has_graph_capability, validate_edge_cost
from tile_search.core.errors import SearchConfigurationError, TileSearchError
from tile_search.search.events import (
    SearchEvent, NodeActivated, NodeDiscoveredOrUpdated, NodeSettled,
    SearchOutcome, SearchStatistics, Found, NotFound, Abandoned
)
from tile_search.search.heuristics import (
    BaseHeuristic, HeuristicFn, SearchAlgorithm, ZeroHeuristic,
    create_heuristic, parse_algorithm, resolve_heuristic
)
from tile_search.search.path import reconstruct_path
from tile_search.search.records import RecordStore

logger = logging.getLogger(__name__)

EventSink = Callable[[SearchEvent], None]


@dataclass
class SearchConfig:
    """Configuration for the search engine."""
    algorithm: str = SearchAlgorithm.ASTAR.value  # 'astar' or 'dijkstra'
    heuristic: str = 'manhattan'  # Default heuristic for A* when none is passed
    heuristic_weight: float = 1.0
    cost_per_unit: float = 1.0  # Minimum edge cost per unit of distance

    def __post_init__(self):
        parse_algorithm(self.algorithm)


class SearchRun:
    """One search from ``start`` to ``goal``, advanced step by step.

    A run owns its record store exclusively. It can be abandoned between
    steps with ``cancel()``; nothing outside the run needs cleaning up.
    """

    def __init__(self, start: Any, goal: Any, heuristic: BaseHeuristic):
        if start is None or goal is None:
            raise SearchConfigurationError("Search needs both a start and a goal node")
        for role, node in (('start', start), ('goal', goal)):
            if not has_graph_capability(node):
                raise SearchConfigurationError(
                    f"The {role} node {node!r} does not provide neighbors()"
                )

        self.start = start
        self.goal = goal
        self.heuristic = heuristic
        self.store = RecordStore()
        self.statistics = SearchStatistics()
        self.outcome: Optional[SearchOutcome] = None
        self._elapsed = 0.0
        self._failed = False
        self._between_expansions = False
        self._steps = self._run()

    @property
    def finished(self) -> bool:
        return self.outcome is not None

    @property
    def nodes_expanded(self) -> int:
        return self.statistics.nodes_expanded

    @property
    def elapsed(self) -> float:
        """Seconds spent inside ``step()`` so far."""
        return self._elapsed

    @property
    def between_expansions(self) -> bool:
        """True when the next step selects a node from the open set."""
        return self._between_expansions and not self.finished

    def finishes_next(self) -> bool:
        """Whether the next step ends the run.

        Only meaningful between expansions: the run ends when the open set
        is empty or its best record is the goal.
        """
        if not self.between_expansions:
            return False
        current = self.store.peek_min()
        return current is None or current.node == self.goal

    def __iter__(self) -> Iterator[SearchEvent]:
        while True:
            event = self.step()
            if event is None:
                return
            yield event

    def step(self) -> Optional[SearchEvent]:
        """Advance to the next event.

        Returns:
            The next event, or None once the run has finished
        """
        if self.finished or self._failed:
            return None

        began = time.perf_counter()
        try:
            event = next(self._steps)
            self.statistics.events_emitted += 1
            return event
        except StopIteration as stop:
            goal_record = stop.value
        except TileSearchError:
            self._failed = True
            self._steps.close()
            raise
        finally:
            self._elapsed += time.perf_counter() - began

        began = time.perf_counter()
        try:
            self._finish(goal_record)
        except TileSearchError:
            self._failed = True
            raise
        self._elapsed += time.perf_counter() - began
        self.outcome.elapsed = self._elapsed
        return None

    def run_to_completion(self, sink: Optional[EventSink] = None) -> SearchOutcome:
        """Step until finished, passing every event to ``sink``."""
        for event in self:
            if sink is not None:
                sink(event)
        return self.outcome

    def cancel(self, reason: str = 'cancelled') -> SearchOutcome:
        """Abandon the run; its state is simply discarded."""
        if not self.finished:
            self._steps.close()
            self.outcome = Abandoned(
                nodes_expanded=self.statistics.nodes_expanded,
                elapsed=self._elapsed,
                statistics=self.statistics,
                reason=reason
            )
            logger.info(f"Search abandoned ({reason}) after {self.statistics.nodes_expanded} expansions")
        return self.outcome

    def _finish(self, goal_record: Optional[SearchRecord]) -> None:
        stats = self.statistics
        if goal_record is None:
            self.outcome = NotFound(nodes_expanded=stats.nodes_expanded, statistics=stats)
            logger.info(f"Search failed: goal {self.goal!r} unreachable, "
                        f"nodes expanded {stats.nodes_expanded}")
            return

        path = reconstruct_path(goal_record, len(self.store))
        self.outcome = Found(
            nodes_expanded=stats.nodes_expanded,
            statistics=stats,
            path=path,
            cost=goal_record.cost_so_far
        )
        logger.info(f"Search finished: path length {len(path)}, cost {goal_record.cost_so_far}, "
                    f"nodes expanded {stats.nodes_expanded}")

    def _estimate(self, node: Any) -> float:
        self.statistics.heuristic_computations += 1
        return self.heuristic(self.start, node, self.goal)

    def _edges(self, node: Any) -> Iterator[Tuple[Any, float]]:
        for label, edge in node.neighbors().items():
            try:
                target, cost = edge
            except (TypeError, ValueError):
                raise SearchConfigurationError(
                    f"Edge {label!r} of {node!r} must be a (target, cost) pair, got {edge!r}"
                )
            if not has_graph_capability(target):
                raise SearchConfigurationError(
                    f"Edge {label!r} of {node!r} leads to {target!r}, which does not provide neighbors()"
                )
            yield target, validate_edge_cost(cost, node, target)

    def _run(self):
        store = self.store
        stats = self.statistics

        start_record = SearchRecord(self.start)
        start_record.improve(0.0, None, self._estimate(self.start))
        store.push(start_record)
        stats.nodes_generated += 1
        stats.max_open_size = 1
        self._between_expansions = True
        yield NodeDiscoveredOrUpdated(self.start, 0.0)

        while store.open_count:
            self._between_expansions = False
            current = store.peek_min()
            yield NodeActivated(current.node)

            if current.node == self.goal:
                return current

            stats.nodes_expanded += 1
            logger.debug(f"Expanding {current.node!r} g={current.cost_so_far} f={current.estimated_total_cost}")

            for neighbor, edge_cost in self._edges(current.node):
                candidate_cost = current.cost_so_far + edge_cost
                record = store.get(neighbor)

                if record is None:
                    record = SearchRecord(neighbor)
                    record.improve(candidate_cost, current, self._estimate(neighbor))
                    store.push(record)
                    stats.nodes_generated += 1
                elif record.cost_so_far <= candidate_cost:
                    continue
                elif store.is_closed(neighbor):
                    # Reuse the known heuristic instead of recomputing it
                    record.improve(candidate_cost, current, record.heuristic)
                    store.reopen(record)
                    stats.nodes_reopened += 1
                else:
                    record.improve(candidate_cost, current, record.heuristic)
                    store.update(record)
                    stats.nodes_updated += 1

                stats.max_open_size = max(stats.max_open_size, store.open_count)
                yield NodeDiscoveredOrUpdated(neighbor, candidate_cost)

            store.close(current)
            self._between_expansions = True
            yield NodeSettled(current.node, current.cost_so_far)

        return None


class SearchEngine:
    """Best-first search over any graph whose nodes provide ``neighbors()``."""

    def __init__(self, config: Optional[SearchConfig] = None):
        """Initialize search engine.

        Args:
            config: Search configuration parameters
        """
        self.config = config or SearchConfig()
        self.algorithm = parse_algorithm(self.config.algorithm)
        logger.info(f"Search engine initialized with algorithm={self.algorithm.value}, "
                    f"heuristic={self.config.heuristic}, weight={self.config.heuristic_weight}")

    def default_heuristic(self) -> BaseHeuristic:
        """Heuristic used when a search is started without one."""
        if self.algorithm == SearchAlgorithm.DIJKSTRA:
            return ZeroHeuristic()
        name = str(self.config.heuristic).lower()
        if name in ('zero', 'uniform'):
            return create_heuristic(name)
        return create_heuristic(
            name,
            weight=self.config.heuristic_weight,
            cost_per_unit=self.config.cost_per_unit
        )

    def start(self, start: Any, goal: Any,
              heuristic: Union[None, str, HeuristicFn] = None) -> SearchRun:
        """Create a run that the caller advances with ``step()``.

        Args:
            start: Start node
            goal: Goal node
            heuristic: Heuristic instance, name or callable. None selects the
                engine default (the zero heuristic in Dijkstra mode).

        Raises:
            SearchConfigurationError: If the inputs cannot be searched
        """
        if heuristic is None:
            resolved = self.default_heuristic()
        else:
            resolved = resolve_heuristic(heuristic)
        return SearchRun(start, goal, resolved)

    def search(self, start: Any, goal: Any,
               heuristic: Union[None, str, HeuristicFn] = None,
               sink: Optional[EventSink] = None) -> SearchOutcome:
        """Run a complete search from ``start`` to ``goal``.

        Args:
            start: Start node
            goal: Goal node
            heuristic: Heuristic instance, name or callable
            sink: Optional callable receiving every progress event in order

        Returns:
            ``Found`` with the path, or ``NotFound`` if the goal is unreachable
        """
        return self.start(start, goal, heuristic).run_to_completion(sink)


def create_search_engine(algorithm: Optional[str] = None,
                         heuristic: Optional[str] = None,
                         heuristic_weight: Optional[float] = None,
                         cost_per_unit: Optional[float] = None) -> SearchEngine:
    """Factory function to create a search engine.

    Values not given explicitly are read from the loaded configuration
    (``search.*``), falling back to ``SearchConfig`` defaults.

    Args:
        algorithm: 'astar' or 'dijkstra'
        heuristic: Default heuristic name for A*
        heuristic_weight: Multiplier for the default heuristic
        cost_per_unit: Minimum edge cost per unit of distance

    Returns:
        Configured SearchEngine instance
    """
    from tile_search.config import get_parameter

    defaults = SearchConfig()
    config = SearchConfig(
        algorithm=algorithm or get_parameter('search.algorithm', defaults.algorithm),
        heuristic=heuristic or get_parameter('search.heuristic', defaults.heuristic),
        heuristic_weight=float(heuristic_weight if heuristic_weight is not None
                               else get_parameter('search.heuristic_weight', defaults.heuristic_weight)),
        cost_per_unit=float(cost_per_unit if cost_per_unit is not None
                            else get_parameter('search.cost_per_unit', defaults.cost_per_unit))
    )
    return SearchEngine(config)
