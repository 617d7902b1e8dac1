"""Driver loop that paces a search and enforces optional limits.

The engine performs no waiting of its own. A ``SearchDriver`` steps a run
to completion and, between steps, can sleep so that a renderer can show
each event as a frame (``pacing='timed'``), or stop the run once an
expansion or wall-clock budget is spent.
"""

import time
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from tile_search.core.errors import SearchConfigurationError
from tile_search.search.engine import EventSink, SearchEngine, SearchRun, create_search_engine
from tile_search.search.events import SearchOutcome

logger = logging.getLogger(__name__)

PACING_MODES = ('immediate', 'timed')


@dataclass
class DriverConfig:
    """Configuration for the search driver."""
    pacing: str = 'immediate'  # 'immediate' or 'timed'
    wait_time: float = 0.0  # Seconds to wait after each event when timed
    max_nodes_expanded: Optional[int] = None
    max_computation_time: Optional[float] = None  # Wall-clock seconds

    def __post_init__(self):
        if self.pacing not in PACING_MODES:
            raise SearchConfigurationError(
                f"pacing must be one of {', '.join(PACING_MODES)}, got {self.pacing!r}"
            )
        if self.wait_time < 0:
            raise SearchConfigurationError(f"wait_time must be non-negative, got {self.wait_time}")
        if self.max_nodes_expanded is not None and self.max_nodes_expanded <= 0:
            raise SearchConfigurationError(
                f"max_nodes_expanded must be positive, got {self.max_nodes_expanded}"
            )
        if self.max_computation_time is not None and self.max_computation_time <= 0:
            raise SearchConfigurationError(
                f"max_computation_time must be positive, got {self.max_computation_time}"
            )


class SearchDriver:
    """Runs searches step by step with pacing and limits."""

    def __init__(self, engine: Optional[SearchEngine] = None,
                 config: Optional[DriverConfig] = None,
                 sleep: Callable[[float], None] = time.sleep,
                 clock: Callable[[], float] = time.perf_counter):
        """Initialize search driver.

        Args:
            engine: Engine creating the runs; defaults to a configured engine
            config: Driver configuration
            sleep: Function used for timed pacing
            clock: Wall clock used for the time limit
        """
        self.engine = engine or create_search_engine()
        self.config = config or DriverConfig()
        self._sleep = sleep
        self._clock = clock

    def run(self, start: Any, goal: Any, heuristic: Any = None,
            sink: Optional[EventSink] = None) -> SearchOutcome:
        """Search from ``start`` to ``goal``.

        Returns:
            ``Found`` or ``NotFound``, or ``Abandoned`` when a limit was hit
        """
        return self.drive(self.engine.start(start, goal, heuristic), sink)

    def drive(self, run: SearchRun, sink: Optional[EventSink] = None) -> SearchOutcome:
        """Step an existing run until it finishes or a limit is reached."""
        started_at = self._clock()
        timed = self.config.pacing == 'timed' and self.config.wait_time > 0

        while not run.finished:
            # Limits apply only between expansions, and never to the step
            # that would select the goal or report an empty open set
            if run.between_expansions and not run.finishes_next():
                reason = self._limit_reached(run, started_at)
                if reason is not None:
                    logger.warning(f"Stopping search: {reason}")
                    return run.cancel(reason)

            event = run.step()
            if event is None:
                break
            if sink is not None:
                sink(event)
            if timed:
                self._sleep(self.config.wait_time)

        return run.outcome

    def _limit_reached(self, run: SearchRun, started_at: float) -> Optional[str]:
        limit = self.config.max_nodes_expanded
        if limit is not None and run.nodes_expanded >= limit:
            return 'expansion_limit'
        limit = self.config.max_computation_time
        if limit is not None and self._clock() - started_at >= limit:
            return 'time_limit'
        return None


def create_driver(engine: Optional[SearchEngine] = None, **overrides) -> SearchDriver:
    """Factory function to create a driver from the loaded configuration.

    Args:
        engine: Engine to drive; defaults to ``create_search_engine()``
        **overrides: ``DriverConfig`` fields taking precedence over config

    Returns:
        Configured SearchDriver instance
    """
    from tile_search.config import get_parameter

    defaults = DriverConfig()
    values = {
        'pacing': get_parameter('driver.pacing', defaults.pacing),
        'wait_time': float(get_parameter('driver.wait_time', defaults.wait_time)),
        'max_nodes_expanded': get_parameter('search.limits.max_nodes_expanded', defaults.max_nodes_expanded),
        'max_computation_time': get_parameter('search.limits.max_computation_time', defaults.max_computation_time),
    }
    values.update({key: value for key, value in overrides.items() if value is not None})
    return SearchDriver(engine=engine, config=DriverConfig(**values))
