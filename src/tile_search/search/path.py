"""Path reconstruction from search record backlinks."""

import logging
from typing import Any, List, Optional, Sequence

from tile_search.core.data_models import SearchRecord, validate_edge_cost
from tile_search.core.errors import PathReconstructionError, SearchConfigurationError

logger = logging.getLogger(__name__)


def reconstruct_path(goal_record: SearchRecord, record_count: Optional[int] = None) -> List[Any]:
    """Walk backlinks from the goal record back to the start.

    Args:
        goal_record: Record of the goal node
        record_count: Number of records discovered by the search. The walk
            may visit at most this many records; passing None disables the
            bound in favor of an explicit visited set.

    Returns:
        Nodes ordered from start to goal

    Raises:
        PathReconstructionError: If the backlinks contain a cycle
    """
    if goal_record is None:
        raise PathReconstructionError("Cannot reconstruct a path without a goal record")

    reversed_path = []
    seen = set()
    current = goal_record
    while current is not None:
        if record_count is not None:
            if len(reversed_path) >= record_count:
                raise PathReconstructionError(
                    f"Backlink walk exceeded {record_count} records without reaching the start"
                )
        else:
            if id(current) in seen:
                raise PathReconstructionError(f"Backlink cycle detected at {current.node!r}")
            seen.add(id(current))
        reversed_path.append(current.node)
        current = current.came_from

    reversed_path.reverse()
    logger.debug(f"Reconstructed path with {len(reversed_path)} nodes")
    return reversed_path


def path_cost(path: Sequence[Any]) -> float:
    """Sum edge costs along a node path using each node's ``neighbors()``.

    When several edges connect the same pair of nodes the cheapest counts.

    Raises:
        SearchConfigurationError: If consecutive nodes are not connected
    """
    total = 0.0
    for source, target in zip(path, path[1:]):
        costs = [validate_edge_cost(edge[1], source, target)
                 for edge in source.neighbors().values() if edge[0] == target]
        if not costs:
            raise SearchConfigurationError(f"No edge from {source!r} to {target!r}")
        total += min(costs)
    return total
