"""Selection of the next tile an agent should head for."""

import logging
from collections import deque
from typing import Any, Callable, Optional, Tuple

from tile_search.core.data_models import has_graph_capability
from tile_search.core.errors import SearchConfigurationError
from tile_search.search.events import SearchOutcome

logger = logging.getLogger(__name__)


def find_nearest(start: Any, predicate: Callable[[Any], bool],
                 max_depth: Optional[int] = None) -> Optional[Any]:
    """Breadth-first walk returning the closest node satisfying ``predicate``.

    Distance is counted in edges, not edge cost. Neighbors are visited in
    the order ``neighbors()`` lists them, so ties resolve deterministically.
    The start node itself qualifies.

    Args:
        start: Node to search from
        predicate: Test applied to each reached node
        max_depth: Optional limit on the number of edges walked

    Returns:
        The nearest matching node, or None
    """
    if not has_graph_capability(start):
        raise SearchConfigurationError(f"Start node {start!r} does not provide neighbors()")

    queue = deque([(start, 0)])
    visited = {start}
    while queue:
        node, depth = queue.popleft()
        if predicate(node):
            return node
        if max_depth is not None and depth >= max_depth:
            continue
        for edge in node.neighbors().values():
            neighbor = edge[0]
            if neighbor not in visited:
                visited.add(neighbor)
                queue.append((neighbor, depth + 1))

    logger.debug(f"No matching node reachable from {start!r}")
    return None


def plan_route_to_nearest(engine, start: Any, predicate: Callable[[Any], bool],
                          heuristic: Any = None,
                          max_depth: Optional[int] = None) -> Tuple[Optional[Any], Optional[SearchOutcome]]:
    """Pick the nearest matching node and search a path to it.

    Returns:
        ``(target, outcome)``, or ``(None, None)`` when nothing matches
    """
    target = find_nearest(start, predicate, max_depth)
    if target is None:
        return None, None
    logger.info(f"Planning route from {start!r} to nearest target {target!r}")
    return target, engine.search(start, target, heuristic)
