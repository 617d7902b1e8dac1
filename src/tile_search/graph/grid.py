"""Rectangular 4-connected tile grid.

Tiles are addressed by integer ``(x, y)`` coordinates with ``y`` growing
upwards, matching the board the game agents walk on. Each tile links to
its up/down/left/right neighbors; every link is a directed edge with its
own cost, so links can be re-weighted or removed one direction at a time.
"""

import logging
from enum import Enum
from typing import Dict, Iterator, Optional, Tuple

import numpy as np

from tile_search.core.data_models import Edge, validate_edge_cost

logger = logging.getLogger(__name__)


class Direction(str, Enum):
    """Edge labels of a grid tile."""
    UP = 'up'
    DOWN = 'down'
    LEFT = 'left'
    RIGHT = 'right'

    @property
    def offset(self) -> Tuple[int, int]:
        return _OFFSETS[self]

    @property
    def opposite(self) -> 'Direction':
        return _OPPOSITES[self]


_OFFSETS = {
    Direction.UP: (0, 1),
    Direction.DOWN: (0, -1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}

_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class GridTile:
    """A tile of a ``GridGraph``; compared by identity."""

    __slots__ = ('graph', 'x', 'y')

    def __init__(self, graph: 'GridGraph', x: int, y: int):
        self.graph = graph
        self.x = x
        self.y = y

    @property
    def key(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @property
    def position(self) -> Tuple[float, float]:
        """World position; neighboring tiles are ``spacing`` apart."""
        return (self.x * self.graph.spacing, self.y * self.graph.spacing)

    def neighbors(self) -> Dict[Direction, Edge]:
        return self.graph.neighbors_of(self)

    def __repr__(self) -> str:
        return f"GridTile({self.x}, {self.y})"


class GridGraph:
    """4-connected grid of tiles with per-edge traversal costs."""

    def __init__(self, width: int, height: int, edge_cost: float = 1.0,
                 blocked: Optional[np.ndarray] = None, spacing: Optional[float] = None):
        """Initialize grid graph.

        Args:
            width: Number of columns
            height: Number of rows
            edge_cost: Cost of every edge initially
            blocked: Optional boolean mask of shape (height, width); True
                marks a missing tile
            spacing: World distance between neighboring tiles. Defaults to
                ``edge_cost`` (or 1.0 for free edges), so that positional
                heuristics stay admissible on the unmodified grid.
        """
        if not isinstance(width, (int, np.integer)) or not isinstance(height, (int, np.integer)) \
                or width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive integers, got {width}x{height}")

        self.width = int(width)
        self.height = int(height)
        self.edge_cost = validate_edge_cost(edge_cost)
        self.spacing = float(spacing) if spacing is not None else (self.edge_cost or 1.0)

        if blocked is None:
            self.blocked = np.zeros((self.height, self.width), dtype=bool)
        else:
            self.blocked = np.asarray(blocked, dtype=bool)
            if self.blocked.shape != (self.height, self.width):
                raise ValueError(
                    f"blocked mask must have shape {(self.height, self.width)}, got {self.blocked.shape}"
                )

        self._tiles: Dict[Tuple[int, int], GridTile] = {}
        self._costs: Dict[Tuple[int, int], Dict[Direction, float]] = {}
        for y in range(self.height):
            for x in range(self.width):
                if not self.blocked[y, x]:
                    self._tiles[(x, y)] = GridTile(self, x, y)

        for (x, y) in self._tiles:
            links = {}
            for direction in Direction:
                dx, dy = direction.offset
                if (x + dx, y + dy) in self._tiles:
                    links[direction] = self.edge_cost
            self._costs[(x, y)] = links

        logger.debug(f"Created {self.width}x{self.height} grid with {len(self._tiles)} tiles")

    def __len__(self) -> int:
        return len(self._tiles)

    def __contains__(self, key: Tuple[int, int]) -> bool:
        return tuple(key) in self._tiles

    def __getitem__(self, key: Tuple[int, int]) -> GridTile:
        return self._tiles[tuple(key)]

    def tile(self, x: int, y: int) -> Optional[GridTile]:
        """Return the tile at ``(x, y)``, or None if absent."""
        return self._tiles.get((x, y))

    def tiles(self) -> Iterator[GridTile]:
        """Iterate tiles row by row, bottom row first."""
        return iter(self._tiles.values())

    def neighbors_of(self, tile: GridTile) -> Dict[Direction, Edge]:
        costs = self._costs[tile.key]
        result = {}
        for direction, cost in costs.items():
            dx, dy = direction.offset
            result[direction] = Edge(self._tiles[(tile.x + dx, tile.y + dy)], cost)
        return result

    def has_edge(self, x: int, y: int, direction: Direction) -> bool:
        return Direction(direction) in self._costs.get((x, y), {})

    def set_edge_cost(self, x: int, y: int, direction: Direction, cost: float,
                      bidirectional: bool = True) -> None:
        """Change the cost of an existing edge.

        Raises:
            KeyError: If the edge does not exist
        """
        direction = Direction(direction)
        cost = validate_edge_cost(cost, (x, y), direction)
        if not self.has_edge(x, y, direction):
            raise KeyError(f"No edge {direction.value} from ({x}, {y})")
        self._costs[(x, y)][direction] = cost
        if bidirectional:
            dx, dy = direction.offset
            self._costs[(x + dx, y + dy)][direction.opposite] = cost

    def remove_edge(self, x: int, y: int, direction: Direction,
                    bidirectional: bool = True) -> None:
        """Remove the edge leaving ``(x, y)`` in ``direction``.

        Removing an edge that is already gone is a no-op.
        """
        direction = Direction(direction)
        if self._costs.get((x, y), {}).pop(direction, None) is None:
            return
        if bidirectional:
            dx, dy = direction.offset
            self._costs[(x + dx, y + dy)].pop(direction.opposite, None)
        logger.debug(f"Removed edge {direction.value} from ({x}, {y})")
