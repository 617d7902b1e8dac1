"""Tests for the grid and adjacency graphs."""

import numpy as np
import pytest

from tile_search.core.data_models import GraphNode, has_graph_capability
from tile_search.core.errors import SearchConfigurationError
from tile_search.graph.adjacency import AdjacencyGraph
from tile_search.graph.grid import Direction, GridGraph


class TestDirection:
    """Test grid directions."""

    def test_offsets_and_opposites(self):
        """Test each direction undoes its opposite."""
        for direction in Direction:
            dx, dy = direction.offset
            ox, oy = direction.opposite.offset
            assert (dx + ox, dy + oy) == (0, 0)
            assert direction.opposite.opposite is direction

    def test_up_increases_y(self):
        assert Direction.UP.offset == (0, 1)
        assert Direction('right') is Direction.RIGHT


class TestGridGraph:
    """Test the 4-connected tile grid."""

    def test_dimensions(self):
        """Test a grid holds width * height tiles."""
        graph = GridGraph(10, 16)
        assert len(graph) == 160
        assert (9, 15) in graph
        assert (10, 0) not in graph
        assert graph.tile(10, 0) is None
        assert graph[(3, 4)].key == (3, 4)

    def test_corner_and_center_neighbors(self):
        """Test edges only connect tiles inside the grid."""
        graph = GridGraph(3, 3)
        corner = graph.tile(0, 0).neighbors()
        center = graph.tile(1, 1).neighbors()

        assert set(corner) == {Direction.UP, Direction.RIGHT}
        assert list(center) == [Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT]
        assert center[Direction.UP].target is graph.tile(1, 2)
        assert center[Direction.LEFT].cost == 1.0

    def test_tiles_are_graph_nodes(self):
        """Test tiles satisfy the graph capability."""
        tile = GridGraph(2, 2).tile(0, 0)
        assert isinstance(tile, GraphNode)
        assert has_graph_capability(tile)
        assert not has_graph_capability((0, 0))

    def test_tiles_row_major(self):
        """Test tiles iterate row by row from the bottom."""
        keys = [tile.key for tile in GridGraph(2, 2).tiles()]
        assert keys == [(0, 0), (1, 0), (0, 1), (1, 1)]

    def test_position_scales_with_edge_cost(self):
        """Test positions are spaced by the edge cost."""
        graph = GridGraph(3, 3, edge_cost=2.0)
        assert graph.tile(2, 1).position == (4.0, 2.0)
        assert GridGraph(2, 2, edge_cost=0.0).tile(1, 1).position == (1.0, 1.0)

    def test_blocked_tiles(self):
        """Test blocked cells have no tile and no edges into them."""
        blocked = np.zeros((3, 3), dtype=bool)
        blocked[1, 1] = True
        graph = GridGraph(3, 3, blocked=blocked)

        assert len(graph) == 8
        assert graph.tile(1, 1) is None
        assert Direction.UP not in graph.tile(1, 0).neighbors()

    def test_blocked_shape_mismatch(self):
        with pytest.raises(ValueError):
            GridGraph(3, 2, blocked=np.zeros((3, 2), dtype=bool))

    @pytest.mark.parametrize('width,height', [(0, 3), (3, -1), (2.5, 2)])
    def test_invalid_dimensions(self, width, height):
        with pytest.raises(ValueError):
            GridGraph(width, height)

    def test_negative_edge_cost(self):
        with pytest.raises(SearchConfigurationError):
            GridGraph(2, 2, edge_cost=-1.0)

    def test_remove_edge(self):
        """Test removal affects both directions unless asked otherwise."""
        graph = GridGraph(3, 3)
        graph.remove_edge(1, 0, Direction.RIGHT)

        assert not graph.has_edge(1, 0, Direction.RIGHT)
        assert not graph.has_edge(2, 0, Direction.LEFT)
        graph.remove_edge(1, 0, Direction.RIGHT)  # already gone

        graph.remove_edge(0, 0, Direction.UP, bidirectional=False)
        assert not graph.has_edge(0, 0, Direction.UP)
        assert graph.has_edge(0, 1, Direction.DOWN)

    def test_set_edge_cost(self):
        """Test edge costs can be changed per direction."""
        graph = GridGraph(3, 3)
        graph.set_edge_cost(0, 0, Direction.RIGHT, 4.0)
        assert graph.tile(0, 0).neighbors()[Direction.RIGHT].cost == 4.0
        assert graph.tile(1, 0).neighbors()[Direction.LEFT].cost == 4.0

        graph.set_edge_cost(0, 0, Direction.UP, 2.0, bidirectional=False)
        assert graph.tile(0, 1).neighbors()[Direction.DOWN].cost == 1.0

    def test_set_missing_edge(self):
        graph = GridGraph(3, 3)
        with pytest.raises(KeyError):
            graph.set_edge_cost(0, 0, Direction.LEFT, 2.0)


class TestAdjacencyGraph:
    """Test the named-vertex graph."""

    def test_add_edge_creates_vertices(self):
        graph = AdjacencyGraph()
        graph.add_edge('a', 'b', 2.0)

        assert len(graph) == 2
        assert 'a' in graph
        edges = graph['a'].neighbors()
        assert list(edges) == ['b']
        assert edges['b'].target is graph['b']
        assert edges['b'].cost == 2.0
        assert graph['b'].neighbors() == {}

    def test_bidirectional(self):
        graph = AdjacencyGraph()
        graph.add_edge('a', 'b', 3.0, bidirectional=True)
        assert graph['b'].neighbors()['a'].cost == 3.0

    def test_neighbors_is_a_copy(self):
        """Test callers cannot mutate the graph through neighbors()."""
        graph = AdjacencyGraph()
        graph.add_edge('a', 'b')
        graph['a'].neighbors().clear()
        assert len(graph['a'].neighbors()) == 1

    def test_remove_edge(self):
        graph = AdjacencyGraph()
        graph.add_edge('a', 'b', label='one')
        graph.add_edge('a', 'b', label='two')
        graph.add_edge('a', 'c')
        graph.remove_edge('a', 'b')
        assert list(graph['a'].neighbors()) == ['c']

    def test_positions(self):
        graph = AdjacencyGraph()
        vertex = graph.add_vertex('a', position=(1.0, 2.0))
        assert graph.add_vertex('a') is vertex
        assert vertex.position == (1.0, 2.0)
        assert vertex.key == 'a'

    @pytest.mark.parametrize('cost', [-0.5, float('nan'), 'x'])
    def test_invalid_cost(self, cost):
        with pytest.raises(SearchConfigurationError):
            AdjacencyGraph().add_edge('a', 'b', cost)
