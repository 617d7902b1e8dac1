"""Tests for path reconstruction and path costs."""

import pytest

from tile_search.core.data_models import SearchRecord
from tile_search.core.errors import PathReconstructionError, SearchConfigurationError
from tile_search.graph.adjacency import AdjacencyGraph
from tile_search.graph.grid import GridGraph
from tile_search.search.path import reconstruct_path, path_cost


def chain(*names):
    """Build linked records for a chain of node names."""
    records = []
    previous = None
    for cost, name in enumerate(names):
        record = SearchRecord(name)
        record.improve(float(cost), previous, 0.0)
        records.append(record)
        previous = record
    return records


class TestReconstructPath:
    """Test backlink walking."""

    def test_chain(self):
        """Test the path runs from start to goal."""
        records = chain('s', 'a', 'b', 'g')
        assert reconstruct_path(records[-1]) == ['s', 'a', 'b', 'g']
        assert reconstruct_path(records[-1], record_count=4) == ['s', 'a', 'b', 'g']

    def test_single_record(self):
        """Test a start record alone is a one-node path."""
        records = chain('s')
        assert reconstruct_path(records[0]) == ['s']

    def test_missing_goal(self):
        """Test reconstruction needs a goal record."""
        with pytest.raises(PathReconstructionError):
            reconstruct_path(None)

    def test_cycle_detected(self):
        """Test a backlink cycle is reported instead of looping forever."""
        records = chain('s', 'a', 'b')
        records[0].came_from = records[-1]

        with pytest.raises(PathReconstructionError, match="cycle"):
            reconstruct_path(records[-1])

    def test_walk_bounded_by_record_count(self):
        """Test the walk stops once it exceeds the number of known records."""
        records = chain('s', 'a', 'b')
        records[0].came_from = records[-1]

        with pytest.raises(PathReconstructionError, match="exceeded 3 records"):
            reconstruct_path(records[-1], record_count=3)

    def test_error_hierarchy(self):
        """Test reconstruction errors are search errors."""
        from tile_search.core.errors import TileSearchError
        assert issubclass(PathReconstructionError, TileSearchError)


class TestPathCost:
    """Test summing edge costs along a path."""

    def test_grid_path(self):
        """Test a straight grid path costs one edge per step."""
        graph = GridGraph(4, 1, edge_cost=2.5)
        path = [graph.tile(x, 0) for x in range(4)]
        assert path_cost(path) == 7.5

    def test_empty_and_single(self):
        """Test trivial paths cost nothing."""
        graph = GridGraph(2, 2)
        assert path_cost([]) == 0.0
        assert path_cost([graph.tile(0, 0)]) == 0.0

    def test_cheapest_parallel_edge(self):
        """Test the cheapest of several edges between two nodes counts."""
        graph = AdjacencyGraph()
        graph.add_edge('a', 'b', 3.0, label='slow')
        graph.add_edge('a', 'b', 1.0, label='fast')
        assert path_cost([graph['a'], graph['b']]) == 1.0

    def test_disconnected(self):
        """Test consecutive nodes must be connected."""
        graph = GridGraph(3, 3)
        with pytest.raises(SearchConfigurationError):
            path_cost([graph.tile(0, 0), graph.tile(2, 2)])
