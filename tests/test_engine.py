"""Tests for the best-first search engine."""

import numpy as np
import pytest

from tile_search.core.errors import SearchConfigurationError
from tile_search.graph.adjacency import AdjacencyGraph
from tile_search.graph.grid import Direction, GridGraph
from tile_search.search.engine import SearchEngine, SearchConfig, SearchRun, create_search_engine
from tile_search.search.events import (
    Found, NotFound, Abandoned, NodeActivated, NodeDiscoveredOrUpdated, NodeSettled
)
from tile_search.search.heuristics import (
    ZeroHeuristic, ManhattanHeuristic, EuclideanHeuristic, CrossProductHeuristic, FunctionHeuristic
)
from tile_search.search.path import path_cost


class StubNode:
    """Minimal node exposing arbitrary edges."""

    def __init__(self, name):
        self.name = name
        self.edges = {}

    def neighbors(self):
        return self.edges

    def __repr__(self):
        return f"StubNode({self.name!r})"


def shortest_costs(nodes):
    """Brute-force all-pairs shortest path costs (Floyd-Warshall)."""
    index = {node: i for i, node in enumerate(nodes)}
    dist = np.full((len(nodes), len(nodes)), np.inf)
    np.fill_diagonal(dist, 0.0)
    for node in nodes:
        for target, cost in node.neighbors().values():
            i, j = index[node], index[target]
            dist[i, j] = min(dist[i, j], cost)
    for k in range(len(nodes)):
        dist = np.minimum(dist, dist[:, k:k + 1] + dist[k:k + 1, :])
    return index, dist


def random_grid(seed, width=5, height=5, removal_rate=0.15):
    """Grid with random integer edge costs in [1, 5] and some one-way removals."""
    rng = np.random.default_rng(seed)
    graph = GridGraph(width, height)
    for tile in list(graph.tiles()):
        for direction in list(tile.neighbors()):
            graph.set_edge_cost(tile.x, tile.y, direction, float(rng.integers(1, 6)), bidirectional=False)
    for tile in list(graph.tiles()):
        for direction in list(tile.neighbors()):
            if rng.random() < removal_rate:
                graph.remove_edge(tile.x, tile.y, direction, bidirectional=False)
    return graph


def reopening_graph():
    """Graph where h(B) is admissible but inconsistent, forcing C to be reopened.

    S -1-> A -3-> C -5-> G
    S -1-> B -1-> C
    """
    graph = AdjacencyGraph()
    graph.add_edge('S', 'A', 1.0)
    graph.add_edge('S', 'B', 1.0)
    graph.add_edge('A', 'C', 3.0)
    graph.add_edge('B', 'C', 1.0)
    graph.add_edge('C', 'G', 5.0)
    estimates = {'S': 0.0, 'A': 0.0, 'B': 4.0, 'C': 0.0, 'G': 0.0}
    heuristic = FunctionHeuristic(lambda start, tile, goal: estimates[tile.name],
                                  name='inconsistent', admissible=True, consistent=False)
    return graph, heuristic


@pytest.fixture
def engine():
    return SearchEngine(SearchConfig(algorithm='dijkstra'))


@pytest.fixture
def grid3():
    return GridGraph(3, 3)


class TestConcreteScenarios:
    """Test the reference grid scenarios."""

    def test_3x3_manhattan(self, engine, grid3):
        """Test corner to corner on a 3x3 grid: 5 tiles, cost 4."""
        start, goal = grid3.tile(0, 0), grid3.tile(2, 2)
        outcome = engine.search(start, goal, ManhattanHeuristic())

        assert isinstance(outcome, Found)
        assert outcome.success
        assert len(outcome.path) == 5
        assert outcome.cost == 4.0
        assert outcome.path[0] is start
        assert outcome.path[-1] is goal
        assert path_cost(outcome.path) == 4.0

    def test_removed_edge_forces_detour(self, engine, grid3):
        """Test removing the direct edge adds exactly 2 to the Manhattan distance."""
        start, goal = grid3.tile(0, 0), grid3.tile(2, 0)
        manhattan = ManhattanHeuristic()(start, start, goal)
        grid3.remove_edge(1, 0, Direction.RIGHT)

        outcome = engine.search(start, goal, ManhattanHeuristic())

        assert isinstance(outcome, Found)
        assert outcome.cost == manhattan + 2
        keys = [tile.key for tile in outcome.path]
        assert len(keys) == 5
        assert (2, 1) in keys
        assert all(pair != ((1, 0), (2, 0)) for pair in zip(keys, keys[1:]))

    def test_start_is_goal(self, engine, grid3):
        """Test searching for the start returns a one-tile path."""
        tile = grid3.tile(1, 1)
        outcome = engine.search(tile, tile)

        assert isinstance(outcome, Found)
        assert outcome.path == [tile]
        assert outcome.cost == 0.0
        assert outcome.nodes_expanded == 0

    def test_non_uniform_costs(self, engine):
        """Test an expensive edge is avoided in favor of a longer cheap route."""
        graph = GridGraph(3, 2)
        graph.set_edge_cost(0, 0, Direction.RIGHT, 10.0)
        outcome = engine.search(graph.tile(0, 0), graph.tile(1, 0))

        assert outcome.cost == 3.0
        assert [tile.key for tile in outcome.path] == [(0, 0), (0, 1), (1, 1), (1, 0)]


class TestOptimality:
    """Test optimality against a brute-force reference."""

    @pytest.mark.parametrize('seed', range(8))
    def test_dijkstra_matches_brute_force(self, engine, seed):
        """Test the zero heuristic finds true shortest-path costs."""
        graph = random_grid(seed)
        tiles = list(graph.tiles())
        index, dist = shortest_costs(tiles)
        rng = np.random.default_rng(100 + seed)

        for _ in range(10):
            start, goal = rng.choice(len(tiles), size=2)
            outcome = engine.search(tiles[start], tiles[goal], ZeroHeuristic())
            expected = dist[index[tiles[start]], index[tiles[goal]]]

            if np.isinf(expected):
                assert isinstance(outcome, NotFound)
            else:
                assert isinstance(outcome, Found)
                assert outcome.cost == pytest.approx(expected)
                assert path_cost(outcome.path) == pytest.approx(expected)

    @pytest.mark.parametrize('seed', range(8))
    @pytest.mark.parametrize('heuristic_cls', [ManhattanHeuristic, EuclideanHeuristic])
    def test_admissible_astar_matches_dijkstra(self, engine, seed, heuristic_cls):
        """Test admissible A* returns the same cost as Dijkstra."""
        graph = random_grid(seed)
        tiles = list(graph.tiles())
        rng = np.random.default_rng(200 + seed)

        for _ in range(10):
            start, goal = (tiles[i] for i in rng.choice(len(tiles), size=2))
            dijkstra = engine.search(start, goal, ZeroHeuristic())
            astar = engine.search(start, goal, heuristic_cls())

            assert type(astar) is type(dijkstra)
            if dijkstra.success:
                assert astar.cost == pytest.approx(dijkstra.cost)

    def test_cross_product_still_finds_a_path(self, engine):
        """Test the inadmissible tie-breaker still reaches the goal on an open grid."""
        graph = GridGraph(6, 6)
        outcome = engine.search(graph.tile(0, 0), graph.tile(5, 3), CrossProductHeuristic())

        assert isinstance(outcome, Found)
        assert outcome.cost == 8.0

    def test_idempotent(self, engine):
        """Test repeating a search gives the same path and cost."""
        graph = random_grid(3, removal_rate=0.0)
        start, goal = graph.tile(0, 0), graph.tile(4, 4)

        first = engine.search(start, goal, ManhattanHeuristic())
        second = engine.search(start, goal, ManhattanHeuristic())

        assert first.path == second.path
        assert first.cost == second.cost
        assert first.nodes_expanded == second.nodes_expanded


class TestReopening:
    """Test reopening of settled records."""

    def test_cheaper_route_reopens_settled_node(self, engine):
        """Test C is settled via A, then reopened when the route via B turns up."""
        graph, heuristic = reopening_graph()
        run = engine.start(graph['S'], graph['G'], heuristic)
        events = list(run)
        outcome = run.outcome

        assert isinstance(outcome, Found)
        assert [vertex.name for vertex in outcome.path] == ['S', 'B', 'C', 'G']
        assert outcome.cost == 7.0
        assert outcome.statistics.nodes_reopened == 1

        settled_c = [event.cost for event in events
                     if isinstance(event, NodeSettled) and event.node.name == 'C']
        assert settled_c == [4.0, 2.0]
        assert outcome.nodes_expanded == 5

    def test_reopening_reuses_known_heuristic(self, engine):
        """Test the heuristic is computed once per discovered node."""
        graph, heuristic = reopening_graph()
        outcome = engine.search(graph['S'], graph['G'], heuristic)

        assert outcome.statistics.heuristic_computations == 5
        assert heuristic.computation_count == 5


class TestNoPath:
    """Test searches that cannot reach the goal."""

    @pytest.fixture
    def split_grid(self):
        graph = GridGraph(4, 3)
        for y in range(3):
            graph.remove_edge(1, y, Direction.RIGHT)
        return graph

    @pytest.mark.parametrize('heuristic', [ZeroHeuristic(), ManhattanHeuristic()])
    def test_disconnected_goal(self, engine, split_grid, heuristic):
        """Test NotFound after expanding the whole reachable component."""
        outcome = engine.search(split_grid.tile(0, 0), split_grid.tile(3, 0), heuristic)

        assert isinstance(outcome, NotFound)
        assert not outcome.success
        assert outcome.termination_reason == 'exhausted'
        assert outcome.nodes_expanded == 6
        assert not hasattr(outcome, 'path')

    def test_blocked_tiles(self, engine):
        """Test a wall of missing tiles also disconnects the goal."""
        blocked = np.zeros((3, 3), dtype=bool)
        blocked[:, 1] = True
        graph = GridGraph(3, 3, blocked=blocked)

        outcome = engine.search(graph.tile(0, 0), graph.tile(2, 2))

        assert isinstance(outcome, NotFound)
        assert outcome.nodes_expanded == 3

    def test_one_way_edges(self, engine):
        """Test direction matters: the goal can be left but not entered."""
        graph = AdjacencyGraph()
        graph.add_edge('a', 'b')
        assert engine.search(graph['a'], graph['b']).success
        assert isinstance(engine.search(graph['b'], graph['a']), NotFound)


class TestEvents:
    """Test the progress event stream."""

    def test_event_order_on_chain(self, engine):
        """Test events follow state changes exactly."""
        graph = AdjacencyGraph()
        graph.add_edge('S', 'A', 1.0)
        graph.add_edge('A', 'G', 1.0)
        events = []

        engine.search(graph['S'], graph['G'], sink=events.append)

        S, A, G = graph['S'], graph['A'], graph['G']
        assert events == [
            NodeDiscoveredOrUpdated(S, 0.0),
            NodeActivated(S),
            NodeDiscoveredOrUpdated(A, 1.0),
            NodeSettled(S, 0.0),
            NodeActivated(A),
            NodeDiscoveredOrUpdated(G, 2.0),
            NodeSettled(A, 1.0),
            NodeActivated(G),
        ]

    def test_update_event_on_cheaper_open_route(self, engine):
        """Test a cheaper route to an open node emits an update with the new cost."""
        graph = AdjacencyGraph()
        graph.add_edge('S', 'G', 5.0)
        graph.add_edge('S', 'A', 1.0)
        graph.add_edge('A', 'G', 1.0)
        events = []

        outcome = engine.search(graph['S'], graph['G'], sink=events.append)

        updates = [event.cost for event in events
                   if isinstance(event, NodeDiscoveredOrUpdated) and event.node.name == 'G']
        assert updates == [5.0, 2.0]
        assert outcome.cost == 2.0
        assert outcome.statistics.nodes_updated == 1

    def test_dijkstra_settles_in_cost_order(self, engine):
        """Test settled costs never decrease with the zero heuristic."""
        graph = random_grid(5, removal_rate=0.0)
        events = []
        engine.search(graph.tile(0, 0), graph.tile(4, 4), ZeroHeuristic(), sink=events.append)

        settled = [event.cost for event in events if isinstance(event, NodeSettled)]
        assert settled == sorted(settled)

    def test_consistent_heuristic_settles_final_costs(self, engine):
        """Test settled records keep their cost under a consistent heuristic."""
        graph = GridGraph(6, 6)
        graph.remove_edge(2, 2, Direction.UP)
        graph.remove_edge(3, 3, Direction.LEFT)
        run = engine.start(graph.tile(0, 0), graph.tile(5, 5), ManhattanHeuristic())

        settled = {}
        for event in run:
            if isinstance(event, NodeSettled):
                assert event.node not in settled
                settled[event.node] = event.cost

        assert run.statistics.nodes_reopened == 0
        for node, cost in settled.items():
            assert run.store.get(node).cost_so_far == cost

    def test_equal_cost_ties_keep_first_route(self, engine):
        """Test the first-discovered of two equal routes wins and is not replaced."""
        for first, second in [('X', 'Y'), ('Y', 'X')]:
            graph = AdjacencyGraph()
            graph.add_edge('S', first, 1.0)
            graph.add_edge('S', second, 1.0)
            graph.add_edge(first, 'G', 1.0)
            graph.add_edge(second, 'G', 1.0)

            outcome = engine.search(graph['S'], graph['G'])

            assert [vertex.name for vertex in outcome.path] == ['S', first, 'G']
            assert outcome.statistics.nodes_updated == 0


class TestStepping:
    """Test the step-by-step run interface."""

    def test_step_until_finished(self, engine, grid3):
        """Test stepping returns events, then None forever."""
        run = engine.start(grid3.tile(0, 0), grid3.tile(2, 2))
        assert isinstance(run, SearchRun)
        assert not run.finished

        count = 0
        while run.step() is not None:
            count += 1

        assert run.finished
        assert run.step() is None
        assert run.statistics.events_emitted == count
        assert isinstance(run.outcome, Found)
        assert run.outcome.elapsed >= 0.0

    def test_expansion_boundaries(self, engine):
        """Test the run reports when the next step selects a new node."""
        graph = GridGraph(2, 1)
        run = engine.start(graph.tile(0, 0), graph.tile(1, 0))
        assert not run.between_expansions

        run.step()  # start discovered
        assert run.between_expansions
        assert not run.finishes_next()

        run.step()  # start activated
        assert not run.between_expansions
        assert not run.finishes_next()

        run.step()  # goal discovered
        run.step()  # start settled
        assert run.between_expansions
        assert run.finishes_next()

        run.run_to_completion()
        assert not run.between_expansions

    def test_cancel_between_steps(self, engine, grid3):
        """Test a run can be abandoned without side effects."""
        run = engine.start(grid3.tile(0, 0), grid3.tile(2, 2))
        run.step()
        run.step()

        outcome = run.cancel()

        assert isinstance(outcome, Abandoned)
        assert outcome.termination_reason == 'cancelled'
        assert run.step() is None
        # A fresh run is unaffected
        assert engine.search(grid3.tile(0, 0), grid3.tile(2, 2)).success

    def test_cancel_after_finish_keeps_outcome(self, engine, grid3):
        """Test cancelling a finished run does not replace its result."""
        run = engine.start(grid3.tile(0, 0), grid3.tile(0, 1))
        outcome = run.run_to_completion()
        assert run.cancel() is outcome


class TestInputValidation:
    """Test configuration errors."""

    @pytest.mark.parametrize('start,goal', [(None, 'goal'), ('start', None), (None, None)])
    def test_missing_nodes(self, engine, grid3, start, goal):
        """Test absent start or goal fails before searching."""
        nodes = {'start': grid3.tile(0, 0), 'goal': grid3.tile(2, 2), None: None}
        with pytest.raises(SearchConfigurationError):
            engine.start(nodes[start], nodes[goal])

    def test_node_without_capability(self, engine, grid3):
        """Test nodes must provide neighbors()."""
        with pytest.raises(SearchConfigurationError):
            engine.start(object(), grid3.tile(0, 0))
        with pytest.raises(SearchConfigurationError):
            engine.start(grid3.tile(0, 0), (2, 2))

    def test_negative_edge_cost(self, engine):
        """Test negative edge costs are rejected when reached."""
        a, b = StubNode('a'), StubNode('b')
        a.edges['to_b'] = (b, -1.0)
        with pytest.raises(SearchConfigurationError):
            engine.search(a, b)

    def test_malformed_edge(self, engine):
        """Test edges must be (target, cost) pairs leading to searchable nodes."""
        a, b = StubNode('a'), StubNode('b')
        a.edges['bad'] = b
        with pytest.raises(SearchConfigurationError):
            engine.search(a, b)

        a.edges = {'bad': ('b', 1.0)}
        with pytest.raises(SearchConfigurationError):
            engine.search(a, b)

    def test_failed_run_stops(self, engine):
        """Test a run that raised does not continue or report NotFound."""
        a, b = StubNode('a'), StubNode('b')
        a.edges['to_b'] = (b, float('nan'))
        run = engine.start(a, b)
        with pytest.raises(SearchConfigurationError):
            list(run)
        assert run.step() is None
        assert run.outcome is None

    def test_negative_heuristic(self, engine, grid3):
        """Test heuristic values are validated during the search."""
        with pytest.raises(SearchConfigurationError):
            engine.search(grid3.tile(0, 0), grid3.tile(2, 2), lambda start, tile, goal: -1.0)

    def test_non_callable_heuristic(self, engine, grid3):
        """Test heuristics must be callable."""
        with pytest.raises(SearchConfigurationError):
            engine.start(grid3.tile(0, 0), grid3.tile(2, 2), 42)


class TestEngineConfiguration:
    """Test engine defaults and factory."""

    def test_dijkstra_default_is_zero_heuristic(self):
        """Test Dijkstra mode searches without a heuristic."""
        engine = SearchEngine(SearchConfig(algorithm='dijkstra'))
        assert isinstance(engine.default_heuristic(), ZeroHeuristic)

    def test_astar_default_heuristic(self):
        """Test A* mode uses the configured heuristic."""
        engine = SearchEngine(SearchConfig(algorithm='astar', heuristic='euclidean', heuristic_weight=1.0))
        assert isinstance(engine.default_heuristic(), EuclideanHeuristic)

    def test_astar_expands_fewer_nodes(self):
        """Test the default A* heuristic pays off on an open grid."""
        graph = GridGraph(10, 16)
        start, goal = graph.tile(0, 0), graph.tile(5, 0)
        dijkstra = SearchEngine(SearchConfig(algorithm='dijkstra')).search(start, goal)
        astar = SearchEngine(SearchConfig(algorithm='astar')).search(start, goal)

        assert astar.cost == dijkstra.cost == 5.0
        assert astar.nodes_expanded == 5
        assert astar.nodes_expanded < dijkstra.nodes_expanded

    def test_invalid_algorithm(self):
        """Test unknown algorithms are rejected."""
        with pytest.raises(SearchConfigurationError):
            SearchConfig(algorithm='greedy')

    def test_factory_without_config(self):
        """Test the factory falls back to defaults."""
        engine = create_search_engine(algorithm='dijkstra')
        assert engine.config.algorithm == 'dijkstra'
        assert engine.config.heuristic == 'manhattan'

    def test_outcome_serialization(self, engine, grid3):
        """Test results convert to JSON-friendly dictionaries."""
        result = engine.search(grid3.tile(0, 0), grid3.tile(1, 0)).to_dict()

        assert result['success'] is True
        assert result['termination_reason'] == 'goal_reached'
        assert result['path'] == [(0, 0), (1, 0)]
        assert result['cost'] == 1.0
        assert result['statistics']['nodes_expanded'] == 1
