#!/usr/bin/env python3
"""Compare Dijkstra and the A* heuristics on sample grids."""

import time

import numpy as np

from tile_search.graph.grid import Direction, GridGraph
from tile_search.search.engine import SearchEngine, SearchConfig
from tile_search.search.heuristics import create_heuristic

HEURISTICS = ['zero', 'manhattan', 'euclidean', 'cross_product']


def walled_grid(width, height):
    """Grid with a wall across the middle that has a single gap."""
    blocked = np.zeros((height, width), dtype=bool)
    blocked[height // 2, :width - 1] = True
    return GridGraph(width, height, blocked=blocked)


def weighted_grid(width, height, seed=0):
    """Grid with random one-way edge costs between 1 and 5."""
    rng = np.random.default_rng(seed)
    graph = GridGraph(width, height)
    for tile in list(graph.tiles()):
        for direction in list(tile.neighbors()):
            graph.set_edge_cost(tile.x, tile.y, direction, float(rng.integers(1, 6)), bidirectional=False)
    return graph


def run_case(title, graph, start, goal):
    print(f"\n📊 {title}")
    print(f"{'heuristic':<15}{'cost':>8}{'length':>8}{'expanded':>10}{'reopened':>10}{'time':>10}")
    engine = SearchEngine(SearchConfig())

    for name in HEURISTICS:
        began = time.perf_counter()
        outcome = engine.search(graph.tile(*start), graph.tile(*goal), create_heuristic(name))
        wall = time.perf_counter() - began

        if outcome.success:
            cost, length = f"{outcome.cost:g}", str(len(outcome.path))
        else:
            cost, length = '-', '-'
        print(f"{name:<15}{cost:>8}{length:>8}{outcome.nodes_expanded:>10}"
              f"{outcome.statistics.nodes_reopened:>10}{wall * 1000:>8.2f}ms")


def main():
    """Run all comparison cases."""
    print("🔍 Dijkstra vs A* on tile grids")
    print("=" * 60)

    run_case("Open 10x16 board, corner to corner", GridGraph(10, 16), (0, 0), (9, 15))
    run_case("Open 10x16 board, along the bottom row", GridGraph(10, 16), (0, 0), (9, 0))
    run_case("Wall with one gap", walled_grid(10, 16), (0, 0), (0, 15))

    detour = GridGraph(10, 16)
    for x in range(1, 10):
        detour.remove_edge(x, 7, Direction.UP)
    run_case("Removed edges force a detour", detour, (5, 0), (5, 15))

    run_case("Random one-way costs", weighted_grid(10, 16, seed=42), (0, 0), (9, 15))

    print("\n✅ Comparison complete")


if __name__ == "__main__":
    main()
