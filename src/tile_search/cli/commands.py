"""CLI command implementations."""

import logging
from typing import Any, Dict

import numpy as np
from omegaconf import OmegaConf

from tile_search.config import load_config, get_parameter, save_config, validate_config, ConfigValidationError
from tile_search.core.errors import TileSearchError
from tile_search.graph.grid import GridGraph, GridTile
from tile_search.search.driver import create_driver
from tile_search.search.engine import create_search_engine
from tile_search.search.events import NodeActivated, NodeDiscoveredOrUpdated, NodeSettled, SearchEvent
from tile_search.search.targets import plan_route_to_nearest

from .utils import parse_coord, parse_edge, format_duration, save_results

logger = logging.getLogger(__name__)


def build_grid(args) -> GridGraph:
    """Build the grid described by the command line and configuration."""
    width = args.width or int(get_parameter('grid.width', 10))
    height = args.height or int(get_parameter('grid.height', 16))
    edge_cost = args.edge_cost if args.edge_cost is not None else float(get_parameter('grid.edge_cost', 1.0))

    blocked = None
    if args.block:
        blocked = np.zeros((height, width), dtype=bool)
        for text in args.block:
            x, y = parse_coord(text)
            if not (0 <= x < width and 0 <= y < height):
                raise ValueError(f"Blocked tile ({x}, {y}) is outside the {width}x{height} grid")
            blocked[y, x] = True

    graph = GridGraph(width, height, edge_cost=edge_cost, blocked=blocked)
    for text in args.remove_edge or []:
        (x, y), direction = parse_edge(text)
        graph.remove_edge(x, y, direction)
    return graph


def _require_tile(graph: GridGraph, text: str, role: str) -> GridTile:
    x, y = parse_coord(text)
    tile = graph.tile(x, y)
    if tile is None:
        raise ValueError(f"{role} tile ({x}, {y}) is outside the grid or blocked")
    return tile


def _print_event(event: SearchEvent) -> None:
    if isinstance(event, NodeActivated):
        print(f"  active  {event.node.key}")
    elif isinstance(event, NodeDiscoveredOrUpdated):
        print(f"  open    {event.node.key} cost={event.cost:g}")
    elif isinstance(event, NodeSettled):
        print(f"  closed  {event.node.key} cost={event.cost:g}")


def _report(outcome, results: Dict[str, Any]) -> None:
    results.update(outcome.to_dict())
    if outcome.success:
        route = ' -> '.join(f"({x},{y})" for x, y in results['path'])
        print(f"Path found: {route}")
        print(f"Path length: {len(outcome.path)} tiles, cost {outcome.cost:g}")
    elif outcome.termination_reason == 'exhausted':
        print("Search failed: no path to goal")
    else:
        print(f"Search stopped: {outcome.termination_reason}")
    print(f"Nodes expanded: {outcome.nodes_expanded}")
    print(f"Elapsed: {format_duration(outcome.elapsed)}")


def _load(args) -> None:
    load_config(overrides=getattr(args, 'config', None) or [])
    if not getattr(args, 'verbose', 0) and not getattr(args, 'quiet', False):
        level = str(get_parameter('logging.level', 'WARNING')).upper()
        logging.getLogger().setLevel(level)


def search_command(args) -> int:
    """Handle search command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    try:
        _load(args)
        graph = build_grid(args)
        start = _require_tile(graph, args.start, 'Start')
        goal = _require_tile(graph, args.goal, 'Goal')

        engine = create_search_engine(algorithm=args.algorithm, heuristic=args.heuristic)
        driver = create_driver(engine, pacing=args.pacing, wait_time=args.wait_time,
                               max_nodes_expanded=args.max_nodes)

        sink = _print_event if args.trace else None
        outcome = driver.run(start, goal, sink=sink)

        results: Dict[str, Any] = {
            'algorithm': engine.algorithm.value,
            'start': start.key,
            'goal': goal.key,
            'grid': {'width': graph.width, 'height': graph.height}
        }
        _report(outcome, results)

        if args.output:
            save_results(results, args.output)

        return 0 if outcome.success else 1

    except (TileSearchError, ConfigValidationError, ValueError) as e:
        logger.error(f"Search failed: {e}")
        return 1


def plan_command(args) -> int:
    """Handle plan command: route to the nearest unclaimed tile.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    try:
        _load(args)
        graph = build_grid(args)
        start = _require_tile(graph, args.start, 'Start')
        claimed = {parse_coord(text) for text in args.claimed or []}

        engine = create_search_engine(algorithm=args.algorithm, heuristic=args.heuristic)
        target, outcome = plan_route_to_nearest(engine, start, lambda tile: tile.key not in claimed)
        if target is None:
            print("Every reachable tile is already claimed")
            return 1

        print(f"Nearest unclaimed tile: {target.key}")
        results: Dict[str, Any] = {'start': start.key, 'target': target.key}
        _report(outcome, results)

        if args.output:
            save_results(results, args.output)

        return 0 if outcome.success else 1

    except (TileSearchError, ConfigValidationError, ValueError) as e:
        logger.error(f"Planning failed: {e}")
        return 1


def config_command(args) -> int:
    """Handle config command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    try:
        if args.config_action == 'show':
            config = load_config(overrides=getattr(args, 'config', None) or [], validate=False)
            print("Current Configuration:")
            print("=" * 50)
            print(OmegaConf.to_yaml(config, resolve=True))
            if getattr(args, 'output', None):
                save_config(args.output, config)
            return 0

        elif args.config_action == 'validate':
            try:
                config = load_config(overrides=getattr(args, 'config', None) or [], validate=False)
                validate_config(config)
                print("Configuration is valid")
                return 0
            except ConfigValidationError as e:
                print(f"Configuration validation failed: {e}")
                return 1

        else:
            print("Unknown config action")
            return 1

    except Exception as e:
        logger.error(f"Config command failed: {e}")
        return 1
