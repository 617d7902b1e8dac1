"""Main CLI entry point for tile search."""

import sys
import argparse
import logging
from typing import List, Optional

from . import commands
from .utils import setup_logging


def _add_grid_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--width',
        type=int,
        help='Grid width in tiles (default: grid.width from config)'
    )
    parser.add_argument(
        '--height',
        type=int,
        help='Grid height in tiles (default: grid.height from config)'
    )
    parser.add_argument(
        '--edge-cost',
        type=float,
        help='Cost of every edge (default: grid.edge_cost from config)'
    )
    parser.add_argument(
        '--block',
        action='append',
        metavar='X,Y',
        help='Remove a tile from the grid (repeatable)'
    )
    parser.add_argument(
        '--remove-edge',
        action='append',
        metavar='X,Y:DIR',
        help='Remove the edge leaving X,Y towards DIR in both directions (repeatable)'
    )
    parser.add_argument(
        '--algorithm', '-a',
        choices=['astar', 'dijkstra'],
        help='Search algorithm (default: search.algorithm from config)'
    )
    parser.add_argument(
        '--heuristic',
        choices=['zero', 'uniform', 'manhattan', 'euclidean', 'cross_product'],
        help='A* heuristic (default: search.heuristic from config)'
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog='tile-search',
        description='Tile Search - Dijkstra and A* path finding on tile grids',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tile-search search --width 3 --height 3 --start 0,0 --goal 2,2
  tile-search search --start 0,0 --goal 9,15 -a dijkstra --trace
  tile-search plan --start 0,0 --claimed 0,0 --claimed 1,0
  tile-search -c search.heuristic=euclidean config show
        """
    )

    # Global options
    parser.add_argument(
        '--config', '-c',
        action='append',
        metavar='KEY=VALUE',
        help='Configuration override (repeatable, e.g. search.algorithm=dijkstra)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='count',
        default=0,
        help='Increase verbosity (use -v or -vv)'
    )

    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress all output except results'
    )

    subparsers = parser.add_subparsers(
        dest='command',
        help='Available commands',
        metavar='COMMAND'
    )

    # Search command
    search_parser = subparsers.add_parser(
        'search',
        help='Find a path between two tiles',
        description='Find a path between two tiles of a rectangular grid'
    )
    search_parser.add_argument('--start', '-s', required=True, metavar='X,Y', help='Start tile')
    search_parser.add_argument('--goal', '-g', required=True, metavar='X,Y', help='Goal tile')
    _add_grid_arguments(search_parser)
    search_parser.add_argument(
        '--trace',
        action='store_true',
        help='Print every search event'
    )
    search_parser.add_argument(
        '--pacing',
        choices=['immediate', 'timed'],
        help='Step pacing (default: driver.pacing from config)'
    )
    search_parser.add_argument(
        '--wait-time',
        type=float,
        help='Seconds to wait after each event when pacing is timed'
    )
    search_parser.add_argument(
        '--max-nodes',
        type=int,
        help='Abandon the search after this many expansions'
    )
    search_parser.add_argument(
        '--output', '-o',
        type=str,
        help='Output file for results (JSON format)'
    )

    # Plan command
    plan_parser = subparsers.add_parser(
        'plan',
        help='Route to the nearest unclaimed tile',
        description='Pick the nearest tile not yet claimed and find a path to it'
    )
    plan_parser.add_argument('--start', '-s', required=True, metavar='X,Y', help='Start tile')
    plan_parser.add_argument(
        '--claimed',
        action='append',
        metavar='X,Y',
        help='Tile already claimed by the agent (repeatable)'
    )
    _add_grid_arguments(plan_parser)
    plan_parser.add_argument(
        '--output', '-o',
        type=str,
        help='Output file for results (JSON format)'
    )

    # Config command
    config_parser = subparsers.add_parser(
        'config',
        help='Configuration management',
        description='Inspect the configuration'
    )
    config_subparsers = config_parser.add_subparsers(
        dest='config_action',
        help='Configuration actions'
    )
    show_parser = config_subparsers.add_parser('show', help='Show current configuration')
    show_parser.add_argument(
        '--output', '-o',
        type=str,
        help='Also write the composed configuration to this YAML file'
    )
    config_subparsers.add_parser('validate', help='Validate configuration')

    return parser


def main_cli(args: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if parsed_args.quiet:
        log_level = logging.ERROR
    elif parsed_args.verbose == 0:
        log_level = logging.WARNING
    elif parsed_args.verbose == 1:
        log_level = logging.INFO
    else:
        log_level = logging.DEBUG

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    try:
        if not parsed_args.command:
            parser.print_help()
            return 1

        if parsed_args.command == 'search':
            return commands.search_command(parsed_args)
        if parsed_args.command == 'plan':
            return commands.plan_command(parsed_args)
        if parsed_args.command == 'config':
            return commands.config_command(parsed_args)

        logger.error(f"Unknown command: {parsed_args.command}")
        return 1

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


def main() -> None:
    """Entry point for console script."""
    sys.exit(main_cli())


if __name__ == '__main__':
    main()
