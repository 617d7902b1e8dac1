"""Command-line interface for tile search.

This module provides CLI commands for running searches on tile grids and
for inspecting the configuration.
"""

from .main import main_cli
from .commands import search_command, plan_command, config_command
from .utils import setup_logging, parse_coord, parse_edge, save_results

__all__ = [
    'main_cli',
    'search_command',
    'plan_command',
    'config_command',
    'setup_logging',
    'parse_coord',
    'parse_edge',
    'save_results'
]
