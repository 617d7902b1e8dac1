"""Configuration management for tile search.

This module provides Hydra-based configuration loading with command-line
overrides and validation of every section.
"""

from .config_manager import ConfigManager, load_config, get_config, get_parameter, reset_config, save_config
from .validators import validate_config, ConfigValidationError

__all__ = [
    'ConfigManager',
    'load_config',
    'get_config',
    'get_parameter',
    'reset_config',
    'save_config',
    'validate_config',
    'ConfigValidationError'
]
