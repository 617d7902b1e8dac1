"""Configuration validation for tile search."""

import logging
from typing import Any
from omegaconf import DictConfig

logger = logging.getLogger(__name__)

ALGORITHMS = ('astar', 'dijkstra')
HEURISTICS = ('zero', 'uniform', 'manhattan', 'euclidean', 'cross_product')
PACING_MODES = ('immediate', 'timed')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class ConfigValidationError(Exception):
    """Exception raised when configuration validation fails."""
    pass


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_config(config: DictConfig) -> None:
    """Validate the complete configuration.

    Args:
        config: Configuration to validate

    Raises:
        ConfigValidationError: If validation fails
    """
    try:
        validate_search_config(config.get('search', {}))
        validate_driver_config(config.get('driver', {}))
        validate_grid_config(config.get('grid', {}))
        validate_logging_config(config.get('logging', {}))

        logger.info("Configuration validation passed")

    except ConfigValidationError:
        raise
    except Exception as e:
        raise ConfigValidationError(f"Configuration validation failed: {e}")


def validate_search_config(search_config: DictConfig) -> None:
    """Validate search configuration section.

    Args:
        search_config: Search configuration section
    """
    if not search_config:
        return

    algorithm = search_config.get('algorithm', 'astar')
    if algorithm not in ALGORITHMS:
        raise ConfigValidationError(
            f"search.algorithm must be one of {ALGORITHMS}, got {algorithm}"
        )

    heuristic = search_config.get('heuristic', 'manhattan')
    if heuristic not in HEURISTICS:
        raise ConfigValidationError(
            f"search.heuristic must be one of {HEURISTICS}, got {heuristic}"
        )

    weight = search_config.get('heuristic_weight', 1.0)
    if not _is_number(weight) or weight < 0:
        raise ConfigValidationError(
            f"search.heuristic_weight must be non-negative number, got {weight}"
        )
    if weight > 1.0:
        logger.warning(f"search.heuristic_weight {weight} > 1 makes A* results suboptimal")

    cost_per_unit = search_config.get('cost_per_unit', 1.0)
    if not _is_number(cost_per_unit) or cost_per_unit < 0:
        raise ConfigValidationError(
            f"search.cost_per_unit must be non-negative number, got {cost_per_unit}"
        )

    limits = search_config.get('limits', {})
    if limits:
        max_nodes = limits.get('max_nodes_expanded')
        if max_nodes is not None and (not isinstance(max_nodes, int) or max_nodes <= 0):
            raise ConfigValidationError(
                f"search.limits.max_nodes_expanded must be positive integer or null, got {max_nodes}"
            )

        max_time = limits.get('max_computation_time')
        if max_time is not None and (not _is_number(max_time) or max_time <= 0):
            raise ConfigValidationError(
                f"search.limits.max_computation_time must be positive number or null, got {max_time}"
            )


def validate_driver_config(driver_config: DictConfig) -> None:
    """Validate driver configuration section.

    Args:
        driver_config: Driver configuration section
    """
    if not driver_config:
        return

    pacing = driver_config.get('pacing', 'immediate')
    if pacing not in PACING_MODES:
        raise ConfigValidationError(
            f"driver.pacing must be one of {PACING_MODES}, got {pacing}"
        )

    wait_time = driver_config.get('wait_time', 0.0)
    if not _is_number(wait_time) or wait_time < 0:
        raise ConfigValidationError(
            f"driver.wait_time must be non-negative number, got {wait_time}"
        )


def validate_grid_config(grid_config: DictConfig) -> None:
    """Validate grid configuration section.

    Args:
        grid_config: Grid configuration section
    """
    if not grid_config:
        return

    for key in ['width', 'height']:
        value = grid_config.get(key, 1)
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            raise ConfigValidationError(
                f"grid.{key} must be positive integer, got {value}"
            )

    edge_cost = grid_config.get('edge_cost', 1.0)
    if not _is_number(edge_cost) or edge_cost < 0:
        raise ConfigValidationError(
            f"grid.edge_cost must be non-negative number, got {edge_cost}"
        )


def validate_logging_config(logging_config: DictConfig) -> None:
    """Validate logging configuration section.

    Args:
        logging_config: Logging configuration section
    """
    if not logging_config:
        return

    level = str(logging_config.get('level', 'INFO')).upper()
    if level not in LOG_LEVELS:
        raise ConfigValidationError(
            f"logging.level must be one of {LOG_LEVELS}, got {level}"
        )
