"""CLI utility functions."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from tile_search.graph.grid import Direction


def setup_logging(level: int = logging.INFO,
                  format_string: Optional[str] = None) -> None:
    """Setup logging configuration.

    Args:
        level: Logging level
        format_string: Custom format string
    """
    if format_string is None:
        if level <= logging.DEBUG:
            format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_string = "%(levelname)s: %(message)s"

    logging.basicConfig(
        level=level,
        format=format_string,
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    # Hydra is chatty at INFO
    logging.getLogger('hydra').setLevel(logging.WARNING)


def parse_coord(text: str) -> Tuple[int, int]:
    """Parse ``"x,y"`` into a coordinate pair.

    Raises:
        ValueError: If the text is not two comma-separated integers
    """
    parts = text.split(',')
    if len(parts) != 2:
        raise ValueError(f"Expected coordinates as x,y, got '{text}'")
    return int(parts[0].strip()), int(parts[1].strip())


def parse_edge(text: str) -> Tuple[Tuple[int, int], Direction]:
    """Parse ``"x,y:direction"`` into a coordinate and a direction.

    Raises:
        ValueError: If the text is malformed or the direction unknown
    """
    coord_text, sep, direction_text = text.partition(':')
    if not sep:
        raise ValueError(f"Expected edge as x,y:direction, got '{text}'")
    return parse_coord(coord_text), Direction(direction_text.strip().lower())


def format_duration(seconds: float) -> str:
    """Format a duration for display."""
    if seconds < 1e-3:
        return f"{seconds * 1e6:.0f}µs"
    if seconds < 1:
        return f"{seconds * 1000:.2f}ms"
    return f"{seconds:.2f}s"


def save_results(results: Dict[str, Any], output_path: Union[str, Path]) -> None:
    """Save results to a JSON file.

    Args:
        results: Results dictionary
        output_path: Path to output file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        json.dump(results, f, indent=2, default=str)

    logging.getLogger(__name__).info(f"Results saved to: {output_path}")
