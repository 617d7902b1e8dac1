"""Core data models and errors shared by the search engine and graphs."""

from .data_models import Edge, GraphNode, SearchRecord, has_graph_capability, validate_edge_cost
from .errors import TileSearchError, SearchConfigurationError, PathReconstructionError

__all__ = [
    'Edge',
    'GraphNode',
    'SearchRecord',
    'has_graph_capability',
    'validate_edge_cost',
    'TileSearchError',
    'SearchConfigurationError',
    'PathReconstructionError'
]
