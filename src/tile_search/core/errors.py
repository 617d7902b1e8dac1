"""Exception hierarchy for tile search."""


class TileSearchError(Exception):
    """Base class for all tile search errors."""
    pass


class SearchConfigurationError(TileSearchError):
    """Raised when a search is given inputs it cannot run on.

    Covers missing start/goal nodes, nodes without the graph capability,
    non-callable heuristics, negative or non-finite heuristic values and
    negative or non-finite edge costs.
    """
    pass


class PathReconstructionError(TileSearchError):
    """Raised when backlinks do not lead back to the start record.

    This signals an internal inconsistency of the engine, never a missing
    path: a search that cannot reach its goal reports ``NotFound`` instead.
    """
    pass
