"""Open/closed record store for best-first search.

The candidate (open) set is a binary heap keyed by
``(estimated_total_cost, entry_order)`` with lazy invalidation: updating a
record pushes a fresh heap entry and marks the previous one stale instead
of searching the heap for it. A dict from node to record gives O(1)
membership tests and lookups for both sets.

Tie-breaking on equal estimates is FIFO by entry into the open set. An
in-place update of an open record keeps its entry order, while a reopened
record gets a new one, placing it after every record currently open.
"""

import heapq
import itertools
import logging
from typing import Any, Dict, Iterator, List, Optional

from tile_search.core.data_models import SearchRecord

logger = logging.getLogger(__name__)

OPEN = 'open'
CLOSED = 'closed'

# Marker stored in place of a record in stale heap entries
_REMOVED = None


class RecordStore:
    """Partition of discovered search records into open and closed sets."""

    def __init__(self):
        self._heap: List[list] = []
        self._entries: Dict[Any, list] = {}
        self._records: Dict[Any, SearchRecord] = {}
        self._state: Dict[Any, str] = {}
        self._counter = itertools.count()
        self._pushes = itertools.count()
        self._open_count = 0

    def __len__(self) -> int:
        """Number of records discovered so far (open and closed)."""
        return len(self._records)

    def __contains__(self, node: Any) -> bool:
        return node in self._records

    def __iter__(self) -> Iterator[SearchRecord]:
        return iter(self._records.values())

    @property
    def open_count(self) -> int:
        return self._open_count

    @property
    def closed_count(self) -> int:
        return len(self._records) - self._open_count

    def get(self, node: Any) -> Optional[SearchRecord]:
        """Return the record for ``node`` or None if undiscovered."""
        return self._records.get(node)

    def is_open(self, node: Any) -> bool:
        return self._state.get(node) == OPEN

    def is_closed(self, node: Any) -> bool:
        return self._state.get(node) == CLOSED

    def push(self, record: SearchRecord) -> None:
        """Insert a newly discovered record into the open set.

        Raises:
            ValueError: If a record for the same node already exists
        """
        if record.node in self._records:
            raise ValueError(f"Node {record.node!r} already has a search record")
        self._records[record.node] = record
        self._open(record)

    def update(self, record: SearchRecord) -> None:
        """Reprioritize an open record after its estimate changed."""
        if not self.is_open(record.node):
            raise ValueError(f"Node {record.node!r} is not in the open set")
        self._invalidate(record.node)
        self._add_entry(record)

    def reopen(self, record: SearchRecord) -> None:
        """Move a closed record back into the open set."""
        if not self.is_closed(record.node):
            raise ValueError(f"Node {record.node!r} is not in the closed set")
        self._open(record)
        logger.debug(f"Reopened {record.node!r} at cost {record.cost_so_far}")

    def peek_min(self) -> Optional[SearchRecord]:
        """Return the open record with the lowest estimate.

        The record stays in the open set until ``close`` is called, matching
        the expand-then-settle order of the search loop.
        """
        self._discard_stale()
        if not self._heap:
            return None
        return self._heap[0][-1]

    def close(self, record: SearchRecord) -> None:
        """Move an open record to the closed set."""
        if not self.is_open(record.node):
            raise ValueError(f"Node {record.node!r} is not in the open set")
        self._invalidate(record.node)
        self._state[record.node] = CLOSED
        self._open_count -= 1

    def _open(self, record: SearchRecord) -> None:
        record.entry_order = next(self._counter)
        self._state[record.node] = OPEN
        self._open_count += 1
        self._add_entry(record)

    def _add_entry(self, record: SearchRecord) -> None:
        # Push sequence keeps entries with equal (f, order) comparable
        entry = [record.estimated_total_cost, record.entry_order, next(self._pushes), record]
        self._entries[record.node] = entry
        heapq.heappush(self._heap, entry)

    def _invalidate(self, node: Any) -> None:
        entry = self._entries.pop(node, None)
        if entry is not None:
            entry[-1] = _REMOVED

    def _discard_stale(self) -> None:
        while self._heap and self._heap[0][-1] is _REMOVED:
            heapq.heappop(self._heap)
