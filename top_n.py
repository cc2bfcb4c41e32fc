# Keep the N largest (path, size) observations out of an unbounded stream.

import heapq
from typing import NamedTuple


class Entry(NamedTuple):
    """One file considered for the report.

    Field order matters: tuples compare by size first, then by path, so the
    smallest entry is the next one to be evicted.
    """
    size: int
    path: str


class TopN:
    """Fixed-capacity collection of the largest entries seen so far.

    Backed by a min-heap, so the eviction candidate is always heap[0], plus a
    set of members so that observing the same (size, path) twice keeps a
    single entry.
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f'capacity must be >= 1, got {capacity}')
        self.capacity = capacity
        self._heap = []
        self._members = set()

    def __len__(self):
        return len(self._heap)

    @property
    def threshold(self):
        """Smallest size still worth inserting, or None while not full."""
        if len(self._heap) < self.capacity:
            return None
        return self._heap[0].size

    def accepts(self, size: int):
        threshold = self.threshold
        return threshold is None or size >= threshold

    def observe(self, path: str, size: int):
        if size < 0:
            raise ValueError(f'size must be >= 0, got {size} for {path}')

        if not self.accepts(size):
            return False

        entry = Entry(size, path)
        if entry in self._members:
            return True

        heapq.heappush(self._heap, entry)
        self._members.add(entry)

        while len(self._heap) > self.capacity:
            evicted = heapq.heappop(self._heap)
            self._members.discard(evicted)

        return entry in self._members

    def results(self):
        """Retained entries, smallest first."""
        return sorted(self._heap)
