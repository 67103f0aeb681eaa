"""Bounded, insertion-ordered buffer of recent outcome lines."""

from collections import deque

DEFAULT_CAPACITY = 500


class RecentHistory:
    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        self._entries: deque[str] = deque(maxlen=capacity)
        self._total_added = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def total_added(self) -> int:
        """Entries ever appended, including evicted ones."""
        return self._total_added

    def add(self, line: str):
        """Append a line, evicting the oldest if at capacity."""
        self._entries.append(line)
        self._total_added += 1

    def get_recent(self, n: int | None = None) -> list[str]:
        """Return the N most recent lines (all when N is None), oldest first."""
        if n is None:
            return list(self._entries)
        if n <= 0:
            return []
        return list(self._entries)[-n:]

    def __len__(self) -> int:
        return len(self._entries)
