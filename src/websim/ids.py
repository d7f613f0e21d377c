from __future__ import annotations

"""Process-unique identifier allocation."""

import threading
from typing import Dict, Hashable


class IdAllocator:
    """
    Hands out monotonically increasing integer ids, one counter per key.

    Sessions pass their class as the key, so all sessions draw from the same sequence while other
    kinds of objects get their own. Allocation is safe to call from several threads.
    """

    def __init__(self, start: int = 1) -> None:
        self._start = start
        self._counters: Dict[Hashable, int] = {}
        self._lock = threading.Lock()

    def poll_id(self, key: Hashable = None) -> int:
        with self._lock:
            value = self._counters.get(key, self._start)
            self._counters[key] = value + 1
        return value

    def peek_id(self, key: Hashable = None) -> int:
        """Return the id the next ``poll_id(key)`` will hand out."""
        with self._lock:
            return self._counters.get(key, self._start)


_DEFAULT_ALLOCATOR = IdAllocator()


def default_allocator() -> IdAllocator:
    return _DEFAULT_ALLOCATOR
