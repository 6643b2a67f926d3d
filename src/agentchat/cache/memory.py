"""Memory tier: bounded LRU of decoded images."""

from __future__ import annotations

import threading
from collections import OrderedDict

from agentchat.cache.stats import CacheEntry

_DEFAULT_MAX_ITEMS = 100
_DEFAULT_MAX_SIZE_MB = 50


class MemoryCache:
    """In-memory LRU cache with count and byte-size eviction.

    Every public method takes the internal lock for the duration of a dict
    operation only, so the tier can be shared between the event loop and
    worker threads.
    """

    def __init__(
        self,
        max_items: int = _DEFAULT_MAX_ITEMS,
        max_size_mb: float = _DEFAULT_MAX_SIZE_MB,
    ) -> None:
        self._store: OrderedDict[str, CacheEntry] = OrderedDict()
        self._max_items = max_items
        self._max_size_bytes = int(max_size_mb * 1024 * 1024)
        self._current_size_bytes = 0
        self._lock = threading.Lock()

    def get(self, key: str) -> CacheEntry | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            # Move to end (most recently used)
            self._store.move_to_end(key)
            return entry

    def set(self, key: str, entry: CacheEntry) -> None:
        with self._lock:
            if key in self._store:
                self._remove(key)
            # Evict until there's room
            while self._store and (
                len(self._store) >= self._max_items
                or self._current_size_bytes + entry.size_bytes > self._max_size_bytes
            ):
                self._evict_oldest()
            self._store[key] = entry
            self._current_size_bytes += entry.size_bytes

    def remove(self, key: str) -> bool:
        with self._lock:
            return self._remove(key)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self._current_size_bytes = 0

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._store

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    @property
    def size_mb(self) -> float:
        return self._current_size_bytes / (1024 * 1024)

    def _remove(self, key: str) -> bool:
        entry = self._store.pop(key, None)
        if entry is None:
            return False
        self._current_size_bytes -= entry.size_bytes
        return True

    def _evict_oldest(self) -> None:
        _, entry = self._store.popitem(last=False)
        self._current_size_bytes -= entry.size_bytes
