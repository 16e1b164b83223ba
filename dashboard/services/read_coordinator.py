"""Cached reads that are invalidated after committed writes.

Views of a collection (the invoice list pages, the overview cards) are cached
under the collection name.  A successful mutation calls
:meth:`ReadCoordinator.invalidate` for the collection, so the next read after
a write is recomputed from the database.  At most ``max_entries`` views are
kept; the least recently used one is evicted first.
"""

from __future__ import annotations

import threading
from collections import OrderedDict, defaultdict
from typing import Any, Callable, Dict, Hashable, Tuple, TypeVar

from flask import current_app

T = TypeVar("T")

DEFAULT_MAX_ENTRIES = 256


class ReadCoordinator:
    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        self.max_entries = max_entries
        self._entries: "OrderedDict[Tuple[str, Hashable], Any]" = OrderedDict()
        self._generations: Dict[str, int] = defaultdict(int)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def read(self, collection: str, key: Hashable, loader: Callable[[], T]) -> T:
        """Return the cached value for ``key`` or load and cache it."""
        cache_key = (collection, key)
        with self._lock:
            if cache_key in self._entries:
                self._entries.move_to_end(cache_key)
                return self._entries[cache_key]
            generation = self._generations[collection]

        value = loader()

        with self._lock:
            # Skip storing a value loaded before an invalidation landed.
            if self._generations[collection] == generation:
                self._entries[cache_key] = value
                while len(self._entries) > self.max_entries:
                    self._entries.popitem(last=False)
        return value

    def invalidate(self, collection: str) -> None:
        """Mark every cached view of ``collection`` stale."""
        with self._lock:
            self._generations[collection] += 1
            for cache_key in [k for k in self._entries if k[0] == collection]:
                del self._entries[cache_key]

    def is_cached(self, collection: str, key: Hashable) -> bool:
        with self._lock:
            return (collection, key) in self._entries


def get_read_coordinator() -> ReadCoordinator:
    """Return the coordinator attached to the current application."""
    app = current_app._get_current_object()
    coordinator = app.extensions.get("read_coordinator")
    if coordinator is None:
        coordinator = app.extensions["read_coordinator"] = ReadCoordinator()
    return coordinator
