"""Resolution cache shared by every entity record of an import run.

Hits and misses are both memoized: a lookup that found nothing stores
``None``, which short-circuits later lookups just like a hit. ``has()`` is the
only way to tell "looked up, not found" from "never looked up".
"""

import threading
from collections.abc import Callable
from typing import Any

from press_import.utils.logging import get_logger

logger = get_logger(__name__)


class ResolutionCache:
    """Thread-safe memoizing map with single-flight ``resolve``.

    Concurrent ``resolve`` calls for the same key run ``compute`` once; the
    other callers block on the key's lock and then read the stored value.
    ``compute`` must not resolve its own key.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Any] = {}
        self._lock = threading.Lock()
        self._inflight: dict[str, threading.Lock] = {}
        self.stats = {"hits": 0, "misses": 0}

    def resolve(self, key: str, compute: Callable[[], Any]) -> Any:
        """Return the cached value for ``key``, computing and storing it once."""
        with self._lock:
            if key in self._entries:
                self.stats["hits"] += 1
                return self._entries[key]
            key_lock = self._inflight.setdefault(key, threading.Lock())

        with key_lock:
            with self._lock:
                if key in self._entries:
                    self.stats["hits"] += 1
                    return self._entries[key]

            value = compute()

            with self._lock:
                self._entries[key] = value
                self._inflight.pop(key, None)
                self.stats["misses"] += 1

        logger.debug("cache_resolved", key=key, found=value is not None)
        return value

    def has(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._entries.get(key, default)

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.stats = {"hits": 0, "misses": 0}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
