"""In-memory result cache with per-entry time-to-live."""
from __future__ import annotations

import logging
from collections import OrderedDict
from copy import deepcopy
from threading import Lock
from time import monotonic
from typing import Any, Callable, Optional

from nav_analytics.config import SETTINGS
from nav_analytics.domain.repositories import ResultCache

logger = logging.getLogger(__name__)


class InMemoryTtlCache(ResultCache):
    """Thread-safe LRU cache with TTL support.

    Expired entries stay in the store until evicted so ``get_stale`` can serve
    them when the provider is down.
    """

    def __init__(
        self,
        max_size: int | None = None,
        default_ttl: float | None = None,
        *,
        time_func: Callable[[], float] = monotonic,
    ) -> None:
        self._max_size = max(0, int(SETTINGS.cache_max_size if max_size is None else max_size))
        self._default_ttl = max(0.0, float(SETTINGS.result_cache_ttl if default_ttl is None else default_ttl))
        self._time = time_func
        self._lock = Lock()
        self._store: OrderedDict[str, tuple[float, Any]] = OrderedDict()
        self._hits = 0
        self._misses = 0

    @property
    def enabled(self) -> bool:
        return self._max_size > 0

    def get(self, key: str) -> Optional[Any]:
        if not key or not self.enabled:
            return None
        with self._lock:
            entry = self._store.get(key)
            if entry is None or entry[0] <= self._time():
                self._misses += 1
                logger.debug("cache miss %s", key)
                return None
            self._hits += 1
            self._store.move_to_end(key)
            logger.debug("cache hit %s", key)
            return deepcopy(entry[1])

    def get_stale(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._store.get(key)
            return None if entry is None else deepcopy(entry[1])

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        if not key or not self.enabled:
            return
        ttl_value = self._default_ttl if ttl is None else float(ttl)
        if ttl_value <= 0:
            return
        expires_at = self._time() + ttl_value
        with self._lock:
            self._store[key] = (expires_at, deepcopy(value))
            self._store.move_to_end(key)
            while len(self._store) > self._max_size:
                self._store.popitem(last=False)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._store.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {"keys": len(self._store), "hits": self._hits, "misses": self._misses}
