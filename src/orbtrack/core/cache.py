"""Memoization caches shared by the parser, position engine and track builders."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Hashable
from typing import Any

from orbtrack.utils.constants import DEFAULT_CACHE_SIZE

logger = logging.getLogger(__name__)

_MISSING = object()


class LRUCache:
    """A bounded mapping that evicts the least recently used entry.

    Args:
        maxsize: Maximum number of entries. ``None`` means unbounded.
    """

    def __init__(self, maxsize: int | None = DEFAULT_CACHE_SIZE) -> None:
        if maxsize is not None and maxsize < 1:
            raise ValueError(f"maxsize must be positive, got {maxsize}")
        self.maxsize = maxsize
        self._data: OrderedDict[Hashable, Any] = OrderedDict()
        self._lock = threading.RLock()

    def get(self, key: Hashable, default: Any = None) -> Any:
        with self._lock:
            value = self._data.get(key, _MISSING)
            if value is _MISSING:
                return default
            self._data.move_to_end(key)
            return value

    def put(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._data[key] = value
            self._data.move_to_end(key)
            if self.maxsize is not None and len(self._data) > self.maxsize:
                self._data.popitem(last=False)

    def pop(self, key: Hashable, default: Any = None) -> Any:
        with self._lock:
            return self._data.pop(key, default)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"LRUCache(size={len(self)}, maxsize={self.maxsize})"


class CacheService:
    """The set of caches used by orbtrack operations.

    Pass an instance as ``cache=`` to any operation to isolate its memoized
    state; operations called without one share :func:`default_cache`.

    Attributes:
        parsed_tles: Raw TLE input -> canonical TLE.
        satellite_info: (line 1, time, observer) -> SatelliteInfo.
        crossings: (line 1, threshold, iteration budget) -> list of
            crossing times, or ``-1`` when the search found none.
        orbit_tracks: (line 1, start s, step, order, max time, threshold)
            -> coordinate tuple.
        slow_moving: Line 2 -> VisibleSatellite for near-static objects.
    """

    NAMES = ("parsed_tles", "satellite_info", "crossings", "orbit_tracks", "slow_moving")

    def __init__(self, maxsize: int | None = DEFAULT_CACHE_SIZE) -> None:
        self.parsed_tles = LRUCache(maxsize)
        self.satellite_info = LRUCache(maxsize)
        self.crossings = LRUCache(maxsize)
        self.orbit_tracks = LRUCache(maxsize)
        self.slow_moving = LRUCache(maxsize)

    def clear(self) -> None:
        """Empty every cache."""
        for name in self.NAMES:
            getattr(self, name).clear()
        logger.debug("Cleared all caches")

    def sizes(self) -> dict[str, int]:
        """Number of entries per cache."""
        return {name: len(getattr(self, name)) for name in self.NAMES}


_default_cache = CacheService()


def default_cache() -> CacheService:
    """Return the process-wide cache used when no ``cache=`` is given."""
    return _default_cache


def resolve_cache(cache: CacheService | None) -> CacheService:
    return _default_cache if cache is None else cache


def clear_cache() -> None:
    """Free the memory held by the default caches in long-running processes."""
    _default_cache.clear()


def get_cache_sizes() -> dict[str, int]:
    return _default_cache.sizes()
