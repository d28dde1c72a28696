"""Time-bounded cache keyed by spatial extent, buffer distance and filter preset."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..config import CACHE_PREFIX, CACHE_TTL_SECONDS
from ..models import Bounds
from .storage import KeyValueStorage

_LOGGER = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True, slots=True)
class CacheInfo:
    total_entries: int
    total_size: int


def _format_buffer(buffer_m: float) -> str:
    value = float(buffer_m)
    if value.is_integer():
        return str(int(value))
    return repr(value)


class SpatialCache:
    """Cache of search results stored in a namespaced key/value storage.

    Keys round the bounding box to 4 decimal degrees (about 11 m), so two
    searches over practically the same extent share an entry. Entries expire
    ``ttl_seconds`` after creation and are purged lazily on read. Storage
    problems never propagate: they are logged and treated as a miss.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        prefix: str = CACHE_PREFIX,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        clock: Clock = time.time,
    ) -> None:
        if not prefix:
            raise ValueError("A non-empty cache prefix is required")
        self._storage = storage
        self._prefix = prefix
        self._ttl_ms = float(ttl_seconds) * 1000.0
        self._clock = clock

    @property
    def prefix(self) -> str:
        return self._prefix

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def key(self, bounds: Bounds, buffer_m: float, filter_id: str) -> str:
        bounds_str = (
            f"{bounds.north:.4f}_{bounds.south:.4f}_"
            f"{bounds.east:.4f}_{bounds.west:.4f}"
        )
        return f"{self._prefix}{bounds_str}_{_format_buffer(buffer_m)}_{filter_id}"

    def get(self, key: str) -> Optional[Any]:
        """Return the cached payload, or ``None`` when absent or expired."""

        try:
            raw = self._storage.get_item(key)
            if raw is None:
                return None
            entry = json.loads(raw)
            if self._now_ms() - int(entry["timestamp"]) > self._ttl_ms:
                self._storage.remove_item(key)
                _LOGGER.debug("Cache entry expired key=%s", key)
                return None
            return entry["data"]
        except Exception as exc:  # noqa: BLE001 - cache must never fail a search
            _LOGGER.warning("Failed to retrieve cached data for %s: %s", key, exc)
            return None

    def set(self, key: str, value: Any, bounds: Bounds, buffer_m: float) -> None:
        """Store ``value`` under ``key``, overwriting any previous entry."""

        try:
            entry = {
                "data": value,
                "timestamp": self._now_ms(),
                "bounds": json.dumps(bounds.to_dict()),
                "bufferDistance": buffer_m,
            }
            self._storage.set_item(key, json.dumps(entry, separators=(",", ":")))
        except Exception as exc:  # noqa: BLE001 - e.g. quota or disk errors
            _LOGGER.warning("Failed to cache data for %s: %s", key, exc)

    def _namespaced_keys(self) -> list[str]:
        return [k for k in self._storage.keys() if k.startswith(self._prefix)]

    def clear(self) -> int:
        """Remove every entry under this cache's prefix; return how many."""

        removed = 0
        try:
            for key in self._namespaced_keys():
                self._storage.remove_item(key)
                removed += 1
        except Exception as exc:  # noqa: BLE001
            _LOGGER.warning("Failed to clear cache: %s", exc)
        _LOGGER.info("Cleared %d cache entries", removed)
        return removed

    def info(self) -> CacheInfo:
        """Return entry count and serialised size (characters) of the namespace."""

        total_entries = 0
        total_size = 0
        try:
            for key in self._namespaced_keys():
                total_entries += 1
                item = self._storage.get_item(key)
                if item:
                    total_size += len(item)
        except Exception as exc:  # noqa: BLE001
            _LOGGER.warning("Failed to get cache info: %s", exc)
        return CacheInfo(total_entries=total_entries, total_size=total_size)


__all__ = ["CacheInfo", "SpatialCache"]
