"""Spatial result cache and its storage backends."""

from .spatial_cache import CacheInfo, SpatialCache
from .storage import JSONFileStorage, KeyValueStorage, MemoryStorage

__all__ = [
    "CacheInfo",
    "SpatialCache",
    "JSONFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
]
