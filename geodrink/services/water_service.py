"""Water point search service.

Composes the spatial cache, the Overpass client and the classifier: a search
is answered from the cache when possible, otherwise the route's padded
bounding box is queried remotely and the raw elements are filtered, sorted
and cached. Transport failures never propagate; they produce an empty,
``FAILED`` outcome carrying a warning for the caller to surface.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple

from ..cache import JSONFileStorage, MemoryStorage, SpatialCache
from ..classifier import filter_water_points
from ..config import CACHE_DIR, CACHE_PERSISTENT, DEFAULT_BUFFER_M
from ..errors import OverpassAPIError
from ..geometry import distance_along_route
from ..models import CurrentPosition, LocationFix, Route, WaterPoint
from ..overpass_client import OverpassClient, build_overpass_query
from ..presets import DEFAULT_PRESET_ID, get_preset

GeolocationProvider = Callable[[], LocationFix]


class QueryState(str, enum.Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    CACHED = "cached"
    FULFILLED = "fulfilled"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class SearchOutcome:
    points: Tuple[WaterPoint, ...]
    state: QueryState
    cache_key: str
    warning: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.state is not QueryState.FAILED


def build_default_cache() -> SpatialCache:
    """Return a cache over the configured storage backend."""

    if CACHE_PERSISTENT:
        return SpatialCache(JSONFileStorage(CACHE_DIR))
    return SpatialCache(MemoryStorage())


@dataclass(slots=True)
class WaterServiceConfig:
    client: OverpassClient | None = None
    cache: SpatialCache | None = None
    logger: logging.Logger | None = None


def _decode_cached(payload: Any) -> List[WaterPoint]:
    if not isinstance(payload, list):
        raise ValueError(f"Cached payload is a {type(payload).__name__}, not a list")
    return [WaterPoint.from_dict(item) for item in payload]


class WaterPointService:
    def __init__(self, config: WaterServiceConfig | None = None):
        self.config = config or WaterServiceConfig()
        self.client = self.config.client or OverpassClient()
        self.cache = self.config.cache or build_default_cache()
        self._log = self.config.logger or logging.getLogger(self.__class__.__name__)
        self.state = QueryState.IDLE

    def search(
        self,
        route: Route,
        buffer_m: float = DEFAULT_BUFFER_M,
        filter_id: str = DEFAULT_PRESET_ID,
    ) -> SearchOutcome:
        """Run one query cycle for ``route`` and return its outcome."""

        if buffer_m < 0:
            raise ValueError("buffer_m must be non-negative")
        preset = get_preset(filter_id)
        cache_key = self.cache.key(route.bounds, buffer_m, preset.id)

        cached = self.cache.get(cache_key)
        if cached is not None:
            try:
                points = _decode_cached(cached)
            except (KeyError, TypeError, ValueError) as exc:
                self._log.warning(
                    "Ignoring unreadable cache entry %s: %s", cache_key, exc
                )
            else:
                self._log.info(
                    "Using cached water points (%d) for preset=%s buffer=%sm",
                    len(points),
                    preset.id,
                    buffer_m,
                )
                self.state = QueryState.CACHED
                return SearchOutcome(tuple(points), QueryState.CACHED, cache_key)

        self.state = QueryState.FETCHING
        query = build_overpass_query(route.bounds, buffer_m, preset)
        try:
            elements = self.client.fetch_elements(query)
        except OverpassAPIError as exc:
            self._log.warning("Error fetching water points: %s", exc)
            self.state = QueryState.FAILED
            return SearchOutcome((), QueryState.FAILED, cache_key, warning=str(exc))

        points = filter_water_points(elements, route, buffer_m, preset)
        self.cache.set(
            cache_key, [p.to_dict() for p in points], route.bounds, buffer_m
        )
        self._log.info(
            "Found %d water points from %d elements (preset=%s buffer=%sm)",
            len(points),
            len(elements),
            preset.id,
            buffer_m,
        )
        self.state = QueryState.FULFILLED
        return SearchOutcome(tuple(points), QueryState.FULFILLED, cache_key)

    def find_water_points(
        self,
        route: Route,
        buffer_m: float = DEFAULT_BUFFER_M,
        filter_id: str = DEFAULT_PRESET_ID,
    ) -> List[WaterPoint]:
        return list(self.search(route, buffer_m, filter_id).points)

    def current_position_on_route(
        self, lat: float, lon: float, route: Route | None
    ) -> CurrentPosition | None:
        return current_position_on_route(lat, lon, route)

    def locate(
        self, provider: GeolocationProvider, route: Route | None
    ) -> CurrentPosition | None:
        """Acquire one location fix and place it on ``route``.

        :class:`~geodrink.errors.GeolocationError` raised by the provider is
        propagated so the caller can report it.
        """

        fix = provider()
        self._log.info("Located at %.4f, %.4f", fix.lat, fix.lon)
        return current_position_on_route(fix.lat, fix.lon, route)


def current_position_on_route(
    lat: float, lon: float, route: Route | None
) -> CurrentPosition | None:
    """Return the user's position with its along-route distance."""

    if route is None or not route.coordinates:
        return None
    return CurrentPosition(
        lat=lat, lon=lon, distance_along_route_m=distance_along_route(lat, lon, route)
    )


_DEFAULT_SERVICE: WaterPointService | None = None


def get_default_service() -> WaterPointService:
    global _DEFAULT_SERVICE
    if _DEFAULT_SERVICE is None:
        _DEFAULT_SERVICE = WaterPointService()
    return _DEFAULT_SERVICE


def find_water_points(
    route: Route,
    buffer_m: float = DEFAULT_BUFFER_M,
    filter_id: str = DEFAULT_PRESET_ID,
) -> Sequence[WaterPoint]:
    """Search with the shared default service."""

    return get_default_service().find_water_points(route, buffer_m, filter_id)


__all__ = [
    "GeolocationProvider",
    "QueryState",
    "SearchOutcome",
    "WaterServiceConfig",
    "WaterPointService",
    "build_default_cache",
    "current_position_on_route",
    "find_water_points",
    "get_default_service",
]
