"""Route-relative distances: segment projection and along-route arc length.

Projection happens in raw ``(lon, lat)`` degree space as a planar
approximation. That is adequate at the scale of a proximity buffer (a few
hundred metres) but not near the poles or across the antimeridian.
"""

from __future__ import annotations

from threading import RLock
from typing import Tuple

import numpy as np
from cachetools import LRUCache
from numpy.typing import NDArray

from ..config import ROUTE_CACHE_SIZE
from ..models import LonLat, Route
from .distance import haversine_array, haversine_m, segment_lengths_m

_RouteKey = Tuple[LonLat, ...]

# Prefix sums of segment lengths, keyed by the route's coordinate tuple.
_cumulative_cache: LRUCache[_RouteKey, NDArray[np.float64]] = LRUCache(
    maxsize=max(1, ROUTE_CACHE_SIZE)
)
_cumulative_cache_lock = RLock()


def nearest_point_on_segment(point: LonLat, start: LonLat, end: LonLat) -> LonLat:
    """Project ``point`` onto the segment ``start``-``end``, clamped to its ends."""

    px, py = point
    ax, ay = start
    bx, by = end
    dx = bx - ax
    dy = by - ay
    if dx == 0 and dy == 0:
        return start
    t = ((px - ax) * dx + (py - ay) * dy) / (dx * dx + dy * dy)
    t = max(0.0, min(1.0, t))
    return ax + t * dx, ay + t * dy


def cumulative_distances(route: Route) -> NDArray[np.float64]:
    """Return the along-route distance at every route vertex (first is 0)."""

    key = route.coordinates
    with _cumulative_cache_lock:
        cached = _cumulative_cache.get(key)
    if cached is not None:
        return cached
    lengths = segment_lengths_m(route.coordinates)
    cumulative = np.concatenate(([0.0], np.cumsum(lengths)))
    cumulative.setflags(write=False)
    with _cumulative_cache_lock:
        _cumulative_cache[key] = cumulative
    return cumulative


def clear_route_cache() -> None:
    """Drop memoised cumulative distances (primarily for testing)."""

    with _cumulative_cache_lock:
        _cumulative_cache.clear()


def _project_onto_segments(
    point: LonLat, coords: NDArray[np.float64]
) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Return projected points and squared degree-space offsets per segment."""

    starts = coords[:-1]
    deltas = coords[1:] - starts
    length_sq = np.einsum("ij,ij->i", deltas, deltas)
    rel = np.asarray(point, dtype=float) - starts
    dots = np.einsum("ij,ij->i", rel, deltas)
    t = np.divide(dots, length_sq, out=np.zeros_like(dots), where=length_sq > 0)
    t = np.clip(t, 0.0, 1.0)
    projected = starts + t[:, None] * deltas
    offsets = projected - np.asarray(point, dtype=float)
    return projected, np.einsum("ij,ij->i", offsets, offsets)


def distance_along_route(lat: float, lon: float, route: Route) -> float:
    """Return the along-route distance (metres) of the point's nearest projection.

    Every segment is considered; the one whose projection lies closest in
    degree space wins, with ties resolved in favour of the earliest segment.
    The result is the great-circle length of all preceding segments plus the
    partial length from the winning segment's start to the projection.
    """

    if len(route.coordinates) < 2:
        return 0.0
    coords = np.asarray(route.coordinates, dtype=float)
    projected, offsets_sq = _project_onto_segments((lon, lat), coords)
    # argmin returns the first index on ties.
    index = int(np.argmin(offsets_sq))
    cumulative = cumulative_distances(route)
    seg_lon, seg_lat = coords[index]
    proj_lon, proj_lat = projected[index]
    partial = haversine_m(seg_lat, seg_lon, proj_lat, proj_lon)
    return float(cumulative[index]) + partial


def min_distance_from_route(lat: float, lon: float, route: Route) -> float:
    """Return the great-circle distance (metres) to the closest route vertex.

    Vertex-based, so it overestimates the true distance when the route has
    long straight segments; see :func:`distance_from_route`. Kept as the
    vertex reference measure; admission and stored distances use the
    segment-based :func:`distance_from_route`.
    """

    if not route.coordinates:
        return float("inf")
    coords = np.asarray(route.coordinates, dtype=float)
    distances = haversine_array(lat, lon, coords[:, 1], coords[:, 0])
    return float(np.min(distances))


def distance_from_route(lat: float, lon: float, route: Route) -> float:
    """Return the great-circle distance (metres) to the closest point on the route.

    Each segment projection is measured with the haversine formula and the
    smallest value wins. A single-coordinate route measures to that vertex.
    """

    if not route.coordinates:
        return float("inf")
    if len(route.coordinates) < 2:
        start_lon, start_lat = route.start
        return haversine_m(lat, lon, start_lat, start_lon)
    coords = np.asarray(route.coordinates, dtype=float)
    projected, _ = _project_onto_segments((lon, lat), coords)
    distances = haversine_array(lat, lon, projected[:, 1], projected[:, 0])
    return float(np.min(distances))


def distance_from_start(lat: float, lon: float, route: Route) -> float:
    """Return the straight great-circle distance from the route start."""

    if not route.coordinates:
        return 0.0
    start_lon, start_lat = route.start
    return haversine_m(start_lat, start_lon, lat, lon)


__all__ = [
    "nearest_point_on_segment",
    "cumulative_distances",
    "clear_route_cache",
    "distance_along_route",
    "min_distance_from_route",
    "distance_from_route",
    "distance_from_start",
]
