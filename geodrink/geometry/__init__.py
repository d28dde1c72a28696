"""Geometry kernel: great-circle distances and route projection."""

from .distance import (
    EARTH_RADIUS_M,
    bounds_of,
    haversine_array,
    haversine_m,
    polyline_length_m,
    segment_lengths_m,
)
from .projection import (
    clear_route_cache,
    cumulative_distances,
    distance_along_route,
    distance_from_route,
    distance_from_start,
    min_distance_from_route,
    nearest_point_on_segment,
)

__all__ = [
    "EARTH_RADIUS_M",
    "bounds_of",
    "haversine_array",
    "haversine_m",
    "polyline_length_m",
    "segment_lengths_m",
    "clear_route_cache",
    "cumulative_distances",
    "distance_along_route",
    "distance_from_route",
    "distance_from_start",
    "min_distance_from_route",
    "nearest_point_on_segment",
]
