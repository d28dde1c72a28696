"""Great-circle distance helpers."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..models import Bounds, LonLat

EARTH_RADIUS_M = 6_371_000.0


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the great-circle distance in metres between two points."""

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlmb = math.radians(lon2 - lon1)
    a = (
        math.sin(dphi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    )
    # Rounding can push ``a`` marginally above 1 for antipodal points.
    a = min(1.0, a)
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def haversine_array(
    lat1: ArrayLike, lon1: ArrayLike, lat2: ArrayLike, lon2: ArrayLike
) -> NDArray[np.float64]:
    """Vectorised :func:`haversine_m` with numpy broadcasting."""

    phi1 = np.radians(np.asarray(lat1, dtype=float))
    phi2 = np.radians(np.asarray(lat2, dtype=float))
    dphi = phi2 - phi1
    dlmb = np.radians(np.asarray(lon2, dtype=float) - np.asarray(lon1, dtype=float))
    a = np.sin(dphi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(dlmb / 2) ** 2
    a = np.clip(a, 0.0, 1.0)
    return 2 * EARTH_RADIUS_M * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


def segment_lengths_m(coordinates: Sequence[LonLat]) -> NDArray[np.float64]:
    """Return the great-circle length of every consecutive coordinate pair."""

    if len(coordinates) < 2:
        return np.zeros(0, dtype=float)
    array = np.asarray(coordinates, dtype=float)
    return haversine_array(array[:-1, 1], array[:-1, 0], array[1:, 1], array[1:, 0])


def polyline_length_m(coordinates: Sequence[LonLat]) -> float:
    """Sum of great-circle segment lengths along ``(lon, lat)`` coordinates."""

    return float(np.sum(segment_lengths_m(coordinates)))


def bounds_of(coordinates: Sequence[LonLat]) -> Bounds:
    """Return the tightest bounding box containing all coordinates."""

    if not coordinates:
        raise ValueError("Cannot compute bounds of an empty coordinate list")
    lons = [pt[0] for pt in coordinates]
    lats = [pt[1] for pt in coordinates]
    return Bounds(north=max(lats), south=min(lats), east=max(lons), west=min(lons))


__all__ = [
    "EARTH_RADIUS_M",
    "haversine_m",
    "haversine_array",
    "segment_lengths_m",
    "polyline_length_m",
    "bounds_of",
]
