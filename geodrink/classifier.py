"""Classify raw OpenStreetMap elements and filter them into water points."""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from .config import METERS_PER_DEGREE
from .geometry import distance_from_route, distance_from_start
from .models import FilterPreset, Route, WaterPoint, WaterSourceType

LOGGER = logging.getLogger(__name__)

RawElement = Mapping[str, Any]


def classify_water_source(tags: Mapping[str, str]) -> WaterSourceType:
    """Map OSM tags to a water source type (first matching rule wins)."""

    amenity = tags.get("amenity")
    if amenity == "drinking_water":
        return "fountain"
    if amenity == "fountain":
        return "fountain"
    if amenity in ("water_point", "water_tap"):
        return "tap"
    if tags.get("man_made") == "water_well":
        return "well"
    if tags.get("natural") == "spring":
        return "spring"
    return "other"


def _coerce_tags(raw: Any) -> Dict[str, str]:
    if not isinstance(raw, Mapping):
        return {}
    return {str(key): str(value) for key, value in raw.items()}


def _coerce_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


def near_route_bounds(lat: float, lon: float, route: Route, buffer_m: float) -> bool:
    """Cheap pre-check: is the point inside the route bounds padded by the buffer?

    Longitude padding is widened by the cosine of the highest latitude so the
    box never cuts into the buffer.
    """

    bounds = route.bounds
    lat_pad = buffer_m / METERS_PER_DEGREE
    cos_lat = math.cos(math.radians(max(abs(bounds.north), abs(bounds.south))))
    lon_pad = lat_pad / max(cos_lat, 1e-6)
    return (
        bounds.south - lat_pad <= lat <= bounds.north + lat_pad
        and bounds.west - lon_pad <= lon <= bounds.east + lon_pad
    )


def rejection_reason(
    tags: Mapping[str, str],
    distance_from_route_m: float,
    buffer_m: float,
    preset: FilterPreset,
) -> Optional[str]:
    """Return why a candidate fails the preset, or ``None`` when it passes."""

    if distance_from_route_m > buffer_m:
        return "outside_buffer"
    rules = preset.rules
    for key, value in rules.exclusions():
        if tags.get(key) == value:
            return f"excluded:{key}={value}"
    access = tags.get("access")
    if rules.access and access is not None and access not in rules.access:
        return f"access:{access}"
    potability = tags.get("drinking_water")
    if (
        rules.drinking_water
        and potability is not None
        and potability not in rules.drinking_water
    ):
        return f"drinking_water:{potability}"
    return None


def evaluate_candidate(
    element: RawElement,
    route: Route,
    buffer_m: float,
    preset: FilterPreset,
) -> Optional[WaterPoint]:
    """Turn one Overpass element into a :class:`WaterPoint`, or reject it.

    Only ``node`` elements with numeric coordinates are candidates. Points
    outside the padded route bounds are rejected before any projection work.
    """

    if element.get("type", "node") != "node":
        return None
    lat = _coerce_float(element.get("lat"))
    lon = _coerce_float(element.get("lon"))
    if lat is None or lon is None or element.get("id") is None:
        return None

    tags = _coerce_tags(element.get("tags"))
    if not near_route_bounds(lat, lon, route, buffer_m):
        LOGGER.debug("Rejected element id=%s reason=outside_bounds", element.get("id"))
        return None
    from_route = distance_from_route(lat, lon, route)
    reason = rejection_reason(tags, from_route, buffer_m, preset)
    if reason is not None:
        LOGGER.debug("Rejected element id=%s reason=%s", element.get("id"), reason)
        return None

    return WaterPoint(
        id=str(element["id"]),
        lat=lat,
        lon=lon,
        tags=tags,
        type=classify_water_source(tags),
        distance_from_start_m=distance_from_start(lat, lon, route),
        distance_from_route_m=from_route,
    )


def filter_water_points(
    elements: Iterable[RawElement],
    route: Route,
    buffer_m: float,
    preset: FilterPreset,
) -> List[WaterPoint]:
    """Return accepted, de-duplicated water points sorted by distance from start."""

    accepted: List[WaterPoint] = []
    seen: Set[str] = set()
    considered = 0
    for element in elements:
        considered += 1
        point = evaluate_candidate(element, route, buffer_m, preset)
        if point is None or point.id in seen:
            continue
        seen.add(point.id)
        accepted.append(point)
    accepted.sort(key=lambda p: p.distance_from_start_m)
    LOGGER.debug(
        "Accepted %d of %d elements with preset=%s buffer=%.1fm",
        len(accepted),
        considered,
        preset.id,
        buffer_m,
    )
    return accepted


__all__ = [
    "classify_water_source",
    "near_route_bounds",
    "rejection_reason",
    "evaluate_candidate",
    "filter_water_points",
]
