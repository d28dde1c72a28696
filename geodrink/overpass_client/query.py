"""Overpass QL query construction for water-source searches."""

from __future__ import annotations

from typing import List

from ..config import METERS_PER_DEGREE, OVERPASS_QUERY_TIMEOUT
from ..models import Bounds, FilterPreset

# Tag selectors used when a preset only accepts potable water. The remote
# query is narrowed so non-potable sources are never transferred.
POTABLE_SELECTORS = (
    '["amenity"="drinking_water"]["drinking_water"!="no"]',
    '["amenity"="fountain"]["drinking_water"="yes"]',
    '["amenity"="water_point"]["drinking_water"="yes"]',
    '["amenity"="water_tap"]["drinking_water"="yes"]',
)

ALL_SOURCE_SELECTORS = (
    '["amenity"="drinking_water"]',
    '["amenity"="fountain"]',
    '["amenity"="water_point"]',
    '["man_made"="water_well"]',
    '["natural"="spring"]',
    '["amenity"="water_tap"]',
)


def pad_bounds(bounds: Bounds, buffer_m: float) -> Bounds:
    """Expand ``bounds`` by ``buffer_m`` using a fixed metres-per-degree factor."""

    return bounds.padded(buffer_m / METERS_PER_DEGREE)


def format_bbox(bounds: Bounds) -> str:
    """Return the Overpass ``south,west,north,east`` bbox filter string."""

    return f"{bounds.south},{bounds.west},{bounds.north},{bounds.east}"


def build_overpass_query(
    bounds: Bounds,
    buffer_m: float,
    preset: FilterPreset,
    *,
    timeout_s: int = OVERPASS_QUERY_TIMEOUT,
) -> str:
    """Build the Overpass QL union query for the route's padded bounding box."""

    bbox = format_bbox(pad_bounds(bounds, buffer_m))
    selectors = POTABLE_SELECTORS if preset.requires_potable else ALL_SOURCE_SELECTORS
    statements: List[str] = [f"node{selector}({bbox});" for selector in selectors]
    body = "\n  ".join(statements)
    return f"[out:json][timeout:{timeout_s}];\n(\n  {body}\n);\nout geom;\n"


__all__ = [
    "POTABLE_SELECTORS",
    "ALL_SOURCE_SELECTORS",
    "pad_bounds",
    "format_bbox",
    "build_overpass_query",
]
