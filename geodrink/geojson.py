"""GeoJSON features and display labels handed to rendering consumers."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from .models import Route, WaterPoint

Feature = Dict[str, Any]
FeatureCollection = Dict[str, Any]


def water_point_label(point: WaterPoint) -> str:
    """Return the source's name, or a type-based fallback such as ``Well Point``."""

    if point.name:
        return point.name
    return f"{point.type.capitalize()} Point"


def water_point_info(point: WaterPoint) -> str:
    info: List[str] = []
    if point.access:
        info.append(f"Access: {point.access}")
    if point.potability == "yes":
        info.append("Potable water")
    elif point.potability == "no":
        info.append("Non-potable")
    if point.fee == "yes":
        info.append("Fee required")
    return " • ".join(info) if info else "Water point"


def water_quality(point: WaterPoint) -> str:
    """Summarise potability and fee into a short quality badge."""

    if point.potability == "yes":
        return "Potable (Paid)" if point.fee == "yes" else "Potable & Free"
    if point.potability == "no":
        return "Non-Potable"
    return "Unknown Quality"


def route_feature(route: Route) -> Feature:
    return {
        "type": "Feature",
        "properties": {
            "name": route.name or "Route",
            "totalDistance": route.total_distance_m,
        },
        "geometry": {
            "type": "LineString",
            "coordinates": [list(coord) for coord in route.coordinates],
        },
    }


def water_points_collection(points: Sequence[WaterPoint]) -> FeatureCollection:
    features = [
        {
            "type": "Feature",
            "properties": {
                "id": point.id,
                "type": point.type,
                "name": water_point_label(point),
                "info": water_point_info(point),
                "quality": water_quality(point),
                "distanceFromStart": point.distance_from_start_m,
                "distanceFromRoute": point.distance_from_route_m,
                "lat": point.lat,
                "lon": point.lon,
            },
            "geometry": {"type": "Point", "coordinates": [point.lon, point.lat]},
        }
        for point in points
    ]
    return {"type": "FeatureCollection", "features": features}


def graticule_cross(lat: float, lon: float, extent: float = 0.01) -> FeatureCollection:
    """Return two short lines crossing at the given position."""

    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {"type": "graticule-lat"},
                "geometry": {
                    "type": "LineString",
                    "coordinates": [[lon - extent, lat], [lon + extent, lat]],
                },
            },
            {
                "type": "Feature",
                "properties": {"type": "graticule-lon"},
                "geometry": {
                    "type": "LineString",
                    "coordinates": [[lon, lat - extent], [lon, lat + extent]],
                },
            },
        ],
    }


__all__ = [
    "water_point_label",
    "water_point_info",
    "water_quality",
    "route_feature",
    "water_points_collection",
    "graticule_cross",
]
