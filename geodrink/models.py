"""Plain data carriers shared by the parser, filters, cache and consumers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple

LonLat = Tuple[float, float]

WaterSourceType = Literal["fountain", "well", "spring", "tap", "other"]
WATER_SOURCE_TYPES: Tuple[str, ...] = ("fountain", "well", "spring", "tap", "other")


@dataclass(frozen=True, slots=True)
class Bounds:
    north: float
    south: float
    east: float
    west: float

    def padded(self, degrees: float) -> "Bounds":
        """Return a copy expanded by ``degrees`` on every side."""

        return Bounds(
            north=self.north + degrees,
            south=self.south - degrees,
            east=self.east + degrees,
            west=self.west - degrees,
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "north": self.north,
            "south": self.south,
            "east": self.east,
            "west": self.west,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Bounds":
        return cls(
            north=float(payload["north"]),
            south=float(payload["south"]),
            east=float(payload["east"]),
            west=float(payload["west"]),
        )


@dataclass(frozen=True, slots=True)
class Route:
    """Normalized polyline parsed from a GPX track.

    Coordinates are ``(lon, lat)`` pairs to match map rendering conventions.
    """

    coordinates: Tuple[LonLat, ...]
    bounds: Bounds
    total_distance_m: float
    name: Optional[str] = None

    @property
    def start(self) -> LonLat:
        return self.coordinates[0]

    @property
    def point_count(self) -> int:
        return len(self.coordinates)


@dataclass(frozen=True, slots=True)
class WaterPoint:
    id: str
    lat: float
    lon: float
    tags: Dict[str, str] = field(hash=False)
    type: WaterSourceType
    distance_from_start_m: float
    distance_from_route_m: float

    @property
    def name(self) -> Optional[str]:
        return self.tags.get("name") or self.tags.get("name:en")

    @property
    def access(self) -> Optional[str]:
        return self.tags.get("access")

    @property
    def potability(self) -> Optional[str]:
        return self.tags.get("drinking_water")

    @property
    def fee(self) -> Optional[str]:
        return self.tags.get("fee")

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly representation used for caching."""

        return {
            "id": self.id,
            "lat": self.lat,
            "lon": self.lon,
            "tags": dict(self.tags),
            "type": self.type,
            "distanceFromStart": self.distance_from_start_m,
            "distanceFromRoute": self.distance_from_route_m,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "WaterPoint":
        point_type = str(payload.get("type", "other"))
        if point_type not in WATER_SOURCE_TYPES:
            raise ValueError(f"Unknown water source type: {point_type}")
        tags = payload.get("tags") or {}
        return cls(
            id=str(payload["id"]),
            lat=float(payload["lat"]),
            lon=float(payload["lon"]),
            tags={str(k): str(v) for k, v in tags.items()},
            type=point_type,  # type: ignore[arg-type]
            distance_from_start_m=float(payload["distanceFromStart"]),
            distance_from_route_m=float(payload["distanceFromRoute"]),
        )


@dataclass(frozen=True, slots=True)
class CurrentPosition:
    lat: float
    lon: float
    distance_along_route_m: float


@dataclass(frozen=True, slots=True)
class LocationFix:
    """A raw device location reading."""

    lat: float
    lon: float
    accuracy_m: Optional[float] = None


@dataclass(frozen=True)
class FilterRules:
    """Tag-based rules narrowing which water sources a preset accepts."""

    drinking_water: Optional[Tuple[str, ...]] = None
    exclude_tags: Tuple[str, ...] = ()
    include_types: Optional[Tuple[str, ...]] = None
    access: Optional[Tuple[str, ...]] = None

    def exclusions(self) -> List[Tuple[str, str]]:
        """Return ``exclude_tags`` split into ``(key, value)`` pairs."""

        pairs: List[Tuple[str, str]] = []
        for rule in self.exclude_tags:
            key, _, value = rule.partition("=")
            pairs.append((key, value))
        return pairs


@dataclass(frozen=True)
class FilterPreset:
    id: str
    name: str
    description: str
    rules: FilterRules = field(default_factory=FilterRules)

    @property
    def requires_potable(self) -> bool:
        return bool(self.rules.drinking_water) and "yes" in self.rules.drinking_water


__all__ = [
    "LonLat",
    "WaterSourceType",
    "WATER_SOURCE_TYPES",
    "Bounds",
    "Route",
    "WaterPoint",
    "CurrentPosition",
    "LocationFix",
    "FilterRules",
    "FilterPreset",
]
