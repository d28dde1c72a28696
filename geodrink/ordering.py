"""Position-relative ordering of water points for display."""

from __future__ import annotations

from typing import List, Optional, Sequence

from .geometry import distance_along_route
from .models import CurrentPosition, Route, WaterPoint


def distance_from_position(
    point: WaterPoint,
    position: Optional[CurrentPosition],
    route: Route,
) -> float:
    """Along-route gap between ``point`` and the user's position.

    Without a position the point's distance from the route start is returned.
    """

    if position is None:
        return point.distance_from_start_m
    along = distance_along_route(point.lat, point.lon, route)
    return abs(along - position.distance_along_route_m)


def sort_for_display(
    points: Sequence[WaterPoint],
    position: Optional[CurrentPosition],
    route: Optional[Route],
) -> List[WaterPoint]:
    """Return a new list ordered by proximity to the user along the route."""

    if route is None:
        return list(points)
    if position is None:
        return sorted(points, key=lambda p: p.distance_from_start_m)
    return sorted(points, key=lambda p: distance_from_position(p, position, route))


__all__ = ["distance_from_position", "sort_for_display"]
