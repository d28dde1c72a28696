"""Render a route and its nearby water sources to an interactive HTML map.

Usage:

    python -m geodrink.tools.water_map route.gpx --buffer 50 --output maps/route.html
"""

from __future__ import annotations

import argparse
import logging
from html import escape
from pathlib import Path
from typing import Optional, Sequence, Union

import folium

from ..config import DEFAULT_BUFFER_M
from ..errors import TrackParseError
from ..geojson import water_point_info, water_point_label, water_quality
from ..gpx_parser import load_gpx
from ..models import CurrentPosition, Route, WaterPoint
from ..presets import DEFAULT_PRESET_ID, preset_ids
from ..services import WaterPointService
from ..utils import format_distance

PathLike = Union[str, Path]

_ROUTE_COLOR = "#2c7bb6"
_POSITION_COLOR = "#d73027"
_TYPE_COLORS = {
    "fountain": "#3182bd",
    "well": "#31a354",
    "spring": "#2ca25f",
    "tap": "#756bb1",
    "other": "#636363",
}


def _latlon(route: Route) -> list[tuple[float, float]]:
    return [(lat, lon) for lon, lat in route.coordinates]


def _popup_html(point: WaterPoint) -> str:
    # Tag values come straight from OSM contributors.
    return (
        f"<strong>{escape(water_point_label(point))}</strong><br>"
        f"{escape(water_point_info(point))}<br>"
        f"{escape(water_quality(point))}<br>"
        f"{format_distance(point.distance_from_start_m)} from start, "
        f"{format_distance(point.distance_from_route_m)} off route"
    )


def create_water_map(
    route: Route,
    points: Sequence[WaterPoint],
    *,
    position: Optional[CurrentPosition] = None,
    output_html_path: Optional[PathLike] = None,
) -> folium.Map:
    """Build a :class:`folium.Map` showing the route, water points and position."""

    bounds = route.bounds
    center = ((bounds.north + bounds.south) / 2, (bounds.east + bounds.west) / 2)
    folium_map = folium.Map(location=center, zoom_start=13, control_scale=True)
    if route.point_count >= 2:
        folium.PolyLine(
            _latlon(route),
            color=_ROUTE_COLOR,
            weight=4,
            opacity=0.8,
            tooltip=escape(route.name or "Route"),
        ).add_to(folium_map)
        folium_map.fit_bounds(
            [[bounds.south, bounds.west], [bounds.north, bounds.east]]
        )

    for point in points:
        color = _TYPE_COLORS.get(point.type, _TYPE_COLORS["other"])
        folium.CircleMarker(
            location=(point.lat, point.lon),
            radius=6,
            color=color,
            fill=True,
            fill_color=color,
            tooltip=escape(water_point_label(point)),
            popup=folium.Popup(html=_popup_html(point), max_width=300),
        ).add_to(folium_map)

    if position is not None:
        folium.CircleMarker(
            location=(position.lat, position.lon),
            radius=8,
            color=_POSITION_COLOR,
            fill=True,
            fill_color=_POSITION_COLOR,
            tooltip=(
                f"You are here ({format_distance(position.distance_along_route_m)}"
                " along route)"
            ),
        ).add_to(folium_map)

    if output_html_path is not None:
        output_path = Path(output_html_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        folium_map.save(str(output_path))

    return folium_map


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render a GPX route and nearby water sources as an HTML map."
    )
    parser.add_argument("gpx", type=Path, help="GPX track or route file")
    parser.add_argument(
        "--buffer",
        type=float,
        default=DEFAULT_BUFFER_M,
        help=f"Search distance from the route in metres (default: {DEFAULT_BUFFER_M:g})",
    )
    parser.add_argument(
        "--filter", choices=preset_ids(), default=DEFAULT_PRESET_ID, dest="filter_id"
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Output HTML path; defaults to maps/<gpx stem>.html",
    )
    return parser


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    service: Optional[WaterPointService] = None,
) -> int:
    """CLI entry point used via ``python -m geodrink.tools.water_map``."""

    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )
    try:
        route = load_gpx(args.gpx)
    except (TrackParseError, OSError) as exc:
        logging.error("Failed to load GPX '%s': %s", args.gpx, exc)
        return 1

    outcome = (service or WaterPointService()).search(
        route, args.buffer, args.filter_id
    )
    output_path = args.output or Path("maps") / f"{args.gpx.stem}.html"
    create_water_map(route, outcome.points, output_html_path=output_path)
    logging.info(
        "Water map with %d points written to %s", len(outcome.points), output_path
    )
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
