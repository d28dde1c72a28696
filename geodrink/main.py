"""Command-line entry point: find water sources along a GPX route."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence, Tuple

from .config import DEFAULT_BUFFER_M
from .errors import ExportError, TrackParseError
from .export import export_water_points
from .geojson import water_point_info, water_point_label
from .gpx_parser import load_gpx
from .models import CurrentPosition, Route
from .ordering import distance_from_position, sort_for_display
from .presets import DEFAULT_PRESET_ID, FILTER_PRESETS, preset_ids
from .services import QueryState, WaterPointService, current_position_on_route
from .utils import format_bytes, format_distance


def _setup_logging() -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=logging.INFO,
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        )


def _parse_position(value: str) -> Tuple[float, float]:
    try:
        lat_text, lon_text = value.split(",", 1)
        return float(lat_text), float(lon_text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"Position must look like LAT,LON (got '{value}')"
        ) from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="geodrink",
        description="List drinking water sources near a GPX route.",
    )
    parser.add_argument("gpx", nargs="?", type=Path, help="GPX track or route file")
    parser.add_argument(
        "--buffer",
        type=float,
        default=DEFAULT_BUFFER_M,
        help=f"Search distance from the route in metres (default: {DEFAULT_BUFFER_M:g})",
    )
    parser.add_argument(
        "--filter",
        choices=preset_ids(),
        default=DEFAULT_PRESET_ID,
        dest="filter_id",
        help="Water filter preset",
    )
    parser.add_argument(
        "--position",
        type=_parse_position,
        help="Current location as LAT,LON; orders results relative to it",
    )
    parser.add_argument(
        "--output", type=Path, help="Export results to a .csv or .xlsx file"
    )
    parser.add_argument(
        "--clear-cache", action="store_true", help="Remove cached search results"
    )
    parser.add_argument(
        "--cache-info", action="store_true", help="Show cache entry count and size"
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List water filter presets"
    )
    return parser


def _log_route(route: Route) -> None:
    logging.info(
        "Route '%s': %d points, %s",
        route.name or "Route",
        route.point_count,
        format_distance(route.total_distance_m),
    )


def _log_points(
    route: Route, points: Sequence, position: Optional[CurrentPosition]
) -> None:
    for point in points:
        logging.info(
            "%10s  %-8s %-30s %s",
            format_distance(distance_from_position(point, position, route)),
            point.type,
            water_point_label(point),
            water_point_info(point),
        )


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    service: Optional[WaterPointService] = None,
) -> int:
    _setup_logging()
    args = _build_parser().parse_args(argv)
    service = service or WaterPointService()

    if args.list_presets:
        for preset in FILTER_PRESETS:
            logging.info("%-18s %s - %s", preset.id, preset.name, preset.description)
    if args.clear_cache:
        removed = service.cache.clear()
        logging.info("Cache cleared (%d entries removed)", removed)
    if args.cache_info:
        info = service.cache.info()
        logging.info(
            "Cache holds %d entries (%s)",
            info.total_entries,
            format_bytes(info.total_size),
        )
    if args.gpx is None:
        if args.list_presets or args.clear_cache or args.cache_info:
            return 0
        logging.error("A GPX file is required")
        return 1

    try:
        route = load_gpx(args.gpx)
    except (TrackParseError, OSError) as exc:
        logging.error("Failed to load GPX '%s': %s", args.gpx, exc)
        return 1
    _log_route(route)

    outcome = service.search(route, args.buffer, args.filter_id)
    if outcome.state is QueryState.FAILED:
        logging.warning("Water point search failed; try again later")
        return 0
    logging.info(
        "Found %d water points within %sm (%s)",
        len(outcome.points),
        f"{args.buffer:g}",
        outcome.state.value,
    )

    position: Optional[CurrentPosition] = None
    if args.position is not None:
        lat, lon = args.position
        position = current_position_on_route(lat, lon, route)
        if position is not None:
            logging.info(
                "Current position is %s along the route",
                format_distance(position.distance_along_route_m),
            )
    ordered = sort_for_display(outcome.points, position, route)
    _log_points(route, ordered, position)

    if args.output is not None:
        try:
            path = export_water_points(ordered, args.output)
        except ExportError as exc:
            logging.warning("%s", exc)
            return 0 if not ordered else 1
        except OSError as exc:
            logging.error("Failed to write '%s': %s", args.output, exc)
            return 1
        logging.info("Results saved to %s", path)
    return 0
