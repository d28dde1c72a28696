"""Benchmark route projection and candidate filtering on long routes."""

from __future__ import annotations

import argparse
import statistics
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Late imports rely on the adjusted sys.path above.
from geodrink.classifier import filter_water_points  # noqa: E402
from geodrink.geometry import (  # noqa: E402
    bounds_of,
    clear_route_cache,
    distance_along_route,
    polyline_length_m,
)
from geodrink.models import Route  # noqa: E402
from geodrink.presets import get_preset  # noqa: E402


@dataclass(slots=True)
class StageDurations:
    along_route: float
    filtering: float

    @property
    def total(self) -> float:
        return self.along_route + self.filtering


@dataclass(slots=True)
class BenchmarkSummary:
    point_count: int
    candidate_count: int
    iterations: int
    mean_along_route_ms: float
    mean_filtering_ms: float
    mean_total_ms: float
    worst_total_ms: float


def _build_route(point_count: int) -> Route:
    """Generate a straight west-east route with evenly spaced vertices."""

    base_lat = 45.0
    base_lon = 6.0
    step_deg = 1.2e-4
    coords = tuple((base_lon + idx * step_deg, base_lat) for idx in range(point_count))
    return Route(
        coordinates=coords,
        bounds=bounds_of(coords),
        total_distance_m=polyline_length_m(coords),
        name="benchmark",
    )


def _build_elements(route: Route, candidate_count: int) -> List[dict]:
    """Spread drinking water nodes along the route, alternating sides."""

    stride = max(1, route.point_count // max(1, candidate_count))
    elements = []
    for idx in range(candidate_count):
        lon, lat = route.coordinates[(idx * stride) % route.point_count]
        offset = 0.0002 if idx % 2 else -0.0002
        elements.append(
            {
                "type": "node",
                "id": idx + 1,
                "lat": lat + offset,
                "lon": lon,
                "tags": {"amenity": "drinking_water", "drinking_water": "yes"},
            }
        )
    return elements


def _run_iteration(route: Route, elements: List[dict]) -> StageDurations:
    clear_route_cache()
    start = time.perf_counter()
    for element in elements:
        distance_along_route(element["lat"], element["lon"], route)
    along_route = time.perf_counter() - start

    start = time.perf_counter()
    points = filter_water_points(elements, route, 50.0, get_preset("all-sources"))
    filtering = time.perf_counter() - start
    if len(points) != len(elements):
        raise RuntimeError("Synthetic candidates fell outside the buffer")

    return StageDurations(along_route=along_route, filtering=filtering)


def run_benchmark(
    point_count: int, candidate_count: int, iterations: int
) -> BenchmarkSummary:
    """Time along-route projection and filtering; return aggregated timings."""

    if point_count < 2:
        raise ValueError("point_count must be at least 2")
    if iterations <= 0:
        raise ValueError("iterations must be positive")

    route = _build_route(point_count)
    elements = _build_elements(route, candidate_count)
    durations = [_run_iteration(route, elements) for _ in range(iterations)]

    return BenchmarkSummary(
        point_count=point_count,
        candidate_count=candidate_count,
        iterations=iterations,
        mean_along_route_ms=statistics.fmean(d.along_route for d in durations)
        * 1000.0,
        mean_filtering_ms=statistics.fmean(d.filtering for d in durations) * 1000.0,
        mean_total_ms=statistics.fmean(d.total for d in durations) * 1000.0,
        worst_total_ms=max(d.total for d in durations) * 1000.0,
    )


def _format_summary(summary: BenchmarkSummary) -> Dict[str, float]:
    return {
        "point_count": summary.point_count,
        "candidate_count": summary.candidate_count,
        "iterations": summary.iterations,
        "mean_along_route_ms": summary.mean_along_route_ms,
        "mean_filtering_ms": summary.mean_filtering_ms,
        "mean_total_ms": summary.mean_total_ms,
        "worst_total_ms": summary.worst_total_ms,
    }


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Benchmark route projection with long routes",
    )
    parser.add_argument(
        "--points", type=int, default=20000, help="Number of route vertices"
    )
    parser.add_argument(
        "--candidates", type=int, default=500, help="Number of water nodes"
    )
    parser.add_argument(
        "--iterations", type=int, default=5, help="Number of repetitions for averaging"
    )
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    summary = run_benchmark(args.points, args.candidates, args.iterations)
    for key, value in _format_summary(summary).items():
        if key in {"point_count", "candidate_count", "iterations"}:
            print(f"{key}: {value}")
        else:
            print(f"{key}: {value:.3f}")


if __name__ == "__main__":
    main()
