"""Global pytest fixtures & helpers.

Adds project root to path and provides reusable routes, Overpass elements
and a stub Overpass client shared across test modules.
"""
from __future__ import annotations

import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from geodrink.cache import MemoryStorage, SpatialCache
from geodrink.geometry import (
    bounds_of,
    clear_route_cache,
    haversine_m,
    polyline_length_m,
)
from geodrink.models import Route, WaterPoint
from geodrink.services import WaterPointService, WaterServiceConfig


# --- Factory helpers -------------------------------------------------
def make_route(coords, name="Test Route"):
    coords = tuple((float(lon), float(lat)) for lon, lat in coords)
    return Route(
        coordinates=coords,
        bounds=bounds_of(coords),
        total_distance_m=polyline_length_m(coords),
        name=name,
    )


def make_node(node_id, lat, lon, **tags):
    return {"type": "node", "id": node_id, "lat": lat, "lon": lon, "tags": tags}


class StubClient:
    """Stands in for OverpassClient with canned elements."""

    def __init__(self, elements=None, error=None):
        self.elements = elements or []
        self.error = error
        self.queries = []

    def fetch_elements(self, query):
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.elements)


# --- Fixtures --------------------------------------------------------
@pytest.fixture(autouse=True)
def reset_route_cache():
    clear_route_cache()
    yield
    clear_route_cache()


@pytest.fixture
def straight_route():
    """Roughly 7.4 km west-east line at latitude 48."""

    return make_route([(2.0, 48.0), (2.1, 48.0)])


@pytest.fixture
def l_route():
    return make_route([(0.0, 0.0), (0.01, 0.0), (0.01, 0.01)], name="L Route")


@pytest.fixture
def memory_cache():
    return SpatialCache(MemoryStorage())


@pytest.fixture
def make_service(memory_cache):
    def _make(elements=None, error=None):
        client = StubClient(elements=elements, error=error)
        service = WaterPointService(
            WaterServiceConfig(client=client, cache=memory_cache)
        )
        return service, client

    return _make


@pytest.fixture
def route_factory():
    return make_route


@pytest.fixture
def node_factory():
    return make_node


@pytest.fixture
def water_point_factory():
    def _make(point_id="1", lat=48.0, lon=2.05, point_type="fountain", **tags):
        return WaterPoint(
            id=str(point_id),
            lat=lat,
            lon=lon,
            tags=dict(tags),
            type=point_type,
            distance_from_start_m=haversine_m(48.0, 2.0, lat, lon),
            distance_from_route_m=0.0,
        )

    return _make
