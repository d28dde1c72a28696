from __future__ import annotations

import pytest

from geodrink.models import Bounds, FilterRules, WaterPoint
from geodrink.presets import get_preset


def test_bounds_round_trip_and_padding():
    bounds = Bounds(north=1.0, south=-1.0, east=2.0, west=-2.0)
    assert Bounds.from_dict(bounds.to_dict()) == bounds
    padded = bounds.padded(0.5)
    assert (padded.north, padded.south, padded.east, padded.west) == (
        1.5,
        -1.5,
        2.5,
        -2.5,
    )


def test_water_point_dict_round_trip(water_point_factory):
    point = water_point_factory("42", name="Pump", fee="no")
    payload = point.to_dict()
    assert payload["distanceFromStart"] == point.distance_from_start_m
    assert payload["distanceFromRoute"] == point.distance_from_route_m
    assert WaterPoint.from_dict(payload) == point


def test_water_point_from_dict_rejects_unknown_type(water_point_factory):
    payload = water_point_factory().to_dict()
    payload["type"] = "lake"
    with pytest.raises(ValueError):
        WaterPoint.from_dict(payload)


def test_filter_rules_exclusions():
    rules = FilterRules(exclude_tags=("fee=yes", "access=private"))
    assert rules.exclusions() == [("fee", "yes"), ("access", "private")]


def test_requires_potable():
    assert get_preset("potable-only").requires_potable
    assert get_preset("all-potable").requires_potable
    assert not get_preset("emergency-sources").requires_potable
    assert not get_preset("all-sources").requires_potable


def test_water_point_is_hashable(water_point_factory):
    first = water_point_factory("7", name="Pump")
    same = water_point_factory("7", name="Pump")
    assert hash(first) == hash(same)
    assert len({first, same}) == 1
