"""Tests for the spatial result cache and its storage backends."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from geodrink.cache import JSONFileStorage, MemoryStorage, SpatialCache
from geodrink.errors import CacheStorageError
from geodrink.models import Bounds

BOUNDS = Bounds(north=48.01, south=48.0, east=2.1, west=2.0)


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class BrokenStorage:
    """Storage whose every operation fails, e.g. quota exceeded."""

    def get_item(self, key):
        raise CacheStorageError("read failed")

    def set_item(self, key, value):
        raise CacheStorageError("quota exceeded")

    def remove_item(self, key):
        raise CacheStorageError("remove failed")

    def keys(self):
        raise CacheStorageError("enumerate failed")


def test_key_format():
    cache = SpatialCache(MemoryStorage())
    assert (
        cache.key(BOUNDS, 15, "potable-only")
        == "geodrink_cache_48.0100_48.0000_2.1000_2.0000_15_potable-only"
    )
    assert cache.key(BOUNDS, 12.5, "all-sources").endswith("_12.5_all-sources")


def test_keys_collide_below_fourth_decimal():
    cache = SpatialCache(MemoryStorage())
    nudged = Bounds(north=48.01001, south=48.00002, east=2.10003, west=2.00004)
    assert cache.key(BOUNDS, 15, "potable-only") == cache.key(
        nudged, 15, "potable-only"
    )
    assert cache.key(BOUNDS, 15, "potable-only") != cache.key(
        BOUNDS, 16, "potable-only"
    )


def test_round_trip_within_ttl():
    clock = FakeClock()
    cache = SpatialCache(MemoryStorage(), clock=clock)
    payload = [{"id": "1", "lat": 48.0, "tags": {"amenity": "drinking_water"}}]
    key = cache.key(BOUNDS, 15, "potable-only")
    cache.set(key, payload, BOUNDS, 15)
    clock.now += 3599
    assert cache.get(key) == payload


def test_entry_at_exact_ttl_is_still_served():
    clock = FakeClock()
    cache = SpatialCache(MemoryStorage(), clock=clock, ttl_seconds=3600)
    key = cache.key(BOUNDS, 15, "potable-only")
    cache.set(key, ["fresh"], BOUNDS, 15)
    clock.now += 3600
    assert cache.get(key) == ["fresh"]
    clock.now += 1
    assert cache.get(key) is None


def test_entry_layout():
    storage = MemoryStorage()
    clock = FakeClock(1000.0)
    cache = SpatialCache(storage, clock=clock)
    cache.set("geodrink_cache_x", [1, 2], BOUNDS, 15)
    entry = json.loads(storage.get_item("geodrink_cache_x"))
    assert entry["data"] == [1, 2]
    assert entry["timestamp"] == 1_000_000
    assert json.loads(entry["bounds"]) == BOUNDS.to_dict()
    assert entry["bufferDistance"] == 15


def test_expired_entry_is_absent_and_purged():
    clock = FakeClock()
    cache = SpatialCache(MemoryStorage(), clock=clock)
    key = cache.key(BOUNDS, 15, "potable-only")
    cache.set(key, ["x"], BOUNDS, 15)
    assert cache.info().total_entries == 1
    clock.now += 3601
    assert cache.get(key) is None
    assert cache.info().total_entries == 0


def test_set_overwrites_and_refreshes_timestamp():
    clock = FakeClock()
    cache = SpatialCache(MemoryStorage(), clock=clock)
    cache.set("geodrink_cache_k", "old", BOUNDS, 15)
    clock.now += 3000
    cache.set("geodrink_cache_k", "new", BOUNDS, 15)
    clock.now += 3000
    assert cache.get("geodrink_cache_k") == "new"


def test_missing_key_returns_none():
    assert SpatialCache(MemoryStorage()).get("geodrink_cache_nothing") is None


def test_clear_only_removes_namespaced_entries():
    storage = MemoryStorage({"other_app_setting": "keep me"})
    cache = SpatialCache(storage)
    cache.set(cache.key(BOUNDS, 15, "potable-only"), [], BOUNDS, 15)
    cache.set(cache.key(BOUNDS, 50, "all-sources"), [], BOUNDS, 50)
    assert cache.clear() == 2
    assert storage.keys() == ["other_app_setting"]
    assert storage.get_item("other_app_setting") == "keep me"


def test_info_counts_namespaced_size():
    storage = MemoryStorage({"unrelated": "x" * 100})
    cache = SpatialCache(storage)
    key = cache.key(BOUNDS, 15, "potable-only")
    cache.set(key, ["a"], BOUNDS, 15)
    info = cache.info()
    assert info.total_entries == 1
    assert info.total_size == len(storage.get_item(key))


def test_corrupt_entry_is_a_miss():
    storage = MemoryStorage({"geodrink_cache_bad": "{not json"})
    assert SpatialCache(storage).get("geodrink_cache_bad") is None


def test_storage_failures_are_swallowed(caplog):
    cache = SpatialCache(BrokenStorage())
    cache.set("geodrink_cache_k", [1], BOUNDS, 15)
    assert cache.get("geodrink_cache_k") is None
    assert cache.clear() == 0
    info = cache.info()
    assert (info.total_entries, info.total_size) == (0, 0)
    assert "quota exceeded" in caplog.text


def test_empty_prefix_rejected():
    with pytest.raises(ValueError):
        SpatialCache(MemoryStorage(), prefix="")


def test_json_file_storage_round_trip(tmp_path: Path):
    storage = JSONFileStorage(tmp_path / "cache")
    storage.set_item("geodrink_cache_a", '{"v": 1}')
    storage.set_item("other/key with spaces", "plain")
    assert storage.get_item("geodrink_cache_a") == '{"v": 1}'
    assert sorted(storage.keys()) == ["geodrink_cache_a", "other/key with spaces"]
    storage.remove_item("geodrink_cache_a")
    storage.remove_item("geodrink_cache_a")
    assert storage.get_item("geodrink_cache_a") is None
    assert storage.keys() == ["other/key with spaces"]


def test_json_file_storage_backs_spatial_cache(tmp_path: Path):
    clock = FakeClock()
    cache = SpatialCache(JSONFileStorage(tmp_path), clock=clock)
    key = cache.key(BOUNDS, 15, "potable-only")
    cache.set(key, [{"id": "1"}], BOUNDS, 15)

    reopened = SpatialCache(JSONFileStorage(tmp_path), clock=clock)
    assert reopened.get(key) == [{"id": "1"}]
    assert reopened.info().total_entries == 1
    assert reopened.clear() == 1
    assert reopened.get(key) is None


def test_json_file_storage_corrupt_file(tmp_path: Path):
    storage = JSONFileStorage(tmp_path)
    storage.set_item("geodrink_cache_a", "value")
    (file_path,) = tmp_path.glob("*/*.json")
    file_path.write_text("garbage", encoding="utf-8")
    with pytest.raises(CacheStorageError):
        storage.get_item("geodrink_cache_a")
    assert storage.keys() == []
    assert SpatialCache(storage).get("geodrink_cache_a") is None


def test_json_file_storage_missing_dir(tmp_path: Path):
    storage = JSONFileStorage(tmp_path / "absent")
    assert storage.keys() == []
    assert storage.get_item("anything") is None
