"""Tests for chuk_mcp_srtm.core.tile_cache."""

import threading
import time

import pytest

from chuk_mcp_srtm.core.height_tile import HeightTile
from chuk_mcp_srtm.core.tile_cache import TileCache

from conftest import TEST_WIDTH, make_heights


def _tile(min_lat: int = 0, fill: int = 1) -> HeightTile:
    return HeightTile(min_lat, 0, make_heights(fill), width=TEST_WIDTH)


class TestConstruction:
    def test_unbounded_default(self):
        assert TileCache().max_tiles is None

    @pytest.mark.parametrize("bad", [0, -1])
    def test_bound_must_be_positive(self, bad):
        with pytest.raises(ValueError):
            TileCache(max_tiles=bad)


class TestGetPut:
    def test_miss(self):
        assert TileCache().get(1) is None

    def test_put_then_get(self):
        cache = TileCache()
        tile = _tile()
        cache.put(1, tile)
        assert cache.get(1) is tile
        assert 1 in cache
        assert len(cache) == 1

    def test_lru_eviction(self):
        cache = TileCache(max_tiles=2)
        cache.put(1, _tile(1))
        cache.put(2, _tile(2))
        cache.get(1)  # 2 is now least recently used
        cache.put(3, _tile(3))
        assert cache.keys() == [1, 3]
        assert cache.evictions == 1

    def test_unbounded_never_evicts(self):
        cache = TileCache()
        for key in range(50):
            cache.put(key, _tile())
        assert len(cache) == 50

    def test_clear(self):
        cache = TileCache()
        cache.put(1, _tile())
        cache.clear()
        assert len(cache) == 0

    def test_total_bytes(self):
        cache = TileCache()
        cache.put(1, _tile())
        cache.put(2, _tile())
        assert cache.total_bytes == 2 * 2 * TEST_WIDTH * TEST_WIDTH


class TestGetOrLoad:
    def test_loads_once(self):
        cache = TileCache()
        calls = []

        def loader():
            calls.append(1)
            return _tile()

        first = cache.get_or_load(7, loader)
        second = cache.get_or_load(7, loader)
        assert first is second
        assert len(calls) == 1
        assert cache.stats()["hits"] == 1
        assert cache.stats()["misses"] == 1

    def test_failed_load_not_cached(self):
        cache = TileCache()

        def failing():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            cache.get_or_load(7, failing)
        assert 7 not in cache
        assert cache._load_locks == {}
        assert cache.get_or_load(7, _tile) is not None

    def test_load_locks_cleaned_up(self):
        cache = TileCache()
        cache.get_or_load(7, _tile)
        assert cache._load_locks == {}

    def test_concurrent_misses_load_once(self):
        cache = TileCache()
        calls = []
        lock = threading.Lock()

        def slow_loader():
            with lock:
                calls.append(1)
            time.sleep(0.05)
            return _tile()

        results = []
        threads = [
            threading.Thread(target=lambda: results.append(cache.get_or_load(3, slow_loader)))
            for _ in range(8)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(calls) == 1
        assert len({id(r) for r in results}) == 1

    def test_concurrent_hits_all_counted(self):
        cache = TileCache()
        cache.get_or_load(5, _tile)

        def hammer():
            for _ in range(500):
                cache.get_or_load(5, _tile)

        threads = [threading.Thread(target=hammer) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert cache.stats()["hits"] == 8 * 500
        assert cache.stats()["misses"] == 1

    def test_waiters_share_lock_after_failed_load(self):
        cache = TileCache()
        started = threading.Event()
        release = threading.Event()
        loads = []
        results = []

        def failing():
            started.set()
            release.wait(2)
            raise RuntimeError("boom")

        def counting():
            loads.append(1)
            time.sleep(0.02)
            return _tile()

        def first():
            with pytest.raises(RuntimeError):
                cache.get_or_load(3, failing)

        def waiter():
            results.append(cache.get_or_load(3, counting))

        threads = [threading.Thread(target=first)]
        threads[0].start()
        assert started.wait(2)
        threads += [threading.Thread(target=waiter) for _ in range(2)]
        for t in threads[1:]:
            t.start()

        deadline = time.monotonic() + 2
        while cache._load_locks[3][1] < 3 and time.monotonic() < deadline:
            time.sleep(0.001)
        assert cache._load_locks[3][1] == 3

        release.set()
        for t in threads:
            t.join()

        assert len(loads) == 1
        assert len({id(r) for r in results}) == 1
        assert cache._load_locks == {}

    def test_different_keys_load_concurrently(self):
        cache = TileCache()
        inside = threading.Barrier(2, timeout=2)

        def loader():
            # Both loaders must be running at once to pass the barrier
            inside.wait()
            return _tile()

        errors = []

        def run(key):
            try:
                cache.get_or_load(key, loader)
            except threading.BrokenBarrierError as e:
                errors.append(e)

        threads = [threading.Thread(target=run, args=(k,)) for k in (1, 2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(cache) == 2


class TestStats:
    def test_stats_keys(self):
        cache = TileCache(max_tiles=3)
        cache.put(1, _tile())
        assert cache.stats() == {
            "tiles": 1,
            "max_tiles": 3,
            "hits": 0,
            "misses": 0,
            "evictions": 0,
        }
