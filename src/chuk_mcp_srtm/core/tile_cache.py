"""
In-memory cache of decoded tiles, keyed by tile key.

Tiles are built outside the cache and published only once complete, so a
reader never sees a partially decoded tile. Loading is serialised per key:
concurrent misses for one tile decode it once, while different tiles can
decode in parallel.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from .height_tile import HeightTile

logger = logging.getLogger(__name__)


class TileCache:
    """LRU tile cache with an optional bound on the number of tiles."""

    def __init__(self, max_tiles: int | None = None) -> None:
        if max_tiles is not None and max_tiles < 1:
            raise ValueError(f"max_tiles must be >= 1 or None, got {max_tiles}")
        self.max_tiles = max_tiles

        # Insertion order doubles as recency order: oldest first
        self._tiles: dict[int, HeightTile] = {}
        self._lock = threading.Lock()
        self._load_locks: dict[int, list] = {}
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def _touch(self, key: int) -> HeightTile | None:
        # Caller holds self._lock
        tile = self._tiles.pop(key, None)
        if tile is not None:
            self._tiles[key] = tile
        return tile

    def get(self, key: int) -> HeightTile | None:
        """Cached tile, moved to the most-recently-used end; None on miss."""
        with self._lock:
            return self._touch(key)

    def put(self, key: int, tile: HeightTile) -> None:
        """Publish a fully decoded tile, evicting the oldest beyond the bound."""
        with self._lock:
            self._tiles.pop(key, None)
            self._tiles[key] = tile
            if self.max_tiles is not None:
                while len(self._tiles) > self.max_tiles:
                    oldest_key = next(iter(self._tiles))
                    evicted = self._tiles.pop(oldest_key)
                    self.evictions += 1
                    logger.debug(f"Evicted tile {evicted.name} (key {oldest_key})")

    def get_or_load(self, key: int, loader: Callable[[], HeightTile]) -> HeightTile:
        """
        Return the tile for key, running loader() on a miss.

        Exceptions from loader() propagate and nothing is cached, so a later
        call retries the load.
        """
        with self._lock:
            tile = self._touch(key)
            if tile is not None:
                self.hits += 1
                return tile
            # [lock, number of threads holding or waiting on it]
            entry = self._load_locks.setdefault(key, [threading.Lock(), 0])
            entry[1] += 1

        try:
            with entry[0]:
                with self._lock:
                    # Another thread may have published while we waited
                    tile = self._touch(key)
                    if tile is not None:
                        self.hits += 1
                        return tile
                    self.misses += 1
                tile = loader()
                self.put(key, tile)
                return tile
        finally:
            with self._lock:
                entry[1] -= 1
                if entry[1] == 0 and self._load_locks.get(key) is entry:
                    del self._load_locks[key]

    def keys(self) -> list[int]:
        with self._lock:
            return list(self._tiles)

    def clear(self) -> None:
        with self._lock:
            self._tiles.clear()

    @property
    def total_bytes(self) -> int:
        with self._lock:
            return sum(tile.nbytes for tile in self._tiles.values())

    def stats(self) -> dict[str, int | None]:
        with self._lock:
            size = len(self._tiles)
        return {
            "tiles": size,
            "max_tiles": self.max_tiles,
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
        }

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._tiles

    def __len__(self) -> int:
        with self._lock:
            return len(self._tiles)
