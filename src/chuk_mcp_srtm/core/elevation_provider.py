"""
SRTM3 elevation provider: the point query entry point.

Wires the area index, tile fetcher and tile cache together. A query
computes the tile key, loads and publishes the tile on a miss, and reads
the nearest sample. Voids become NaN only here, at the public boundary.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path

from ..constants import DEFAULT_BASE_URL, DEFAULT_CACHE_DIR, TILE_WIDTH
from ..settings import SRTMSettings
from .area_index import AreaIndex, load_bundled_area_index
from .height_tile import HeightTile
from .tile_cache import TileCache
from .tile_fetcher import Downloader, HttpDownloader, TileFetcher, prepare_cache_dir
from .tile_locator import tile_key, tile_origin, validate_coordinate

logger = logging.getLogger(__name__)


class SRTMElevationProvider:
    """Answers "what is the ground elevation at (lat, lon)?" from SRTM3 tiles."""

    def __init__(
        self,
        area_index: AreaIndex | None = None,
        cache_dir: str | Path = DEFAULT_CACHE_DIR,
        downloader: Downloader | None = None,
        tile_cache: TileCache | None = None,
        base_url: str = DEFAULT_BASE_URL,
        width: int = TILE_WIDTH,
    ) -> None:
        self.area_index = area_index if area_index is not None else load_bundled_area_index()
        self.tile_cache = tile_cache if tile_cache is not None else TileCache()
        self.width = width
        self.fetcher = TileFetcher(
            self.area_index,
            cache_dir,
            downloader=downloader,
            base_url=base_url,
            width=width,
        )

    @classmethod
    def from_settings(
        cls,
        settings: SRTMSettings,
        downloader: Downloader | None = None,
    ) -> "SRTMElevationProvider":
        """Build a provider from SRTMSettings (see SRTMSettings.from_env)."""
        return cls(
            area_index=load_bundled_area_index(settings.area_names_dir),
            cache_dir=settings.cache_dir,
            downloader=downloader or HttpDownloader(timeout_s=settings.download_timeout_s),
            tile_cache=TileCache(max_tiles=settings.cache_max_tiles),
            base_url=settings.base_url,
        )

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def cache_dir(self) -> Path:
        return self.fetcher.cache_dir

    def set_cache_dir(self, cache_dir: str | Path) -> None:
        """
        Point the archive cache at another directory, creating it if needed.

        Raises:
            ConfigurationError: if the path is not a directory
        """
        self.fetcher.cache_dir = prepare_cache_dir(cache_dir)

    def set_downloader(self, downloader: Downloader) -> None:
        self.fetcher.downloader = downloader

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_tile(self, lat: float, lon: float) -> HeightTile:
        """
        Decoded tile containing (lat, lon), loading it on first use.

        Raises:
            ValueError: coordinate outside the geographic domain
            AreaNotFound: coordinate outside dataset coverage
            RetrievalError: archive download failed
            DecodeError: archive unreadable or truncated
        """
        validate_coordinate(lat, lon)
        key = tile_key(lat, lon)

        def load() -> HeightTile:
            min_lat, min_lon = tile_origin(lat, lon)
            samples = self.fetcher.materialize(lat, lon)
            return HeightTile(min_lat, min_lon, samples, width=self.width)

        return self.tile_cache.get_or_load(key, load)

    def height_at(self, lat: float, lon: float) -> int | None:
        """Nearest sample in metres, or None where the tile has a void."""
        return self.get_tile(lat, lon).get_height(lat, lon)

    def elevation_at(self, lat: float, lon: float) -> float:
        """Elevation in metres at (lat, lon); NaN where the data has a void."""
        height = self.height_at(lat, lon)
        if height is None:
            return math.nan
        return float(height)

    def elevations_at(self, points: list[tuple[float, float]]) -> list[float]:
        """Elevation for each (lat, lon) pair; tiles are loaded once each."""
        return [self.elevation_at(lat, lon) for lat, lon in points]
