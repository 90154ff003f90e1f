"""
Decoded SRTM3 tile and nearest-sample point lookup.

Heights are stored north-to-south, west-to-east: row 0 is the northern
edge (min_lat + 1), column 0 the western edge (min_lon). Adjacent tiles
share their edge rows and columns.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import NDArray

from ..constants import NODATA_HEIGHT, TILE_WIDTH, ErrorMessages
from .tile_locator import format_tile_name

HeightArray = NDArray[np.int16]


class HeightTile:
    """One fully decoded 1x1 degree tile. Immutable once constructed."""

    __slots__ = ("min_lat", "min_lon", "width", "_heights")

    def __init__(
        self,
        min_lat: int,
        min_lon: int,
        heights: HeightArray,
        width: int = TILE_WIDTH,
    ) -> None:
        heights = np.asarray(heights, dtype=np.int16)
        if heights.shape == (width * width,):
            heights = heights.reshape(width, width)
        if heights.shape != (width, width):
            raise ValueError(f"Expected {width}x{width} heights, got shape {heights.shape}")

        heights = heights.copy()
        heights.setflags(write=False)

        self.min_lat = int(min_lat)
        self.min_lon = int(min_lon)
        self.width = width
        self._heights = heights

    @property
    def heights(self) -> HeightArray:
        """Read-only (width, width) int16 grid; NODATA_HEIGHT marks voids."""
        return self._heights

    @property
    def name(self) -> str:
        return format_tile_name(self.min_lat, self.min_lon)

    @property
    def nbytes(self) -> int:
        return int(self._heights.nbytes)

    def sample_index(self, lat: float, lon: float) -> tuple[int, int]:
        """
        Row/column of the sample nearest to (lat, lon).

        Raises:
            ValueError: if the coordinate falls outside this tile
        """
        last = self.width - 1
        row = int(round((self.min_lat + 1 - lat) * last))
        col = int(round((lon - self.min_lon) * last))
        if not (0 <= row < self.width and 0 <= col < self.width):
            raise ValueError(ErrorMessages.OUTSIDE_TILE.format(lat, lon, self.name))
        return row, col

    def get_height(self, lat: float, lon: float) -> int | None:
        """Elevation in metres at the nearest sample, or None for a void."""
        row, col = self.sample_index(lat, lon)
        value = int(self._heights[row, col])
        if value == NODATA_HEIGHT:
            return None
        return value

    def void_count(self) -> int:
        return int(np.count_nonzero(self._heights == NODATA_HEIGHT))

    def elevation_range(self) -> list[float]:
        """[min, max] over valid samples; [0.0, 0.0] for an all-void tile."""
        valid = self._heights[self._heights != NODATA_HEIGHT]
        if valid.size == 0:
            return [0.0, 0.0]
        return [float(valid.min()), float(valid.max())]

    def as_float_array(self) -> NDArray[np.float32]:
        """float32 copy with voids as NaN, for raster output."""
        data = self._heights.astype(np.float32)
        data[self._heights == NODATA_HEIGHT] = np.nan
        return data

    def bounds(self) -> list[float]:
        """[west, south, east, north] in EPSG:4326."""
        return [
            float(self.min_lon),
            float(self.min_lat),
            float(self.min_lon + 1),
            float(self.min_lat + 1),
        ]

    def describe(self) -> dict[str, Any]:
        return {
            "tile": self.name,
            "min_lat": self.min_lat,
            "min_lon": self.min_lon,
            "width": self.width,
            "bounds": self.bounds(),
            "elevation_range": self.elevation_range(),
            "void_samples": self.void_count(),
        }

    def __repr__(self) -> str:
        return f"HeightTile({self.name}, width={self.width})"
