"""
Raster output for decoded SRTM tiles.

All functions are synchronous; callers wrap them in asyncio.to_thread().
Handles GeoTIFF export, terrain-coloured and hillshade PNG rendering.
"""

import io
import math
from typing import Any

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from ..constants import NODATA_HEIGHT
from .height_tile import HeightTile

# Type aliases
FloatArray = NDArray[np.floating[Any]]
Transform = Any  # rasterio.Affine

METRES_PER_DEGREE = 111320.0


# ---------------------------------------------------------------------------
# Georeferencing
# ---------------------------------------------------------------------------


def tile_transform(tile: HeightTile) -> Transform:
    """
    Affine transform for a tile.

    SRTM samples sit on grid nodes, so pixel centres line up with the tile
    edges and the raster extends half a sample beyond the 1x1 degree cell.
    """
    from rasterio.transform import from_origin

    res = 1.0 / (tile.width - 1)
    return from_origin(tile.min_lon - res / 2.0, tile.min_lat + 1 + res / 2.0, res, res)


def tile_cell_size_m(tile: HeightTile) -> tuple[float, float]:
    """(x, y) sample spacing in metres at the tile's mid latitude."""
    res = 1.0 / (tile.width - 1)
    mid_lat = tile.min_lat + 0.5
    return (
        res * METRES_PER_DEGREE * math.cos(math.radians(mid_lat)),
        res * METRES_PER_DEGREE,
    )


# ---------------------------------------------------------------------------
# Output conversion
# ---------------------------------------------------------------------------


def tile_to_geotiff(tile: HeightTile) -> bytes:
    """
    Convert a tile to int16 GeoTIFF bytes in EPSG:4326.

    Voids keep the SRTM nodata value and are flagged as nodata in the file.
    """
    from rasterio.crs import CRS
    from rasterio.io import MemoryFile

    memfile = MemoryFile()
    with memfile.open(
        driver="GTiff",
        height=tile.width,
        width=tile.width,
        count=1,
        dtype="int16",
        crs=CRS.from_epsg(4326),
        transform=tile_transform(tile),
        nodata=NODATA_HEIGHT,
    ) as dst:
        dst.write(tile.heights[np.newaxis, :])

    return memfile.read()


def compute_hillshade(
    elevation: FloatArray,
    cellsize_x: float,
    cellsize_y: float,
    azimuth: float = 315.0,
    altitude: float = 45.0,
    z_factor: float = 1.0,
) -> FloatArray:
    """
    Compute hillshade (shaded relief) from elevation data.

    Uses Horn's method (1981) for slope and aspect calculation.

    Args:
        elevation: 2D elevation array (NaN for voids)
        cellsize_x: Column spacing in metres
        cellsize_y: Row spacing in metres
        azimuth: Sun azimuth in degrees from north
        altitude: Sun altitude in degrees above horizon
        z_factor: Vertical exaggeration factor

    Returns:
        Hillshade array (0-255 range as float)
    """
    padded = np.pad(elevation, 1, mode="edge")
    padded = np.nan_to_num(padded, nan=0.0)

    # Horn's method: 3x3 gradient
    dz_dx = (
        (padded[:-2, 2:] + 2 * padded[1:-1, 2:] + padded[2:, 2:])
        - (padded[:-2, :-2] + 2 * padded[1:-1, :-2] + padded[2:, :-2])
    ) / (8.0 * cellsize_x)

    dz_dy = (
        (padded[:-2, :-2] + 2 * padded[:-2, 1:-1] + padded[:-2, 2:])
        - (padded[2:, :-2] + 2 * padded[2:, 1:-1] + padded[2:, 2:])
    ) / (8.0 * cellsize_y)

    dz_dx *= z_factor
    dz_dy *= z_factor

    az_rad = math.radians(360.0 - azimuth + 90.0)
    alt_rad = math.radians(altitude)

    slope = np.arctan(np.sqrt(dz_dx**2 + dz_dy**2))
    aspect = np.arctan2(-dz_dy, dz_dx)

    hillshade = 255.0 * (
        math.cos(alt_rad) * np.cos(slope)
        + math.sin(alt_rad) * np.sin(slope) * np.cos(az_rad - aspect)
    )

    return np.clip(hillshade, 0, 255)


def tile_to_hillshade_png(tile: HeightTile) -> bytes:
    """Greyscale hillshade PNG of a tile; voids render black."""
    elevation = tile.as_float_array()
    cellsize_x, cellsize_y = tile_cell_size_m(tile)
    hs = compute_hillshade(elevation, cellsize_x, cellsize_y)
    hs[np.isnan(elevation)] = 0.0

    img = Image.fromarray(hs.astype(np.uint8))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def tile_to_terrain_png(tile: HeightTile) -> bytes:
    """Terrain-coloured PNG of a tile; voids render magenta."""
    elevation = tile.as_float_array()
    void_mask = np.isnan(elevation)
    valid = elevation[~void_mask]
    if len(valid) == 0:
        img = Image.new("L", (tile.width, tile.width), 0)
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()

    vmin, vmax = float(np.min(valid)), float(np.max(valid))
    if vmax == vmin:
        vmax = vmin + 1.0

    norm = (elevation - vmin) / (vmax - vmin)
    norm = np.clip(np.nan_to_num(norm, nan=0.0), 0.0, 1.0)

    # Simple terrain colour ramp: green -> brown -> white
    r = np.clip(norm * 2.0, 0, 1) * 200 + 55
    g = np.clip(1.0 - norm * 0.5, 0, 1) * 200 + 55
    b = np.clip(norm * 1.5 - 0.5, 0, 1) * 200 + 55

    rgb = np.stack([r, g, b], axis=-1).astype(np.uint8)
    rgb[void_mask] = [255, 0, 255]

    img = Image.fromarray(rgb)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
