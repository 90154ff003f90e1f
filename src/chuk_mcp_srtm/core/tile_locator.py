"""
Tile addressing for the SRTM3 per-degree grid.

Pure functions mapping a (lat, lon) pair to a bucket key, a tile origin
and the canonical "<Partition>/N52E004" name used both as the remote path
suffix and as the local file stem.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from ..constants import FLOOR_EPSILON, ErrorMessages

if TYPE_CHECKING:
    from .area_index import AreaIndex


def floor_coord(value: float) -> int:
    """
    Floor a coordinate, tolerating float noise at integer boundaries.

    A negative value less than FLOOR_EPSILON away from the integer above it
    maps to that integer, e.g. -4.000001 -> -4 rather than -5.
    """
    truncated = int(value)
    if value >= 0 or truncated - value < FLOOR_EPSILON:
        return truncated
    return truncated - 1


def validate_coordinate(lat: float, lon: float) -> None:
    """Raise ValueError for coordinates outside the geographic domain."""
    if math.isnan(lat) or not -90.0 <= lat <= 90.0:
        raise ValueError(ErrorMessages.INVALID_LATITUDE.format(lat))
    if math.isnan(lon) or not -180.0 <= lon <= 180.0:
        raise ValueError(ErrorMessages.INVALID_LONGITUDE.format(lon))


def bucket_key(lat_deg: int, lon_deg: int) -> int:
    """Encode an integer 1x1 degree cell as a single int."""
    return (lat_deg + 90) * 1000 + (lon_deg + 180)


def tile_key(lat: float, lon: float) -> int:
    """Key of the 1x1 degree cell containing (lat, lon)."""
    return bucket_key(floor_coord(lat), floor_coord(lon))


def tile_origin(lat: float, lon: float) -> tuple[int, int]:
    """Lower-left (south-west) corner of the tile containing (lat, lon)."""
    return floor_coord(lat), floor_coord(lon)


def format_tile_name(lat: float, lon: float) -> str:
    """SRTM file stem for the tile containing (lat, lon), e.g. N52E004."""
    min_lat, min_lon = tile_origin(lat, lon)
    ns = "N" if min_lat >= 0 else "S"
    ew = "E" if min_lon >= 0 else "W"
    return f"{ns}{abs(min_lat):02d}{ew}{abs(min_lon):03d}"


def canonical_name(area_index: AreaIndex, lat: float, lon: float) -> str:
    """
    Partition-qualified tile name, e.g. "Eurasia/N52E004".

    Raises:
        AreaNotFound: if no partition covers the tile
    """
    partition = area_index.lookup_partition(lat, lon)
    return f"{partition}/{format_tile_name(lat, lon)}"
