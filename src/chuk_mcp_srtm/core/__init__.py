"""Core tile pipeline for chuk-mcp-srtm."""

from .area_index import AreaIndex, load_area_index, load_bundled_area_index
from .elevation_provider import SRTMElevationProvider
from .height_tile import HeightTile
from .tile_cache import TileCache
from .tile_fetcher import Downloader, HttpDownloader, TileFetcher, decode_hgt_archive
from .tile_locator import canonical_name, floor_coord, tile_key, tile_origin

__all__ = [
    "AreaIndex",
    "Downloader",
    "HeightTile",
    "HttpDownloader",
    "SRTMElevationProvider",
    "TileCache",
    "TileFetcher",
    "canonical_name",
    "decode_hgt_archive",
    "floor_coord",
    "load_area_index",
    "load_bundled_area_index",
    "tile_key",
    "tile_origin",
]
