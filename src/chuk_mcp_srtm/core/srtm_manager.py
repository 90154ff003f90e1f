"""
SRTM Manager: async orchestrator behind the MCP tools.

Owns the elevation provider, validates tool input, and stores rendered
tiles in the artifact store. Blocking tile I/O runs via asyncio.to_thread().
"""

import asyncio
import logging
import math
import uuid
from dataclasses import dataclass
from typing import Any

from ..constants import (
    DEFAULT_PREVIEW_STYLE,
    MAX_POINTS_PER_QUERY,
    PREVIEW_STYLES,
    ErrorMessages,
)
from ..settings import SRTMSettings
from .elevation_provider import SRTMElevationProvider
from .tile_locator import format_tile_name, tile_key

logger = logging.getLogger(__name__)


@dataclass
class PointResult:
    """Result of a single-point elevation query."""

    elevation_m: float
    tile: str
    void: bool


@dataclass
class MultiPointResult:
    """Result of a multi-point elevation query."""

    elevations: list[float]
    elevation_range: list[float]
    void_count: int
    tiles: list[str]


@dataclass
class TileArtifactResult:
    """Result of rendering or exporting a tile to the artifact store."""

    artifact_ref: str
    tile: str
    format: str
    size_bytes: int


class SRTMManager:
    """Central manager for SRTM elevation operations."""

    def __init__(
        self,
        provider: SRTMElevationProvider | None = None,
        settings: SRTMSettings | None = None,
    ) -> None:
        self._provider = provider
        self._settings = settings

    @property
    def provider(self) -> SRTMElevationProvider:
        """Elevation provider, built from the environment on first use."""
        if self._provider is None:
            settings = self._settings or SRTMSettings.from_env()
            self._provider = SRTMElevationProvider.from_settings(settings)
            logger.info(
                f"Elevation provider ready (cache: {settings.cache_dir}, "
                f"max tiles: {settings.cache_max_tiles or 'unbounded'})"
            )
        return self._provider

    # ------------------------------------------------------------------
    # Discovery (sync, no I/O)
    # ------------------------------------------------------------------

    def list_partitions(self) -> list[dict]:
        """Partitions of the SRTM3 tree with their tile counts."""
        counts = self.provider.area_index.partition_counts()
        return [{"name": name, "tile_count": count} for name, count in counts.items()]

    def check_coverage(self, bbox: list[float]) -> dict:
        """Which tiles a bounding box needs and which of them the dataset has."""
        self._validate_bbox(bbox)
        area_index = self.provider.area_index

        west, south, east, north = bbox
        available: list[str] = []
        missing: list[str] = []

        lat = math.floor(south)
        while lat < north:
            lon = math.floor(west)
            while lon < east:
                name = format_tile_name(lat, lon)
                if area_index.covers(lat, lon):
                    partition = area_index.lookup_partition(lat, lon)
                    available.append(f"{partition}/{name}")
                else:
                    missing.append(name)
                lon += 1
            lat += 1

        total = len(available) + len(missing)
        coverage_pct = (len(available) / total) * 100.0 if total else 0.0
        return {
            "fully_covered": total > 0 and not missing,
            "coverage_percentage": round(coverage_pct, 1),
            "tiles_required": total,
            "tile_ids": available,
            "missing_tiles": missing,
        }

    def cache_stats(self) -> dict:
        if self._provider is None:
            return {"tiles": 0, "max_tiles": None, "hits": 0, "misses": 0, "evictions": 0}
        return self._provider.tile_cache.stats()

    # ------------------------------------------------------------------
    # Elevation queries (async)
    # ------------------------------------------------------------------

    async def fetch_point(self, lon: float, lat: float) -> PointResult:
        """Get elevation at a single point."""
        value = await asyncio.to_thread(self.provider.elevation_at, lat, lon)
        return PointResult(
            elevation_m=value,
            tile=format_tile_name(lat, lon),
            void=math.isnan(value),
        )

    async def fetch_points(self, points: list[list[float]]) -> MultiPointResult:
        """Get elevations at multiple [lon, lat] points."""
        self._validate_points(points)

        pairs = [(p[1], p[0]) for p in points]
        values = await asyncio.to_thread(self.provider.elevations_at, pairs)

        valid_values = [v for v in values if not math.isnan(v)]
        if valid_values:
            elev_range = [min(valid_values), max(valid_values)]
        else:
            elev_range = [0.0, 0.0]

        tiles: dict[int, str] = {}
        for lat, lon in pairs:
            tiles.setdefault(tile_key(lat, lon), format_tile_name(lat, lon))

        return MultiPointResult(
            elevations=values,
            elevation_range=elev_range,
            void_count=len(values) - len(valid_values),
            tiles=list(tiles.values()),
        )

    async def tile_info(self, lon: float, lat: float) -> dict:
        """Load the tile containing a point and describe it."""
        tile = await asyncio.to_thread(self.provider.get_tile, lat, lon)
        info = tile.describe()
        info["archive_url"] = self.provider.fetcher.archive_url(lat, lon)
        info["archive_path"] = str(self.provider.fetcher.archive_path(lat, lon))
        return info

    # ------------------------------------------------------------------
    # Rendering (async, artifact store)
    # ------------------------------------------------------------------

    async def tile_preview(
        self,
        lon: float,
        lat: float,
        style: str = DEFAULT_PREVIEW_STYLE,
    ) -> TileArtifactResult:
        """Render the tile containing a point to PNG and store it."""
        from . import raster_io

        if style not in PREVIEW_STYLES:
            raise ValueError(
                ErrorMessages.INVALID_PREVIEW_STYLE.format(style, ", ".join(PREVIEW_STYLES))
            )

        tile = await asyncio.to_thread(self.provider.get_tile, lat, lon)
        if style == "hillshade":
            render = raster_io.tile_to_hillshade_png
        else:
            render = raster_io.tile_to_terrain_png
        png_bytes = await asyncio.to_thread(render, tile)

        ref = await self._store_raster(
            png_bytes,
            {
                "type": "srtm_preview",
                "tile": tile.name,
                "style": style,
                "format": "png",
                "bounds": tile.bounds(),
            },
            suffix=f"_{style}.png",
        )
        return TileArtifactResult(
            artifact_ref=ref, tile=tile.name, format="png", size_bytes=len(png_bytes)
        )

    async def tile_export(self, lon: float, lat: float) -> TileArtifactResult:
        """Export the tile containing a point as a GeoTIFF artifact."""
        from . import raster_io

        tile = await asyncio.to_thread(self.provider.get_tile, lat, lon)
        tif_bytes = await asyncio.to_thread(raster_io.tile_to_geotiff, tile)

        ref = await self._store_raster(
            tif_bytes,
            {
                "schema_version": "1.0",
                "type": "srtm_tile",
                "tile": tile.name,
                "crs": "EPSG:4326",
                "bounds": tile.bounds(),
                "shape": [tile.width, tile.width],
                "dtype": "int16",
                "elevation_range": tile.elevation_range(),
                "void_samples": tile.void_count(),
            },
            suffix=".tif",
        )
        return TileArtifactResult(
            artifact_ref=ref, tile=tile.name, format="geotiff", size_bytes=len(tif_bytes)
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _validate_bbox(self, bbox: list[float]) -> None:
        """Validate bounding box."""
        if len(bbox) != 4:
            raise ValueError(ErrorMessages.INVALID_BBOX)
        west, south, east, north = bbox
        if west >= east:
            raise ValueError(ErrorMessages.INVALID_BBOX_VALUES.format(west, east))
        if south >= north:
            raise ValueError(ErrorMessages.INVALID_BBOX_LAT.format(south, north))

    def _validate_points(self, points: list[list[float]]) -> None:
        if not points:
            raise ValueError(ErrorMessages.NO_POINTS)
        if len(points) > MAX_POINTS_PER_QUERY:
            raise ValueError(
                ErrorMessages.TOO_MANY_POINTS.format(len(points), MAX_POINTS_PER_QUERY)
            )
        for p in points:
            if len(p) != 2:
                raise ValueError(ErrorMessages.INVALID_POINT.format(p))

    def _get_store(self) -> Any:
        """Get the artifact store instance."""
        from chuk_mcp_server import get_artifact_store

        store = get_artifact_store()
        if store is None:
            raise RuntimeError(ErrorMessages.NO_ARTIFACT_STORE)
        return store

    async def _store_raster(
        self,
        data: bytes,
        metadata: dict,
        suffix: str = ".tif",
    ) -> str:
        """Store raster data in the artifact store."""
        try:
            store = self._get_store()
            ref = f"srtm/{uuid.uuid4().hex[:12]}{suffix}"
            mime = "image/tiff" if suffix.endswith(".tif") else "image/png"

            await store.store(
                ref,
                data,
                mime_type=mime,
                metadata=metadata,
                summary=f"SRTM tile ({metadata.get('type', 'unknown')})",
            )
            return ref
        except Exception as e:
            logger.error(f"Failed to store raster: {e}")
            raise
