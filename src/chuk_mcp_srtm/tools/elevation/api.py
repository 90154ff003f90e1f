"""
Elevation tools: point and multi-point queries, tile info, preview, export.

These tools may download SRTM3 archives on first use of a tile. Rendered
tiles are stored in the artifact store.
"""

import logging

from ...constants import DEFAULT_PREVIEW_STYLE, SuccessMessages
from ...models.responses import (
    ErrorResponse,
    MultiPointResponse,
    PointElevationResponse,
    PointInfo,
    TileArtifactResponse,
    TileInfoResponse,
    format_response,
    nan_to_none,
)

logger = logging.getLogger(__name__)


def register_elevation_tools(mcp, manager):
    """Register elevation tools with the MCP server."""

    @mcp.tool()
    async def srtm_elevation_point(lon: float, lat: float, output_mode: str = "json") -> str:
        """Get ground elevation at a single geographic point from SRTM3 (~90m).

        Returns the nearest 3 arc-second sample. Elevation is null where
        the dataset has a void.

        Args:
            lon: Longitude (-180 to 180)
            lat: Latitude (-90 to 90)
            output_mode: "json" or "text"

        Returns:
            Elevation in metres and the tile it came from
        """
        try:
            result = await manager.fetch_point(lon=lon, lat=lat)
            elevation = nan_to_none(result.elevation_m)

            if elevation is None:
                message = SuccessMessages.POINT_NO_DATA
            else:
                message = SuccessMessages.POINT_ELEVATION.format(elevation)

            response = PointElevationResponse(
                lon=lon,
                lat=lat,
                elevation_m=elevation,
                tile=result.tile,
                void=result.void,
                message=message,
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"srtm_elevation_point failed: {e}")
            return format_response(
                ErrorResponse(error=str(e), error_type=type(e).__name__), output_mode
            )

    @mcp.tool()
    async def srtm_elevation_points(points: list[list[float]], output_mode: str = "json") -> str:
        """Get elevations at multiple geographic points (profiles, batches).

        Each tile is downloaded and decoded at most once for the whole batch.

        Args:
            points: List of [lon, lat] pairs
            output_mode: "json" or "text"

        Returns:
            Elevation per point with overall range and void count
        """
        try:
            result = await manager.fetch_points(points)

            point_infos = [
                PointInfo(lon=p[0], lat=p[1], elevation_m=nan_to_none(elev))
                for p, elev in zip(points, result.elevations)
            ]

            response = MultiPointResponse(
                point_count=len(points),
                points=point_infos,
                elevation_range=result.elevation_range,
                void_count=result.void_count,
                tiles=result.tiles,
                message=SuccessMessages.POINTS_ELEVATION.format(len(points), result.void_count),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"srtm_elevation_points failed: {e}")
            return format_response(
                ErrorResponse(error=str(e), error_type=type(e).__name__), output_mode
            )

    @mcp.tool()
    async def srtm_tile_info(lon: float, lat: float, output_mode: str = "json") -> str:
        """Describe the SRTM3 tile containing a point: bounds, elevation range, voids.

        Args:
            lon: Longitude (-180 to 180)
            lat: Latitude (-90 to 90)
            output_mode: "json" or "text"

        Returns:
            Tile metadata including archive location
        """
        try:
            info = await manager.tile_info(lon=lon, lat=lat)
            response = TileInfoResponse(
                **info,
                message=SuccessMessages.TILE_INFO.format(info["tile"], info["void_samples"]),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"srtm_tile_info failed: {e}")
            return format_response(
                ErrorResponse(error=str(e), error_type=type(e).__name__), output_mode
            )

    @mcp.tool()
    async def srtm_tile_preview(
        lon: float,
        lat: float,
        style: str = DEFAULT_PREVIEW_STYLE,
        output_mode: str = "json",
    ) -> str:
        """Render the SRTM3 tile containing a point to a PNG artifact.

        Args:
            lon: Longitude (-180 to 180)
            lat: Latitude (-90 to 90)
            style: "terrain" (colour ramp, voids magenta) or "hillshade"
            output_mode: "json" or "text"

        Returns:
            Artifact reference of the PNG
        """
        try:
            result = await manager.tile_preview(lon=lon, lat=lat, style=style)
            response = TileArtifactResponse(
                tile=result.tile,
                artifact_ref=result.artifact_ref,
                format=result.format,
                size_bytes=result.size_bytes,
                message=SuccessMessages.TILE_PREVIEW.format(result.tile),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"srtm_tile_preview failed: {e}")
            return format_response(
                ErrorResponse(error=str(e), error_type=type(e).__name__), output_mode
            )

    @mcp.tool()
    async def srtm_tile_export(lon: float, lat: float, output_mode: str = "json") -> str:
        """Export the SRTM3 tile containing a point as an int16 GeoTIFF artifact.

        Voids keep the SRTM nodata value (-32768).

        Args:
            lon: Longitude (-180 to 180)
            lat: Latitude (-90 to 90)
            output_mode: "json" or "text"

        Returns:
            Artifact reference of the GeoTIFF
        """
        try:
            result = await manager.tile_export(lon=lon, lat=lat)
            response = TileArtifactResponse(
                tile=result.tile,
                artifact_ref=result.artifact_ref,
                format=result.format,
                size_bytes=result.size_bytes,
                message=SuccessMessages.TILE_EXPORT.format(result.tile, result.format),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"srtm_tile_export failed: {e}")
            return format_response(
                ErrorResponse(error=str(e), error_type=type(e).__name__), output_mode
            )
