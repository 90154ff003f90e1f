"""
Discovery tools: partition listing, coverage check, status, capabilities.

These tools require no network I/O and answer from the bundled area index
and the server configuration.
"""

import logging
import os

from ...constants import (
    AREA_PARTITIONS,
    DATASET_INFO,
    OUTPUT_FORMATS,
    PREVIEW_STYLES,
    EnvVar,
    ServerConfig,
    StorageProvider,
    SuccessMessages,
)
from ...models.responses import (
    CapabilitiesResponse,
    CoverageCheckResponse,
    ErrorResponse,
    PartitionInfo,
    PartitionsResponse,
    StatusResponse,
    format_response,
)

logger = logging.getLogger(__name__)

TOOL_COUNT = 9


def register_discovery_tools(mcp, manager):
    """Register discovery tools with the MCP server."""

    @mcp.tool()
    async def srtm_list_partitions(output_mode: str = "json") -> str:
        """List the SRTM3 regional partitions and how many tiles each one holds.

        Every 1x1 degree tile belongs to exactly one partition
        (Africa, Australia, Eurasia, Islands, North_America, South_America).

        Args:
            output_mode: "json" for structured data, "text" for human-readable summary

        Returns:
            Partitions with tile counts
        """
        try:
            partitions = [PartitionInfo(**p) for p in manager.list_partitions()]
            total = sum(p.tile_count for p in partitions)

            response = PartitionsResponse(
                partitions=partitions,
                total_tiles=total,
                message=SuccessMessages.PARTITIONS_LIST.format(len(partitions), total),
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"srtm_list_partitions failed: {e}")
            return format_response(
                ErrorResponse(error=str(e), error_type=type(e).__name__), output_mode
            )

    @mcp.tool()
    async def srtm_check_coverage(bbox: list[float], output_mode: str = "json") -> str:
        """Check which SRTM3 tiles a bounding box needs and whether the dataset has them.

        SRTM3 covers land between roughly 60N and 56S. Oceans and polar
        regions have no tiles.

        Args:
            bbox: Bounding box [west, south, east, north] in EPSG:4326
            output_mode: "json" or "text"

        Returns:
            Coverage percentage with available and missing tiles
        """
        try:
            result = manager.check_coverage(bbox)

            if result["fully_covered"]:
                message = SuccessMessages.COVERAGE_FULL.format(result["tiles_required"])
            else:
                message = SuccessMessages.COVERAGE_PARTIAL.format(
                    len(result["tile_ids"]), result["tiles_required"]
                )

            response = CoverageCheckResponse(bbox=bbox, **result, message=message)
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"srtm_check_coverage failed: {e}")
            return format_response(
                ErrorResponse(error=str(e), error_type=type(e).__name__), output_mode
            )

    @mcp.tool()
    async def srtm_status(output_mode: str = "json") -> str:
        """Get server status including version, storage configuration and tile cache usage.

        Args:
            output_mode: "json" for structured data, "text" for human-readable summary

        Returns:
            Server status information
        """
        try:
            provider = os.environ.get(EnvVar.ARTIFACTS_PROVIDER, StorageProvider.MEMORY)

            store_available = False
            try:
                manager._get_store()
                store_available = True
            except Exception:
                pass

            stats = manager.cache_stats()

            response = StatusResponse(
                server=ServerConfig.NAME,
                version=ServerConfig.VERSION,
                dataset=DATASET_INFO["name"],
                storage_provider=provider,
                artifact_store_available=store_available,
                cached_tiles=stats["tiles"],
                max_cached_tiles=stats["max_tiles"],
                cache_hits=stats["hits"],
                cache_misses=stats["misses"],
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"srtm_status failed: {e}")
            return format_response(
                ErrorResponse(error=str(e), error_type=type(e).__name__), output_mode
            )

    @mcp.tool()
    async def srtm_capabilities(output_mode: str = "json") -> str:
        """Get full server capabilities including dataset metadata, partitions,
        preview styles and output formats.

        Args:
            output_mode: "json" for structured data, "text" for human-readable summary

        Returns:
            Complete server capabilities
        """
        try:
            response = CapabilitiesResponse(
                server=ServerConfig.NAME,
                version=ServerConfig.VERSION,
                dataset=DATASET_INFO,
                partitions=AREA_PARTITIONS,
                preview_styles=PREVIEW_STYLES,
                output_formats=OUTPUT_FORMATS,
                tool_count=TOOL_COUNT,
                llm_guidance=(
                    "Use srtm_check_coverage to see whether an area has SRTM3 tiles. "
                    "Use srtm_elevation_point for a single elevation and "
                    "srtm_elevation_points for profiles or batches of [lon, lat] points. "
                    "Elevations are metres above the EGM96 geoid at ~90m spacing, "
                    "nearest sample, no interpolation. A null elevation means a data void. "
                    "Use srtm_tile_preview or srtm_tile_export to get the whole 1x1 degree "
                    "tile as a PNG or GeoTIFF artifact."
                ),
                message=f"{ServerConfig.NAME} v{ServerConfig.VERSION} capabilities",
            )
            return format_response(response, output_mode)

        except Exception as e:
            logger.error(f"srtm_capabilities failed: {e}")
            return format_response(
                ErrorResponse(error=str(e), error_type=type(e).__name__), output_mode
            )
