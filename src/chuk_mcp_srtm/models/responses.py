"""
Response models for chuk-mcp-srtm tools.

All tool responses are Pydantic models for type safety and consistent API.
Void samples are reported as elevation_m = null rather than NaN.
"""

import math

from pydantic import BaseModel, ConfigDict, Field


def format_response(model: BaseModel, output_mode: str = "json") -> str:
    """Format a response model as JSON or human-readable text.

    Args:
        model: Pydantic response model instance
        output_mode: "json" (default) or "text"

    Returns:
        Formatted string
    """
    if output_mode == "text" and hasattr(model, "to_text"):
        return str(model.to_text())
    return str(model.model_dump_json())


def nan_to_none(value: float) -> float | None:
    """Map NaN (void sample) to None for JSON output."""
    return None if math.isnan(value) else value


def _fmt_elevation(value: float | None) -> str:
    return "no data" if value is None else f"{value:.1f}m"


class ErrorResponse(BaseModel):
    """Error response model for tool failures."""

    model_config = ConfigDict(extra="forbid")

    error: str = Field(..., description="Error message describing what went wrong")
    error_type: str | None = Field(None, description="Exception class name")

    def to_text(self) -> str:
        return f"Error: {self.error}"


class PartitionInfo(BaseModel):
    """Summary of one SRTM3 partition."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., description="Partition name (e.g., Eurasia)")
    tile_count: int = Field(..., description="Number of tiles listed for the partition", ge=0)

    def to_text(self) -> str:
        return f"{self.name}: {self.tile_count} tiles"


class PartitionsResponse(BaseModel):
    """Response model for listing SRTM3 partitions."""

    model_config = ConfigDict(extra="forbid")

    partitions: list[PartitionInfo] = Field(..., description="Partitions with tile counts")
    total_tiles: int = Field(..., description="Tiles across all partitions", ge=0)
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        lines = [self.message, ""]
        for p in self.partitions:
            lines.append(f"  {p.to_text()}")
        return "\n".join(lines)


class CoverageCheckResponse(BaseModel):
    """Response model for checking SRTM3 coverage over an area."""

    model_config = ConfigDict(extra="forbid")

    bbox: list[float] = Field(..., description="Requested bounding box [west, south, east, north]")
    fully_covered: bool = Field(..., description="Whether every tile in the bbox exists")
    coverage_percentage: float = Field(
        ..., description="Percentage of tiles available", ge=0, le=100
    )
    tiles_required: int = Field(..., description="Number of 1x1 degree tiles in the bbox", ge=0)
    tile_ids: list[str] = Field(..., description="Available tiles as Partition/N00E000")
    missing_tiles: list[str] = Field(..., description="Tiles the dataset does not cover")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        status = (
            "fully covered" if self.fully_covered else f"{self.coverage_percentage:.1f}% covered"
        )
        bbox_str = ", ".join(f"{b:.4f}" for b in self.bbox)
        lines = [
            f"Area: [{bbox_str}]",
            f"Status: {status}",
            f"Tiles required: {self.tiles_required}",
        ]
        if self.tile_ids:
            lines.append(f"Tile IDs: {', '.join(self.tile_ids[:10])}")
            if len(self.tile_ids) > 10:
                lines.append(f"  ... and {len(self.tile_ids) - 10} more")
        if self.missing_tiles:
            lines.append(f"Missing: {', '.join(self.missing_tiles[:10])}")
            if len(self.missing_tiles) > 10:
                lines.append(f"  ... and {len(self.missing_tiles) - 10} more")
        return "\n".join(lines)


class PointElevationResponse(BaseModel):
    """Response model for single-point elevation query."""

    model_config = ConfigDict(extra="forbid")

    lon: float = Field(..., description="Longitude")
    lat: float = Field(..., description="Latitude")
    elevation_m: float | None = Field(..., description="Elevation in metres (null for a void)")
    tile: str = Field(..., description="Tile name (e.g., N52E004)")
    void: bool = Field(..., description="True when the nearest sample is a data void")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        lines = [
            f"Elevation at ({self.lon:.6f}, {self.lat:.6f}): {_fmt_elevation(self.elevation_m)}",
            f"Tile: {self.tile}",
        ]
        if self.void:
            lines.append("WARNING: nearest sample is a data void")
        return "\n".join(lines)


class PointInfo(BaseModel):
    """Elevation data for a single point in a multi-point query."""

    model_config = ConfigDict(extra="forbid")

    lon: float = Field(..., description="Longitude")
    lat: float = Field(..., description="Latitude")
    elevation_m: float | None = Field(..., description="Elevation in metres (null for a void)")


class MultiPointResponse(BaseModel):
    """Response model for multi-point elevation query."""

    model_config = ConfigDict(extra="forbid")

    point_count: int = Field(..., description="Number of points queried", ge=1)
    points: list[PointInfo] = Field(..., description="Elevation results per point")
    elevation_range: list[float] = Field(..., description="[min, max] elevation across all points")
    void_count: int = Field(..., description="Points whose nearest sample is a void", ge=0)
    tiles: list[str] = Field(..., description="Tiles touched by the query")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        elev_min, elev_max = self.elevation_range
        lines = [
            f"Elevation for {self.point_count} point(s)",
            f"Range: {elev_min:.1f}m to {elev_max:.1f}m",
            f"Tiles: {', '.join(self.tiles)}",
            "",
        ]
        for p in self.points:
            lines.append(f"  ({p.lon:.6f}, {p.lat:.6f}): {_fmt_elevation(p.elevation_m)}")
        if self.void_count:
            lines.append(f"WARNING: {self.void_count} point(s) fell on data voids")
        return "\n".join(lines)


class TileInfoResponse(BaseModel):
    """Response model describing a decoded tile."""

    model_config = ConfigDict(extra="forbid")

    tile: str = Field(..., description="Tile name (e.g., N52E004)")
    min_lat: int = Field(..., description="Latitude of the southern edge")
    min_lon: int = Field(..., description="Longitude of the western edge")
    width: int = Field(..., description="Samples per side", ge=2)
    bounds: list[float] = Field(..., description="[west, south, east, north]")
    elevation_range: list[float] = Field(..., description="[min, max] valid elevation in metres")
    void_samples: int = Field(..., description="Number of void samples", ge=0)
    archive_url: str = Field(..., description="Remote .hgt.zip location")
    archive_path: str = Field(..., description="Local cached archive path")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        elev_min, elev_max = self.elevation_range
        lines = [
            f"Tile {self.tile} ({self.width}x{self.width})",
            f"Bounds: {', '.join(f'{b:.1f}' for b in self.bounds)}",
            f"Elevation: {elev_min:.0f}m to {elev_max:.0f}m",
            f"Void samples: {self.void_samples}",
            f"Archive: {self.archive_url}",
            f"Cached at: {self.archive_path}",
        ]
        return "\n".join(lines)


class TileArtifactResponse(BaseModel):
    """Response model for tile preview/export artifacts."""

    model_config = ConfigDict(extra="forbid")

    tile: str = Field(..., description="Tile name (e.g., N52E004)")
    artifact_ref: str = Field(..., description="Artifact store reference")
    format: str = Field(..., description="Artifact format (png or geotiff)")
    size_bytes: int = Field(..., description="Artifact size in bytes", ge=0)
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        lines = [
            self.message,
            f"Artifact: {self.artifact_ref}",
            f"Format: {self.format} ({self.size_bytes / 1024:.1f} KB)",
        ]
        return "\n".join(lines)


class StatusResponse(BaseModel):
    """Response model for server status queries."""

    model_config = ConfigDict(extra="forbid")

    server: str = Field(default="chuk-mcp-srtm", description="Server name")
    version: str = Field(default="0.1.0", description="Server version")
    dataset: str = Field(..., description="Dataset served")
    storage_provider: str = Field(..., description="Active storage provider (memory/filesystem)")
    artifact_store_available: bool = Field(
        default=False, description="Whether artifact store is available"
    )
    cached_tiles: int = Field(default=0, description="Decoded tiles held in memory", ge=0)
    max_cached_tiles: int | None = Field(None, description="Tile cache bound (null = unbounded)")
    cache_hits: int = Field(default=0, description="Tile cache hits", ge=0)
    cache_misses: int = Field(default=0, description="Tile cache misses", ge=0)

    def to_text(self) -> str:
        store_status = "available" if self.artifact_store_available else "not available"
        bound = self.max_cached_tiles if self.max_cached_tiles is not None else "unbounded"
        lines = [
            f"{self.server} v{self.version}",
            f"Dataset: {self.dataset}",
            f"Storage: {self.storage_provider}",
            f"Artifact store: {store_status}",
            f"Tile cache: {self.cached_tiles}/{bound} "
            f"({self.cache_hits} hits, {self.cache_misses} misses)",
        ]
        return "\n".join(lines)


class CapabilitiesResponse(BaseModel):
    """Response model for server capabilities listing."""

    model_config = ConfigDict(extra="forbid")

    server: str = Field(..., description="Server name")
    version: str = Field(..., description="Server version")
    dataset: dict = Field(..., description="Dataset metadata")
    partitions: list[str] = Field(..., description="SRTM3 partition names")
    preview_styles: list[str] = Field(..., description="Available tile preview styles")
    output_formats: list[str] = Field(..., description="Supported artifact formats")
    tool_count: int = Field(..., description="Number of available tools", ge=0)
    llm_guidance: str = Field(..., description="LLM-friendly usage guidance for the server")
    message: str = Field(..., description="Operation result message")

    def to_text(self) -> str:
        lines = [
            f"{self.server} v{self.version}",
            f"Tools: {self.tool_count}",
            f"Dataset: {self.dataset.get('name', 'unknown')}",
            f"Partitions: {', '.join(self.partitions)}",
            f"Preview styles: {', '.join(self.preview_styles)}",
            f"Output formats: {', '.join(self.output_formats)}",
            "",
            self.llm_guidance,
        ]
        return "\n".join(lines)
