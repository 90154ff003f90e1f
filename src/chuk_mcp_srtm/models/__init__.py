"""Response models for chuk-mcp-srtm."""

from .responses import (
    CapabilitiesResponse,
    CoverageCheckResponse,
    ErrorResponse,
    MultiPointResponse,
    PartitionInfo,
    PartitionsResponse,
    PointElevationResponse,
    PointInfo,
    StatusResponse,
    TileArtifactResponse,
    TileInfoResponse,
    format_response,
)

__all__ = [
    "ErrorResponse",
    "PartitionInfo",
    "PartitionsResponse",
    "CoverageCheckResponse",
    "PointElevationResponse",
    "PointInfo",
    "MultiPointResponse",
    "TileInfoResponse",
    "TileArtifactResponse",
    "StatusResponse",
    "CapabilitiesResponse",
    "format_response",
]
