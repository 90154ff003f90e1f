"""
Constants for chuk-mcp-srtm server.

All magic strings, dataset metadata, and configuration values live here.
"""


class ServerConfig:
    NAME = "chuk-mcp-srtm"
    VERSION = "0.1.0"
    DESCRIPTION = "SRTM3 Point Elevation MCP Server"


class StorageProvider:
    MEMORY = "memory"
    FILESYSTEM = "filesystem"


class SessionProvider:
    MEMORY = "memory"


class EnvVar:
    ARTIFACTS_PROVIDER = "CHUK_ARTIFACTS_PROVIDER"
    ARTIFACTS_PATH = "CHUK_ARTIFACTS_PATH"
    MCP_STDIO = "MCP_STDIO"
    SRTM_CACHE_DIR = "SRTM_CACHE_DIR"
    SRTM_BASE_URL = "SRTM_BASE_URL"
    SRTM_CACHE_MAX_TILES = "SRTM_CACHE_MAX_TILES"
    SRTM_AREA_NAMES_DIR = "SRTM_AREA_NAMES_DIR"
    SRTM_DOWNLOAD_TIMEOUT = "SRTM_DOWNLOAD_TIMEOUT"


class Partition:
    AFRICA = "Africa"
    AUSTRALIA = "Australia"
    EURASIA = "Eurasia"
    ISLANDS = "Islands"
    NORTH_AMERICA = "North_America"
    SOUTH_AMERICA = "South_America"


# Regional groupings used by the SRTM3 v2.1 download tree
AREA_PARTITIONS = [
    Partition.AFRICA,
    Partition.AUSTRALIA,
    Partition.EURASIA,
    Partition.ISLANDS,
    Partition.NORTH_AMERICA,
    Partition.SOUTH_AMERICA,
]
AREA_NAMES_SUFFIX = "_names.txt.zip"

# Tile geometry: 1x1 degree, 3 arc-second spacing, shared edge rows/columns
TILE_WIDTH = 1201
SAMPLE_BYTES = 2

# Plausible physical band; anything outside is a void marker
MIN_VALID_HEIGHT = -1000
MAX_VALID_HEIGHT = 10000
NODATA_HEIGHT = -32768

# Floor tolerance for negative values within float noise of an integer
FLOOR_EPSILON = 1e-5

# Remote archive layout
DEFAULT_BASE_URL = "http://dds.cr.usgs.gov/srtm/version2_1/SRTM3"
ARCHIVE_SUFFIX = ".hgt.zip"
DOWNLOAD_USER_AGENT = "chuk-mcp-srtm/0.1.0"

# Local cache
DEFAULT_CACHE_DIR = "~/.cache/chuk-mcp-srtm"
DEFAULT_CACHE_MAX_TILES = 64
DOWNLOAD_CHUNK_BYTES = 1024 * 1024
DECODE_CHUNK_BYTES = 64 * 1024

# Retry (HTTP downloader only)
DEFAULT_DOWNLOAD_TIMEOUT_S = 60.0
RETRY_ATTEMPTS = 3
RETRY_WAIT_MIN = 1
RETRY_WAIT_MAX = 10

# Dataset metadata reported by discovery tools
DATASET_INFO: dict = {
    "id": "srtm3",
    "name": "SRTM3 v2.1",
    "resolution_arcsec": 3,
    "resolution_m": 90,
    "coverage": "60N-56S",
    "vertical_datum": "EGM96",
    "vertical_unit": "metres",
    "horizontal_crs": "EPSG:4326",
    "dtype": "int16",
    "nodata_value": NODATA_HEIGHT,
    "void_filled": False,
    "license": "Public Domain",
}

OUTPUT_FORMATS = ["png", "geotiff"]
PREVIEW_STYLES = ["terrain", "hillshade"]
DEFAULT_PREVIEW_STYLE = "terrain"
MAX_POINTS_PER_QUERY = 1000


class ErrorMessages:
    AREA_NOT_FOUND = "Area {} not found for {},{}"
    INVALID_LATITUDE = "Latitude {} outside [-90, 90]"
    INVALID_LONGITUDE = "Longitude {} outside [-180, 180]"
    DUPLICATE_AREA = "Duplicate area key {}: {} vs. {}"
    MALFORMED_AREA_CODE = "Malformed area code '{}' in {}"
    MISSING_AREA_RESOURCE = "Area names resource missing for partition {}"
    UNREADABLE_AREA_RESOURCE = "Cannot read area names for partition {}: {}"
    CACHE_DIR_NOT_DIRECTORY = "Cache path has to be a directory: {}"
    CACHE_DIR_NOT_CREATABLE = "Cannot create cache directory {}: {}"
    INVALID_SETTING = "Invalid value '{}' for {}: {}"
    DOWNLOAD_FAILED = "Failed to download {}: {}"
    ARCHIVE_UNREADABLE = "Cannot read tile archive {}: {}"
    ARCHIVE_EMPTY = "Tile archive {} has no entries"
    ARCHIVE_SHORT_READ = "Tile archive {} is truncated: {} of {} bytes"
    ARCHIVE_TOO_LONG = "Tile archive {} holds more than {} bytes"
    OUTSIDE_TILE = "Coordinate {},{} outside tile {}"
    INVALID_BBOX = "Invalid bounding box: must be [west, south, east, north]"
    INVALID_BBOX_VALUES = "Invalid bounding box values: west ({}) must be < east ({})"
    INVALID_BBOX_LAT = "Invalid bounding box values: south ({}) must be < north ({})"
    NO_POINTS = "At least one [lon, lat] point is required"
    TOO_MANY_POINTS = "Too many points ({}); limit is {}"
    INVALID_POINT = "Point {} must be a [lon, lat] pair"
    INVALID_PREVIEW_STYLE = "Invalid preview style '{}'. Available: {}"
    NO_ARTIFACT_STORE = (
        "No artifact store available. Configure CHUK_ARTIFACTS_PROVIDER "
        "environment variable (memory or filesystem)."
    )


class SuccessMessages:
    POINT_ELEVATION = "Elevation at point: {:.1f}m"
    POINT_NO_DATA = "No elevation data at point (void sample)"
    POINTS_ELEVATION = "Retrieved elevation for {} points ({} void)"
    PARTITIONS_LIST = "{} partitions covering {} tiles"
    COVERAGE_FULL = "Full coverage: {} tiles"
    COVERAGE_PARTIAL = "Partial coverage: {} of {} tiles"
    TILE_INFO = "Tile {} ({} void samples)"
    TILE_PREVIEW = "Tile {} rendered to PNG"
    TILE_EXPORT = "Tile {} exported as {}"
