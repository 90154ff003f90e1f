"""Shared test fixtures for chuk-mcp-srtm."""

import io
import zipfile
from pathlib import Path

import numpy as np
import pytest
from unittest.mock import AsyncMock, MagicMock

# Small tiles keep synthetic archives tiny; geometry scales with width
TEST_WIDTH = 5

AREA_LISTS = {
    "Eurasia": "N52E004.hgt.zip\nN46E007.hgt.zip\n",
    "North_America": "N36W119.hgt.zip\n",
    "South_America": "S23W044.hgt.zip\n",
}


def make_heights(fill: int = 100, width: int = TEST_WIDTH) -> np.ndarray:
    return np.full((width, width), fill, dtype=np.int16)


def hgt_zip_bytes(heights: np.ndarray, entry_name: str = "N52E004.hgt") -> bytes:
    """Zip archive holding one big-endian .hgt entry."""
    payload = np.asarray(heights, dtype=">i2").tobytes()
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(entry_name, payload)
    return buf.getvalue()


def write_hgt_zip(path: Path, heights: np.ndarray) -> Path:
    path = Path(path)
    path.write_bytes(hgt_zip_bytes(heights, path.name.removesuffix(".zip")))
    return path


class CountingDownloader:
    """Serves archives from memory and records every fetch."""

    def __init__(self, archives: dict[str, bytes]) -> None:
        self.archives = archives
        self.calls: list[str] = []

    @property
    def count(self) -> int:
        return len(self.calls)

    def fetch(self, url: str, dest_path: str) -> None:
        self.calls.append(url)
        name = url.rsplit("/", 1)[-1]
        if name not in self.archives:
            raise FileNotFoundError(f"404 {url}")
        Path(dest_path).write_bytes(self.archives[name])


@pytest.fixture
def area_index():
    """Synthetic area index with a handful of tiles."""
    from chuk_mcp_srtm.core.area_index import load_area_index

    return load_area_index({name: text.encode() for name, text in AREA_LISTS.items()})


@pytest.fixture
def dutch_heights():
    """
    5x5 grid for N52E004.

    (52.88, 4.63) lands on row 0, col 3 -> 1223
    (52.5, 4.5) lands on row 2, col 2 -> 20000 (out of range, void)
    (52.0, 4.99) lands on row 4, col 4 -> -32768 (void)
    """
    heights = make_heights(10)
    heights[0, 3] = 1223
    heights[2, 2] = 20000
    heights[4, 4] = -32768
    heights[1, 0] = -5
    return heights


@pytest.fixture
def alpine_heights():
    heights = make_heights(2000)
    heights[0, 0] = 4000
    return heights


@pytest.fixture
def downloader(dutch_heights, alpine_heights):
    return CountingDownloader(
        {
            "N52E004.hgt.zip": hgt_zip_bytes(dutch_heights, "N52E004.hgt"),
            "N46E007.hgt.zip": hgt_zip_bytes(alpine_heights, "N46E007.hgt"),
        }
    )


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "srtm-cache"


@pytest.fixture
def provider(area_index, downloader, cache_dir):
    """Elevation provider wired to the synthetic index and downloader."""
    from chuk_mcp_srtm.core.elevation_provider import SRTMElevationProvider
    from chuk_mcp_srtm.core.tile_cache import TileCache

    return SRTMElevationProvider(
        area_index=area_index,
        cache_dir=cache_dir,
        downloader=downloader,
        tile_cache=TileCache(max_tiles=4),
        base_url="http://example.test/SRTM3",
        width=TEST_WIDTH,
    )


@pytest.fixture
def mock_artifact_store():
    """Mock artifact store."""
    store = AsyncMock()
    store.store = AsyncMock(return_value=None)
    store.retrieve = AsyncMock(return_value=b"fake-geotiff-bytes")
    return store


@pytest.fixture
def mock_manager(provider, mock_artifact_store):
    """SRTMManager over the synthetic provider with mocked store."""
    from chuk_mcp_srtm.core.srtm_manager import SRTMManager

    manager = SRTMManager(provider=provider)
    manager._get_store = MagicMock(return_value=mock_artifact_store)
    return manager


@pytest.fixture
def mock_mcp():
    """Mock ChukMCPServer."""
    mcp = MagicMock()
    mcp.tool = MagicMock(return_value=lambda fn: fn)
    return mcp
