"""Tests for chuk_mcp_srtm.tools.elevation.api module.

Covers the point, multi-point, tile info, preview and export tools against
the synthetic provider, in JSON and text modes, including error paths.
"""

import json

import pytest
from unittest.mock import AsyncMock, MagicMock

from chuk_mcp_srtm.tools.elevation.api import register_elevation_tools


# ── Fixtures ───────────────────────────────────────────────────────


@pytest.fixture
def elevation_tools(mock_manager):
    """Register elevation tools and return a dict mapping name -> coroutine function."""
    tools = {}
    mcp = MagicMock()

    def capture_tool(**kwargs):
        def decorator(fn):
            tools[fn.__name__] = fn
            return fn

        return decorator

    mcp.tool = capture_tool
    register_elevation_tools(mcp, mock_manager)
    return tools


class TestRegistration:
    def test_registers_five_tools(self, elevation_tools):
        assert set(elevation_tools) == {
            "srtm_elevation_point",
            "srtm_elevation_points",
            "srtm_tile_info",
            "srtm_tile_preview",
            "srtm_tile_export",
        }


# ── srtm_elevation_point ───────────────────────────────────────────


class TestElevationPoint:
    async def test_json(self, elevation_tools):
        data = json.loads(await elevation_tools["srtm_elevation_point"](lon=4.63, lat=52.88))
        assert data["elevation_m"] == 1223.0
        assert data["tile"] == "N52E004"
        assert data["void"] is False
        assert data["message"] == "Elevation at point: 1223.0m"

    async def test_void_is_null(self, elevation_tools):
        data = json.loads(await elevation_tools["srtm_elevation_point"](lon=4.5, lat=52.5))
        assert data["elevation_m"] is None
        assert data["void"] is True
        assert data["message"] == "No elevation data at point (void sample)"

    async def test_text(self, elevation_tools):
        text = await elevation_tools["srtm_elevation_point"](
            lon=4.63, lat=52.88, output_mode="text"
        )
        assert "1223.0m" in text

    async def test_uncovered_area(self, elevation_tools):
        data = json.loads(await elevation_tools["srtm_elevation_point"](lon=-30.5, lat=0.5))
        assert data["error_type"] == "AreaNotFound"

    async def test_invalid_latitude(self, elevation_tools):
        data = json.loads(await elevation_tools["srtm_elevation_point"](lon=0.0, lat=95.0))
        assert "Latitude" in data["error"]

    async def test_retrieval_failure(self, elevation_tools):
        data = json.loads(await elevation_tools["srtm_elevation_point"](lon=-118.3, lat=36.5))
        assert data["error_type"] == "RetrievalError"
        assert "N36W119.hgt.zip" in data["error"]


# ── srtm_elevation_points ──────────────────────────────────────────


class TestElevationPoints:
    async def test_json(self, elevation_tools):
        points = [[4.63, 52.88], [4.5, 52.5], [7.5, 46.5]]
        data = json.loads(await elevation_tools["srtm_elevation_points"](points=points))
        assert data["point_count"] == 3
        assert [p["elevation_m"] for p in data["points"]] == [1223.0, None, 2000.0]
        assert data["void_count"] == 1
        assert data["tiles"] == ["N52E004", "N46E007"]
        assert data["message"] == "Retrieved elevation for 3 points (1 void)"

    async def test_text(self, elevation_tools):
        text = await elevation_tools["srtm_elevation_points"](
            points=[[4.63, 52.88]], output_mode="text"
        )
        assert "1 point(s)" in text

    async def test_empty(self, elevation_tools):
        data = json.loads(await elevation_tools["srtm_elevation_points"](points=[]))
        assert "At least one" in data["error"]


# ── srtm_tile_info ─────────────────────────────────────────────────


class TestTileInfo:
    async def test_json(self, elevation_tools):
        data = json.loads(await elevation_tools["srtm_tile_info"](lon=4.63, lat=52.88))
        assert data["tile"] == "N52E004"
        assert data["width"] == 5
        assert data["void_samples"] == 2
        assert data["message"] == "Tile N52E004 (2 void samples)"

    async def test_text(self, elevation_tools):
        text = await elevation_tools["srtm_tile_info"](lon=4.63, lat=52.88, output_mode="text")
        assert "Void samples: 2" in text


# ── srtm_tile_preview / srtm_tile_export ───────────────────────────


class TestTileArtifacts:
    async def test_preview(self, elevation_tools, mock_artifact_store):
        data = json.loads(await elevation_tools["srtm_tile_preview"](lon=4.63, lat=52.88))
        assert data["format"] == "png"
        assert data["artifact_ref"].endswith("_terrain.png")
        assert data["message"] == "Tile N52E004 rendered to PNG"
        mock_artifact_store.store.assert_awaited_once()

    async def test_preview_bad_style(self, elevation_tools):
        data = json.loads(
            await elevation_tools["srtm_tile_preview"](lon=4.63, lat=52.88, style="x")
        )
        assert "Invalid preview style" in data["error"]

    async def test_export(self, elevation_tools):
        data = json.loads(await elevation_tools["srtm_tile_export"](lon=7.5, lat=46.5))
        assert data["format"] == "geotiff"
        assert data["tile"] == "N46E007"
        assert data["message"] == "Tile N46E007 exported as geotiff"

    async def test_export_store_failure(self, elevation_tools, mock_manager):
        failing = MagicMock()
        failing.store = AsyncMock(side_effect=OSError("disk full"))
        mock_manager._get_store = MagicMock(return_value=failing)
        data = json.loads(await elevation_tools["srtm_tile_export"](lon=7.5, lat=46.5))
        assert data["error"] == "disk full"

    async def test_export_text(self, elevation_tools):
        text = await elevation_tools["srtm_tile_export"](lon=7.5, lat=46.5, output_mode="text")
        assert "Artifact: srtm/" in text
