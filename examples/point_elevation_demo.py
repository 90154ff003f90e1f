#!/usr/bin/env python3
"""
Point Elevation Demo -- chuk-mcp-srtm

Queries a few points on the Dutch coast (tile Eurasia/N52E004), a short
west-east profile across the dunes, and describes the tile. The first run
downloads the tile archive; later runs read it from the local cache.

Usage:
    python examples/point_elevation_demo.py

Requirements:
    Network access to the SRTM3 archive (or SRTM_BASE_URL pointing at a mirror)
"""

import asyncio
import sys

from tool_runner import ToolRunner

PLACES = {
    "Petten": [4.63, 52.88],
    "Haarlem": [4.64, 52.38],
    "Amsterdam": [4.90, 52.37],
}
PROFILE_START = [4.50, 52.60]
PROFILE_END = [4.80, 52.60]
NUM_POINTS = 31


async def main() -> None:
    runner = ToolRunner()

    print("=" * 60)
    print("Dutch coast -- SRTM3 point elevations")
    print("=" * 60)

    for name, (lon, lat) in PLACES.items():
        result = await runner.run("srtm_elevation_point", lon=lon, lat=lat)
        if "error" in result:
            print(f"  ERROR: {result['error']}")
            sys.exit(1)
        elev = result["elevation_m"]
        shown = "void" if elev is None else f"{elev:.0f}m"
        print(f"  {name:10s} ({lon:.2f}, {lat:.2f}) in {result['tile']}: {shown}")

    step = (PROFILE_END[0] - PROFILE_START[0]) / (NUM_POINTS - 1)
    points = [[PROFILE_START[0] + i * step, PROFILE_START[1]] for i in range(NUM_POINTS)]
    profile = await runner.run("srtm_elevation_points", points=points)
    print(f"\nProfile along {PROFILE_START[1]}N ({profile['point_count']} points):")
    for p in profile["points"]:
        elev = p["elevation_m"]
        bar = "" if elev is None else "#" * max(0, int(elev))
        print(f"  {p['lon']:.3f}  {bar}")
    print(f"  Range: {profile['elevation_range'][0]:.0f}m to {profile['elevation_range'][1]:.0f}m")

    print("\nTile info:")
    print(await runner.run_text("srtm_tile_info", lon=4.63, lat=52.88))

    print("\nCache after queries:")
    print(await runner.run_text("srtm_status"))


if __name__ == "__main__":
    asyncio.run(main())
