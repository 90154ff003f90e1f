#!/usr/bin/env python3
"""
Capabilities Demo -- chuk-mcp-srtm

Quick-start script showing what the server can do, without any network
access. Lists partitions, checks coverage of a few areas, prints server
status and capabilities, and shows the dual output mode (JSON vs text).

Usage:
    python examples/capabilities_demo.py
"""

import asyncio

from tool_runner import ToolRunner

AREAS = {
    "Dutch coast": [4.0, 52.0, 5.5, 53.0],
    "North Sea": [2.0, 55.0, 3.0, 56.0],
}


async def main() -> None:
    runner = ToolRunner()

    print("=" * 60)
    print("chuk-mcp-srtm -- Server Capabilities")
    print("=" * 60)

    print(f"\nRegistered tools ({len(runner.tool_names)}):")
    for name in sorted(runner.tool_names):
        print(f"  - {name}")

    partitions = await runner.run("srtm_list_partitions")
    print(f"\nPartitions ({partitions['total_tiles']} tiles):")
    for p in partitions["partitions"]:
        print(f"  {p['name']:14s} {p['tile_count']:6d}")

    for label, bbox in AREAS.items():
        coverage = await runner.run("srtm_check_coverage", bbox=bbox)
        print(f"\nCoverage for {label}: {coverage['coverage_percentage']:.1f}%")
        print(f"  Available: {', '.join(coverage['tile_ids']) or '-'}")
        print(f"  Missing: {', '.join(coverage['missing_tiles']) or '-'}")

    print("\n" + "-" * 60)
    print("Dual Output Mode Demo")
    print("-" * 60)

    print("\nsrtm_status (output_mode='text'):")
    print(await runner.run_text("srtm_status"))

    print("\nsrtm_capabilities (output_mode='text'):")
    print(await runner.run_text("srtm_capabilities"))

    print("\n" + "=" * 60)
    print("Nothing above touched the network. Run point_elevation_demo.py")
    print("to download a tile and query elevations.")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
