"""
Command-line elevation probe.

    chuk-mcp-srtm-query 52.88 4.63

Prints the elevation in metres, or "nan" where the dataset has a void.
Exits 1 on a lookup failure and 2 on bad arguments.
"""

import argparse
import logging
import sys

from .core.elevation_provider import SRTMElevationProvider
from .errors import SRTMError
from .settings import SRTMSettings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chuk-mcp-srtm-query",
        description="Print the SRTM3 ground elevation at a coordinate",
    )
    parser.add_argument("lat", type=float, help="Latitude in decimal degrees")
    parser.add_argument("lon", type=float, help="Longitude in decimal degrees")
    parser.add_argument(
        "--cache-dir", default=None, help="Archive cache directory (overrides SRTM_CACHE_DIR)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log downloads and decodes")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    try:
        settings = SRTMSettings.from_env()
        provider = SRTMElevationProvider.from_settings(settings)
        if args.cache_dir:
            provider.set_cache_dir(args.cache_dir)
        elevation = provider.elevation_at(args.lat, args.lon)
    except (SRTMError, ValueError) as e:
        logger.error(f"Elevation lookup failed: {e}")
        return 1

    print(elevation)
    return 0


if __name__ == "__main__":
    sys.exit(main())
