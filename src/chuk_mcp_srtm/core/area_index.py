"""
Area index: which SRTM3 partition directory holds a given tile.

The remote tree groups tiles by continent (Eurasia/N52E004.hgt.zip), so a
coordinate has to be mapped to its partition before the archive URL can be
built. The mapping is loaded once from six "<Partition>_names.txt.zip"
resources and never changes afterwards.
"""

from __future__ import annotations

import io
import logging
import re
import zipfile
from collections import Counter
from collections.abc import Iterable, Iterator, Mapping
from importlib import resources
from pathlib import Path
from types import MappingProxyType

from ..constants import AREA_NAMES_SUFFIX, AREA_PARTITIONS, ErrorMessages
from ..errors import AreaNotFound, ConfigurationError
from .tile_locator import bucket_key, tile_key, validate_coordinate

logger = logging.getLogger(__name__)

_AREA_CODE = re.compile(r"^([NS])(\d{2})([EW])(\d{3})")


def parse_area_code(line: str, source: str = "<input>") -> tuple[int, int]:
    """
    Parse a fixed-width tile code such as "N52E004" or "S34W071.hgt.zip".

    Returns:
        Signed (lat, lon) of the tile's lower-left corner

    Raises:
        ConfigurationError: if the line does not start with a valid code
    """
    match = _AREA_CODE.match(line.strip())
    if match is None:
        raise ConfigurationError(ErrorMessages.MALFORMED_AREA_CODE.format(line.strip(), source))
    ns, lat_str, ew, lon_str = match.groups()
    lat = int(lat_str)
    lon = int(lon_str)
    if lat > 90 or lon > 180:
        raise ConfigurationError(ErrorMessages.MALFORMED_AREA_CODE.format(line.strip(), source))
    return (-lat if ns == "S" else lat), (-lon if ew == "W" else lon)


class AreaIndex:
    """Immutable bucket key -> partition name mapping."""

    def __init__(self, areas: Mapping[int, str]) -> None:
        self._areas = MappingProxyType(dict(areas))

    @classmethod
    def from_entries(cls, entries: Iterable[tuple[str, Iterable[str]]]) -> "AreaIndex":
        """
        Build an index from (partition, lines) pairs.

        Raises:
            ConfigurationError: on a malformed line or a key claimed twice
        """
        areas: dict[int, str] = {}
        for partition, lines in entries:
            for line in lines:
                if not line.strip():
                    continue
                lat, lon = parse_area_code(line, partition)
                key = bucket_key(lat, lon)
                existing = areas.get(key)
                if existing is not None:
                    raise ConfigurationError(
                        ErrorMessages.DUPLICATE_AREA.format(key, existing, partition)
                    )
                areas[key] = partition
        return cls(areas)

    def lookup_partition(self, lat: float, lon: float) -> str:
        """
        Partition holding the tile that contains (lat, lon).

        Raises:
            ValueError: for coordinates outside [-90, 90] x [-180, 180]
            AreaNotFound: if the dataset does not cover the tile
        """
        validate_coordinate(lat, lon)
        key = tile_key(lat, lon)
        partition = self._areas.get(key)
        if partition is None:
            raise AreaNotFound(ErrorMessages.AREA_NOT_FOUND.format(key, lat, lon), lat, lon)
        return partition

    def covers(self, lat: float, lon: float) -> bool:
        validate_coordinate(lat, lon)
        return tile_key(lat, lon) in self._areas

    def partition_counts(self) -> dict[str, int]:
        """Number of tiles per partition."""
        counts = Counter(self._areas.values())
        return {name: counts.get(name, 0) for name in sorted(set(counts) | set(AREA_PARTITIONS))}

    def __len__(self) -> int:
        return len(self._areas)

    def __contains__(self, key: object) -> bool:
        return key in self._areas

    def __iter__(self) -> Iterator[int]:
        return iter(self._areas)

    def __repr__(self) -> str:
        return f"AreaIndex({len(self._areas)} tiles)"


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def _decode_resource(partition: str, data: bytes) -> list[str]:
    """Text lines of a names resource, zip-compressed or plain."""
    try:
        if zipfile.is_zipfile(io.BytesIO(data)):
            with zipfile.ZipFile(io.BytesIO(data)) as zf:
                names = zf.namelist()
                if not names:
                    raise ConfigurationError(
                        ErrorMessages.UNREADABLE_AREA_RESOURCE.format(partition, "empty archive")
                    )
                text = zf.read(names[0]).decode("utf-8")
        else:
            text = data.decode("utf-8")
    except (zipfile.BadZipFile, UnicodeDecodeError) as e:
        raise ConfigurationError(ErrorMessages.UNREADABLE_AREA_RESOURCE.format(partition, e)) from e
    return text.splitlines()


def load_area_index(raw_resources: Mapping[str, bytes]) -> AreaIndex:
    """
    Build an AreaIndex from raw resource bytes keyed by partition name.

    Pure: no filesystem or package access, so tests can pass synthetic data.

    Args:
        raw_resources: partition name -> zip archive (one text entry) or plain text

    Returns:
        The populated, immutable index
    """
    entries = [
        (partition, _decode_resource(partition, data)) for partition, data in raw_resources.items()
    ]
    return AreaIndex.from_entries(entries)


def read_area_resources(names_dir: str | Path | None = None) -> dict[str, bytes]:
    """
    Read the six "<Partition>_names.txt.zip" resources.

    Args:
        names_dir: Directory holding the files; None uses the bundled copies

    Raises:
        ConfigurationError: if any partition's resource is missing
    """
    raw: dict[str, bytes] = {}
    for partition in AREA_PARTITIONS:
        filename = f"{partition}{AREA_NAMES_SUFFIX}"
        try:
            if names_dir is None:
                bundled = resources.files("chuk_mcp_srtm") / "data" / filename
                raw[partition] = bundled.read_bytes()
            else:
                raw[partition] = (Path(names_dir).expanduser() / filename).read_bytes()
        except OSError as e:
            raise ConfigurationError(
                ErrorMessages.MISSING_AREA_RESOURCE.format(partition)
            ) from e
    return raw


def load_bundled_area_index(names_dir: str | Path | None = None) -> AreaIndex:
    """Load the area index from bundled (or overriding) resources."""
    index = load_area_index(read_area_resources(names_dir))
    logger.info(
        f"Loaded area index: {len(index)} tiles from "
        f"{'bundled resources' if names_dir is None else names_dir}"
    )
    return index
