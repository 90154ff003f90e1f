"""Tests for chuk_mcp_srtm.core.area_index."""

import io
import zipfile

import pytest

from chuk_mcp_srtm.constants import AREA_PARTITIONS
from chuk_mcp_srtm.core.area_index import (
    AreaIndex,
    load_area_index,
    load_bundled_area_index,
    parse_area_code,
    read_area_resources,
)
from chuk_mcp_srtm.core.tile_locator import bucket_key, canonical_name
from chuk_mcp_srtm.errors import AreaNotFound, ConfigurationError


def _zipped(name: str, text: str) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr(name, text)
    return buf.getvalue()


class TestParseAreaCode:
    def test_north_east(self):
        assert parse_area_code("N52E004.hgt.zip") == (52, 4)

    def test_south_west(self):
        assert parse_area_code("S34W071.hgt.zip") == (-34, -71)

    def test_bare_code(self):
        assert parse_area_code("N00E000") == (0, 0)

    def test_surrounding_whitespace(self):
        assert parse_area_code("  N46E007.hgt.zip\r") == (46, 7)

    @pytest.mark.parametrize("line", ["", "X52E004", "N5E004", "N52E04", "hello", "N95E004"])
    def test_malformed(self, line):
        with pytest.raises(ConfigurationError):
            parse_area_code(line, "Eurasia")


class TestAreaIndex:
    def test_lookup(self, area_index):
        assert area_index.lookup_partition(52.88, 4.63) == "Eurasia"
        assert area_index.lookup_partition(36.5, -118.3) == "North_America"

    def test_lookup_uncovered(self, area_index):
        with pytest.raises(AreaNotFound) as exc_info:
            area_index.lookup_partition(0.5, -30.5)
        assert exc_info.value.lat == 0.5
        assert exc_info.value.lon == -30.5

    def test_area_not_found_is_lookup_error(self, area_index):
        with pytest.raises(LookupError):
            area_index.lookup_partition(0.5, -30.5)

    def test_lookup_invalid_coordinate(self, area_index):
        with pytest.raises(ValueError):
            area_index.lookup_partition(95.0, 0.0)

    def test_covers(self, area_index):
        assert area_index.covers(46.5, 7.5)
        assert not area_index.covers(47.5, 7.5)

    def test_len_and_contains(self, area_index):
        assert len(area_index) == 4
        assert bucket_key(52, 4) in area_index
        assert bucket_key(53, 4) not in area_index

    def test_iter(self, area_index):
        assert set(area_index) == {
            bucket_key(52, 4),
            bucket_key(46, 7),
            bucket_key(36, -119),
            bucket_key(-23, -44),
        }

    def test_partition_counts_include_all_partitions(self, area_index):
        counts = area_index.partition_counts()
        assert set(counts) == set(AREA_PARTITIONS)
        assert counts["Eurasia"] == 2
        assert counts["Africa"] == 0

    def test_immutable(self, area_index):
        with pytest.raises(TypeError):
            area_index._areas[0] = "Africa"

    def test_repr(self, area_index):
        assert "4 tiles" in repr(area_index)

    def test_duplicate_key_rejected(self):
        with pytest.raises(ConfigurationError, match="Duplicate"):
            AreaIndex.from_entries(
                [("Eurasia", ["N52E004.hgt.zip"]), ("Africa", ["N52E004.hgt.zip"])]
            )

    def test_blank_lines_skipped(self):
        index = AreaIndex.from_entries([("Islands", ["", "N19W156.hgt.zip", "   "])])
        assert len(index) == 1


class TestLoadAreaIndex:
    def test_zip_resources(self):
        index = load_area_index(
            {
                "Eurasia": _zipped("Eurasia_names.txt", "N52E004.hgt.zip\n"),
                "Africa": _zipped("Africa_names.txt", "S34E018.hgt.zip\n"),
            }
        )
        assert canonical_name(index, 52.88, 4.63) == "Eurasia/N52E004"
        assert canonical_name(index, -33.9, 18.4) == "Africa/S34E018"

    def test_plain_text_resources(self):
        index = load_area_index({"Eurasia": b"N52E004.hgt.zip\nN46E007.hgt.zip\n"})
        assert len(index) == 2

    def test_empty_zip(self):
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w"):
            pass
        with pytest.raises(ConfigurationError):
            load_area_index({"Eurasia": buf.getvalue()})

    def test_undecodable_text(self):
        with pytest.raises(ConfigurationError):
            load_area_index({"Eurasia": b"\xff\xfe\xfa"})

    def test_malformed_line(self):
        with pytest.raises(ConfigurationError, match="Malformed"):
            load_area_index({"Eurasia": b"N52E004.hgt.zip\ngarbage\n"})


class TestBundledResources:
    def test_reads_all_partitions(self):
        raw = read_area_resources()
        assert set(raw) == set(AREA_PARTITIONS)

    def test_bundled_index(self):
        index = load_bundled_area_index()
        assert canonical_name(index, 52.88, 4.63) == "Eurasia/N52E004"
        assert len(index) > 0

    def test_bundled_tile_count(self):
        index = load_bundled_area_index()
        assert len(index) > 14000
        counts = index.partition_counts()
        assert all(counts[partition] > 100 for partition in AREA_PARTITIONS)

    @pytest.mark.parametrize(
        "lat,lon,partition",
        [
            (48.85, 2.35, "Eurasia"),
            (51.5, -0.12, "Eurasia"),
            (40.4, -3.7, "Eurasia"),
            (35.68, 139.69, "Eurasia"),
            (19.07, 72.88, "Eurasia"),
            (40.7, -74.0, "North_America"),
            (39.74, -104.99, "North_America"),
            (19.43, -99.13, "North_America"),
            (30.05, 31.23, "Africa"),
            (-1.29, 36.82, "Africa"),
            (-33.92, 18.42, "Africa"),
            (-23.55, -46.63, "South_America"),
            (-34.6, -58.38, "South_America"),
            (-33.87, 151.2, "Australia"),
            (-36.85, 174.76, "Australia"),
            (21.3, -157.86, "Islands"),
        ],
    )
    def test_bundled_land_points(self, lat, lon, partition):
        index = load_bundled_area_index()
        assert index.lookup_partition(lat, lon) == partition

    @pytest.mark.parametrize(
        "lat,lon", [(0.5, -140.5), (30.5, -40.5), (-40.5, -120.5), (65.0, 10.0)]
    )
    def test_bundled_open_ocean_and_polar(self, lat, lon):
        index = load_bundled_area_index()
        with pytest.raises(AreaNotFound):
            index.lookup_partition(lat, lon)

    def test_override_dir(self, tmp_path):
        for partition in AREA_PARTITIONS:
            text = "N10E010.hgt.zip\n" if partition == "Africa" else ""
            (tmp_path / f"{partition}_names.txt.zip").write_bytes(
                _zipped(f"{partition}_names.txt", text)
            )
        index = load_bundled_area_index(tmp_path)
        assert len(index) == 1
        assert index.lookup_partition(10.5, 10.5) == "Africa"

    def test_override_dir_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="missing"):
            read_area_resources(tmp_path)
