"""Tests for chuk_mcp_srtm.settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from chuk_mcp_srtm.constants import DEFAULT_BASE_URL, DEFAULT_CACHE_MAX_TILES
from chuk_mcp_srtm.errors import ConfigurationError
from chuk_mcp_srtm.settings import SRTMSettings


class TestDefaults:
    def test_defaults(self):
        settings = SRTMSettings.from_env({})
        assert settings.base_url == DEFAULT_BASE_URL
        assert settings.cache_max_tiles == DEFAULT_CACHE_MAX_TILES
        assert settings.area_names_dir is None
        assert settings.download_timeout_s == 60.0

    def test_cache_dir_expanded(self):
        settings = SRTMSettings.from_env({})
        assert "~" not in str(settings.cache_dir)
        assert settings.cache_dir == Path("~/.cache/chuk-mcp-srtm").expanduser()

    def test_frozen(self):
        settings = SRTMSettings()
        with pytest.raises(ValidationError):
            settings.base_url = "http://other"

    def test_extra_forbidden(self):
        with pytest.raises(ValidationError):
            SRTMSettings(unknown=1)


class TestFromEnv:
    def test_reads_all_variables(self, tmp_path):
        settings = SRTMSettings.from_env(
            {
                "SRTM_CACHE_DIR": str(tmp_path / "c"),
                "SRTM_BASE_URL": "https://mirror.test/SRTM3/",
                "SRTM_CACHE_MAX_TILES": "8",
                "SRTM_AREA_NAMES_DIR": str(tmp_path),
                "SRTM_DOWNLOAD_TIMEOUT": "12.5",
            }
        )
        assert settings.cache_dir == tmp_path / "c"
        assert settings.base_url == "https://mirror.test/SRTM3"
        assert settings.cache_max_tiles == 8
        assert settings.area_names_dir == tmp_path
        assert settings.download_timeout_s == 12.5

    def test_zero_means_unbounded(self):
        assert SRTMSettings.from_env({"SRTM_CACHE_MAX_TILES": "0"}).cache_max_tiles is None

    def test_empty_values_use_defaults(self):
        settings = SRTMSettings.from_env({"SRTM_CACHE_MAX_TILES": ""})
        assert settings.cache_max_tiles == DEFAULT_CACHE_MAX_TILES

    @pytest.mark.parametrize(
        "var,value",
        [
            ("SRTM_CACHE_MAX_TILES", "lots"),
            ("SRTM_CACHE_MAX_TILES", "-3"),
            ("SRTM_DOWNLOAD_TIMEOUT", "0"),
            ("SRTM_DOWNLOAD_TIMEOUT", "soon"),
            ("SRTM_BASE_URL", "ftp://example.test"),
        ],
    )
    def test_invalid_values(self, var, value):
        with pytest.raises(ConfigurationError) as exc_info:
            SRTMSettings.from_env({var: value})
        assert var in str(exc_info.value)
        assert value in str(exc_info.value)

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("SRTM_CACHE_MAX_TILES", "3")
        assert SRTMSettings.from_env().cache_max_tiles == 3
