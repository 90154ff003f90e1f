"""
Runtime settings for the elevation provider, read from environment variables.

Server-level settings (artifact store, transport) stay in server.py; these
cover the tile pipeline only.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import (
    DEFAULT_BASE_URL,
    DEFAULT_CACHE_DIR,
    DEFAULT_CACHE_MAX_TILES,
    DEFAULT_DOWNLOAD_TIMEOUT_S,
    EnvVar,
    ErrorMessages,
)
from .errors import ConfigurationError


class SRTMSettings(BaseModel):
    """Tile pipeline configuration."""

    model_config = ConfigDict(extra="forbid", frozen=True, validate_default=True)

    cache_dir: Path = Field(
        default=Path(DEFAULT_CACHE_DIR), description="Directory for downloaded .hgt.zip archives"
    )
    base_url: str = Field(default=DEFAULT_BASE_URL, description="Base URL of the SRTM3 tree")
    cache_max_tiles: int | None = Field(
        default=DEFAULT_CACHE_MAX_TILES,
        description="Decoded tiles kept in memory; None for unbounded",
    )
    area_names_dir: Path | None = Field(
        default=None, description="Directory overriding the bundled area name lists"
    )
    download_timeout_s: float = Field(
        default=DEFAULT_DOWNLOAD_TIMEOUT_S, gt=0, description="HTTP timeout in seconds"
    )

    @field_validator("cache_dir", "area_names_dir")
    @classmethod
    def _expand_user(cls, value: Path | None) -> Path | None:
        return value.expanduser() if value is not None else None

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("must be an http(s) URL")
        return value.rstrip("/")

    @field_validator("cache_max_tiles")
    @classmethod
    def _zero_means_unbounded(cls, value: int | None) -> int | None:
        if value is None or value == 0:
            return None
        if value < 0:
            raise ValueError("must be >= 0")
        return value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "SRTMSettings":
        """
        Build settings from environment variables, falling back to defaults.

        Raises:
            ConfigurationError: if any variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        fields = {
            "cache_dir": EnvVar.SRTM_CACHE_DIR,
            "base_url": EnvVar.SRTM_BASE_URL,
            "cache_max_tiles": EnvVar.SRTM_CACHE_MAX_TILES,
            "area_names_dir": EnvVar.SRTM_AREA_NAMES_DIR,
            "download_timeout_s": EnvVar.SRTM_DOWNLOAD_TIMEOUT,
        }
        values = {name: env[var] for name, var in fields.items() if env.get(var)}
        try:
            return cls(**values)
        except ValidationError as e:
            err = e.errors()[0]
            name = str(err["loc"][0]) if err.get("loc") else "settings"
            raise ConfigurationError(
                ErrorMessages.INVALID_SETTING.format(
                    values.get(name), fields.get(name, name), err["msg"]
                )
            ) from e
