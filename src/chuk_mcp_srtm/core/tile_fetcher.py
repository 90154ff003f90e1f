"""
Tile fetcher: download-on-first-need and decoding of .hgt.zip archives.

A local archive that exists is taken as-is: no freshness check and no
re-download. A corrupt local file surfaces as a DecodeError.

All functions are synchronous; async callers wrap them in asyncio.to_thread().
"""

from __future__ import annotations

import logging
import os
import zipfile
import zlib
from pathlib import Path
from typing import Protocol

import httpx
import numpy as np
from numpy.typing import NDArray
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..constants import (
    ARCHIVE_SUFFIX,
    DECODE_CHUNK_BYTES,
    DEFAULT_BASE_URL,
    DEFAULT_DOWNLOAD_TIMEOUT_S,
    DOWNLOAD_CHUNK_BYTES,
    DOWNLOAD_USER_AGENT,
    MAX_VALID_HEIGHT,
    MIN_VALID_HEIGHT,
    NODATA_HEIGHT,
    RETRY_ATTEMPTS,
    RETRY_WAIT_MAX,
    RETRY_WAIT_MIN,
    SAMPLE_BYTES,
    TILE_WIDTH,
    ErrorMessages,
)
from ..errors import ConfigurationError, DecodeError, RetrievalError
from .area_index import AreaIndex
from .tile_locator import canonical_name

logger = logging.getLogger(__name__)

# Big-endian signed 16-bit, as stored in .hgt files
HGT_DTYPE = np.dtype(">i2")


class Downloader(Protocol):
    """Anything that can copy a remote resource to a local path."""

    def fetch(self, url: str, dest_path: str) -> None: ...


# ---------------------------------------------------------------------------
# HTTP downloader
# ---------------------------------------------------------------------------

_retry_network = retry(
    stop=stop_after_attempt(RETRY_ATTEMPTS),
    wait=wait_exponential(multiplier=1, min=RETRY_WAIT_MIN, max=RETRY_WAIT_MAX),
    retry=retry_if_exception_type((httpx.TransportError, ConnectionError, TimeoutError)),
    reraise=True,
)


class HttpDownloader:
    """Streams a URL to disk with httpx, retrying transient transport errors."""

    def __init__(
        self,
        timeout_s: float = DEFAULT_DOWNLOAD_TIMEOUT_S,
        user_agent: str = DOWNLOAD_USER_AGENT,
    ) -> None:
        self.timeout_s = timeout_s
        self.user_agent = user_agent

    @_retry_network
    def fetch(self, url: str, dest_path: str) -> None:
        headers = {"User-Agent": self.user_agent}
        with httpx.Client(timeout=self.timeout_s, follow_redirects=True, headers=headers) as client:
            with client.stream("GET", url) as resp:
                resp.raise_for_status()
                with open(dest_path, "wb") as f:
                    for chunk in resp.iter_bytes(chunk_size=DOWNLOAD_CHUNK_BYTES):
                        if chunk:
                            f.write(chunk)


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def mask_invalid_heights(samples: NDArray[np.int16]) -> int:
    """
    Replace samples outside [MIN_VALID_HEIGHT, MAX_VALID_HEIGHT] with NODATA_HEIGHT.

    Operates in place and returns the number of replaced samples.
    """
    invalid = (samples < MIN_VALID_HEIGHT) | (samples > MAX_VALID_HEIGHT)
    count = int(np.count_nonzero(invalid))
    if count:
        samples[invalid] = NODATA_HEIGHT
    return count


def decode_hgt_archive(path: str | Path, width: int = TILE_WIDTH) -> NDArray[np.int16]:
    """
    Decode the single .hgt entry of a zip archive into a flat int16 buffer.

    Samples are 2-byte big-endian signed integers in row-major order from the
    north-west corner. The stream is consumed in chunks; out-of-range values
    become NODATA_HEIGHT.

    Args:
        path: Local .hgt.zip file
        width: Samples per side

    Returns:
        Native-endian int16 array of width * width samples

    Raises:
        DecodeError: unreadable archive, no entry, or wrong payload length
    """
    expected = SAMPLE_BYTES * width * width
    buffer = bytearray(expected)
    view = memoryview(buffer)
    filled = 0

    try:
        with zipfile.ZipFile(path) as zf:
            entries = zf.infolist()
            if not entries:
                raise DecodeError(ErrorMessages.ARCHIVE_EMPTY.format(path))
            with zf.open(entries[0]) as stream:
                while filled < expected:
                    n = stream.readinto(view[filled : min(filled + DECODE_CHUNK_BYTES, expected)])
                    if not n:
                        break
                    filled += n
                if filled == expected and stream.read(1):
                    raise DecodeError(ErrorMessages.ARCHIVE_TOO_LONG.format(path, expected))
    except (zipfile.BadZipFile, zipfile.LargeZipFile, zlib.error, OSError, EOFError) as e:
        raise DecodeError(ErrorMessages.ARCHIVE_UNREADABLE.format(path, e)) from e

    if filled < expected:
        raise DecodeError(ErrorMessages.ARCHIVE_SHORT_READ.format(path, filled, expected))

    samples = np.frombuffer(buffer, dtype=HGT_DTYPE).astype(np.int16)
    voids = mask_invalid_heights(samples)
    if voids:
        logger.warning(f"{Path(path).name}: {voids} void samples")
    return samples


# ---------------------------------------------------------------------------
# Fetcher
# ---------------------------------------------------------------------------


def prepare_cache_dir(cache_dir: str | Path) -> Path:
    """
    Resolve and create the local archive cache directory.

    Raises:
        ConfigurationError: if the path exists but is not a directory, or
            cannot be created
    """
    path = Path(cache_dir).expanduser()
    if path.exists() and not path.is_dir():
        raise ConfigurationError(ErrorMessages.CACHE_DIR_NOT_DIRECTORY.format(path))
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigurationError(ErrorMessages.CACHE_DIR_NOT_CREATABLE.format(path, e)) from e
    return path


class TileFetcher:
    """Makes a tile's archive available locally and decodes it."""

    def __init__(
        self,
        area_index: AreaIndex,
        cache_dir: str | Path,
        downloader: Downloader | None = None,
        base_url: str = DEFAULT_BASE_URL,
        width: int = TILE_WIDTH,
    ) -> None:
        self.area_index = area_index
        self.cache_dir = prepare_cache_dir(cache_dir)
        self.downloader: Downloader = downloader or HttpDownloader()
        self.base_url = base_url.rstrip("/")
        self.width = width

    def archive_url(self, lat: float, lon: float) -> str:
        return f"{self.base_url}/{canonical_name(self.area_index, lat, lon)}{ARCHIVE_SUFFIX}"

    def archive_path(self, lat: float, lon: float) -> Path:
        url = self.archive_url(lat, lon)
        return self.cache_dir / url.rsplit("/", 1)[-1]

    def ensure_archive(self, lat: float, lon: float) -> Path:
        """
        Local path of the tile archive, downloading it if absent.

        The download goes to a ".part" file that is renamed on success, so a
        failed transfer never leaves a file that would later count as present.

        Raises:
            AreaNotFound: no partition covers the tile
            RetrievalError: the downloader failed
        """
        url = self.archive_url(lat, lon)
        path = self.cache_dir / url.rsplit("/", 1)[-1]
        if path.exists():
            return path

        partial = path.with_name(path.name + ".part")
        logger.info(f"Downloading {url} -> {path}")
        try:
            self.downloader.fetch(url, str(partial))
            if not partial.exists():
                raise FileNotFoundError(f"downloader wrote nothing to {partial}")
            os.replace(partial, path)
        except Exception as e:
            partial.unlink(missing_ok=True)
            raise RetrievalError(ErrorMessages.DOWNLOAD_FAILED.format(url, e), url) from e

        logger.info(f"Downloaded {path.name} ({path.stat().st_size / 1024:.0f} KB)")
        return path

    def materialize(self, lat: float, lon: float) -> NDArray[np.int16]:
        """Decoded flat sample buffer for the tile containing (lat, lon)."""
        path = self.ensure_archive(lat, lon)
        samples = decode_hgt_archive(path, self.width)
        logger.info(f"Decoded {path.name}")
        return samples
