"""Exception hierarchy for chuk-mcp-srtm."""


class SRTMError(RuntimeError):
    """Base class for all SRTM elevation errors."""


class ConfigurationError(SRTMError):
    """Bad cache directory, bad setting, or malformed bundled dataset."""


class AreaNotFound(SRTMError, LookupError):
    """The coordinate lies outside the dataset's coverage."""

    def __init__(self, message: str, lat: float | None = None, lon: float | None = None):
        super().__init__(message)
        self.lat = lat
        self.lon = lon


class RetrievalError(SRTMError):
    """A tile archive could not be downloaded."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class DecodeError(SRTMError):
    """A tile archive is unreadable, empty or truncated."""
