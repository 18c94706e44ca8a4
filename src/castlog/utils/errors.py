"""Custom exceptions for castlog."""


class CastlogError(Exception):
    """Base exception for all castlog errors."""

    pass


class ConfigError(CastlogError):
    """Configuration-related errors."""

    pass


class InvalidConfigError(ConfigError):
    """Invalid configuration data."""

    pass


class APIKeyError(ConfigError):
    """Raised when an API credential is invalid or missing."""

    pass


class FeedError(CastlogError):
    """Audio feed errors."""

    pass


class FeedParseError(FeedError):
    """RSS feed parsing errors."""

    pass


class NetworkError(CastlogError):
    """Network-related errors."""

    pass


class UpstreamError(NetworkError):
    """An upstream service answered with a non-200 status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class VideoNotFoundError(NetworkError):
    """The video metadata service does not know the requested ID."""

    pass


class NoDataError(CastlogError):
    """An expected "nothing to do" condition.

    These are not failures: callers branch on the type and carry on.
    """

    pass


class NoUpdatesError(NoDataError):
    """No matching announcements were found (or the window is in the future)."""

    pass


class NoCaptionsError(NoDataError):
    """The video exists but has no captions."""

    pass


class NoVideoIDError(NoDataError):
    """An update carries no usable video ID."""

    pass


class CatalogError(CastlogError):
    """Errors reading or writing catalog files."""

    pass


class EpisodeFormatError(CatalogError):
    """An episode file has malformed front matter."""

    pass


class GuestFileError(CatalogError):
    """The guest registry could not be parsed."""

    pass


class RepoError(CastlogError):
    """The working directory is not the expected repository."""

    pass
